from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console

from . import __version__
from .config import (
    DEFAULT_DB_PATH,
    AppConfig,
    UiMode,
    format_tick_interval,
    parse_tick_interval,
    parse_ui_mode,
)
from .models import Pet
from .runtime.dispatcher import AppState, Dispatcher
from .runtime.loop import run_event_loop
from .runtime.multiplexer import ChannelClosed, EventChannel, EventMultiplexer
from .store.base import PetStoreInterface, RecordIndexError, StoreError
from .store.json_file import JsonPetStore
from .store.memory import InMemoryPetStore
from .ui.render import RichRenderer
from .ui.summary import build_pets_table, render_pets
from .ui.terminal import terminal_session
from .ui.textual_app import run_textual

logger = logging.getLogger(__name__)

app = typer.Typer(
    add_completion=False,
    invoke_without_command=True,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(log_file: Path | None, level: str) -> None:
    numeric = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric, int):
        raise typer.BadParameter(f"Unknown log level: {level!r}")
    if log_file is None:
        # stderr belongs to the full-screen UI; stay quiet unless asked.
        return
    logging.basicConfig(filename=log_file, level=numeric, format=_LOG_FORMAT, force=True)


def _db_option() -> Path:
    return typer.Option(
        DEFAULT_DB_PATH,
        "--db",
        envvar="PET_TUI_DB",
        help="Path to the pet database (JSON array).",
    )


def _open_store(config: AppConfig, *, dry_run: bool = False) -> PetStoreInterface:
    store = JsonPetStore(config.db_path, categories=config.categories)
    exists = config.db_path.exists()
    if dry_run:
        pets = store.load() if exists else []
        return InMemoryPetStore(pets, categories=config.categories)
    if not exists:
        typer.echo(
            f"Database not found: {config.db_path} (create it with `pet-tui init`).",
            err=True,
        )
        raise typer.Exit(2)
    return store


def _can_run_interactive(console: Console) -> bool:
    return console.is_terminal and sys.stdin.isatty() and sys.stdout.isatty()


def _resolve_ui(mode: UiMode) -> UiMode:
    if mode != "auto":
        return mode
    return "rich" if sys.platform != "win32" else "textual"


def _run_rich(
    console: Console,
    dispatcher: Dispatcher,
    state: AppState,
    *,
    tick_interval_s: float,
) -> None:
    channel = EventChannel()
    with terminal_session() as source:
        multiplexer = EventMultiplexer(source, channel, tick_interval_s=tick_interval_s)
        multiplexer.start()
        try:
            with RichRenderer(console=console) as renderer:
                run_event_loop(channel, dispatcher, renderer, state)
        except ChannelClosed as exc:
            if multiplexer.failure is not None:
                raise ChannelClosed(f"Input stopped: {multiplexer.failure}") from exc
            raise
        finally:
            channel.close()
            multiplexer.stop()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Print version and exit.",
        is_eager=True,
    ),
    log_file: Path | None = typer.Option(  # noqa: B008
        None,
        "--log-file",
        envvar="PET_TUI_LOG_FILE",
        help="Write logs to this file (nothing is logged otherwise).",
    ),
    log_level: str = typer.Option(  # noqa: B008
        "info",
        "--log-level",
        help="Log level for --log-file: debug, info, warning or error.",
    ),
) -> None:
    if version:
        typer.echo(f"pet-tui {__version__}")
        raise typer.Exit(0)
    _configure_logging(log_file, log_level)


@app.command()
def run(
    db: Path = _db_option(),  # noqa: B008
    tick: str = typer.Option(  # noqa: B008
        format_tick_interval(AppConfig.tick_interval_s),
        "--tick",
        envvar="PET_TUI_TICK",
        help="Redraw interval without input, e.g. 200ms, 0.5s or 1.",
    ),
    ui: str = typer.Option(  # noqa: B008
        "auto",
        "--ui",
        help="Front-end: auto, rich, or textual.",
    ),
    strict: bool = typer.Option(  # noqa: B008
        False,
        "--strict",
        help="Exit on store errors instead of showing them in the status line.",
    ),
    dry_run: bool = typer.Option(  # noqa: B008
        False,
        "--dry-run",
        help="Work on an in-memory copy of the database; nothing is written.",
    ),
) -> None:
    """Browse, add and delete pets in a full-screen terminal UI."""

    tick_interval_s = parse_tick_interval(tick)
    if tick_interval_s is None:
        typer.echo(f"Invalid --tick value: {tick!r}. Use e.g. 200ms, 0.5s or 1.", err=True)
        raise typer.Exit(2)
    ui_mode = parse_ui_mode(ui)
    if ui_mode is None:
        typer.echo("Invalid --ui value. Expected one of: auto, rich, textual.", err=True)
        raise typer.Exit(2)
    config = AppConfig(
        db_path=db,
        tick_interval_s=tick_interval_s,
        fail_fast=strict,
        ui=ui_mode,
    )

    try:
        store = _open_store(config, dry_run=dry_run)
    except StoreError as exc:
        typer.echo(f"Cannot open database: {exc}", err=True)
        raise typer.Exit(1) from exc

    console = Console()
    if not _can_run_interactive(console):
        typer.echo("Interactive UI requires a TTY terminal; try `pet-tui list`.", err=True)
        raise typer.Exit(2)

    dispatcher = Dispatcher(store, fail_fast=config.fail_fast)
    state = AppState()
    front_end = _resolve_ui(config.ui)
    logger.info(
        "starting ui=%s db=%s tick=%s dry_run=%s",
        front_end,
        config.db_path,
        format_tick_interval(config.tick_interval_s),
        dry_run,
    )
    try:
        if front_end == "textual":
            run_textual(dispatcher, state, tick_interval_s=config.tick_interval_s)
        else:
            _run_rich(console, dispatcher, state, tick_interval_s=config.tick_interval_s)
    except StoreError as exc:
        typer.echo(f"Store error: {exc}", err=True)
        raise typer.Exit(1) from exc
    except ChannelClosed as exc:
        typer.echo(f"Event stream closed unexpectedly: {exc}", err=True)
        raise typer.Exit(1) from exc


@app.command()
def init(
    db: Path = _db_option(),  # noqa: B008
    force: bool = typer.Option(  # noqa: B008
        False,
        "--force",
        help="Overwrite an existing database with an empty one.",
    ),
) -> None:
    """Create an empty pet database."""

    store = JsonPetStore(db)
    try:
        created = store.init(overwrite=force)
    except StoreError as exc:
        typer.echo(f"Cannot create database: {exc}", err=True)
        raise typer.Exit(1) from exc
    if not created:
        typer.echo(f"Database already exists: {db} (use --force to reset it).", err=True)
        raise typer.Exit(0)
    typer.echo(str(db))


@app.command("list")
def list_pets(db: Path = _db_option()) -> None:  # noqa: B008
    """Print all pets as a table."""

    store = _open_store(AppConfig(db_path=db))
    try:
        pets = store.load()
    except StoreError as exc:
        typer.echo(f"Cannot read database: {exc}", err=True)
        raise typer.Exit(1) from exc
    render_pets(Console(), pets, db_path=db)


@app.command()
def add(
    db: Path = _db_option(),  # noqa: B008
    count: int = typer.Option(  # noqa: B008
        1,
        "--count",
        "-n",
        min=1,
        help="Number of random pets to add.",
    ),
) -> None:
    """Append random pets."""

    store = _open_store(AppConfig(db_path=db))
    added: list[Pet] = []
    try:
        for _ in range(count):
            added.append(store.append_random()[-1])
    except StoreError as exc:
        typer.echo(f"Cannot add pet: {exc}", err=True)
        raise typer.Exit(1) from exc
    Console().print(build_pets_table(added, title=f"Added {len(added)} pets"))


@app.command()
def remove(
    index: int = typer.Argument(..., help="Zero-based position of the pet to delete."),
    db: Path = _db_option(),  # noqa: B008
) -> None:
    """Delete the pet at INDEX."""

    store = _open_store(AppConfig(db_path=db))
    try:
        remaining = store.remove_at(index)
    except RecordIndexError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(2) from exc
    except StoreError as exc:
        typer.echo(f"Cannot remove pet: {exc}", err=True)
        raise typer.Exit(1) from exc
    typer.echo(f"Removed pet {index}; {len(remaining)} left.")
