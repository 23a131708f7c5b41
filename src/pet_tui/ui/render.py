from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Final

from rich.align import Align
from rich.console import Console, Group, RenderableType
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models import ViewMode, ViewModel

_MENU_TITLES: Final[tuple[str, ...]] = ("Home", "Pets", "Add", "Delete", "Quit")
_MENU_MODES: Final[dict[str, ViewMode]] = {"Home": "home", "Pets": "pets"}
_FOOTER: Final[str] = "pet-CLI 2020 - all rights reserved"
_HIGHLIGHT: Final[str] = "bold black on yellow"
_BORDER: Final[str] = "#729fcf"


def _menu_bar(mode: ViewMode) -> RenderableType:
    text = Text()
    for idx, title in enumerate(_MENU_TITLES):
        if idx:
            text.append(" | ", style="dim")
        style = _HIGHLIGHT if _MENU_MODES.get(title) == mode else "white"
        text.append(title[0], style=f"{style} underline")
        text.append(title[1:], style=style)
    return Panel(text, title="Menu", border_style=_BORDER)


def _home() -> RenderableType:
    body = Group(
        Text(""),
        Text("Welcome", justify="center"),
        Text(""),
        Text("to", justify="center"),
        Text(""),
        Text("pet-CLI", style="bold magenta", justify="center"),
        Text(""),
        Text(
            "Press 'p' to access pets, 'a' to add random new pets and 'd' to delete "
            "the currently selected pet.",
            justify="center",
        ),
    )
    return Panel(Align.center(body, vertical="middle"), title="Home", border_style=_BORDER)


def _pet_list(view: ViewModel) -> RenderableType:
    table = Table.grid(expand=True)
    table.add_column("Pet")
    for idx, pet in enumerate(view.pets):
        if idx == view.selected:
            table.add_row(Text(f">> {pet.name}", style=_HIGHLIGHT))
        else:
            table.add_row(Text(f"   {pet.name}"))
    return Panel(table, title="Pets", border_style=_BORDER)


def _pet_detail(view: ViewModel) -> RenderableType:
    pet = view.selected_pet
    if pet is None:
        return Panel(
            Text("No pets yet. Press 'a' to add one.", style="dim"),
            title="Detail",
            border_style=_BORDER,
        )
    table = Table(expand=True, border_style=_BORDER, header_style="bold")
    table.add_column("ID", width=10)
    table.add_column("Name", ratio=2)
    table.add_column("Category", ratio=2)
    table.add_column("Age", width=5)
    table.add_column("Created At", ratio=3)
    table.add_row(str(pet.id), pet.name, pet.category, str(pet.age), pet.created_at_text)
    return Panel(table, title="Detail", border_style=_BORDER)


def _pets(view: ViewModel) -> RenderableType:
    layout = Layout(name="pets")
    layout.split_row(
        Layout(_pet_list(view), name="list", ratio=1),
        Layout(_pet_detail(view), name="detail", ratio=4),
    )
    return layout


def _status_line(view: ViewModel) -> RenderableType:
    if view.error:
        return Text(f"Error: {view.error}", style="bold red")
    return Text(view.status or f"{len(view.pets)} pets", style="#fce94f on #555753")


def build_view(view: ViewModel) -> RenderableType:
    """Build the full-screen renderable for one view model."""

    layout = Layout(name="root")
    layout.split_column(
        Layout(_menu_bar(view.mode), name="menu", size=3),
        Layout(_home() if view.mode == "home" else _pets(view), name="body", ratio=1),
        Layout(_status_line(view), name="status", size=1),
        Layout(
            Panel(Text(_FOOTER, style="cyan", justify="center"), title="Copyright"),
            name="footer",
            size=3,
        ),
    )
    return layout


class RichRenderer(AbstractContextManager["RichRenderer"]):
    """Full-screen renderer on top of `rich.live.Live`.

    The alternate screen and hidden cursor are restored when the context exits.
    """

    def __init__(self, *, console: Console) -> None:
        self._console = console
        self._live: Live | None = None

    def __enter__(self) -> RichRenderer:
        self._live = Live(
            console=self._console,
            screen=True,
            auto_refresh=False,
            transient=True,
        )
        self._live.start()
        return self

    def __exit__(self, *_exc: object) -> None:
        if self._live is not None:
            self._live.stop()
        self._live = None
        return None

    def render(self, view: ViewModel) -> None:
        if self._live is None:
            raise RuntimeError("RichRenderer used outside its context")
        self._live.update(build_view(view), refresh=True)
