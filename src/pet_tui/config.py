from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final, Literal

from .runtime.multiplexer import DEFAULT_TICK_INTERVAL_S
from .store.generate import DEFAULT_CATEGORIES

UiMode = Literal["auto", "rich", "textual"]

DEFAULT_DB_PATH: Final[Path] = Path("data") / "db.json"
TICK_INTERVAL_MIN_S: Final[float] = 0.01
TICK_INTERVAL_MAX_S: Final[float] = 5.0


@dataclass(frozen=True)
class AppConfig:
    db_path: Path = DEFAULT_DB_PATH
    tick_interval_s: float = DEFAULT_TICK_INTERVAL_S
    categories: tuple[str, ...] = DEFAULT_CATEGORIES
    fail_fast: bool = False
    ui: UiMode = "auto"


def format_tick_interval(seconds: float) -> str:
    if seconds < 1.0:
        return f"{round(seconds * 1000)}ms"
    if seconds.is_integer():
        return f"{int(seconds)}s"
    return f"{seconds:.2f}s"


def parse_tick_interval(raw: str) -> float | None:
    """Parse `200ms`, `0.5s` or a bare number of seconds; None when invalid."""

    text = raw.strip().lower()
    if not text:
        return None
    scale = 1.0
    if text.endswith("ms"):
        text = text[:-2]
        scale = 0.001
    elif text.endswith("s"):
        text = text[:-1]
    try:
        value = float(text.strip()) * scale
    except ValueError:
        return None
    if not (TICK_INTERVAL_MIN_S <= value <= TICK_INTERVAL_MAX_S):
        return None
    return value


def parse_ui_mode(raw: str) -> UiMode | None:
    text = raw.strip().lower()
    if text == "auto":
        return "auto"
    if text == "rich":
        return "rich"
    if text == "textual":
        return "textual"
    return None
