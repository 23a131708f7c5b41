from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Keystroke:
    key: str
    at: float = 0.0


@dataclass(frozen=True, slots=True)
class Tick:
    at: float = 0.0


InputEvent = Keystroke | Tick
