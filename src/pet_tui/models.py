from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

ViewMode = Literal["home", "pets"]

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


@dataclass(frozen=True, slots=True)
class Pet:
    id: int
    name: str
    category: str
    age: int
    created_at: datetime

    @property
    def created_at_text(self) -> str:
        return format_timestamp(self.created_at)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "age": self.age,
            "created_at": self.created_at_text,
        }


@dataclass(frozen=True, slots=True)
class ViewModel:
    """Everything a renderer needs for one frame."""

    mode: ViewMode
    pets: tuple[Pet, ...]
    selected: int | None
    status: str = ""
    error: str | None = None

    @property
    def selected_pet(self) -> Pet | None:
        if self.selected is None or not (0 <= self.selected < len(self.pets)):
            return None
        return self.pets[self.selected]


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""

    parsed = datetime.fromisoformat(text.strip())
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
