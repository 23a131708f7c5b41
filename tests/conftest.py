from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from pet_tui.models import Pet

CREATED_AT = datetime(2026, 2, 11, 12, 0, 0, 123456, tzinfo=UTC)


def make_pet(pet_id: int, name: str, *, category: str = "cats", age: int = 3) -> Pet:
    return Pet(id=pet_id, name=name, category=category, age=age, created_at=CREATED_AT)


@pytest.fixture
def sample_pets() -> list[Pet]:
    return [
        make_pet(1, "Chip"),
        make_pet(2, "Rex", category="dogs", age=7),
        make_pet(3, "Luna", age=2),
    ]


@pytest.fixture
def db_path(tmp_path: Path, sample_pets: list[Pet]) -> Path:
    path = tmp_path / "data" / "db.json"
    path.parent.mkdir()
    path.write_text(json.dumps([pet.to_json() for pet in sample_pets]), encoding="utf-8")
    return path
