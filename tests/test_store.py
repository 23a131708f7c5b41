from __future__ import annotations

import json
import random
from datetime import UTC, datetime
from pathlib import Path

import pytest
from conftest import CREATED_AT, make_pet

from pet_tui.models import Pet
from pet_tui.store import (
    InMemoryPetStore,
    JsonPetStore,
    RecordIndexError,
    StoreError,
    StoreFormatError,
    StoreIoError,
    decode_pets,
)
from pet_tui.store.generate import AGE_MAX, AGE_MIN, ID_MAX, random_pet


def test_save_then_load_round_trips_field_for_field(
    tmp_path: Path, sample_pets: list[Pet]
) -> None:
    store = JsonPetStore(tmp_path / "db.json")
    store.save(sample_pets)
    assert store.load() == sample_pets


def test_saved_document_uses_exact_fields_and_utc_timestamp(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    JsonPetStore(path).save([make_pet(42, "Chip")])
    document = json.loads(path.read_text(encoding="utf-8"))
    assert document == [
        {
            "id": 42,
            "name": "Chip",
            "category": "cats",
            "age": 3,
            "created_at": "2026-02-11T12:00:00.123456Z",
        }
    ]


def test_save_leaves_no_temporary_files(tmp_path: Path, sample_pets: list[Pet]) -> None:
    store = JsonPetStore(tmp_path / "db.json")
    store.save(sample_pets)
    store.save(sample_pets[:1])
    assert sorted(p.name for p in tmp_path.iterdir()) == ["db.json"]


def test_load_missing_file_raises_io_error(tmp_path: Path) -> None:
    with pytest.raises(StoreIoError):
        JsonPetStore(tmp_path / "missing.json").load()


def test_save_into_missing_directory_raises_io_error(tmp_path: Path) -> None:
    with pytest.raises(StoreIoError):
        JsonPetStore(tmp_path / "nope" / "db.json").save([])


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        '{"id": 1}',
        '[{"id": 1, "name": "x", "category": "cats", "age": 1}]',
        '[{"id": -1, "name": "x", "category": "cats", "age": 1, '
        '"created_at": "2026-02-11T12:00:00Z"}]',
        '[{"id": true, "name": "x", "category": "cats", "age": 1, '
        '"created_at": "2026-02-11T12:00:00Z"}]',
        '[{"id": 1, "name": 5, "category": "cats", "age": 1, '
        '"created_at": "2026-02-11T12:00:00Z"}]',
        '[{"id": 1, "name": "x", "category": "cats", "age": 1, "created_at": "yesterday"}]',
        '[{"id": 1, "name": "x", "category": "cats", "age": 1, '
        '"created_at": "2026-02-11T12:00:00Z", "color": "red"}]',
        "[1, 2]",
    ],
)
def test_decode_rejects_malformed_documents(text: str) -> None:
    with pytest.raises(StoreFormatError):
        decode_pets(text)


def test_load_reports_format_error_with_path(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    path.write_text("[", encoding="utf-8")
    with pytest.raises(StoreFormatError, match="db.json"):
        JsonPetStore(path).load()


def test_load_reports_undecodable_bytes_as_format_error(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    path.write_bytes(b"[\xff]")
    with pytest.raises(StoreFormatError, match="UTF-8"):
        JsonPetStore(path).load()


def test_decode_accepts_second_precision_and_naive_timestamps() -> None:
    pets = decode_pets(
        json.dumps(
            [
                {
                    "id": 1,
                    "name": "a",
                    "category": "cats",
                    "age": 1,
                    "created_at": "2026-02-11T12:00:00Z",
                },
                {
                    "id": 2,
                    "name": "b",
                    "category": "dogs",
                    "age": 2,
                    "created_at": "2026-02-11T12:00:00",
                },
            ]
        )
    )
    expected = datetime(2026, 2, 11, 12, 0, 0, tzinfo=UTC)
    assert [pet.created_at for pet in pets] == [expected, expected]


def test_append_random_adds_exactly_one_valid_pet(db_path: Path, sample_pets: list[Pet]) -> None:
    store = JsonPetStore(db_path, rng=random.Random(7))
    updated = store.append_random()
    assert len(updated) == len(sample_pets) + 1
    assert updated[:-1] == sample_pets
    added = updated[-1]
    assert AGE_MIN <= added.age <= AGE_MAX
    assert added.category in {"cats", "dogs"}
    assert len(added.name) == 10 and added.name.isalnum()
    assert store.load() == updated


def test_append_random_on_corrupt_file_does_not_write(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    path.write_text("{broken", encoding="utf-8")
    with pytest.raises(StoreFormatError):
        JsonPetStore(path).append_random()
    assert path.read_text(encoding="utf-8") == "{broken"


def test_remove_at_removes_one_and_persists(db_path: Path, sample_pets: list[Pet]) -> None:
    store = JsonPetStore(db_path)
    remaining = store.remove_at(1)
    assert remaining == [sample_pets[0], sample_pets[2]]
    assert store.load() == remaining


@pytest.mark.parametrize("index", [3, 10, -1])
def test_remove_at_out_of_range_raises_index_error(db_path: Path, index: int) -> None:
    store = JsonPetStore(db_path)
    with pytest.raises(RecordIndexError) as excinfo:
        store.remove_at(index)
    assert isinstance(excinfo.value, IndexError)
    assert isinstance(excinfo.value, StoreError)
    assert len(store.load()) == 3


def test_init_creates_empty_database_and_keeps_existing(tmp_path: Path) -> None:
    path = tmp_path / "data" / "db.json"
    store = JsonPetStore(path)
    assert store.init() is True
    assert store.load() == []

    store.save([make_pet(1, "Chip")])
    assert store.init() is False
    assert len(store.load()) == 1
    assert store.init(overwrite=True) is True
    assert store.load() == []


def test_random_pet_respects_ranges_and_categories() -> None:
    rng = random.Random(1234)
    pets = [
        random_pet(rng, categories=("birds", "fish"), now=lambda: CREATED_AT)
        for _ in range(200)
    ]
    assert {pet.category for pet in pets} == {"birds", "fish"}
    assert all(AGE_MIN <= pet.age <= AGE_MAX for pet in pets)
    assert all(0 <= pet.id <= ID_MAX for pet in pets)
    assert len({pet.id for pet in pets}) > 1
    assert all(pet.created_at == CREATED_AT for pet in pets)


def test_random_pet_requires_categories() -> None:
    with pytest.raises(ValueError):
        random_pet(random.Random(0), categories=())


def test_in_memory_store_matches_file_store_contract(sample_pets: list[Pet]) -> None:
    store = InMemoryPetStore(sample_pets, rng=random.Random(3))
    assert store.load() == sample_pets
    assert len(store.append_random()) == 4
    assert store.remove_at(0)[0] == sample_pets[1]
    assert store.writes == 2

    store.fail_writes = True
    with pytest.raises(StoreIoError):
        store.append_random()
    assert len(store.load()) == 3

    store.text = "garbage"
    with pytest.raises(StoreFormatError):
        store.load()
