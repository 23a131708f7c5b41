from __future__ import annotations

import json
import logging
import os
import random
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Final

from ..models import Pet, parse_timestamp
from .base import PetStoreInterface, StoreFormatError, StoreIoError
from .generate import DEFAULT_CATEGORIES, random_pet

logger = logging.getLogger(__name__)

_FIELDS: Final[frozenset[str]] = frozenset({"id", "name", "category", "age", "created_at"})


def _require_uint(entry: dict[str, Any], key: str, *, position: int) -> int:
    value = entry[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise StoreFormatError(
            f"Record {position}: {key!r} must be a non-negative integer, got {value!r}"
        )
    return value


def _require_str(entry: dict[str, Any], key: str, *, position: int) -> str:
    value = entry[key]
    if not isinstance(value, str):
        raise StoreFormatError(f"Record {position}: {key!r} must be a string, got {value!r}")
    return value


def pet_from_json(entry: object, *, position: int = 0) -> Pet:
    if not isinstance(entry, dict):
        raise StoreFormatError(f"Record {position}: expected an object, got {type(entry).__name__}")
    keys = set(entry)
    if keys != _FIELDS:
        missing = sorted(_FIELDS - keys)
        extra = sorted(keys - _FIELDS)
        raise StoreFormatError(f"Record {position}: missing={missing} unexpected={extra}")
    created_at_text = _require_str(entry, "created_at", position=position)
    try:
        created_at = parse_timestamp(created_at_text)
    except ValueError as exc:
        raise StoreFormatError(
            f"Record {position}: invalid created_at {created_at_text!r}"
        ) from exc
    return Pet(
        id=_require_uint(entry, "id", position=position),
        name=_require_str(entry, "name", position=position),
        category=_require_str(entry, "category", position=position),
        age=_require_uint(entry, "age", position=position),
        created_at=created_at,
    )


def decode_pets(text: str) -> list[Pet]:
    """Decode a whole JSON document into pets.

    Raises:
        StoreFormatError: The text is not a JSON array of complete pet records.
    """

    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise StoreFormatError(f"Invalid JSON: {exc}") from exc
    if not isinstance(document, list):
        raise StoreFormatError(f"Expected a JSON array, got {type(document).__name__}")
    return [pet_from_json(entry, position=idx) for idx, entry in enumerate(document)]


def encode_pets(pets: Sequence[Pet]) -> str:
    return json.dumps([pet.to_json() for pet in pets], indent=2) + "\n"


class JsonPetStore(PetStoreInterface):
    """Pet store backed by a single JSON file.

    Writes go to a temporary file in the same directory which then replaces the target,
    so readers never observe a half-written document.
    """

    def __init__(
        self,
        path: Path,
        *,
        categories: Sequence[str] = DEFAULT_CATEGORIES,
        rng: random.Random | None = None,
    ) -> None:
        self._path = path
        self._categories = tuple(categories)
        self._rng = rng if rng is not None else random.Random()

    @property
    def path(self) -> Path:
        return self._path

    def init(self, *, overwrite: bool = False) -> bool:
        """Create the backing file holding an empty array.

        Returns True when a file was written.
        """

        if self._path.exists() and not overwrite:
            return False
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreIoError(f"Cannot create {self._path.parent}: {exc}") from exc
        self.save([])
        return True

    def load(self) -> list[Pet]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StoreIoError(f"Cannot read {self._path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise StoreFormatError(f"{self._path}: not valid UTF-8: {exc}") from exc
        try:
            return decode_pets(text)
        except StoreFormatError as exc:
            raise StoreFormatError(f"{self._path}: {exc}") from exc

    def save(self, pets: Sequence[Pet]) -> None:
        payload = encode_pets(pets)
        directory = self._path.parent
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(payload)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreIoError(f"Cannot write {self._path}: {exc}") from exc
        logger.info("Wrote %d pets to %s", len(pets), self._path)

    def new_pet(self) -> Pet:
        return random_pet(self._rng, categories=self._categories)
