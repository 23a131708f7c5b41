from __future__ import annotations

import random
from collections.abc import Sequence

from ..models import Pet
from .base import PetStoreInterface, StoreIoError
from .generate import DEFAULT_CATEGORIES, random_pet
from .json_file import decode_pets, encode_pets


class InMemoryPetStore(PetStoreInterface):
    """In-process pet store used for tests and `--dry-run`.

    The collection is kept as encoded JSON text, so it goes through the same codec
    (and fails the same way) as the file-backed store.
    """

    def __init__(
        self,
        pets: Sequence[Pet] = (),
        *,
        categories: Sequence[str] = DEFAULT_CATEGORIES,
        rng: random.Random | None = None,
    ) -> None:
        self._text = encode_pets(pets)
        self._categories = tuple(categories)
        self._rng = rng if rng is not None else random.Random()
        self.fail_reads = False
        self.fail_writes = False
        self.reads = 0
        self.writes = 0

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        self._text = value

    def load(self) -> list[Pet]:
        self.reads += 1
        if self.fail_reads:
            raise StoreIoError("Simulated read failure")
        return decode_pets(self._text)

    def save(self, pets: Sequence[Pet]) -> None:
        if self.fail_writes:
            raise StoreIoError("Simulated write failure")
        self.writes += 1
        self._text = encode_pets(pets)

    def new_pet(self) -> Pet:
        return random_pet(self._rng, categories=self._categories)
