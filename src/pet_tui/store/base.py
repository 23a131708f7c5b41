from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from ..models import Pet


class StoreError(Exception):
    """Base class for pet store errors."""


class StoreIoError(StoreError):
    """Raised when the backing resource cannot be read or written."""


class StoreFormatError(StoreError):
    """Raised when stored content does not parse as a pet record array."""


class RecordIndexError(StoreError, IndexError):
    """Raised when a removal references a position outside the collection."""


class PetStoreInterface(ABC):
    """Whole-document pet persistence.

    Every mutating call performs one full read followed by one full write. There is
    no locking: concurrent external writers are unsupported and the last writer wins.
    """

    @abstractmethod
    def load(self) -> list[Pet]:
        """Return the complete persisted collection."""

    @abstractmethod
    def save(self, pets: Sequence[Pet]) -> None:
        """Replace the persisted collection with `pets`."""

    @abstractmethod
    def new_pet(self) -> Pet:
        """Synthesize a new random record (not persisted)."""

    def append_random(self) -> list[Pet]:
        pets = self.load()
        pets.append(self.new_pet())
        self.save(pets)
        return pets

    def remove_at(self, index: int) -> list[Pet]:
        pets = self.load()
        if not (0 <= index < len(pets)):
            raise RecordIndexError(
                f"Cannot remove pet at index {index}: collection has {len(pets)} records"
            )
        del pets[index]
        self.save(pets)
        return pets
