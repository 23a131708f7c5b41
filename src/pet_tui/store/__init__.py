from .base import (
    PetStoreInterface,
    RecordIndexError,
    StoreError,
    StoreFormatError,
    StoreIoError,
)
from .json_file import JsonPetStore, decode_pets, encode_pets
from .memory import InMemoryPetStore

__all__ = [
    "InMemoryPetStore",
    "JsonPetStore",
    "PetStoreInterface",
    "RecordIndexError",
    "StoreError",
    "StoreFormatError",
    "StoreIoError",
    "decode_pets",
    "encode_pets",
]
