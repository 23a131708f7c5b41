from __future__ import annotations

import random
import string
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Final

from ..models import Pet

DEFAULT_CATEGORIES: Final[tuple[str, str]] = ("cats", "dogs")
ID_MAX: Final[int] = 9_999_999
NAME_LENGTH: Final[int] = 10
AGE_MIN: Final[int] = 1
AGE_MAX: Final[int] = 14
_NAME_ALPHABET: Final[str] = string.ascii_letters + string.digits


def _utc_now() -> datetime:
    return datetime.now(UTC)


def random_pet(
    rng: random.Random,
    *,
    categories: Sequence[str] = DEFAULT_CATEGORIES,
    now: Callable[[], datetime] = _utc_now,
) -> Pet:
    """Build a pet with a random id, name, category and age.

    Ids are drawn from 0..ID_MAX inclusive and may collide with existing records.
    """

    if not categories:
        raise ValueError("At least one category is required")
    return Pet(
        id=rng.randint(0, ID_MAX),
        name="".join(rng.choices(_NAME_ALPHABET, k=NAME_LENGTH)),
        category=rng.choice(list(categories)),
        age=rng.randint(AGE_MIN, AGE_MAX),
        created_at=now(),
    )
