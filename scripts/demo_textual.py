#!/usr/bin/env python3
from __future__ import annotations

import random
from datetime import UTC, datetime

from pet_tui.models import Pet
from pet_tui.runtime.dispatcher import AppState, Dispatcher
from pet_tui.store import InMemoryPetStore
from pet_tui.ui.textual_app import run_textual

_SEED_PETS = (
    ("Chip", "cats", 3),
    ("Rex", "dogs", 7),
    ("Luna", "cats", 2),
)


def main() -> int:
    created_at = datetime.now(UTC)
    pets = [
        Pet(id=idx + 1, name=name, category=category, age=age, created_at=created_at)
        for idx, (name, category, age) in enumerate(_SEED_PETS)
    ]
    store = InMemoryPetStore(pets, rng=random.Random(2020))
    run_textual(Dispatcher(store), AppState(mode="pets"), tick_interval_s=0.2)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
