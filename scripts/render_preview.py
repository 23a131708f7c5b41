#!/usr/bin/env python3
from __future__ import annotations

import argparse
import random
from pathlib import Path

from rich.console import Console

from pet_tui.runtime.dispatcher import AppState, Dispatcher
from pet_tui.store import InMemoryPetStore, JsonPetStore
from pet_tui.ui.render import build_view


def main() -> int:
    parser = argparse.ArgumentParser(description="Render one UI frame to the terminal.")
    parser.add_argument("--db", type=Path, help="Pet database to show (random pets otherwise).")
    parser.add_argument("--mode", choices=("home", "pets"), default="pets")
    parser.add_argument("--selected", type=int, default=0)
    parser.add_argument("--width", type=int, default=100)
    parser.add_argument("--height", type=int, default=30)
    parser.add_argument("--out", type=Path, help="Also save the frame as SVG.")
    args = parser.parse_args()

    if args.db is not None:
        pets = JsonPetStore(args.db).load()
    else:
        seeded = InMemoryPetStore(rng=random.Random(2020))
        for _ in range(5):
            seeded.append_random()
        pets = seeded.load()

    dispatcher = Dispatcher(InMemoryPetStore(pets))
    state = AppState(mode=args.mode)
    dispatcher.view_model(state)
    for _ in range(max(0, args.selected)):
        state.selection.select_next(len(pets))

    console = Console(record=True, width=args.width, height=args.height)
    console.print(build_view(dispatcher.view_model(state)))
    if args.out is not None:
        args.out.write_text(console.export_svg(title="pet-tui"), encoding="utf-8")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
