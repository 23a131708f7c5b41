from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..models import Pet


def build_pets_table(pets: Sequence[Pet], *, title: str | None = None) -> Table:
    table = Table(title=title, header_style="bold", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Age", justify="right")
    table.add_column("Created At")
    for idx, pet in enumerate(pets):
        table.add_row(
            str(idx),
            str(pet.id),
            pet.name,
            pet.category,
            str(pet.age),
            pet.created_at_text,
        )
    return table


def render_pets(console: Console, pets: Sequence[Pet], *, db_path: Path) -> None:
    if not pets:
        console.print(Text(f"No pets in {db_path}", style="dim"))
        return
    console.print(build_pets_table(pets, title=f"{len(pets)} pets ({db_path})"))
