"""Rich and JSON renderings of records and search results."""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from dexvault.shared.constants import CLIDefaults, CLIMessages
from dexvault.shared.models import CompositeRecord


def display_name(name: str) -> str:
    """``"mr-mime"`` -> ``"Mr Mime"``."""
    return " ".join(part.capitalize() for part in name.replace("_", "-").split("-"))


def record_to_dict(
    record: CompositeRecord,
    moves_shown: int = CLIDefaults.MOVES_SHOWN,
    language: str = CLIDefaults.FLAVOR_LANGUAGE,
) -> dict[str, Any]:
    """Summary of a composite record for JSON output."""
    pokemon = record.pokemon
    return {
        "id": record.id,
        "name": record.name,
        "types": list(pokemon.types),
        "genus": record.species.genus if record.species else None,
        "height": pokemon.height,
        "weight": pokemon.weight,
        "abilities": list(pokemon.abilities),
        "moves": list(pokemon.moves[:moves_shown]),
        "flavor_text": record.flavor_text(language),
        "evolution_line": list(record.evolution_line()),
        "sprite": pokemon.sprites.best_front,
    }


def evolution_text(record: CompositeRecord) -> Text:
    """Evolution line with the record's own species highlighted."""
    text = Text()
    current = record.species.name if record.species else record.name
    for position, name in enumerate(record.evolution_line()):
        if position:
            text.append(" → ", style="dim")
        style = "bold yellow" if name == current else ""
        text.append(display_name(name), style=style)
    return text


def render_record(console: Console, record: CompositeRecord) -> None:
    summary = record_to_dict(record)

    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan", no_wrap=True)
    table.add_column()
    table.add_row("Type", " / ".join(t.capitalize() for t in summary["types"]) or "-")
    if summary["genus"]:
        table.add_row("Genus", summary["genus"])
    if summary["height"] is not None:
        table.add_row("Height", f"{summary['height'] / 10:.1f} m")
    if summary["weight"] is not None:
        table.add_row("Weight", f"{summary['weight'] / 10:.1f} kg")
    table.add_row("Abilities", ", ".join(display_name(a) for a in summary["abilities"]) or "-")
    table.add_row("Moves", ", ".join(display_name(m) for m in summary["moves"]) or "-")
    if summary["evolution_line"]:
        table.add_row("Evolution", evolution_text(record))
    table.add_row("Entry", summary["flavor_text"] or CLIMessages.NO_ENTRY)

    console.print(
        Panel(
            table,
            title=f"#{record.id:03d} {display_name(record.name)}",
            title_align="left",
            border_style="red",
        )
    )


def render_suggestions(console: Console, query: str, names: list[str] | tuple[str, ...]) -> None:
    table = Table(title=f"{CLIMessages.SUGGESTIONS} {query!r}")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="green")
    for position, name in enumerate(names, start=1):
        table.add_row(str(position), display_name(name))
    console.print(table)
