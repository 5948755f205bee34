# ABOUTME: The `biblioenrich classify` command for inspecting book identifiers.
# ABOUTME: Shows whether each identifier is an ISBN-10, ISBN-13, or ASIN, its region, and ISBN-13 form.

import click
from rich.console import Console
from rich.table import Table

from biblioenrich.records.isbn import is_asin, is_isbn10, is_isbn13, route_region, to_isbn13


def _kind(identifier: str) -> str:
    if is_isbn10(identifier):
        return "ISBN-10"
    if is_isbn13(identifier):
        return "ISBN-13"
    if is_asin(identifier):
        return "ASIN"
    return "unknown"


@click.command()
@click.argument("identifiers", nargs=-1, required=True)
def classify(identifiers: tuple[str, ...]) -> None:
    """Classify book identifiers (ISBN-10, ISBN-13, ASIN)."""
    console = Console()

    table = Table()
    table.add_column("Identifier", style="bold")
    table.add_column("Kind")
    table.add_column("Region")
    table.add_column("ISBN-13")

    unknown = 0
    for identifier in identifiers:
        kind = _kind(identifier)
        if kind == "unknown":
            unknown += 1
            table.add_row(identifier, "[red]unknown[/red]", "", "")
            continue
        table.add_row(
            identifier,
            kind,
            route_region(identifier),
            to_isbn13(identifier) or "[dim]-[/dim]",
        )

    console.print(table)
    if unknown:
        console.print(f"\n[yellow]{unknown} identifier(s) not recognized.[/yellow]")
