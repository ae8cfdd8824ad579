"""Inspect command implementation."""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from bookbinder.core.epub_reader import EpubReader
from bookbinder.models.epub import InspectedEpub, NavPointEntry


def _add_nav_rows(table: Table, entries: list[NavPointEntry]) -> None:
    for entry in entries:
        order = str(entry.play_order) if entry.play_order is not None else "-"
        indent = "  " * entry.level
        table.add_row(order, f"{indent}{entry.label}", entry.src)
        _add_nav_rows(table, entry.children)


def display_nav_map(inspected: InspectedEpub, console: Console) -> None:
    """Display the navigation map as an indented table in play order."""
    table = Table(title="Navigation", show_header=True, header_style="bold cyan")
    table.add_column("Order", style="dim", width=5)
    table.add_column("Label", style="white")
    table.add_column("Target", style="dim")
    _add_nav_rows(table, inspected.nav_points)
    console.print(table)


def execute_inspect(epub_path: Path, console: Console) -> InspectedEpub:
    """Execute the inspect command."""
    inspected = EpubReader(epub_path).read()
    metadata = inspected.metadata

    info_lines = [
        f"[bold]{metadata.title}[/]",
        "",
        f"[dim]Author(s):[/] {', '.join(metadata.authors) or 'Unknown'}",
        f"[dim]Language:[/] {metadata.language or 'Unknown'}",
        f"[dim]Publisher:[/] {metadata.publisher or 'Unknown'}",
        f"[dim]Identifier:[/] {metadata.identifier or 'Unknown'}",
        f"[dim]Date:[/] {metadata.publication_date or 'Unknown'}",
        f"[dim]Documents:[/] {len(inspected.documents)}",
        f"[dim]Images:[/] {len(inspected.images)}",
    ]

    console.print()
    console.print(
        Panel(
            "\n".join(info_lines),
            title="Book Information",
            border_style="green",
        )
    )
    console.print()
    display_nav_map(inspected, console)
    console.print()
    return inspected
