"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from bookbinder.config import AssemblerConfig

app = typer.Typer(
    name="bookbinder",
    help="Assemble EPUB books from metadata, pages and images.",
    add_completion=False,
)

console = Console()


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich when asked to."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def build(
    source_path: Annotated[
        Path,
        typer.Argument(
            help="Path to the JSON book description",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output file path (default: {title}.epub next to the description)",
        ),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress progress output",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug logging",
        ),
    ] = False,
) -> None:
    """Build an EPUB from a JSON book description."""
    configure_logging(verbose)
    try:
        from bookbinder.commands.build import execute_build

        execute_build(
            source_path=source_path,
            output_path=output,
            quiet=quiet,
            console=console,
        )
    except Exception as e:
        console.print(f"[red]Error: {e}[/]")
        raise typer.Exit(1)


@app.command()
def inspect(
    epub_path: Annotated[
        Path,
        typer.Argument(
            help="Path to the EPUB file",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
) -> None:
    """Display book metadata and navigation tree."""
    try:
        from bookbinder.commands.inspect import execute_inspect

        execute_inspect(epub_path=epub_path, console=console)
    except Exception as e:
        console.print(f"[red]Error reading file: {e}[/]")
        raise typer.Exit(1)


@app.command()
def locales() -> None:
    """List supported locale codes."""
    config = AssemblerConfig()
    table = Table(title="Locales", show_header=True, header_style="bold cyan")
    table.add_column("Code", style="white")
    table.add_column("Contents label", style="green")
    table.add_column("Direction", style="dim")

    for code in sorted(config.locales):
        labels = config.locales[code]
        table.add_row(code, labels.toc, labels.direction)

    console.print(table)


if __name__ == "__main__":
    app()
