"""Build command implementation."""

import asyncio
import json
import re
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn

from bookbinder.core.assembler import EpubAssembler
from bookbinder.models.output import ProgressUpdate
from bookbinder.models.source import BookSource


def load_book_source(source_path: Path) -> BookSource:
    """Load and validate a JSON book description."""
    data = json.loads(source_path.read_text(encoding="utf-8"))
    return BookSource.model_validate(data)


def get_default_output_path(source_path: Path, title: str | None) -> Path:
    """Get default output file based on the book title or source filename."""
    stem = title or source_path.stem
    clean_stem = re.sub(r"[^\w\s-]", "", stem).strip()
    clean_stem = re.sub(r"[-\s]+", "_", clean_stem) or "book"
    return source_path.parent / f"{clean_stem}.epub"


def assemble_from_source(source: BookSource, base_dir: Path) -> EpubAssembler:
    """Feed a book description into a fresh assembler.

    Image and cover paths are resolved against base_dir.
    """
    book = EpubAssembler().initialize(source.metadata)

    if source.date is not None:
        book.set_date(source.date)
    if source.identifier:
        book.set_identifier(source.identifier)
    if source.cover:
        book.register_cover((base_dir / source.cover).read_bytes())
    for name, image_path in source.images.items():
        book.register_image((base_dir / image_path).read_bytes(), name)
    if source.notes:
        book.set_notes(source.notes)
    for page in source.pages:
        book.add_page(page.title, page.content, page.level)

    return book


def execute_build(
    source_path: Path,
    output_path: Path | None,
    quiet: bool,
    console: Console,
) -> Path:
    """Execute the build command."""
    source = load_book_source(source_path)
    book = assemble_from_source(source, source_path.parent)
    final_output = output_path or get_default_output_path(
        source_path, source.metadata.title
    )

    if quiet:
        data = asyncio.run(book.generate("bytes"))
    else:
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            console=console,
        ) as progress:
            task = progress.add_task("Packaging...", total=100)

            def on_progress(update: ProgressUpdate) -> None:
                progress.update(
                    task,
                    completed=update.percent,
                    description=f"Packaging: {(update.current_file or '')[:40]}",
                )

            data = asyncio.run(book.generate("bytes", on_progress))

    final_output.parent.mkdir(parents=True, exist_ok=True)
    final_output.write_bytes(data)

    if not quiet:
        metadata = book.metadata.with_defaults(book.labels.code)
        summary_lines = [
            f"[green]Built {metadata.title}[/]",
            "",
            f"[dim]Author:[/] {metadata.author}",
            f"[dim]Pages:[/] {len(book.pages)}",
            f"[dim]Images:[/] {len(book.resources.images)}",
            f"[dim]Cover:[/] {'yes' if book.resources.cover else 'no'}",
            f"[dim]Output:[/] {final_output}",
        ]
        console.print()
        console.print(
            Panel(
                "\n".join(summary_lines),
                title="Complete",
                border_style="green",
            )
        )

    return final_output
