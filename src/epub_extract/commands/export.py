"""Export command implementation."""

import asyncio
import logging
import re
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress

from epub_extract.config import ExtractorConfig
from epub_extract.core.epub_parser import EpubParser
from epub_extract.core.output_writer import OutputWriter
from epub_extract.exceptions import EpubError
from epub_extract.models.output import ChapterMetadata

log = logging.getLogger(__name__)


def get_default_output_dir(book_path: Path) -> Path:
    """Get default output directory based on book filename."""
    stem = book_path.stem
    # Clean up the filename for directory name
    clean_stem = re.sub(r"[^\w\s-]", "", stem).strip()
    clean_stem = re.sub(r"[-\s]+", "_", clean_stem)
    return book_path.parent / f"{clean_stem}_chapters"


async def export_book(
    parser: EpubParser,
    writer: OutputWriter,
    progress: Progress | None = None,
) -> tuple[Path, list[ChapterMetadata]]:
    """Stream chapters to disk one at a time, then write the manifest.

    Chapters that fail to load are skipped so the output matches eager
    extraction.
    """
    metadata = await parser.get_metadata()
    stream = await parser.extract_chapters_stream()
    task = progress.add_task("Exporting chapters...", total=len(stream)) if progress else None

    written: list[ChapterMetadata] = []
    while True:
        try:
            chapter = await anext(stream)
        except StopAsyncIteration:
            break
        except EpubError as e:
            log.warning("Skipping chapter: %s", e)
        else:
            _, chapter_meta = writer.write_chapter(len(written), chapter)
            written.append(chapter_meta)
        if progress is not None and task is not None:
            progress.update(task, advance=1)

    manifest_path = writer.write_manifest(metadata, written)
    return manifest_path, written


def execute_export(
    book_path: Path,
    output_dir: Path | None,
    config: ExtractorConfig,
    quiet: bool,
    console: Console,
) -> None:
    """Execute the export command."""
    final_output_dir = output_dir or get_default_output_dir(book_path)
    parser = EpubParser.open(book_path, config)
    writer = OutputWriter(final_output_dir, book_path)

    if quiet:
        asyncio.run(export_book(parser, writer))
        return

    with Progress(console=console) as progress:
        manifest_path, written = asyncio.run(export_book(parser, writer, progress))

    console.print()
    summary_lines = [
        f"[green]Successfully exported {len(written)} chapter(s)[/]",
        "",
        f"[dim]Output directory:[/] {escape(str(final_output_dir))}",
        f"[dim]Manifest:[/] {escape(manifest_path.name)}",
    ]
    console.print(
        Panel(
            "\n".join(summary_lines),
            title="Complete",
            border_style="green",
        )
    )
