"""Info command implementation."""

import asyncio
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from epub_extract.config import ExtractorConfig
from epub_extract.core.epub_parser import EpubParser
from epub_extract.models.epub import EpubMetadata, ParsedChapter

PREVIEW_CHARS = 300


async def collect_book(parser: EpubParser) -> tuple[EpubMetadata, list[ParsedChapter]]:
    """Fetch metadata and all chapters."""
    metadata = await parser.get_metadata()
    chapters = await parser.extract_chapters()
    return metadata, chapters


def build_info_lines(metadata: EpubMetadata, chapters: list[ParsedChapter]) -> list[str]:
    """Lines for the book information panel."""
    lines = [f"[bold]{escape(metadata.title or '(unknown)')}[/]", ""]

    if metadata.authors:
        lines.append(f"[dim]Authors:[/] {escape(', '.join(metadata.authors))}")
    if metadata.languages:
        lines.append(f"[dim]Languages:[/] {escape(', '.join(metadata.languages))}")
    if metadata.publisher:
        lines.append(f"[dim]Publisher:[/] {escape(metadata.publisher)}")
    if metadata.date:
        lines.append(f"[dim]Publication Date:[/] {escape(metadata.date)}")

    total_words = sum(ch.word_count for ch in chapters)
    total_chars = sum(ch.char_count for ch in chapters)
    lines.append("")
    lines.append(f"[dim]Chapters:[/] {len(chapters)}")
    lines.append(f"[dim]Total Words:[/] {total_words:,}")
    lines.append(f"[dim]Total Characters:[/] {total_chars:,}")
    return lines


def execute_info(
    book_path: Path,
    config: ExtractorConfig,
    console: Console,
    quiet: bool = False,
) -> None:
    """Execute the info command."""
    parser = EpubParser.open(book_path, config)

    if quiet:
        metadata, chapters = asyncio.run(collect_book(parser))
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            progress.add_task("Parsing EPUB...", total=None)
            metadata, chapters = asyncio.run(collect_book(parser))

    console.print()
    console.print(
        Panel(
            "\n".join(build_info_lines(metadata, chapters)),
            title="Book Information",
            border_style="green",
        )
    )

    if chapters:
        preview = chapters[0].content[:PREVIEW_CHARS].strip()
        console.print(
            Panel(
                f"{escape(preview)}\n[dim]...[/]",
                title="First Chapter Preview",
                border_style="blue",
            )
        )
    console.print()
