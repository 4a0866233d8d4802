"""Chapters command implementation."""

import asyncio
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from epub_extract.config import ExtractorConfig
from epub_extract.core.epub_parser import EpubParser
from epub_extract.exceptions import EpubError
from epub_extract.models.epub import ParsedChapter


async def collect_rows(
    parser: EpubParser, stream: bool
) -> list[ParsedChapter | EpubError]:
    """Chapters in spine order.

    Eager mode silently drops unreadable chapters; stream mode keeps the
    error for each failed position.
    """
    if not stream:
        return list(await parser.extract_chapters())

    rows: list[ParsedChapter | EpubError] = []
    chapter_stream = await parser.extract_chapters_stream()
    while True:
        try:
            rows.append(await anext(chapter_stream))
        except StopAsyncIteration:
            break
        except EpubError as e:
            rows.append(e)
    return rows


def execute_chapters(
    book_path: Path,
    config: ExtractorConfig,
    stream: bool,
    console: Console,
) -> None:
    """Execute the chapters command."""
    parser = EpubParser.open(book_path, config)
    rows = asyncio.run(collect_rows(parser, stream))

    table = Table(title="Chapters", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("ID", style="white")
    table.add_column("Href", style="white")
    table.add_column("Words", justify="right", style="green")
    table.add_column("Chars", justify="right", style="green")
    if config.with_ast:
        table.add_column("AST", justify="right", style="dim")

    for i, row in enumerate(rows):
        if isinstance(row, EpubError):
            cells = [
                str(i + 1),
                "[red]error[/]",
                f"[red]{escape(str(row))}[/]",
                "-",
                "-",
            ]
            if config.with_ast:
                cells.append("-")
            table.add_row(*cells)
            continue

        cells = [
            str(i + 1),
            escape(row.chapter_info.id),
            escape(row.chapter_info.href),
            f"{row.word_count:,}",
            f"{row.char_count:,}",
        ]
        if config.with_ast:
            cells.append("yes" if row.ast is not None else "no")
        table.add_row(*cells)

    console.print(table)
