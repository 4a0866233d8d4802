"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from epub_extract.config import ExtractorConfig
from epub_extract.exceptions import EpubError

app = typer.Typer(
    name="epub-extract",
    help="Extract metadata, chapter text and HTML ASTs from EPUB files.",
    add_completion=False,
)

console = Console()

BookPath = Annotated[
    Path,
    typer.Argument(
        help="Path to the EPUB file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]

LowMemory = Annotated[
    bool,
    typer.Option(
        "--low-memory",
        envvar="EPUB_EXTRACT_LOW_MEMORY",
        help="Do not memoize package or chapters between requests",
    ),
]

WithAst = Annotated[
    bool,
    typer.Option(
        "--ast",
        help="Also build an HTML AST for each chapter",
    ),
]


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Extract metadata, chapter text and HTML ASTs from EPUB files."""
    configure_logging(verbose)


@app.command()
def info(
    book_path: BookPath,
    low_memory: LowMemory = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress progress output"),
    ] = False,
) -> None:
    """Display book metadata, content statistics and a first-chapter preview."""
    try:
        from epub_extract.commands.info import execute_info

        execute_info(
            book_path=book_path,
            config=ExtractorConfig(low_memory=low_memory),
            console=console,
            quiet=quiet,
        )
    except EpubError as e:
        console.print(f"[red]Error reading EPUB: {escape(str(e))}[/]")
        raise typer.Exit(1)


@app.command()
def chapters(
    book_path: BookPath,
    stream: Annotated[
        bool,
        typer.Option(
            "--stream",
            "-s",
            help="Read chapters one at a time and report per-chapter errors",
        ),
    ] = False,
    with_ast: WithAst = False,
    low_memory: LowMemory = False,
) -> None:
    """List chapters in reading order with word and character counts."""
    try:
        from epub_extract.commands.chapters import execute_chapters

        execute_chapters(
            book_path=book_path,
            config=ExtractorConfig(low_memory=low_memory, with_ast=with_ast),
            stream=stream,
            console=console,
        )
    except EpubError as e:
        console.print(f"[red]Error reading EPUB: {escape(str(e))}[/]")
        raise typer.Exit(1)


@app.command()
def export(
    book_path: BookPath,
    output_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--output-dir",
            "-o",
            help="Output directory (default: {book_name}_chapters/)",
        ),
    ] = None,
    with_ast: WithAst = False,
    low_memory: LowMemory = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress progress output"),
    ] = False,
) -> None:
    """Write every chapter to JSON, plus a manifest.json."""
    try:
        from epub_extract.commands.export import execute_export

        execute_export(
            book_path=book_path,
            output_dir=output_dir,
            config=ExtractorConfig(low_memory=low_memory, with_ast=with_ast),
            quiet=quiet,
            console=console,
        )
    except EpubError as e:
        console.print(f"[red]Error reading EPUB: {escape(str(e))}[/]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
