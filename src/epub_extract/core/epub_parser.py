"""EPUB extraction pipeline: container -> package -> spine -> chapters."""

import logging
import os
from functools import partial
from typing import BinaryIO

from epub_extract.config import CONTAINER_PATH, XHTML_MEDIA_TYPE, ExtractorConfig
from epub_extract.core.archive import (
    ArchiveSource,
    ExclusiveArchiveSource,
    SharedArchiveSource,
)
from epub_extract.core.chapter_stream import ChapterStream
from epub_extract.core.content_processor import ContentProcessor
from epub_extract.core.package_parser import (
    parse_container,
    parse_package,
    resolve_spine,
)
from epub_extract.exceptions import EpubError
from epub_extract.models.epub import (
    AnalysisReport,
    Chapter,
    EpubMetadata,
    ParsedChapter,
    ResolvedEntry,
    ResolvedPackage,
)

log = logging.getLogger(__name__)


class EpubParser:
    """Parse one EPUB archive into metadata and spine-ordered chapters.

    Nothing is read at construction time; a bad archive is only detected on
    the first request. The resolved package and the chapter list are
    memoized on the instance unless ``config.low_memory`` is set.
    """

    def __init__(self, source: ArchiveSource, config: ExtractorConfig | None = None):
        self.source = source
        self.config = config or ExtractorConfig()
        self.processor = ContentProcessor.from_config(self.config)
        self._resolved: ResolvedPackage | None = None
        # Keyed by whether the AST was built
        self._chapters: dict[bool, list[ParsedChapter]] = {}

    @classmethod
    def open(
        cls, path: str | os.PathLike, config: ExtractorConfig | None = None
    ) -> "EpubParser":
        """Parser over an EPUB file on disk."""
        return cls(SharedArchiveSource.from_path(path), config)

    @classmethod
    def from_bytes(
        cls, data: bytes | bytearray | memoryview, config: ExtractorConfig | None = None
    ) -> "EpubParser":
        """Parser over an EPUB held in memory."""
        return cls(SharedArchiveSource.from_bytes(data), config)

    @classmethod
    def from_reader(
        cls, reader: BinaryIO, config: ExtractorConfig | None = None
    ) -> "EpubParser":
        """Parser over a seekable binary reader owned by the caller."""
        return cls(ExclusiveArchiveSource(reader), config)

    async def read_file(self, path: str) -> bytes:
        """Read one archive entry by exact name."""
        return await self.source.read_entry(path)

    async def resolve(self) -> ResolvedPackage:
        """Locate and parse the package document and resolve the spine."""
        if self._resolved is not None:
            log.debug("Using cached package")
            return self._resolved

        container = parse_container(await self.read_file(CONTAINER_PATH))
        rootfile_path = container.rootfile_path
        package = parse_package(await self.read_file(rootfile_path))

        resolved = ResolvedPackage(
            rootfile_path=rootfile_path,
            package=package,
            entries=resolve_spine(rootfile_path, package),
        )
        if not self.config.low_memory:
            self._resolved = resolved
        return resolved

    async def get_metadata(self) -> EpubMetadata:
        """Book metadata from the package document."""
        resolved = await self.resolve()
        return EpubMetadata.from_package(resolved.package)

    async def load_chapter(
        self, entry: ResolvedEntry, processor: ContentProcessor | None = None
    ) -> ParsedChapter:
        """Fetch and parse a single resolved spine entry."""
        content = await self.read_file(entry.path)
        chapter = Chapter(
            href=entry.path,
            id=entry.id,
            media_type=XHTML_MEDIA_TYPE,
            content=content,
        )
        return (processor or self.processor).parse_chapter(chapter)

    async def extract_chapters(self, with_ast: bool | None = None) -> list[ParsedChapter]:
        """All readable chapters in spine order.

        A chapter that cannot be read from the archive is left out; it never
        aborts the whole extraction. Container and package errors propagate.

        Args:
            with_ast: Override ``config.with_ast`` for this call
        """
        build_ast = self.config.with_ast if with_ast is None else with_ast
        cached = self._chapters.get(build_ast)
        if cached is not None:
            log.debug("Using cached chapters")
            return list(cached)

        resolved = await self.resolve()
        processor = ContentProcessor(build_ast=build_ast)

        chapters = []
        for entry in resolved.entries:
            try:
                chapters.append(await self.load_chapter(entry, processor))
            except EpubError as e:
                log.warning("Skipping chapter '%s' (%s): %s", entry.id, entry.path, e)
                continue

        log.info("Extracted %d of %d chapters", len(chapters), len(resolved.entries))
        if not self.config.low_memory:
            self._chapters[build_ast] = chapters
        return list(chapters)

    async def extract_text_only(self) -> list[str]:
        """Plain text of every chapter."""
        return [chapter.content for chapter in await self.extract_chapters()]

    async def extract_ast(self) -> list[ParsedChapter]:
        """Chapters with their AST populated."""
        return await self.extract_chapters(with_ast=True)

    async def extract_chapters_stream(self, with_ast: bool | None = None) -> ChapterStream:
        """Chapters one at a time; see ChapterStream for error behaviour.

        Only the spine is resolved up front; chapter bodies are read on demand.
        """
        build_ast = self.config.with_ast if with_ast is None else with_ast
        resolved = await self.resolve()
        processor = ContentProcessor(build_ast=build_ast)
        return ChapterStream(resolved.entries, partial(self.load_chapter, processor=processor))

    async def total_word_count(self) -> int:
        return sum(chapter.word_count for chapter in await self.extract_chapters())

    async def total_char_count(self) -> int:
        return sum(chapter.char_count for chapter in await self.extract_chapters())

    async def analyze(self) -> AnalysisReport:
        """Whole-book figures from one streaming pass, keeping no chapters.

        Chapters the stream fails on are skipped, matching extract_chapters.
        """
        report = AnalysisReport(metadata=await self.get_metadata())
        stream = await self.extract_chapters_stream(with_ast=False)

        while True:
            try:
                chapter = await anext(stream)
            except StopAsyncIteration:
                break
            except EpubError as e:
                log.warning("Skipping unreadable chapter: %s", e)
                continue
            report.chapter_count += 1
            report.total_words += chapter.word_count
            report.total_chars += chapter.char_count

        return report


async def analyze_reader(reader: BinaryIO, config: ExtractorConfig | None = None) -> AnalysisReport:
    """Analyze an EPUB from a seekable reader without holding it in memory."""
    return await EpubParser.from_reader(reader, config).analyze()


async def extract_text_only(path: str | os.PathLike) -> list[str]:
    """Plain text of every chapter of the EPUB at ``path``."""
    return await EpubParser.open(path).extract_text_only()


async def extract_ast(path: str | os.PathLike) -> list[ParsedChapter]:
    """Chapters with AST of the EPUB at ``path``."""
    return await EpubParser.open(path).extract_ast()


async def get_metadata(path: str | os.PathLike) -> EpubMetadata:
    """Metadata of the EPUB at ``path``."""
    return await EpubParser.open(path).get_metadata()
