"""Structured content extraction from EPUB archives.

Metadata, spine-ordered chapters, plain text and HTML ASTs from a file path,
an in-memory buffer or a seekable reader.
"""

from epub_extract.config import ExtractorConfig
from epub_extract.core.archive import (
    ArchiveSource,
    ExclusiveArchiveSource,
    SharedArchiveSource,
    open_source,
)
from epub_extract.core.chapter_stream import ChapterStream, StreamState
from epub_extract.core.content_processor import (
    ContentProcessor,
    extract_text_content,
    parse_html_ast,
)
from epub_extract.core.epub_parser import (
    EpubParser,
    analyze_reader,
    extract_ast,
    extract_text_only,
    get_metadata,
)
from epub_extract.core.package_parser import parse_container, parse_package
from epub_extract.exceptions import (
    ArchiveFormatError,
    EntryNotFoundError,
    EpubError,
    EpubIOError,
    InvalidPackageError,
    XmlError,
)
from epub_extract.models import (
    AnalysisReport,
    AstNode,
    Chapter,
    EpubMetadata,
    PackageDocument,
    ParsedChapter,
)

__all__ = [
    "EpubParser",
    "ExtractorConfig",
    "ArchiveSource",
    "SharedArchiveSource",
    "ExclusiveArchiveSource",
    "open_source",
    "ChapterStream",
    "StreamState",
    "ContentProcessor",
    "extract_text_content",
    "parse_html_ast",
    "parse_container",
    "parse_package",
    "analyze_reader",
    "extract_text_only",
    "extract_ast",
    "get_metadata",
    "EpubError",
    "EpubIOError",
    "ArchiveFormatError",
    "EntryNotFoundError",
    "XmlError",
    "InvalidPackageError",
    "AnalysisReport",
    "AstNode",
    "Chapter",
    "EpubMetadata",
    "PackageDocument",
    "ParsedChapter",
]
