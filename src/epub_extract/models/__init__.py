"""Data models."""

from epub_extract.models.ast import (
    AstNode,
    CommentNode,
    ElementNode,
    TextNode,
    ast_adapter,
)
from epub_extract.models.epub import (
    AnalysisReport,
    Chapter,
    ContainerDescriptor,
    EpubMetadata,
    PackageDocument,
    ParsedChapter,
    ResolvedEntry,
    ResolvedPackage,
)
from epub_extract.models.output import (
    BookOutput,
    ChapterMetadata,
    ChapterOutput,
)

__all__ = [
    # AST models
    "AstNode",
    "ElementNode",
    "TextNode",
    "CommentNode",
    "ast_adapter",
    # EPUB models
    "ContainerDescriptor",
    "PackageDocument",
    "EpubMetadata",
    "ResolvedEntry",
    "ResolvedPackage",
    "Chapter",
    "ParsedChapter",
    "AnalysisReport",
    # Output models
    "ChapterMetadata",
    "ChapterOutput",
    "BookOutput",
]
