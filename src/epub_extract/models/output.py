"""Data models for output format."""

from datetime import datetime

from pydantic import BaseModel, Field

from epub_extract.models.ast import AstNode
from epub_extract.models.epub import EpubMetadata


class ChapterMetadata(BaseModel):
    """Metadata accompanying chapter content."""

    chapter_id: str
    chapter_index: int
    href: str
    media_type: str
    source_path: str
    extracted_at: datetime = Field(default_factory=datetime.now)
    word_count: int
    character_count: int


class ChapterOutput(BaseModel):
    """One chapter as written to disk."""

    metadata: ChapterMetadata
    content: str
    ast: AstNode | None = None


class BookOutput(BaseModel):
    """Complete book output manifest."""

    book_title: str | None
    metadata: EpubMetadata
    total_chapters: int
    total_words: int
    total_chars: int
    output_directory: str
    created_at: datetime = Field(default_factory=datetime.now)
    chapters: list[ChapterMetadata]
