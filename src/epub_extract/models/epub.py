"""Data models for EPUB structure."""

from pydantic import BaseModel, Field

from epub_extract.models.ast import AstNode


class ContainerDescriptor(BaseModel):
    """Location of the package document as recorded in container.xml."""

    rootfile_path: str


class PackageDocument(BaseModel):
    """Everything the package document (OPF) declares that we care about."""

    title: str | None = None
    creators: list[str] = Field(default_factory=list)
    description: str | None = None
    languages: list[str] = Field(default_factory=list)
    subjects: list[str] = Field(default_factory=list)
    publisher: str | None = None
    date: str | None = None
    identifiers: list[str] = Field(default_factory=list)
    rights: str | None = None
    contributors: list[str] = Field(default_factory=list)
    manifest: dict[str, str] = Field(default_factory=dict)  # id -> href
    spine: list[str] = Field(default_factory=list)  # manifest ids, reading order


class EpubMetadata(BaseModel):
    """Book-level metadata exposed to callers."""

    title: str | None = None
    authors: list[str] = Field(default_factory=list)
    description: str | None = None
    languages: list[str] = Field(default_factory=list)
    subjects: list[str] = Field(default_factory=list)
    publisher: str | None = None
    date: str | None = None  # opaque, unvalidated
    identifiers: list[str] = Field(default_factory=list)
    rights: str | None = None
    contributors: list[str] = Field(default_factory=list)

    @classmethod
    def from_package(cls, package: PackageDocument) -> "EpubMetadata":
        """Project a package document onto the public metadata shape."""
        return cls(
            title=package.title,
            authors=list(package.creators),
            description=package.description,
            languages=list(package.languages),
            subjects=list(package.subjects),
            publisher=package.publisher,
            date=package.date,
            identifiers=list(package.identifiers),
            rights=package.rights,
            contributors=list(package.contributors),
        )


class ResolvedEntry(BaseModel):
    """A spine item mapped to its absolute path inside the archive."""

    id: str
    path: str


class ResolvedPackage(BaseModel):
    """Result of the container -> package -> spine resolution step."""

    rootfile_path: str
    package: PackageDocument
    entries: list[ResolvedEntry] = Field(default_factory=list)


class Chapter(BaseModel):
    """Raw chapter as read from the archive."""

    href: str
    id: str
    media_type: str
    content: bytes = b""


class ParsedChapter(BaseModel):
    """Chapter text, optional AST and statistics derived from the text."""

    chapter_info: Chapter
    content: str
    ast: AstNode | None = None
    word_count: int = 0
    char_count: int = 0


class AnalysisReport(BaseModel):
    """Whole-book figures gathered in a single streaming pass."""

    metadata: EpubMetadata
    chapter_count: int = 0
    total_words: int = 0
    total_chars: int = 0
