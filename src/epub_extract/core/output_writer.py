"""Write parsed chapters to output directory."""

from datetime import datetime
from pathlib import Path

from epub_extract.models.epub import EpubMetadata, ParsedChapter
from epub_extract.models.output import BookOutput, ChapterMetadata, ChapterOutput


class OutputWriter:
    """Write parsed chapters to output directory."""

    def __init__(self, output_dir: Path, source_path: Path):
        """Initialize output writer.

        Args:
            output_dir: Directory to write output files
            source_path: Path to source EPUB
        """
        self.output_dir = output_dir
        self.source_path = source_path
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write_chapter(
        self, index: int, chapter: ParsedChapter
    ) -> tuple[Path, ChapterMetadata]:
        """Write single chapter to JSON file. Raw chapter bytes are not written."""
        info = chapter.chapter_info
        metadata = ChapterMetadata(
            chapter_id=info.id,
            chapter_index=index,
            href=info.href,
            media_type=info.media_type,
            source_path=str(self.source_path),
            extracted_at=datetime.now(),
            word_count=chapter.word_count,
            character_count=chapter.char_count,
        )

        output = ChapterOutput(
            metadata=metadata,
            content=chapter.content,
            ast=chapter.ast,
        )

        filename = f"chapter_{index + 1:03d}.json"
        filepath = self.output_dir / filename
        filepath.write_text(
            output.model_dump_json(indent=2, exclude_none=True), encoding="utf-8"
        )

        return filepath, metadata

    def write_manifest(
        self,
        metadata: EpubMetadata,
        chapter_metadata: list[ChapterMetadata],
    ) -> Path:
        """Write book manifest file."""
        manifest = BookOutput(
            book_title=metadata.title,
            metadata=metadata,
            total_chapters=len(chapter_metadata),
            total_words=sum(ch.word_count for ch in chapter_metadata),
            total_chars=sum(ch.character_count for ch in chapter_metadata),
            output_directory=str(self.output_dir),
            created_at=datetime.now(),
            chapters=chapter_metadata,
        )

        filepath = self.output_dir / "manifest.json"
        filepath.write_text(manifest.model_dump_json(indent=2), encoding="utf-8")
        return filepath
