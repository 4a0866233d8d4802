"""Error hierarchy for EPUB extraction."""


class EpubError(Exception):
    """Base error for everything raised by epub_extract.

    The CLI catches this and prints a concise message without a traceback.
    """


class EpubIOError(EpubError):
    """Underlying file or reader failure while reading the archive."""


class ArchiveFormatError(EpubError):
    """Corrupt or truncated ZIP structure (central directory, local header, data)."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class EntryNotFoundError(EpubError):
    """No archive entry has exactly the requested filename."""

    def __init__(self, path: str):
        super().__init__(f"File '{path}' not found in EPUB")
        self.path = path


class XmlError(EpubError):
    """Malformed container or package XML."""


class InvalidPackageError(EpubError):
    """Well-formed XML that is missing a required element (e.g. no rootfile)."""
