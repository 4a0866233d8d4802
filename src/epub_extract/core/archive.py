"""Archive sources: named-entry reads over a path, a buffer or a reader."""

import asyncio
import io
import logging
import os
import threading
import zipfile
import zlib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

from epub_extract.exceptions import (
    ArchiveFormatError,
    EntryNotFoundError,
    EpubIOError,
)

log = logging.getLogger(__name__)

# Structural failures surfaced by zipfile while parsing or inflating
_FORMAT_ERRORS = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    zlib.error,
    EOFError,
    NotImplementedError,
    # Encrypted entry without a password
    RuntimeError,
    # Header offsets pointing outside the archive
    ValueError,
)


def read_zip_entry(archive: str | Path | BinaryIO, path: str) -> bytes:
    """Parse the central directory of ``archive`` and inflate one entry.

    The entry is located by exact, case-sensitive filename match. Either the
    whole entry is returned or an error is raised; there are no partial reads.

    Raises:
        EntryNotFoundError: No entry is named ``path``
        ArchiveFormatError: Central directory, local header or data is corrupt
        EpubIOError: The underlying file or reader failed
    """
    try:
        with zipfile.ZipFile(archive) as zf:
            info = next(
                (item for item in zf.infolist() if item.filename == path), None
            )
            if info is None:
                raise EntryNotFoundError(path)
            with zf.open(info) as entry:
                return entry.read()
    except _FORMAT_ERRORS as exc:
        raise ArchiveFormatError(f"Invalid ZIP archive: {exc}", path) from exc
    except OSError as exc:
        raise EpubIOError(f"Cannot read archive: {exc}") from exc


class ArchiveSource(ABC):
    """Random access to named entries of one ZIP archive."""

    kind: str = "archive"

    @abstractmethod
    async def read_entry(self, path: str) -> bytes:
        """Return the decompressed bytes of the entry named ``path``."""


class SharedArchiveSource(ArchiveSource):
    """Stateless source over a filesystem path or an in-memory buffer.

    Each read opens a fresh view of the archive, so any number of tasks or
    threads may read concurrently. The central directory is re-parsed on
    every call.
    """

    def __init__(self, origin: str | os.PathLike | bytes):
        if isinstance(origin, bytes):
            self.kind = "bytes"
            self._data: bytes | None = origin
            self._path: Path | None = None
        else:
            self.kind = "path"
            self._data = None
            self._path = Path(origin)

    @classmethod
    def from_path(cls, path: str | os.PathLike) -> "SharedArchiveSource":
        """Create a source over a file on disk. The file is not touched yet."""
        return cls(path)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> "SharedArchiveSource":
        """Create a source over an in-memory archive. The data is not validated."""
        return cls(bytes(data))

    @property
    def path(self) -> Path | None:
        return self._path

    async def read_entry(self, path: str) -> bytes:
        log.debug("Reading %s from %s source", path, self.kind)
        return await asyncio.to_thread(self._read, path)

    def _read(self, path: str) -> bytes:
        if self._data is not None:
            return read_zip_entry(io.BytesIO(self._data), path)
        return read_zip_entry(self._path, path)

    def __repr__(self) -> str:
        if self._path is not None:
            return f"SharedArchiveSource(path={str(self._path)!r})"
        return f"SharedArchiveSource(bytes={len(self._data or b'')})"


class ExclusiveArchiveSource(ArchiveSource):
    """Source over a single caller-owned, seekable binary reader.

    The reader has one shared position, so every read holds an asyncio lock
    for its whole duration; concurrent callers wait their turn. A thread lock
    is held around the blocking part as well, so a cancelled waiter can never
    let two reads touch the reader at once. The reader is never closed here.
    """

    kind = "reader"

    def __init__(self, reader: BinaryIO):
        seekable = getattr(reader, "seekable", None)
        if not callable(getattr(reader, "read", None)) or seekable is None or not seekable():
            raise TypeError("Streaming source requires a readable, seekable binary file object")
        self._reader = reader
        self._lock = asyncio.Lock()
        self._thread_lock = threading.Lock()

    async def read_entry(self, path: str) -> bytes:
        async with self._lock:
            log.debug("Reading %s from reader source", path)
            return await asyncio.to_thread(self._read, path)

    def _read(self, path: str) -> bytes:
        with self._thread_lock:
            return read_zip_entry(self._reader, path)

    def __repr__(self) -> str:
        return f"ExclusiveArchiveSource(reader={self._reader!r})"


def open_source(origin: "str | os.PathLike | bytes | bytearray | memoryview | BinaryIO") -> ArchiveSource:
    """Pick the source implementation matching the kind of ``origin``.

    Args:
        origin: Filesystem path, archive bytes, or a seekable binary reader

    Returns:
        ArchiveSource ready for ``read_entry``; nothing is read yet

    Raises:
        TypeError: If ``origin`` is none of the supported kinds
    """
    if isinstance(origin, (str, os.PathLike)):
        return SharedArchiveSource.from_path(origin)
    if isinstance(origin, (bytes, bytearray, memoryview)):
        return SharedArchiveSource.from_bytes(origin)
    if hasattr(origin, "read") and hasattr(origin, "seek"):
        return ExclusiveArchiveSource(origin)
    raise TypeError(f"Unsupported archive origin: {type(origin).__name__}")
