"""Lazy chapter extraction: one chapter fetched and parsed per pull."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from epub_extract.models.epub import ParsedChapter, ResolvedEntry

log = logging.getLogger(__name__)

ChapterLoader = Callable[[ResolvedEntry], Awaitable[ParsedChapter]]


class StreamState(str, Enum):
    """Where the cursor stands."""

    IDLE = "idle"
    FETCHING = "fetching"
    EXHAUSTED = "exhausted"


class ChapterStream:
    """Finite, non-restartable async iterator over resolved spine entries.

    At most one fetch+parse task is pending at any time, so peak memory is one
    decompressed chapter regardless of book size. When loading the entry at
    the cursor fails, the cursor still moves past it and the error is raised
    from ``__anext__``; pulling again continues with the next entry. Pulls must not
    overlap; a second ``__anext__`` while one is in flight raises
    ``RuntimeError``, as async generators do::

        stream = await parser.extract_chapters_stream()
        async for chapter in stream:
            ...
    """

    def __init__(self, entries: list[ResolvedEntry], load: ChapterLoader):
        self._entries = list(entries)
        self._load = load
        self._cursor = 0
        self._pending: asyncio.Task | None = None
        self._running = False
        self.state = StreamState.IDLE if self._entries else StreamState.EXHAUSTED

    @property
    def cursor(self) -> int:
        """Index of the next entry to be yielded."""
        return self._cursor

    def __len__(self) -> int:
        return len(self._entries)

    def __aiter__(self) -> "ChapterStream":
        return self

    async def __anext__(self) -> ParsedChapter:
        if self.state is StreamState.EXHAUSTED:
            raise StopAsyncIteration
        if self._running:
            raise RuntimeError("anext(): ChapterStream is already running")

        if self._pending is None or self._pending.cancelled():
            entry = self._entries[self._cursor]
            log.debug("Stream fetching %d: %s", self._cursor, entry.path)
            self._pending = asyncio.create_task(self._load(entry))
            self.state = StreamState.FETCHING

        self._running = True
        try:
            chapter = await self._pending
        except asyncio.CancelledError:
            # Not advanced; the next pull starts this entry again
            raise
        except Exception:
            self._advance()
            raise
        finally:
            self._running = False

        self._advance()
        return chapter

    def _advance(self) -> None:
        self._pending = None
        self._cursor += 1
        if self._cursor >= len(self._entries):
            self.state = StreamState.EXHAUSTED
            log.debug("Stream exhausted after %d entries", len(self._entries))
        else:
            self.state = StreamState.IDLE

    async def aclose(self) -> None:
        """Cancel any in-flight work and stop the stream."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        self.state = StreamState.EXHAUSTED
