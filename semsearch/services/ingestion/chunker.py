"""Fixed-size overlapping character windows over a RawUnit's text.

Splits source text into :class:`~semsearch.models.corpus.Chunk` objects of
at most ``chunk_size`` characters.  Consecutive chunks from the same unit
share exactly ``overlap`` characters so that a passage spanning a boundary
is fully contained in at least one chunk.

The walk starts at offset 0, emits ``text[cursor:cursor + chunk_size]``,
advances the cursor by ``chunk_size - overlap`` and stops as soon as an
emitted window reaches the end of the text.  For a text of length ``L``
this gives ``ceil((L - overlap) / (chunk_size - overlap))`` chunks when
``L > chunk_size`` and exactly one chunk otherwise.

Chunking is pure: identical input always produces an identical chunk
sequence, including chunk IDs (derived from source ID and offsets).
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable

import structlog

from semsearch.models.corpus import Chunk, RawUnit

logger = structlog.get_logger(logger_name=__name__)


class TextChunker:
    """Splits text into overlapping fixed-size windows.

    Parameters
    ----------
    chunk_size:
        Maximum characters per chunk (default 1000).
    overlap:
        Characters shared by consecutive chunks (default 200).  Must satisfy
        ``0 <= overlap < chunk_size``.
    """

    def __init__(self, chunk_size: int = 1000, overlap: int = 200) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if not 0 <= overlap < chunk_size:
            raise ValueError(
                f"overlap must satisfy 0 <= overlap < chunk_size, got overlap={overlap}, "
                f"chunk_size={chunk_size}"
            )
        self._chunk_size = chunk_size
        self._overlap = overlap

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def overlap(self) -> int:
        return self._overlap

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def chunk(self, unit: RawUnit) -> list[Chunk]:
        """Split *unit* into overlapping :class:`Chunk` objects.

        Whitespace-only text returns an empty list.
        """
        text = unit.text
        if not text.strip():
            return []

        chunks: list[Chunk] = []
        for start, end in self.windows(len(text)):
            chunks.append(
                Chunk(
                    chunk_id=_chunk_id(unit.source_id, start, end),
                    text=text[start:end],
                    source_id=unit.source_id,
                    offset_start=start,
                    offset_end=end,
                    extra=dict(unit.extra),
                )
            )

        logger.debug(
            "chunking_complete",
            source_id=unit.source_id,
            num_chunks=len(chunks),
            text_length=len(text),
        )
        return chunks

    def chunk_many(self, units: Iterable[RawUnit]) -> list[Chunk]:
        """Chunk every unit in *units*, preserving unit order."""
        chunks: list[Chunk] = []
        for unit in units:
            chunks.extend(self.chunk(unit))
        return chunks

    def windows(self, length: int) -> list[tuple[int, int]]:
        """Return the ``(start, end)`` offsets of every window over *length* chars."""
        if length <= 0:
            return []

        step = self._chunk_size - self._overlap
        spans: list[tuple[int, int]] = []
        cursor = 0
        while True:
            end = min(cursor + self._chunk_size, length)
            spans.append((cursor, end))
            if end >= length:
                break
            cursor += step
        return spans


def _chunk_id(source_id: str, start: int, end: int) -> str:
    digest = hashlib.sha256(f"{source_id}\x00{start}\x00{end}".encode()).hexdigest()
    return digest[:32]
