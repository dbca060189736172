"""In-memory brute-force vector store backed by numpy.

Embeddings are kept as rows of a float matrix alongside their row norms.
A query computes the cosine similarity against every row in one vectorised
pass and returns the top ``k`` rows.  For a corpus of a few thousand chunks
this is exact and fast enough that no approximate index is needed.

Conventions:

- a zero-norm vector (stored or query) scores ``0.0`` against everything
- equal scores keep insertion order (stable sort over scores rounded to
  nine decimals, computed in float64)
- no deduplication: adding the same chunk twice stores two entries
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone

import numpy as np
import structlog

from semsearch.interfaces.vector_store_provider import IVectorStoreProvider
from semsearch.models.corpus import IndexEntry, IndexStats, QueryResult, SkippedSource
from semsearch.utils.errors import VectorIndexError

logger = structlog.get_logger(logger_name=__name__)

_SCORE_DECIMALS = 9


class MemoryVectorStore(IVectorStoreProvider):
    """Exact cosine-similarity index held entirely in process memory.

    Parameters
    ----------
    dimension:
        Expected embedding length.  When ``None`` the length of the first
        added embedding fixes it.
    """

    def __init__(self, dimension: int | None = None) -> None:
        self._dimension = dimension
        self._entries: list[IndexEntry] = []
        self._matrix = np.empty((0, dimension or 0), dtype=np.float64)
        self._norms = np.empty(0, dtype=np.float64)
        self._skipped: list[SkippedSource] = []
        self._built_at: datetime | None = None
        self._build_seconds = 0.0

    @property
    def dimension(self) -> int | None:
        return self._dimension

    # ------------------------------------------------------------------
    # IVectorStoreProvider
    # ------------------------------------------------------------------

    def add(self, entries: list[IndexEntry]) -> int:
        if not entries:
            return 0

        dimension = self._dimension or len(entries[0].embedding)
        for entry in entries:
            if len(entry.embedding) != dimension:
                raise VectorIndexError(
                    message=(
                        f"embedding for chunk {entry.chunk.chunk_id} has dimension "
                        f"{len(entry.embedding)}, index expects {dimension}"
                    ),
                    provider_name=self.get_provider_name(),
                )

        block = np.asarray([e.embedding for e in entries], dtype=np.float64)
        if self._dimension is None:
            self._dimension = dimension
            self._matrix = np.empty((0, dimension), dtype=np.float64)

        self._matrix = np.vstack([self._matrix, block])
        self._norms = np.concatenate([self._norms, np.linalg.norm(block, axis=1)])
        self._entries.extend(entries)

        logger.debug("vector_store_add", added=len(entries), total=len(self._entries))
        return len(entries)

    def query(self, embedding: list[float], k: int) -> list[QueryResult]:
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        if k == 0 or not self._entries:
            return []
        if len(embedding) != self._dimension:
            raise VectorIndexError(
                message=(
                    f"query embedding has dimension {len(embedding)}, "
                    f"index expects {self._dimension}"
                ),
                provider_name=self.get_provider_name(),
            )

        vector = np.asarray(embedding, dtype=np.float64)
        query_norm = float(np.linalg.norm(vector))
        if query_norm == 0.0:
            scores = np.zeros(len(self._entries), dtype=np.float64)
        else:
            denom = self._norms * query_norm
            dots = self._matrix @ vector
            scores = np.divide(
                dots, denom, out=np.zeros_like(dots), where=denom > 0
            )
            # Rounding collapses last-ulp noise so mathematically equal
            # scores compare equal and the stable sort keeps insertion order.
            scores = np.round(np.clip(scores, -1.0, 1.0), _SCORE_DECIMALS)

        order = np.argsort(-scores, kind="stable")[:k]
        return [
            QueryResult(chunk=self._entries[i].chunk, score=float(scores[i]), rank=rank)
            for rank, i in enumerate(order)
        ]

    def count(self) -> int:
        return len(self._entries)

    def get_stats(self) -> IndexStats:
        by_type = Counter(e.chunk.source_type for e in self._entries)
        sources = {e.chunk.source_id for e in self._entries}
        return IndexStats(
            total_entries=len(self._entries),
            total_sources=len(sources),
            dimension=self._dimension if self._entries else None,
            sources_by_type=dict(by_type),
            skipped_sources=list(self._skipped),
            built_at=self._built_at,
            build_seconds=self._build_seconds,
        )

    def get_provider_name(self) -> str:
        return "memory"

    # ------------------------------------------------------------------
    # Build bookkeeping
    # ------------------------------------------------------------------

    def mark_built(self, build_seconds: float, skipped: list[SkippedSource] | None = None) -> None:
        """Record when and how the store was built; reported by :meth:`get_stats`."""
        self._built_at = datetime.now(timezone.utc)
        self._build_seconds = round(max(build_seconds, 0.0), 3)
        self._skipped = list(skipped or [])
