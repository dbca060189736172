"""Abstract base class for vector-store providers.

Defines the contract for storing embedded chunks and answering top-k
similarity queries.  The in-memory brute-force implementation is the only
one shipped; an approximate-nearest-neighbour backend could be swapped in
behind the same interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from semsearch.models.corpus import IndexEntry, IndexStats, QueryResult, SkippedSource


# Concrete implementation: MemoryVectorStore (semsearch/providers/vector_store/)
class IVectorStoreProvider(ABC):
    """Contract for the vector index used by the search pipeline.

    Entries are added in bulk during an indexing pass; afterwards the store
    is read-only.  Queries never mutate it, so concurrent readers need no
    locking.
    """

    @abstractmethod
    def add(self, entries: list[IndexEntry]) -> int:
        """Append *entries* to the store.

        No deduplication is performed: adding the same chunk twice yields two
        entries.  Callers are responsible for not double-indexing.

        Returns
        -------
        int
            The number of entries added.

        Raises
        ------
        semsearch.utils.errors.VectorIndexError
            If an embedding's length differs from the store's dimension.
        """

    @abstractmethod
    def query(self, embedding: list[float], k: int) -> list[QueryResult]:
        """Return the *k* entries most similar to *embedding*.

        Results are ordered by descending cosine similarity; equal scores
        keep insertion order.  An empty store returns ``[]``.  If *k* exceeds
        the number of entries, all entries are returned, sorted.

        Raises
        ------
        ValueError
            If *k* is negative.
        semsearch.utils.errors.VectorIndexError
            If the query embedding's length differs from the store's dimension.
        """

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored entries."""

    @abstractmethod
    def get_stats(self) -> IndexStats:
        """Return aggregate statistics about the stored entries."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"memory"``."""

    @abstractmethod
    def mark_built(self, build_seconds: float, skipped: list[SkippedSource] | None = None) -> None:
        """Record the build time and the sources skipped by the indexing pass.

        Both are reported back through :meth:`get_stats`.
        """
