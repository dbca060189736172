"""Answers similarity queries as a stream of ranked results.

:meth:`SearchService.respond` is an async generator.  It validates the
query, makes sure an index is available, embeds the query with exactly one
remote call, and yields the top-k hits one at a time in ranked order.  A
failure after streaming has begun is raised out of the generator so the
consumer sees an error rather than a silently shortened result list.
"""

from __future__ import annotations

import time
from collections.abc import AsyncIterator

import structlog

from semsearch.interfaces.vector_store_provider import IVectorStoreProvider
from semsearch.models.corpus import QueryResult
from semsearch.services.embedder import Embedder
from semsearch.services.indexing_service import IndexingService
from semsearch.utils.errors import IndexUnavailableError, InvalidQueryError

logger = structlog.get_logger(logger_name=__name__)


class SearchService:
    """Query front-end over an :class:`IndexingService`.

    Parameters
    ----------
    embedder:
        Embeds the query text.
    indexing:
        Owner of the published index.
    default_top_k:
        Result count used when the caller does not pass one.
    max_top_k:
        Upper bound on the requested result count.
    max_query_chars:
        Longest accepted query.
    auto_index:
        When ``True`` the first query builds the index; when ``False`` a
        query arriving before any index exists raises
        :class:`IndexUnavailableError` unless a pass is already running.
    """

    def __init__(
        self,
        embedder: Embedder,
        indexing: IndexingService,
        default_top_k: int = 4,
        max_top_k: int = 50,
        max_query_chars: int = 2000,
        auto_index: bool = True,
    ) -> None:
        self._embedder = embedder
        self._indexing = indexing
        self._default_top_k = default_top_k
        self._max_top_k = max_top_k
        self._max_query_chars = max_query_chars
        self._auto_index = auto_index

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def validate(self, query: str, top_k: int | None = None) -> tuple[str, int]:
        """Return the stripped query text and the effective result count.

        Raises
        ------
        InvalidQueryError
            If the query is empty, whitespace-only or too long, or *top_k*
            is outside ``0..max_top_k``.
        """
        text = (query or "").strip()
        if not text:
            raise InvalidQueryError(message="Query text must not be empty", query=query)
        if len(text) > self._max_query_chars:
            raise InvalidQueryError(
                message=f"Query exceeds {self._max_query_chars} characters",
                query=text[:100],
            )

        k = self._default_top_k if top_k is None else top_k
        if k < 0 or k > self._max_top_k:
            raise InvalidQueryError(
                message=f"top_k must be between 0 and {self._max_top_k}, got {k}",
                query=text[:100],
            )
        return text, k

    def check_available(self) -> None:
        """Raise :class:`IndexUnavailableError` if a query could not be served now."""
        if self._auto_index or self._indexing.current_index is not None:
            return
        if not self._indexing.is_indexing:
            raise IndexUnavailableError(
                message="No index has been built; trigger a reload first",
            )

    async def respond(self, query: str, top_k: int | None = None) -> AsyncIterator[QueryResult]:
        """Yield the top-k results for *query*, best first."""
        text, k = self.validate(query, top_k)
        index = await self._resolve_index()

        start = time.monotonic()
        vector = await self._embedder.embed_query(text)
        results = index.query(vector, k)
        logger.info(
            "search_complete",
            query=text[:80],
            top_k=k,
            results=len(results),
            top_score=round(results[0].score, 4) if results else None,
            time_s=round(time.monotonic() - start, 3),
        )

        for result in results:
            yield result

    async def search(self, query: str, top_k: int | None = None) -> list[QueryResult]:
        """Collect :meth:`respond` into a list."""
        return [result async for result in self.respond(query, top_k)]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _resolve_index(self) -> IVectorStoreProvider:
        index = self._indexing.current_index
        if index is not None:
            return index
        self.check_available()
        return await self._indexing.ensure_index()
