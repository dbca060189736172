"""Builds and publishes the in-memory search index.

Pipeline stages: **load -> chunk -> embed -> index**.

:class:`IndexingService` owns the currently published index.  An indexing
pass reads every corpus file (and every configured web page), chunks the
text, embeds all chunks and loads them into a fresh store built by the
injected index factory.  The new store is published only when the whole
pass succeeds; a failed pass leaves the previous index (or no index) in
place and may be retried later.

Passes are single-flight: the first caller of :meth:`ensure_index` or
:meth:`reload` starts one task, and every caller arriving while it runs
awaits that same task.  Waiters are shielded, so a cancelled request never
cancels the shared pass.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from semsearch.interfaces.vector_store_provider import IVectorStoreProvider
from semsearch.models.corpus import IndexEntry, IndexStats, RawUnit, SkippedSource
from semsearch.providers.source.web_fetcher import WebPageFetcher
from semsearch.services.embedder import Embedder
from semsearch.services.ingestion.chunker import TextChunker
from semsearch.services.ingestion.source_loader import SourceLoader
from semsearch.utils.errors import SourceReadError

logger = structlog.get_logger(logger_name=__name__)

IndexFactory = Callable[[int | None], IVectorStoreProvider]


class IndexingService:
    """Runs indexing passes and holds the published index.

    Parameters
    ----------
    loader:
        Reads corpus files into RawUnits.
    chunker:
        Splits RawUnits into Chunks.
    embedder:
        Embeds chunk texts.
    index_factory:
        Builds an empty store for a pass, given the embedding dimension.
    corpus_dir:
        Directory scanned for source files on every pass.
    urls:
        Web pages fetched and indexed alongside the corpus files.
    web_fetcher:
        Fetcher used for *urls*; required when *urls* is non-empty.
    """

    def __init__(
        self,
        loader: SourceLoader,
        chunker: TextChunker,
        embedder: Embedder,
        index_factory: IndexFactory,
        corpus_dir: str | Path,
        urls: Sequence[str] = (),
        web_fetcher: WebPageFetcher | None = None,
    ) -> None:
        if urls and web_fetcher is None:
            raise ValueError("a web_fetcher is required when urls are configured")
        self._loader = loader
        self._chunker = chunker
        self._embedder = embedder
        self._corpus_dir = Path(corpus_dir)
        self._urls = list(urls)
        self._web_fetcher = web_fetcher
        self._index_factory = index_factory

        self._index: IVectorStoreProvider | None = None
        self._inflight: asyncio.Task[IVectorStoreProvider] | None = None
        self._passes_run = 0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def corpus_dir(self) -> Path:
        return self._corpus_dir

    @property
    def current_index(self) -> IVectorStoreProvider | None:
        """The published index, or ``None`` before the first successful pass."""
        return self._index

    @property
    def is_ready(self) -> bool:
        return self._index is not None

    @property
    def is_indexing(self) -> bool:
        return self._inflight is not None

    @property
    def passes_run(self) -> int:
        """Number of indexing passes started since construction."""
        return self._passes_run

    def stats(self) -> IndexStats | None:
        return self._index.get_stats() if self._index is not None else None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ensure_index(self) -> IVectorStoreProvider:
        """Return the published index, building it first if necessary.

        Raises
        ------
        semsearch.utils.errors.EmbeddingServiceError
            If the pass this call started or joined failed while embedding.
        """
        if self._index is not None:
            return self._index
        return await self._join_or_start()

    async def reload(self) -> IVectorStoreProvider:
        """Build a fresh index and replace the published one on success.

        A reload requested while a pass is already running joins that pass.
        """
        logger.info("index_reload_requested", corpus_dir=str(self._corpus_dir))
        return await self._join_or_start()

    async def cancel_pass(self) -> None:
        """Cancel the running indexing pass, if any, and wait for it to stop.

        Waiters of the cancelled pass receive ``CancelledError``; the
        published index is left unchanged.
        """
        task = self._inflight
        if task is None or task.done():
            return
        logger.info("indexing_cancelled", corpus_dir=str(self._corpus_dir))
        task.cancel()
        await asyncio.wait([task])

    async def aclose(self) -> None:
        """Stop any running pass, then release the web fetcher's HTTP client."""
        await self.cancel_pass()
        if self._web_fetcher is not None:
            await self._web_fetcher.aclose()

    # ------------------------------------------------------------------
    # Single-flight machinery
    # ------------------------------------------------------------------

    async def _join_or_start(self) -> IVectorStoreProvider:
        task = self._inflight
        if task is None:
            task = asyncio.create_task(self._run_pass(), name="semsearch-indexing-pass")
            task.add_done_callback(self._on_pass_done)
            self._inflight = task
        else:
            logger.debug("indexing_pass_joined")
        return await asyncio.shield(task)

    def _on_pass_done(self, task: asyncio.Task[IVectorStoreProvider]) -> None:
        if self._inflight is task:
            self._inflight = None
        # Mark the exception retrieved even when every waiter was cancelled.
        if not task.cancelled():
            task.exception()

    async def _run_pass(self) -> IVectorStoreProvider:
        self._passes_run += 1
        pass_number = self._passes_run
        start = time.monotonic()
        logger.info(
            "indexing_started",
            pass_number=pass_number,
            corpus_dir=str(self._corpus_dir),
            urls=len(self._urls),
        )

        try:
            skipped: list[SkippedSource] = []
            units = await asyncio.to_thread(self._read_corpus, skipped)
            units.extend(await self._fetch_urls(skipped))

            chunks = self._chunker.chunk_many(units)
            embeddings = await self._embedder.embed([c.text for c in chunks])

            index = self._index_factory(self._embedder.dimension)
            index.add(
                [IndexEntry(embedding=vec, chunk=chunk) for chunk, vec in zip(chunks, embeddings)]
            )
            elapsed = time.monotonic() - start
            index.mark_built(elapsed, skipped)
        except Exception as exc:
            logger.error(
                "indexing_failed",
                pass_number=pass_number,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise

        self._index = index
        logger.info(
            "indexing_complete",
            pass_number=pass_number,
            sources=len(units),
            skipped=len(skipped),
            entries=index.count(),
            time_s=round(elapsed, 2),
        )
        return index

    def _read_corpus(self, skipped: list[SkippedSource]) -> list[RawUnit]:
        paths = self._loader.discover(self._corpus_dir)
        return list(self._loader.iter_units(paths, on_skip=skipped.append))

    async def _fetch_urls(self, skipped: list[SkippedSource]) -> list[RawUnit]:
        if not self._urls or self._web_fetcher is None:
            return []
        units: list[RawUnit] = []
        for url in self._urls:
            try:
                units.append(await self._web_fetcher.fetch(url))
            except SourceReadError as exc:
                logger.warning("source_skipped", path=url, error_type=type(exc).__name__, reason=exc.message)
                skipped.append(SkippedSource(path=url, reason=exc.message))
        return units
