"""Batching front-end for an :class:`IEmbeddingProvider`.

The :class:`Embedder` splits an arbitrary list of texts into batches no
larger than both the configured batch size and the provider's own limit,
calls the provider once per batch, and stitches the results back together
in input order.

Every returned vector is checked before it leaves this class: the number of
vectors must match the number of inputs and every vector must have the same
length as the corpus dimension.  A mismatch aborts the whole call with
:class:`EmbeddingServiceError`; partial results are never returned and no
placeholder vectors are substituted.
"""

from __future__ import annotations

import time

import structlog

from semsearch.interfaces.embedding_provider import IEmbeddingProvider
from semsearch.utils.errors import EmbeddingServiceError

logger = structlog.get_logger(logger_name=__name__)


class Embedder:
    """Turns texts into fixed-length vectors through a remote provider.

    Parameters
    ----------
    provider:
        The embedding backend.
    batch_size:
        Upper bound on texts per remote call.  The effective size is the
        smaller of this and ``provider.get_batch_limit()``.
    """

    def __init__(self, provider: IEmbeddingProvider, batch_size: int = 512) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._provider = provider
        self._batch_size = max(1, min(batch_size, provider.get_batch_limit()))
        declared = provider.get_dimension()
        self._dimension: int | None = declared if declared > 0 else None

    @property
    def dimension(self) -> int | None:
        """Vector length, or ``None`` until the first vector has been seen."""
        return self._dimension

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def get_provider_name(self) -> str:
        return self._provider.get_provider_name()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed *texts*, returning one vector per input in input order.

        Raises
        ------
        EmbeddingServiceError
            If the provider fails or returns a malformed response.
        """
        if not texts:
            return []

        start = time.monotonic()
        vectors: list[list[float]] = []
        for i in range(0, len(texts), self._batch_size):
            batch = texts[i : i + self._batch_size]
            result = await self._provider.embed(batch)
            self._check_batch(batch, result)
            vectors.extend(result)

        logger.info(
            "embedding_complete",
            provider=self.get_provider_name(),
            texts=len(texts),
            batches=-(-len(texts) // self._batch_size),
            dimension=self._dimension,
            time_s=round(time.monotonic() - start, 3),
        )
        return vectors

    async def embed_query(self, text: str) -> list[float]:
        """Embed a single query string with exactly one remote call."""
        result = await self._provider.embed([text])
        self._check_batch([text], result)
        return result[0]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check_batch(self, batch: list[str], result: list[list[float]]) -> None:
        provider = self.get_provider_name()
        if len(result) != len(batch):
            raise EmbeddingServiceError(
                message=f"expected {len(batch)} embeddings, received {len(result)}",
                provider_name=provider,
            )
        for vector in result:
            if not vector:
                raise EmbeddingServiceError(
                    message="received an empty embedding vector",
                    provider_name=provider,
                )
            if self._dimension is None:
                self._dimension = len(vector)
                logger.debug("embedding_dimension_learned", provider=provider, dimension=self._dimension)
            elif len(vector) != self._dimension:
                raise EmbeddingServiceError(
                    message=(
                        f"embedding dimension mismatch: expected {self._dimension}, "
                        f"received {len(vector)}"
                    ),
                    provider_name=provider,
                )
