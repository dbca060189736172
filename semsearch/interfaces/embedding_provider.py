"""Abstract base class for text-embedding service providers.

Defines the contract for generating embedding vectors from text through a
remote embedding service.  Implementations wrap OpenAI (or any
OpenAI-compatible endpoint) and Nomic ``nomic-embed-text`` served by Ollama.
Providers are interchangeable behind this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations:
#   OpenAIEmbeddingProvider -- text-embedding-3-large by default (API key)
#   NomicEmbeddingProvider  -- nomic-embed-text via Ollama (local server)
# Located in: semsearch/providers/embedding/
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by the pipeline.

    Providers perform exactly one remote call per :meth:`embed` invocation.
    Splitting large inputs into batches that respect :meth:`get_batch_limit`
    is the job of :class:`~semsearch.services.embedder.Embedder`.
    """

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for one batch of texts.

        Parameters
        ----------
        texts:
            At most :meth:`get_batch_limit` text strings.

        Returns
        -------
        list[list[float]]
            Embedding vectors corresponding positionally to *texts*.

        Raises
        ------
        semsearch.utils.errors.EmbeddingServiceError
            If the embedding API call fails or times out.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string.

        Convenience wrapper around :meth:`embed` for the query case.
        """

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the declared dimensionality of the embedding vectors.

        ``0`` means the provider does not know it up front (e.g. an unknown
        model behind an OpenAI-compatible endpoint); the embedder then takes
        the length of the first returned vector as the corpus dimension.
        """

    @abstractmethod
    def get_batch_limit(self) -> int:
        """Return the maximum number of texts accepted by one :meth:`embed` call."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this embedding provider.

        Example return values: ``"openai_embedding"``, ``"nomic_embedding"``.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured and reachable.

        Implementations should verify that credentials (if any) are present
        without generating an actual embedding.
        """
