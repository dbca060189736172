"""OpenAI-compatible embedding provider adapter.

Wraps the ``openai`` async client to implement :class:`IEmbeddingProvider`.
Supports both real OpenAI and OpenAI-compatible providers (TogetherAI,
Anyscale, Fireworks) via custom ``base_url`` and model name settings.
Timeouts and transport-level retries are delegated to the SDK client.
"""

from __future__ import annotations

import openai
import structlog

from semsearch.config.settings import Settings
from semsearch.interfaces.embedding_provider import IEmbeddingProvider
from semsearch.utils.errors import EmbeddingServiceError

logger = structlog.get_logger(logger_name=__name__)

_OPENAI_BATCH_LIMIT = 2048

# Known embedding model dimensions.  Unknown models report 0 and the
# embedder learns the dimension from the first response.
_MODEL_DIMENSIONS: dict[str, int] = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
    "BAAI/bge-base-en-v1.5": 768,
    "BAAI/bge-large-en-v1.5": 1024,
    "togethercomputer/m2-bert-80M-8k-retrieval": 768,
    "intfloat/multilingual-e5-large-instruct": 1024,
}


class OpenAIEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by an OpenAI-compatible embeddings API.

    Uses ``text-embedding-3-large`` (3072 dims) by default.  When
    ``openai_base_url`` is configured the client points at that URL.
    ``openai_embedding_dimensions`` shortens ``text-embedding-3-*`` vectors
    server-side.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._api_key = settings.openai_api_key

        client_kwargs: dict = {
            "api_key": self._api_key,
            "timeout": settings.embedding_timeout,
            "max_retries": settings.embedding_max_retries,
        }
        if settings.openai_base_url:
            client_kwargs["base_url"] = settings.openai_base_url

        self._client = openai.AsyncOpenAI(**client_kwargs)
        self._model = settings.openai_embedding_model or "text-embedding-3-large"
        self._requested_dimensions = settings.openai_embedding_dimensions
        self._dimension = self._requested_dimensions or _MODEL_DIMENSIONS.get(self._model, 0)
        self._provider_label = (
            "openai-compatible_embedding" if settings.openai_base_url else "openai_embedding"
        )

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed one batch of texts with a single API call."""
        if not texts:
            return []

        request: dict = {"input": texts, "model": self._model}
        if self._requested_dimensions:
            request["dimensions"] = self._requested_dimensions

        try:
            response = await self._client.embeddings.create(**request)
        except openai.APIStatusError as exc:
            raise EmbeddingServiceError(
                message=f"{self._provider_label} API error ({exc.status_code}): {exc.message}",
                provider_name=self.get_provider_name(),
                status_code=exc.status_code,
            ) from exc
        except openai.APITimeoutError as exc:
            raise EmbeddingServiceError(
                message=f"{self._provider_label} request timed out after {self._settings.embedding_timeout}s",
                provider_name=self.get_provider_name(),
            ) from exc
        except openai.APIError as exc:
            raise EmbeddingServiceError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info(
            "openai_embedding_batch",
            model=self._model,
            provider=self._provider_label,
            batch_size=len(texts),
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return [list(item.embedding) for item in response.data]

    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text string."""
        result = await self.embed([text])
        if len(result) != 1:
            raise EmbeddingServiceError(
                message=f"expected 1 embedding, got {len(result)}",
                provider_name=self.get_provider_name(),
            )
        return result[0]

    def get_dimension(self) -> int:
        return self._dimension

    def get_batch_limit(self) -> int:
        return _OPENAI_BATCH_LIMIT

    def get_provider_name(self) -> str:
        return self._provider_label

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured."""
        return bool(self._api_key)
