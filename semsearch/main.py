"""semsearch FastAPI application entry point.

Wires together the embedding provider, source readers, chunker, indexing
service and search service via dependency injection.  Loads configuration
from ``.env`` and ``config/config.yaml`` and configures structured logging.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from semsearch import __version__
from semsearch.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from semsearch.api.routes import router as api_router
from semsearch.config.loader import load_config
from semsearch.config.settings import Settings
from semsearch.interfaces.embedding_provider import IEmbeddingProvider
from semsearch.providers.source.html_reader import HTMLSourceReader
from semsearch.providers.source.pdf_reader import PDFSourceReader
from semsearch.providers.source.text_reader import TextSourceReader
from semsearch.providers.source.web_fetcher import WebPageFetcher
from semsearch.providers.vector_store.memory_vector_store import MemoryVectorStore
from semsearch.services.embedder import Embedder
from semsearch.services.indexing_service import IndexingService
from semsearch.services.ingestion.chunker import TextChunker
from semsearch.services.ingestion.source_loader import SourceLoader
from semsearch.services.search_service import SearchService
from semsearch.utils.errors import ConfigurationError, SemSearchError
from semsearch.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Embedding provider selection
# ---------------------------------------------------------------------------


def _build_embedding_provider(app_settings: Settings) -> IEmbeddingProvider | None:
    """Select the first available embedding provider.

    Priority: OpenAI/OpenAI-compatible (if API key set) ->
              Nomic/Ollama (if reachable).
    Returns ``None`` if no embedding provider is available.
    """
    if app_settings.openai_api_key:
        from semsearch.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        provider: IEmbeddingProvider = OpenAIEmbeddingProvider(settings=app_settings)
        if provider.is_available():
            return provider

    from semsearch.providers.embedding.nomic_embedding_provider import (
        NomicEmbeddingProvider,
    )

    provider = NomicEmbeddingProvider(settings=app_settings)
    if provider.is_available():
        return provider

    return None


# ---------------------------------------------------------------------------
# Full DI assembly
# ---------------------------------------------------------------------------


def _build_all(
    app_settings: Settings,
    embedding_provider: IEmbeddingProvider | None = None,
) -> dict[str, Any]:
    """Construct every provider and service instance.

    Returns a flat dict of named components to be stored on ``app.state``
    (or used directly by the CLI).

    Raises
    ------
    ConfigurationError
        If no embedding provider is configured or reachable.
    """
    provider = embedding_provider or _build_embedding_provider(app_settings)
    if provider is None:
        raise ConfigurationError(
            message="No embedding provider available: set OPENAI_API_KEY or start Ollama",
        )

    html_reader = HTMLSourceReader(selector=app_settings.html_selector)
    loader = SourceLoader(
        readers=[PDFSourceReader(), TextSourceReader(), html_reader],
        extensions=app_settings.get_corpus_extensions(),
    )
    chunker = TextChunker(
        chunk_size=app_settings.chunk_size,
        overlap=app_settings.chunk_overlap,
    )
    embedder = Embedder(provider, batch_size=app_settings.embedding_batch_size)

    urls = app_settings.get_corpus_urls()
    web_fetcher = WebPageFetcher(html_reader=html_reader) if urls else None
    indexing_service = IndexingService(
        loader=loader,
        chunker=chunker,
        embedder=embedder,
        index_factory=MemoryVectorStore,
        corpus_dir=app_settings.corpus_dir,
        urls=urls,
        web_fetcher=web_fetcher,
    )
    search_service = SearchService(
        embedder=embedder,
        indexing=indexing_service,
        default_top_k=app_settings.search_top_k,
        max_top_k=app_settings.search_max_top_k,
        max_query_chars=app_settings.search_max_query_chars,
        auto_index=app_settings.auto_index_on_query,
    )

    return {
        "embedding_provider": provider,
        "embedder": embedder,
        "source_loader": loader,
        "chunker": chunker,
        "indexing_service": indexing_service,
        "search_service": search_service,
        "provider_registry": {
            "embedding": provider.get_provider_name(),
            "vector_store": "memory",
            "source_extensions": list(loader.extensions),
            "corpus_urls": len(urls),
        },
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


async def _warm_index(indexing_service: IndexingService) -> None:
    try:
        await indexing_service.ensure_index()
    except SemSearchError as exc:
        _logger.error("startup_indexing_failed", error_type=type(exc).__name__, message=exc.message)


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    indexing_service: IndexingService = components["indexing_service"]
    warm_task: asyncio.Task[None] | None = None
    if settings.index_on_startup:
        warm_task = asyncio.create_task(_warm_index(indexing_service))

    _logger.info(
        "app_startup",
        version=__version__,
        environment=settings.app_env,
        embedding_provider=components["provider_registry"]["embedding"],
        corpus_dir=settings.corpus_dir,
        index_on_startup=settings.index_on_startup,
    )

    yield

    if warm_task is not None and not warm_task.done():
        warm_task.cancel()
    await indexing_service.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="semsearch API",
        version=__version__,
        description=(
            "Index a small document corpus with remote embeddings and stream "
            "the passages most similar to a query as server-sent events."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=config.get("api", {}).get("cors_origins"))

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "semsearch.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
