"""FastAPI route handlers for the semsearch API.

Endpoints (all under ``/api/v1``):

    /search          POST    Stream ranked results as server-sent events
    /health          GET     Health check and index readiness
    /index/stats     GET     Statistics of the published index
    /index/reload    POST    Rebuild the index from the corpus

Services are created once in ``main.py`` and stored on ``app.state``;
handlers fetch them through the small ``_get_*`` helpers below.
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator
from typing import Any

import structlog
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse

from semsearch import __version__
from semsearch.api.schemas import HealthResponse, SearchHit, SearchRequest
from semsearch.models.corpus import IndexStats
from semsearch.services.indexing_service import IndexingService
from semsearch.services.search_service import SearchService
from semsearch.utils.errors import SemSearchError

logger = structlog.get_logger(logger_name=__name__)

router = APIRouter(prefix="/api/v1")

_SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def _get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service


def _get_indexing_service(request: Request) -> IndexingService:
    return request.app.state.indexing_service


def _sse(data: Any, event: str | None = None) -> str:
    payload = data if isinstance(data, str) else json.dumps(data)
    prefix = f"event: {event}\n" if event else ""
    return f"{prefix}data: {payload}\n\n"


async def _result_events(
    service: SearchService, query: str, top_k: int
) -> AsyncGenerator[str, None]:
    sent = 0
    try:
        async for result in service.respond(query, top_k):
            yield _sse(SearchHit.from_result(result).model_dump_json())
            sent += 1
    except SemSearchError as exc:
        logger.error(
            "search_stream_failed",
            error_type=type(exc).__name__,
            message=exc.message,
            provider=exc.provider_name,
            sent=sent,
        )
        yield _sse({"error": type(exc).__name__, "detail": exc.message}, event="error")
        return
    except Exception as exc:
        logger.exception("search_stream_crashed", error_type=type(exc).__name__, sent=sent)
        yield _sse({"error": "InternalError", "detail": "unexpected server error"}, event="error")
        return
    yield _sse({"results": sent}, event="end")


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


@router.post(
    "/search",
    summary="Stream search results as server-sent events",
    response_class=StreamingResponse,
)
async def search(body: SearchRequest, request: Request) -> StreamingResponse:
    """Validate the query, then stream one ``data:`` event per ranked hit.

    The stream ends with ``event: end``.  If embedding or lookup fails after
    the response has started, an ``event: error`` carrying
    ``{"error", "detail"}`` is sent instead and the stream closes.
    """
    service = _get_search_service(request)
    query, top_k = service.validate(body.query, body.top_k)
    service.check_available()

    return StreamingResponse(
        _result_events(service, query, top_k),
        media_type="text/event-stream",
        headers=_SSE_HEADERS,
    )


# ---------------------------------------------------------------------------
# Health and index management
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and index readiness."""
    indexing = _get_indexing_service(request)
    providers: dict[str, Any] = dict(getattr(request.app.state, "provider_registry", {}))

    index = indexing.current_index
    entries = index.count() if index is not None else 0
    if index is not None:
        status = "healthy"
    elif indexing.is_indexing:
        status = "indexing"
    else:
        status = "degraded"

    return HealthResponse(
        status=status,
        version=__version__,
        index_ready=index is not None,
        indexing=indexing.is_indexing,
        entries=entries,
        providers=providers,
    )


@router.get(
    "/index/stats",
    response_model=IndexStats,
    summary="Statistics of the published index",
)
async def index_stats(request: Request) -> IndexStats:
    """Return stats for the current index; 404 before the first build."""
    stats = _get_indexing_service(request).stats()
    if stats is None:
        raise HTTPException(status_code=404, detail="No index has been built yet")
    return stats


@router.post(
    "/index/reload",
    response_model=IndexStats,
    summary="Rebuild the index from the corpus",
)
async def reload_index(request: Request) -> IndexStats:
    """Run an indexing pass and return the stats of the new index."""
    index = await _get_indexing_service(request).reload()
    return index.get_stats()
