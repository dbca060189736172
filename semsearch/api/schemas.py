"""Pydantic request/response schemas for the semsearch HTTP API.

Request schemas end with ``Request``, response schemas with ``Response``.
Search results are streamed as server-sent events, one serialised
:class:`SearchHit` per ``data:`` line.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from semsearch.models.corpus import QueryResult


class SearchRequest(BaseModel):
    """Body of ``POST /api/v1/search``.

    ``query`` is deliberately unconstrained here so that an empty query is
    rejected by the search service with a 400 instead of a 422.
    """

    query: str
    top_k: int | None = Field(default=None, ge=0, description="Number of results; server default when omitted.")


class SearchHit(BaseModel):
    """One streamed search result."""

    rank: int
    score: float
    chunk_id: str
    source_id: str
    source_type: str
    offset_start: int
    offset_end: int
    text: str
    extra: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, result: QueryResult) -> SearchHit:
        chunk = result.chunk
        return cls(
            rank=result.rank,
            score=result.score,
            chunk_id=chunk.chunk_id,
            source_id=chunk.source_id,
            source_type=chunk.source_type,
            offset_start=chunk.offset_start,
            offset_end=chunk.offset_end,
            text=chunk.text,
            extra=dict(chunk.extra),
        )


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    index_ready: bool
    indexing: bool
    entries: int
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
