"""Data models for the semantic-search pipeline.

Defines Pydantic v2 models for the units that flow through
**load -> chunk -> embed -> index -> query**.  All models are frozen: once a
stage hands a value to the next one it is never mutated.

Lifecycle:

    RawUnit      created by a source reader, consumed by the chunker
    Chunk        created by the chunker, embedded and stored in the index
    IndexEntry   (embedding, chunk) pair held by the vector index
    QueryResult  transient, one per ranked hit of a query
    IndexStats   summary of one completed indexing pass
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# RawUnit -- one loaded source artifact.
# ---------------------------------------------------------------------------
class RawUnit(BaseModel):
    """The full extracted text of one source file or web page."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Extracted plain text of the source.")
    source_id: str = Field(description="Stable identifier of the source (path or URL).")
    extra: dict[str, Any] = Field(
        default_factory=dict,
        description="Reader-specific metadata (source_type, title, page_count, ...).",
    )


# ---------------------------------------------------------------------------
# Chunk -- the unit of embedding and retrieval.
# ---------------------------------------------------------------------------
class Chunk(BaseModel):
    """A bounded slice ``text[offset_start:offset_end]`` of a RawUnit."""

    model_config = ConfigDict(frozen=True)

    chunk_id: str = Field(description="Deterministic identifier derived from source and offsets.")
    text: str = Field(description="The chunk's textual content.")
    source_id: str = Field(description="Identifier of the parent source.")
    offset_start: int = Field(ge=0, description="Start offset (inclusive) in the source text.")
    offset_end: int = Field(ge=0, description="End offset (exclusive) in the source text.")
    extra: dict[str, Any] = Field(
        default_factory=dict,
        description="Metadata copied unchanged from the parent RawUnit.",
    )

    @model_validator(mode="after")
    def _check_offsets(self) -> Chunk:
        if self.offset_end < self.offset_start:
            raise ValueError("offset_end must not precede offset_start")
        if self.offset_end - self.offset_start != len(self.text):
            raise ValueError("offset range does not match text length")
        return self

    @property
    def source_type(self) -> str:
        return str(self.extra.get("source_type", "unknown"))


# ---------------------------------------------------------------------------
# IndexEntry -- what the vector index stores.
# ---------------------------------------------------------------------------
class IndexEntry(BaseModel):
    """An embedded chunk."""

    model_config = ConfigDict(frozen=True)

    embedding: list[float] = Field(min_length=1, description="Embedding vector of the chunk text.")
    chunk: Chunk


# ---------------------------------------------------------------------------
# QueryResult -- a ranked hit.
# ---------------------------------------------------------------------------
class QueryResult(BaseModel):
    """A chunk returned by a similarity query with its cosine score."""

    model_config = ConfigDict(frozen=True)

    chunk: Chunk
    score: float = Field(description="Cosine similarity between query and chunk, in [-1, 1].")
    rank: int = Field(default=0, ge=0, description="0-based position in the ranked result list.")


# ---------------------------------------------------------------------------
# Indexing pass bookkeeping.
# ---------------------------------------------------------------------------
class SkippedSource(BaseModel):
    """A source the reader skipped, and why."""

    model_config = ConfigDict(frozen=True)

    path: str
    reason: str


class IndexStats(BaseModel):
    """Summary of the currently published index."""

    model_config = ConfigDict(frozen=True)

    total_entries: int = Field(default=0, ge=0)
    total_sources: int = Field(default=0, ge=0)
    dimension: int | None = Field(default=None, description="Embedding length; None for an empty index.")
    sources_by_type: dict[str, int] = Field(default_factory=dict)
    skipped_sources: list[SkippedSource] = Field(default_factory=list)
    built_at: datetime | None = None
    build_seconds: float = Field(default=0.0, ge=0.0)
