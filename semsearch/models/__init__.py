"""Pydantic data models shared across the pipeline."""

from semsearch.models.corpus import (
    Chunk,
    IndexEntry,
    IndexStats,
    QueryResult,
    RawUnit,
    SkippedSource,
)

__all__ = [
    "Chunk",
    "IndexEntry",
    "IndexStats",
    "QueryResult",
    "RawUnit",
    "SkippedSource",
]
