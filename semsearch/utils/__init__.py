"""Utility modules for semsearch.

- **errors** -- Domain-specific exception hierarchy rooted at SemSearchError;
  each pipeline stage raises its own subclass so callers can handle failures
  granularly.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

from semsearch.utils.errors import (
    ConfigurationError,
    EmbeddingServiceError,
    IndexUnavailableError,
    InvalidQueryError,
    SemSearchError,
    SourceReadError,
    UnsupportedFormatError,
    VectorIndexError,
)
from semsearch.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "EmbeddingServiceError",
    "IndexUnavailableError",
    "InvalidQueryError",
    "SemSearchError",
    "SourceReadError",
    "UnsupportedFormatError",
    "VectorIndexError",
    "configure_logging",
    "get_logger",
]
