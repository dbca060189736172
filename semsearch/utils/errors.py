"""Custom exception hierarchy for semsearch.

All application exceptions inherit from :class:`SemSearchError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "openai_embedding", "pdf") caused the failure.

The hierarchy is organized by pipeline stage:

    SemSearchError  (base -- catch-all for any semsearch error)
    +-- UnsupportedFormatError   (reader: no decoder for a file type)
    +-- SourceReadError          (reader: file could not be decoded)
    +-- EmbeddingServiceError    (embedder: remote call failed / bad output)
    +-- InvalidQueryError        (responder: empty or malformed query)
    +-- IndexUnavailableError    (responder: no index and none being built)
    +-- VectorIndexError         (index: dimension mismatch)
    +-- ConfigurationError       (startup / missing config)

Reader errors are skip-and-continue; embedding errors abort the current
indexing pass or query; query errors never touch the shared index.
"""

from __future__ import annotations


class SemSearchError(Exception):
    """Base exception for all semsearch errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[openai_embedding] timed out``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Source reading
# ---------------------------------------------------------------------------

class UnsupportedFormatError(SemSearchError):
    """Raised when a source file's type has no registered reader."""

    def __init__(
        self,
        message: str = "Unsupported source format",
        provider_name: str | None = None,
        path: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self.path = path


class SourceReadError(SemSearchError):
    """Raised when a reader cannot decode a file it claims to support."""

    def __init__(
        self,
        message: str = "Source could not be read",
        provider_name: str | None = None,
        path: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self.path = path


# ---------------------------------------------------------------------------
# Embedding service
# ---------------------------------------------------------------------------

class EmbeddingServiceError(SemSearchError):
    """Raised when the remote embedding call fails or returns bad output.

    ``status_code`` carries the upstream HTTP status when one is known
    (``None`` for timeouts, connection failures and malformed responses).
    """

    def __init__(
        self,
        message: str = "Embedding service call failed",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self.status_code = status_code


# ---------------------------------------------------------------------------
# Query / index errors
# ---------------------------------------------------------------------------

class InvalidQueryError(SemSearchError):
    """Raised when a query is empty, whitespace-only or too long."""

    def __init__(
        self,
        message: str = "Query text must not be empty",
        provider_name: str | None = None,
        query: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self.query = query


class IndexUnavailableError(SemSearchError):
    """Raised when no index has been built and no indexing pass is running."""

    def __init__(
        self,
        message: str = "Search index is not ready",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class VectorIndexError(SemSearchError):
    """Raised when an embedding does not fit the index (dimension mismatch)."""

    def __init__(
        self,
        message: str = "Vector index operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class ConfigurationError(SemSearchError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
