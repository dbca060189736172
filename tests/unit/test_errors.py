"""Unit tests for the SemSearchError hierarchy."""

from __future__ import annotations

import pytest

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


@pytest.mark.parametrize(
    "error_cls",
    [
        ConfigurationError,
        EmbeddingServiceError,
        IndexUnavailableError,
        InvalidQueryError,
        SourceReadError,
        UnsupportedFormatError,
        VectorIndexError,
    ],
)
def test_subclasses_share_base(error_cls: type[SemSearchError]) -> None:
    exc = error_cls()
    assert isinstance(exc, SemSearchError)
    assert exc.message
    assert exc.provider_name is None


def test_str_prefixes_provider() -> None:
    exc = EmbeddingServiceError(message="timed out", provider_name="openai_embedding")
    assert str(exc) == "[openai_embedding] timed out"
    assert str(SemSearchError("plain")) == "plain"


def test_context_attributes() -> None:
    assert EmbeddingServiceError(status_code=429).status_code == 429
    assert SourceReadError(path="a.pdf").path == "a.pdf"
    assert UnsupportedFormatError(path="a.csv").path == "a.csv"
    assert InvalidQueryError(query="  ").query == "  "
