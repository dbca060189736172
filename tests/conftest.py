"""Shared pytest fixtures for the semsearch test suite."""

from __future__ import annotations

import asyncio
import hashlib
import math
import re
import struct
from pathlib import Path

import pytest

from semsearch.config.settings import Settings
from semsearch.interfaces.embedding_provider import IEmbeddingProvider
from semsearch.models.corpus import RawUnit
from semsearch.providers.source.html_reader import HTMLSourceReader
from semsearch.providers.source.text_reader import TextSourceReader
from semsearch.providers.vector_store.memory_vector_store import MemoryVectorStore
from semsearch.services.embedder import Embedder
from semsearch.services.indexing_service import IndexingService
from semsearch.services.ingestion.chunker import TextChunker
from semsearch.services.ingestion.source_loader import SourceLoader
from semsearch.services.search_service import SearchService
from semsearch.utils.errors import EmbeddingServiceError
from semsearch.utils.logging import configure_logging

# ---------------------------------------------------------------------------
# Sample corpus
# ---------------------------------------------------------------------------

DOGS_TEXT = "Dogs are loyal pets. Dogs are loyal companions and dogs love their owners."
CATS_TEXT = "Cats are independent pets. Cats are independent and cats like quiet homes."

_VOCABULARY = ("dogs", "cats", "loyal", "independent", "pets", "companions", "space")
_TOKEN = re.compile(r"[a-z]+")


def keyword_vector(text: str) -> list[float]:
    """Bag-of-words counts over a tiny fixed vocabulary.

    Plural/singular forms are folded so "dog" and "dogs" land in the same
    dimension; text with none of the words maps to the zero vector.
    """
    counts = [0.0] * len(_VOCABULARY)
    for token in _TOKEN.findall(text.lower()):
        for i, word in enumerate(_VOCABULARY):
            if token == word or token + "s" == word:
                counts[i] += 1.0
    return counts


def hash_vector(text: str, dim: int = 16) -> list[float]:
    """Deterministic unit-length vector derived from SHA-256 of *text*."""
    raw = hashlib.sha256(text.encode("utf-8")).digest()
    while len(raw) < dim * 4:
        raw += hashlib.sha256(raw).digest()
    values = [v for (v,) in struct.iter_unpack(">i", raw[: dim * 4])]
    norm = math.sqrt(sum(v * v for v in values)) or 1.0
    return [v / norm for v in values]


class KeywordEmbeddingProvider(IEmbeddingProvider):
    """Deterministic in-memory embedding provider that records its calls."""

    def __init__(self, batch_limit: int = 64, delay: float = 0.0) -> None:
        self.calls: list[list[str]] = []
        self._batch_limit = batch_limit
        self._delay = delay

    async def embed(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        if self._delay:
            await asyncio.sleep(self._delay)
        return [keyword_vector(t) for t in texts]

    async def embed_single(self, text: str) -> list[float]:
        return (await self.embed([text]))[0]

    def get_dimension(self) -> int:
        return len(_VOCABULARY)

    def get_batch_limit(self) -> int:
        return self._batch_limit

    def get_provider_name(self) -> str:
        return "keyword-embedding"

    def is_available(self) -> bool:
        return True

    @property
    def texts_embedded(self) -> int:
        return sum(len(c) for c in self.calls)


class FailingEmbeddingProvider(KeywordEmbeddingProvider):
    """Fails the first ``failures`` calls with an upstream 503, then succeeds."""

    def __init__(self, failures: int = 1, **kwargs) -> None:
        super().__init__(**kwargs)
        self._failures = failures

    async def embed(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        if self._failures > 0:
            self._failures -= 1
            raise EmbeddingServiceError(
                message="service unavailable",
                provider_name=self.get_provider_name(),
                status_code=503,
            )
        return [keyword_vector(t) for t in texts]


def make_settings(**overrides) -> Settings:
    defaults = {
        "openai_api_key": "",
        "openai_base_url": "",
        "corpus_extensions": ".txt,.md,.html",
        "corpus_urls": "",
        "chunk_size": 1000,
        "chunk_overlap": 200,
        "search_top_k": 4,
    }
    defaults.update(overrides)
    return Settings(**defaults)


def build_services(
    corpus_dir: Path,
    provider: IEmbeddingProvider | None = None,
    chunk_size: int = 1000,
    overlap: int = 200,
    auto_index: bool = True,
) -> tuple[IndexingService, SearchService]:
    """Wire an IndexingService/SearchService pair over *corpus_dir*."""
    provider = provider or KeywordEmbeddingProvider()
    loader = SourceLoader([TextSourceReader(), HTMLSourceReader()])
    embedder = Embedder(provider, batch_size=32)
    indexing = IndexingService(
        loader=loader,
        chunker=TextChunker(chunk_size=chunk_size, overlap=overlap),
        embedder=embedder,
        index_factory=MemoryVectorStore,
        corpus_dir=corpus_dir,
    )
    search = SearchService(embedder=embedder, indexing=indexing, auto_index=auto_index)
    return indexing, search


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session", autouse=True)
def _quiet_logging() -> None:
    """Configure structlog once, before any per-test output capture starts."""
    configure_logging(log_level="WARNING")


@pytest.fixture
def dogs_unit() -> RawUnit:
    return RawUnit(text=DOGS_TEXT, source_id="doc-a", extra={"source_type": "text"})


@pytest.fixture
def cats_unit() -> RawUnit:
    return RawUnit(text=CATS_TEXT, source_id="doc-b", extra={"source_type": "text"})


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    """A corpus directory holding the dogs (doc-a) and cats (doc-b) documents."""
    root = tmp_path / "corpus"
    root.mkdir()
    (root / "doc-a.txt").write_text(DOGS_TEXT, encoding="utf-8")
    (root / "doc-b.txt").write_text(CATS_TEXT, encoding="utf-8")
    return root


@pytest.fixture
def empty_corpus_dir(tmp_path: Path) -> Path:
    root = tmp_path / "empty"
    root.mkdir()
    return root


@pytest.fixture
def keyword_provider() -> KeywordEmbeddingProvider:
    return KeywordEmbeddingProvider()
