"""Unit tests for SearchService -- validation, streaming and index resolution."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from semsearch.utils.errors import EmbeddingServiceError, IndexUnavailableError, InvalidQueryError
from tests.conftest import KeywordEmbeddingProvider, build_services


class TestValidation:
    @pytest.mark.parametrize("query", ["", "   ", "\n\t"])
    @pytest.mark.asyncio
    async def test_blank_query_rejected_before_network(self, corpus_dir: Path, query: str) -> None:
        provider = KeywordEmbeddingProvider()
        indexing, search = build_services(corpus_dir, provider=provider)

        with pytest.raises(InvalidQueryError):
            await search.search(query)

        assert provider.calls == []
        assert indexing.passes_run == 0

    @pytest.mark.asyncio
    async def test_overlong_query_rejected(self, corpus_dir: Path) -> None:
        provider = KeywordEmbeddingProvider()
        _, search = build_services(corpus_dir, provider=provider)

        with pytest.raises(InvalidQueryError, match="exceeds"):
            await search.search("dogs " * 1000)

        assert provider.calls == []

    def test_validate_strips_and_defaults_top_k(self, corpus_dir: Path) -> None:
        _, search = build_services(corpus_dir)
        assert search.validate("  dogs  ") == ("dogs", 4)
        assert search.validate("dogs", 2) == ("dogs", 2)

    @pytest.mark.parametrize("top_k", [-1, 51])
    def test_top_k_out_of_range(self, corpus_dir: Path, top_k: int) -> None:
        _, search = build_services(corpus_dir)
        with pytest.raises(InvalidQueryError):
            search.validate("dogs", top_k)


class TestRespond:
    @pytest.mark.asyncio
    async def test_first_query_builds_index_then_answers(self, corpus_dir: Path) -> None:
        provider = KeywordEmbeddingProvider()
        indexing, search = build_services(corpus_dir, provider=provider)

        results = await search.search("Tell me about dogs", top_k=1)

        assert indexing.passes_run == 1
        assert len(results) == 1
        assert results[0].chunk.source_id.endswith("doc-a.txt")
        # one call for the corpus, one for the query
        assert provider.calls[-1] == ["Tell me about dogs"]
        assert len(provider.calls) == 2

    @pytest.mark.asyncio
    async def test_exactly_one_embedding_call_per_query(self, corpus_dir: Path) -> None:
        provider = KeywordEmbeddingProvider()
        indexing, search = build_services(corpus_dir, provider=provider)
        await indexing.ensure_index()
        before = len(provider.calls)

        await search.search("independent cats")

        assert len(provider.calls) == before + 1

    @pytest.mark.asyncio
    async def test_yields_results_in_rank_order(self, corpus_dir: Path) -> None:
        _, search = build_services(corpus_dir)

        ranks = []
        scores = []
        async for result in search.respond("independent cats", top_k=2):
            ranks.append(result.rank)
            scores.append(result.score)

        assert ranks == [0, 1]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.asyncio
    async def test_top_k_caps_result_count(self, corpus_dir: Path) -> None:
        _, search = build_services(corpus_dir)
        assert len(await search.search("pets", top_k=10)) == 2
        assert await search.search("pets", top_k=0) == []

    @pytest.mark.asyncio
    async def test_two_concurrent_first_queries_share_one_pass(self, corpus_dir: Path) -> None:
        provider = KeywordEmbeddingProvider(delay=0.05)
        indexing, search = build_services(corpus_dir, provider=provider)

        a, b = await asyncio.gather(search.search("dogs"), search.search("cats"))

        assert indexing.passes_run == 1
        assert a and b

    @pytest.mark.asyncio
    async def test_embedding_failure_raises_out_of_stream(self, corpus_dir: Path) -> None:
        provider = KeywordEmbeddingProvider()
        indexing, search = build_services(corpus_dir, provider=provider)
        await indexing.ensure_index()

        async def broken(texts: list[str]) -> list[list[float]]:
            raise EmbeddingServiceError(message="down", status_code=502)

        provider.embed = broken
        with pytest.raises(EmbeddingServiceError):
            await search.search("dogs")

        assert indexing.current_index is not None


class TestIndexAvailability:
    @pytest.mark.asyncio
    async def test_no_auto_index_raises_unavailable(self, corpus_dir: Path) -> None:
        provider = KeywordEmbeddingProvider()
        indexing, search = build_services(corpus_dir, provider=provider, auto_index=False)

        with pytest.raises(IndexUnavailableError):
            await search.search("dogs")

        assert provider.calls == []
        assert indexing.passes_run == 0

    @pytest.mark.asyncio
    async def test_no_auto_index_works_after_reload(self, corpus_dir: Path) -> None:
        indexing, search = build_services(corpus_dir, auto_index=False)
        await indexing.reload()

        results = await search.search("dogs", top_k=1)

        assert len(results) == 1

    @pytest.mark.asyncio
    async def test_no_auto_index_joins_running_pass(self, corpus_dir: Path) -> None:
        provider = KeywordEmbeddingProvider(delay=0.05)
        indexing, search = build_services(corpus_dir, provider=provider, auto_index=False)

        reload_task = asyncio.create_task(indexing.reload())
        await asyncio.sleep(0)
        assert indexing.is_indexing
        search.check_available()

        results = await search.search("dogs", top_k=1)
        await reload_task

        assert len(results) == 1
        assert indexing.passes_run == 1
