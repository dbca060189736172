"""End-to-end pipeline tests: load -> chunk -> embed -> index -> query."""

from __future__ import annotations

from pathlib import Path

import pytest

from semsearch.models.corpus import IndexEntry, RawUnit
from semsearch.providers.vector_store.memory_vector_store import MemoryVectorStore
from semsearch.services.embedder import Embedder
from semsearch.services.ingestion.chunker import TextChunker
from tests.conftest import KeywordEmbeddingProvider, build_services


class TestDogsAndCats:
    @pytest.mark.asyncio
    async def test_in_memory_units(self, dogs_unit: RawUnit, cats_unit: RawUnit) -> None:
        chunker = TextChunker(chunk_size=1000, overlap=200)
        embedder = Embedder(KeywordEmbeddingProvider())

        chunks = chunker.chunk_many([dogs_unit, cats_unit])
        vectors = await embedder.embed([c.text for c in chunks])
        store = MemoryVectorStore()
        store.add([IndexEntry(embedding=v, chunk=c) for c, v in zip(chunks, vectors)])

        assert store.count() == 2

        query = await embedder.embed_query("Tell me about dogs")
        results = store.query(query, 1)

        assert len(results) == 1
        assert results[0].chunk.source_id == "doc-a"
        assert results[0].chunk.text == dogs_unit.text

    @pytest.mark.asyncio
    async def test_from_corpus_directory(self, corpus_dir: Path) -> None:
        indexing, search = build_services(corpus_dir, chunk_size=1000, overlap=200)

        results = await search.search("Tell me about dogs", top_k=1)

        assert indexing.current_index is not None
        assert indexing.current_index.count() == 2
        assert [Path(r.chunk.source_id).stem for r in results] == ["doc-a"]

    @pytest.mark.asyncio
    async def test_cats_query_prefers_cats(self, corpus_dir: Path) -> None:
        _, search = build_services(corpus_dir)

        results = await search.search("Which pets are independent?", top_k=2)

        assert Path(results[0].chunk.source_id).stem == "doc-b"
        assert results[0].score > results[1].score

    @pytest.mark.asyncio
    async def test_self_query_scores_near_one(self, corpus_dir: Path) -> None:
        indexing, search = build_services(corpus_dir)
        index = await indexing.ensure_index()
        stored = index.query([1.0] * 7, 2)

        for hit in stored:
            top = (await search.search(hit.chunk.text, top_k=1))[0]
            assert top.chunk.chunk_id == hit.chunk.chunk_id
            assert top.score == pytest.approx(1.0, abs=1e-5)


class TestEmptyCorpus:
    @pytest.mark.asyncio
    async def test_empty_directory_yields_no_results(self, empty_corpus_dir: Path) -> None:
        indexing, search = build_services(empty_corpus_dir)

        results = await search.search("Tell me about dogs")

        assert indexing.current_index is not None
        assert indexing.current_index.count() == 0
        assert results == []


class TestMixedFormats:
    @pytest.mark.asyncio
    async def test_html_and_markdown_sources(self, tmp_path: Path) -> None:
        root = tmp_path / "mixed"
        root.mkdir()
        (root / "space.md").write_text("# Space\n\nSpace is vast and space is cold.", encoding="utf-8")
        (root / "dogs.html").write_text(
            "<html><head><title>Dogs</title></head><body>"
            "<nav>dogs dogs dogs</nav><p>Dogs are loyal companions.</p></body></html>",
            encoding="utf-8",
        )
        (root / "ignored.csv").write_text("dogs,cats", encoding="utf-8")
        indexing, search = build_services(root)

        results = await search.search("space", top_k=1)
        stats = indexing.stats()

        assert Path(results[0].chunk.source_id).name == "space.md"
        assert stats is not None
        assert stats.total_entries == 2
        assert stats.sources_by_type == {"html": 1, "markdown": 1}
