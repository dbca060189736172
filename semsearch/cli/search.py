"""Standalone CLI for indexing a corpus and querying it.

Usage::

    python -m semsearch.cli index --dir data/corpus

    python -m semsearch.cli query "Tell me about dogs" --top-k 3

    python -m semsearch.cli query "loyal pets" --json

    python -m semsearch.cli chunk notes.txt --chunk-size 500 --overlap 100

Configuration comes from the environment / ``.env`` (see
:class:`~semsearch.config.settings.Settings`); the flags override it for a
single run.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from semsearch.config.settings import Settings
from semsearch.utils.errors import SemSearchError
from semsearch.utils.logging import configure_logging


def _load_settings(args: argparse.Namespace) -> Settings:
    """Build Settings from the environment, overridden by CLI flags."""
    overrides: dict[str, Any] = {}
    if getattr(args, "dir", None):
        overrides["corpus_dir"] = args.dir
    if getattr(args, "chunk_size", None) is not None:
        overrides["chunk_size"] = args.chunk_size
    if getattr(args, "overlap", None) is not None:
        overrides["chunk_overlap"] = args.overlap
    return Settings(**overrides)


def _build_services(app_settings: Settings) -> dict[str, Any]:
    """Assemble the same component graph the web app uses."""
    from semsearch.main import _build_all

    return _build_all(app_settings)


def _print_stats(stats) -> None:  # noqa: ANN001
    print("Index Statistics")
    print("=" * 40)
    print(f"  Total entries:    {stats.total_entries}")
    print(f"  Total sources:    {stats.total_sources}")
    print(f"  Dimension:        {stats.dimension if stats.dimension is not None else '-'}")
    print(f"  Build time:       {stats.build_seconds:.2f}s")
    if stats.sources_by_type:
        print("\n  Entries by type:")
        for src_type, count in sorted(stats.sources_by_type.items()):
            print(f"    {src_type:<15} {count}")
    if stats.skipped_sources:
        print("\n  Skipped sources:")
        for skipped in stats.skipped_sources:
            print(f"    {skipped.path}: {skipped.reason}")


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


async def _handle_index(components: dict[str, Any]) -> int:
    indexing = components["indexing_service"]
    print(f"Indexing: {indexing.corpus_dir}")
    try:
        index = await indexing.ensure_index()
    finally:
        await indexing.aclose()
    print()
    _print_stats(index.get_stats())
    return 0


async def _handle_query(args: argparse.Namespace, components: dict[str, Any]) -> int:
    from semsearch.api.schemas import SearchHit

    search_service = components["search_service"]
    indexing = components["indexing_service"]
    found = 0
    try:
        async for result in search_service.respond(args.text, args.top_k):
            found += 1
            if args.json:
                print(SearchHit.from_result(result).model_dump_json(), flush=True)
                continue
            chunk = result.chunk
            print(
                f"[{result.rank + 1}] score={result.score:.4f}  {chunk.source_id}"
                f" [{chunk.offset_start}:{chunk.offset_end}]",
                flush=True,
            )
            preview = " ".join(chunk.text.split())
            print(f"    {preview[:300]}", flush=True)
    finally:
        await indexing.aclose()

    if not found and not args.json:
        print("No results.")
    return 0


def _handle_chunk(args: argparse.Namespace, app_settings: Settings) -> int:
    """Print the chunk windows of one file without calling any remote service."""
    from semsearch.providers.source.html_reader import HTMLSourceReader
    from semsearch.providers.source.pdf_reader import PDFSourceReader
    from semsearch.providers.source.text_reader import TextSourceReader
    from semsearch.services.ingestion.chunker import TextChunker
    from semsearch.services.ingestion.source_loader import SourceLoader

    loader = SourceLoader(
        [PDFSourceReader(), TextSourceReader(), HTMLSourceReader(selector=app_settings.html_selector)]
    )
    unit = loader.read(Path(args.file))
    chunker = TextChunker(chunk_size=app_settings.chunk_size, overlap=app_settings.chunk_overlap)
    chunks = chunker.chunk(unit)

    print(f"Source: {unit.source_id} ({len(unit.text)} chars)")
    print(f"Window: size={chunker.chunk_size} overlap={chunker.overlap}")
    print(f"Chunks: {len(chunks)}")
    for i, chunk in enumerate(chunks):
        preview = " ".join(chunk.text.split())
        print(f"  #{i:<4} [{chunk.offset_start}:{chunk.offset_end}]  {preview[:60]}")
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the semsearch CLI."""
    parser = argparse.ArgumentParser(
        prog="semsearch",
        description="Index a document corpus and run semantic search queries.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # -- index --
    index_parser = subparsers.add_parser("index", help="Build the index and print stats")
    index_parser.add_argument("--dir", help="Corpus directory (default: CORPUS_DIR)")
    index_parser.add_argument("--chunk-size", type=int, dest="chunk_size", help="Characters per chunk")
    index_parser.add_argument("--overlap", type=int, help="Characters shared by adjacent chunks")

    # -- query --
    query_parser = subparsers.add_parser("query", help="Index the corpus, then run a query")
    query_parser.add_argument("text", help="Query text")
    query_parser.add_argument("--top-k", type=int, dest="top_k", help="Number of results")
    query_parser.add_argument("--dir", help="Corpus directory (default: CORPUS_DIR)")
    query_parser.add_argument("--json", action="store_true", help="Print one JSON object per result")

    # -- chunk --
    chunk_parser = subparsers.add_parser("chunk", help="Preview chunk boundaries for one file")
    chunk_parser.add_argument("file", help="Path to a PDF, text, Markdown or HTML file")
    chunk_parser.add_argument("--chunk-size", type=int, dest="chunk_size", help="Characters per chunk")
    chunk_parser.add_argument("--overlap", type=int, help="Characters shared by adjacent chunks")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Exit codes: ``0`` success, ``1`` runtime failure (embedding service,
    unreadable file, missing provider), ``2`` invalid arguments or settings.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(2)

    try:
        app_settings = _load_settings(args)
    except ValidationError as exc:
        print(f"Error: invalid settings: {exc.errors()[0]['msg']}", file=sys.stderr)
        sys.exit(2)

    # Logs go to stderr so query output on stdout stays pipeable.
    if not structlog.is_configured():
        configure_logging(
            log_level=app_settings.log_level,
            json_output=(app_settings.app_env == "production"),
        )

    try:
        if args.command == "chunk":
            exit_code = _handle_chunk(args, app_settings)
        else:
            components = _build_services(app_settings)
            if args.command == "index":
                exit_code = asyncio.run(_handle_index(components))
            else:
                exit_code = asyncio.run(_handle_query(args, components))
    except SemSearchError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
