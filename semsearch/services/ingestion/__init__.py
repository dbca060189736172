"""Ingestion stages: source loading and chunking."""

from semsearch.services.ingestion.chunker import TextChunker
from semsearch.services.ingestion.source_loader import SourceLoader

__all__ = ["SourceLoader", "TextChunker"]
