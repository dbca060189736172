"""Pipeline services: embedding, indexing and search."""

from semsearch.services.embedder import Embedder
from semsearch.services.indexing_service import IndexingService
from semsearch.services.search_service import SearchService

__all__ = ["Embedder", "IndexingService", "SearchService"]
