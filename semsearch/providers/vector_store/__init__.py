"""Vector store backends."""

from semsearch.providers.vector_store.memory_vector_store import MemoryVectorStore

__all__ = ["MemoryVectorStore"]
