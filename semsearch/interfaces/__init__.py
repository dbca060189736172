"""Public interface definitions for all external collaborators.

The embedding service, the file-format decoders and the vector index are
accessed exclusively through the abstract base classes in this package.
"""

from semsearch.interfaces.embedding_provider import IEmbeddingProvider
from semsearch.interfaces.source_reader import ISourceReader
from semsearch.interfaces.vector_store_provider import IVectorStoreProvider

__all__ = [
    "IEmbeddingProvider",
    "ISourceReader",
    "IVectorStoreProvider",
]
