"""Embedding provider implementations.

Embeddings convert text into numeric vectors that capture semantic meaning.
They are stored in the in-memory vector index and compared by cosine
similarity at query time.

Two implementations of IEmbeddingProvider (in selection priority order):
    1. OpenAIEmbeddingProvider -- text-embedding-3-large (3072 dims) or any
       model behind an OpenAI-compatible endpoint.  Requires an API key.
    2. NomicEmbeddingProvider  -- nomic-embed-text via Ollama (768 dims).
       Free and local, but requires a running Ollama server.
"""

from semsearch.providers.embedding.nomic_embedding_provider import NomicEmbeddingProvider
from semsearch.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["OpenAIEmbeddingProvider", "NomicEmbeddingProvider"]
