"""Embedding provider implementations.

Embeddings convert document chunks and search queries into numeric vectors.
The vectors are inserted into the organization's backend and used for
similarity search.
"""

from vector_admin.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["OpenAIEmbeddingProvider"]
