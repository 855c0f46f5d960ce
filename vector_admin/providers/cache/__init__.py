"""Vector cache store implementations."""

from vector_admin.providers.cache.file_vector_cache import FileVectorCacheStore

__all__ = ["FileVectorCacheStore"]
