"""vector_admin: one connector contract over many vector database backends."""

__version__ = "0.1.0"
