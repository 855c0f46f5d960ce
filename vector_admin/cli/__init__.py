"""Command-line tools for operating vector database connections."""
