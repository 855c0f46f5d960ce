"""Configuration package: environment-driven application settings."""

from vector_admin.config.settings import Settings

__all__ = ["Settings"]
