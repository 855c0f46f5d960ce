"""Application settings loaded from environment variables via pydantic-settings.

Settings are read from two sources, highest priority first:

  1. Environment variables, e.g. ``OPENAI_API_KEY=sk-abc123``
  2. A ``.env`` file in the working directory (local development)

Field names map to upper-cased environment variables automatically
(``vector_cache_dir`` -> ``VECTOR_CACHE_DIR``).  Defaults apply when neither
source sets a value.

Connector credentials are *not* configured here: they belong to each
organization's persisted connection record and travel with it.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """vector_admin settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Embedding provider ===
    # Empty key = "not configured"; ingestion callers usually pass the
    # organization's own key per call instead.
    openai_api_key: str = ""
    openai_base_url: str = ""
    openai_embedding_model: str = "text-embedding-ada-002"

    # === Durable side-effects of ingestion ===
    database_path: str = "data/vector_admin.db"
    vector_cache_dir: str = "data/vector-cache"

    # === Ingestion pipeline ===
    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=20, ge=0)
    # Backend payload limits make 500 records per insert call a safe ceiling.
    insert_batch_size: int = Field(default=500, gt=0)

    # === App config ===
    app_env: str = "development"
    log_level: str = "INFO"
