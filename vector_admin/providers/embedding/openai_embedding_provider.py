"""OpenAI-compatible embedding provider adapter.

Wraps the ``openai`` async client to implement :class:`IEmbeddingProvider`.
Supports both real OpenAI and OpenAI-compatible providers via custom
``base_url`` and model name settings.  The API key may be supplied per
instance, so each organization embeds with its own key.
"""

from __future__ import annotations

import openai
import structlog

from vector_admin.config.settings import Settings
from vector_admin.interfaces.embedding_provider import IEmbeddingProvider

logger = structlog.get_logger(logger_name=__name__)

_OPENAI_BATCH_LIMIT = 2048

_DEFAULT_MODEL = "text-embedding-ada-002"


class OpenAIEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by an OpenAI-compatible embeddings API.

    Uses ``text-embedding-ada-002`` (1536 dims) by default.  Inputs larger
    than the per-call limit are split into several requests.  API errors are
    logged and reported as ``None`` so the ingestion pipeline can fail the
    document without an exception crossing the provider boundary.
    """

    def __init__(self, settings: Settings, api_key: str | None = None) -> None:
        self._settings = settings
        self._api_key = api_key or settings.openai_api_key

        client_kwargs: dict = {"api_key": self._api_key or None}
        if settings.openai_base_url:
            client_kwargs["base_url"] = settings.openai_base_url

        self._client = openai.AsyncOpenAI(**client_kwargs)
        self._model = settings.openai_embedding_model or _DEFAULT_MODEL
        self._provider_label = (
            "openai-compatible_embedding" if settings.openai_base_url else "openai_embedding"
        )

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    async def embed_text_chunks(self, chunks: list[str]) -> list[list[float]] | None:
        """Embed *chunks* in order, batching at 2048 inputs per request."""
        if not chunks:
            return []

        try:
            all_embeddings: list[list[float]] = []
            for start in range(0, len(chunks), _OPENAI_BATCH_LIMIT):
                batch = chunks[start : start + _OPENAI_BATCH_LIMIT]
                response = await self._client.embeddings.create(
                    input=batch,
                    model=self._model,
                )
                ordered = sorted(response.data, key=lambda item: item.index)
                all_embeddings.extend(item.embedding for item in ordered)
                logger.info(
                    "openai_embedding_batch",
                    model=self._model,
                    provider=self._provider_label,
                    batch_size=len(batch),
                    tokens=response.usage.total_tokens if response.usage else None,
                )
            return all_embeddings
        except openai.APIError as exc:
            logger.error(
                "openai_embedding_failed",
                model=self._model,
                provider=self._provider_label,
                error=str(exc),
            )
            return None

    async def embed_single(self, text: str) -> list[float] | None:
        """Generate an embedding vector for a single text string."""
        result = await self.embed_text_chunks([text])
        return result[0] if result else None

    def get_provider_name(self) -> str:
        return self._provider_label

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured."""
        return bool(self._api_key)
