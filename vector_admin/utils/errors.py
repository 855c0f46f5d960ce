"""Custom exception hierarchy for vector_admin.

All application exceptions inherit from :class:`VectorAdminError`, which
carries an optional ``provider_name`` so error handlers can identify which
backend (e.g. "milvus", "qdrant", "openai") caused the failure.

    VectorAdminError  (base -- catch-all for any vector_admin error)
    +-- UnsupportedConnectorError  (unknown connector type tag)
    +-- ValidationError            (failed liveness / credential probe)
    +-- EmbeddingError             (provider returned no usable vectors)
    +-- BackendTransportError      (network / client failure during an operation)
    +-- MissingArgumentError       (required identifier omitted)
    +-- ConfigurationError         (invalid settings or connector mismatch)

Read paths convert these into empty results; mutation paths return them as
the typed ``cause`` of an explicit failure result.
"""


class VectorAdminError(Exception):
    """Base exception for all vector_admin errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[milvus] Collection not loaded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Connector selection / registration
# ---------------------------------------------------------------------------

class UnsupportedConnectorError(VectorAdminError):
    """Raised when a connector type tag is not in the supported set."""

    def __init__(
        self,
        message: str = "Unsupported connector for vector database.",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ValidationError(VectorAdminError):
    """Raised when a backend fails its pre-registration liveness probe."""

    def __init__(
        self,
        message: str = "Connector validation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(VectorAdminError):
    """Raised when connector settings are invalid or do not match the backend."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Operation errors
# ---------------------------------------------------------------------------

class EmbeddingError(VectorAdminError):
    """Raised when the embedding provider returns no vectors for a document."""

    def __init__(
        self,
        message: str = "embedding failure",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class BackendTransportError(VectorAdminError):
    """Raised for any network or client exception during a backend operation."""

    def __init__(
        self,
        message: str = "Backend request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class MissingArgumentError(VectorAdminError):
    """Raised when a required identifier (e.g. a namespace name) is omitted."""

    def __init__(
        self,
        message: str = "No namespace value provided.",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
