"""structlog configuration for vector_admin.

One shared processor chain feeds two renderers: a coloured console renderer
for local work and a JSON renderer when ``app_env`` is ``"production"``.
Standard-library logging is routed through the same chain so records from
the backend SDKs (chromadb, pymilvus, qdrant-client over httpx, ...) come out
in the same format as ours.

Log output goes to stderr.  stdout belongs to the operator CLI, whose command
results are meant to be piped.
"""

import logging
import os
import sys

import structlog

# SDK loggers that report every HTTP round-trip at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore", "urllib3", "chromadb", "pymilvus", "weaviate")


def configure_logging(
    log_level: str = "INFO",
    app_env: str | None = None,
    json_output: bool = False,
) -> structlog.BoundLogger:
    """Configure structlog and bridge stdlib logging into it.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
        app_env: Deployment environment, usually ``Settings.app_env``.  Falls
                 back to the ``APP_ENV`` environment variable.
        json_output: Force JSON rendering regardless of environment.

    Returns:
        A configured structlog BoundLogger.
    """
    env = app_env or os.environ.get("APP_ENV", "development")
    use_json = json_output or env == "production"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    level = logging.getLevelName(log_level.upper())
    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared_processors,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return structlog.get_logger()
