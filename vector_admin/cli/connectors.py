# =============================================================================
# vector_admin/cli/connectors.py - Operator CLI for Vector Database Connectors
# =============================================================================
#
# Small operator tool for checking and exercising organization connections
# without the admin web surface.
#
# Supported subcommands:
#
#   validate    Probe a backend configuration (no persistence)
#   register    Validate, then store an organization connection in SQLite
#   heartbeat   Check a stored or ad-hoc connection is reachable
#   namespaces  List namespaces/collections with their sizes
#   ingest      Chunk, embed and insert a plain-text file into a namespace
#   search      Embed a query and print the nearest chunks
#
# A connection is given either by id (--connection, loaded from the SQLite
# database at DATABASE_PATH) or ad hoc with --type and --settings (JSON).
#
# Usage examples:
#   python -m vector_admin.cli validate --type qdrant \
#       --settings '{"clusterUrl": "http://localhost:6333"}'
#   python -m vector_admin.cli register --org 1 --type chroma \
#       --settings '{"instanceURL": "http://localhost:8000"}'
#   python -m vector_admin.cli namespaces --connection 3
#   python -m vector_admin.cli ingest --connection 3 --namespace docs \
#       --file notes.txt --document-id 12 --workspace-id 4
#   python -m vector_admin.cli search --connection 3 --namespace docs \
#       --query "how are vectors stored?" --top-k 4
# =============================================================================

"""Operator CLI for validating, registering and exercising connectors.

Exit code is 0 on success and 1 on any failure.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from vector_admin.config.settings import Settings
from vector_admin.utils.errors import VectorAdminError
from vector_admin.utils.logging import configure_logging


async def _load_connector(args: argparse.Namespace, app_settings: Settings, **deps):  # noqa: ANN202
    """Resolve the connector named by ``--connection`` or ``--type/--settings``."""
    from vector_admin.providers.vector_db.factory import connector_for, select_connector

    if args.connection is not None:
        from vector_admin.providers.persistence.sqlite_connections import (
            SQLiteOrganizationConnectionRepository,
        )

        repository = SQLiteOrganizationConnectionRepository(app_settings.database_path)
        await repository.initialize()
        connection = await repository.get(args.connection)
        if connection is None:
            raise VectorAdminError(f"No connection with id {args.connection}")
        return connector_for(connection, **deps)

    if not args.type:
        raise VectorAdminError("Either --connection or --type is required")
    return select_connector(args.type, args.settings or "{}", **deps)


async def _build_pipeline(app_settings: Settings):  # noqa: ANN202
    from vector_admin.providers.cache.file_vector_cache import FileVectorCacheStore
    from vector_admin.providers.persistence.sqlite_document_vectors import (
        SQLiteDocumentVectorRepository,
    )
    from vector_admin.services.ingestion.pipeline import DocumentIngestionPipeline

    document_vectors = SQLiteDocumentVectorRepository(app_settings.database_path)
    await document_vectors.initialize()
    return DocumentIngestionPipeline.from_settings(
        app_settings,
        document_vectors=document_vectors,
        cache_store=FileVectorCacheStore(app_settings.vector_cache_dir),
    )


# ------------------------------------------------------------------
# Handlers
# ------------------------------------------------------------------


async def _handle_validate(args: argparse.Namespace, app_settings: Settings) -> int:
    from vector_admin.services.connector_validator import validate_connector

    result = await validate_connector(args.type, args.settings or "{}")
    if result.valid:
        print(f"{args.type}: connection is valid")
        return 0
    print(f"{args.type}: {result.message}", file=sys.stderr)
    return 1


async def _handle_register(args: argparse.Namespace, app_settings: Settings) -> int:
    from vector_admin.providers.persistence.sqlite_connections import (
        SQLiteOrganizationConnectionRepository,
    )
    from vector_admin.services.connector_registration import ConnectorRegistrationService

    repository = SQLiteOrganizationConnectionRepository(app_settings.database_path)
    await repository.initialize()
    service = ConnectorRegistrationService(repository)
    result = await service.register(args.org, args.type, args.settings or "{}")
    if result.connector is None:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    print(f"Registered {result.connector.type.value} connection id={result.connector.id}")
    return 0


async def _handle_heartbeat(args: argparse.Namespace, app_settings: Settings) -> int:
    connector = await _load_connector(args, app_settings)
    result = await connector.heartbeat()
    if result.result:
        print(f"{connector.get_provider_name()}: alive")
        return 0
    print(f"{connector.get_provider_name()}: unreachable ({result.error})", file=sys.stderr)
    return 1


async def _handle_namespaces(args: argparse.Namespace, app_settings: Settings) -> int:
    connector = await _load_connector(args, app_settings)
    namespaces = await connector.namespaces()
    total = await connector.total_indicies()
    print(f"{connector.get_provider_name()} namespaces")
    print("=" * 40)
    for info in namespaces:
        print(f"  {info.name:<30} {info.count}")
    print(f"\n  Total vectors: {total.result}")
    return 0


async def _handle_ingest(args: argparse.Namespace, app_settings: Settings) -> int:
    from vector_admin.models.vectors import WorkspaceDocument

    path = Path(args.file)
    text = path.read_text(encoding="utf-8")
    pipeline = await _build_pipeline(app_settings)
    connector = await _load_connector(args, app_settings, pipeline=pipeline)

    doc_id = args.doc_id or path.stem
    workspace_document = WorkspaceDocument(
        id=args.document_id,
        doc_id=doc_id,
        name=path.name,
        workspace_id=args.workspace_id,
        organization_id=connector.connection.organization_id,
    )
    print(f"Ingesting {path.name} into {args.namespace} ({connector.get_provider_name()})")
    result = await connector.process_document(
        args.namespace,
        {"pageContent": text, "id": doc_id, "title": path.name},
        app_settings.openai_api_key,
        workspace_document,
    )
    if not result.success:
        print(f"Error: {result.message} ({result.vector_count} vectors inserted)", file=sys.stderr)
        return 1
    print(f"  Vectors inserted: {result.vector_count}")
    print(f"  Cache artifact:   {workspace_document.vector_filename()}")
    return 0


async def _handle_search(args: argparse.Namespace, app_settings: Settings) -> int:
    from vector_admin.providers.embedding.openai_embedding_provider import (
        OpenAIEmbeddingProvider,
    )

    embedder = OpenAIEmbeddingProvider(app_settings)
    query_vector = await embedder.embed_single(args.query)
    if not query_vector:
        print("Error: could not embed query", file=sys.stderr)
        return 1

    connector = await _load_connector(args, app_settings)
    response = await connector.similarity_response(args.namespace, query_vector, args.top_k)
    if not len(response):
        print("No results.")
        return 0
    for vector_id, text, score in zip(response.vector_ids, response.context_texts, response.scores):
        preview = text.replace("\n", " ")[:100]
        print(f"  {score:.3f}  {vector_id}  {preview}")
    return 0


_HANDLERS = {
    "validate": _handle_validate,
    "register": _handle_register,
    "heartbeat": _handle_heartbeat,
    "namespaces": _handle_namespaces,
    "ingest": _handle_ingest,
    "search": _handle_search,
}


def _add_connection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--connection", type=int, default=None, help="Stored connection id")
    parser.add_argument("--type", default=None, help="Backend type for an ad-hoc connection")
    parser.add_argument("--settings", default=None, help="Backend settings as JSON")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the connector CLI."""
    parser = argparse.ArgumentParser(
        prog="vector-admin",
        description="Validate, register and exercise vector database connections.",
    )
    sub = parser.add_subparsers(dest="command")

    validate = sub.add_parser("validate", help="Probe a backend configuration")
    validate.add_argument("--type", required=True)
    validate.add_argument("--settings", default=None)

    register = sub.add_parser("register", help="Validate and store a connection")
    register.add_argument("--org", type=int, required=True, help="Organization id")
    register.add_argument("--type", required=True)
    register.add_argument("--settings", default=None)

    _add_connection_args(sub.add_parser("heartbeat", help="Check a connection is reachable"))
    _add_connection_args(sub.add_parser("namespaces", help="List namespaces and sizes"))

    ingest = sub.add_parser("ingest", help="Ingest a plain-text file")
    _add_connection_args(ingest)
    ingest.add_argument("--namespace", required=True)
    ingest.add_argument("--file", required=True)
    ingest.add_argument("--doc-id", default=None, help="Document key (default: file stem)")
    ingest.add_argument("--document-id", type=int, required=True)
    ingest.add_argument("--workspace-id", type=int, required=True)

    search = sub.add_parser("search", help="Similarity search a namespace")
    _add_connection_args(search)
    search.add_argument("--namespace", required=True)
    search.add_argument("--query", required=True)
    search.add_argument("--top-k", type=int, default=4)

    return parser


def run(argv: list[str] | None = None) -> int:
    """Parse *argv*, dispatch the subcommand and return its exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    app_settings = Settings()
    try:
        return asyncio.run(_HANDLERS[args.command](args, app_settings))
    except (VectorAdminError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def main() -> None:
    """CLI entry point.  Logging is configured once per process, here."""
    app_settings = Settings()
    configure_logging(app_settings.log_level, app_env=app_settings.app_env)
    sys.exit(run())


if __name__ == "__main__":
    main()
