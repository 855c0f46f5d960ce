"""Document ingestion: text splitting and the shared embed-and-record pipeline."""

from vector_admin.services.ingestion.pipeline import DocumentIngestionPipeline
from vector_admin.services.ingestion.text_splitter import RecursiveCharacterTextSplitter

__all__ = ["DocumentIngestionPipeline", "RecursiveCharacterTextSplitter"]
