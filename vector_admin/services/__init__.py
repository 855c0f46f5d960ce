"""Application services: connector validation, registration and ingestion."""
