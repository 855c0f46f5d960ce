"""Shared utilities: errors, logging, batching and score normalization."""
