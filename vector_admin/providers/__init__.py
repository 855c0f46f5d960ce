"""Concrete adapters for the interfaces in :mod:`vector_admin.interfaces`."""
