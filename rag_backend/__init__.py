"""Tenant-scoped retrieval backend: embeddings, vector storage, similarity search, context assembly."""

__version__ = "0.1.0"
