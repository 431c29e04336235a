"""Boundary adapters: database, embedding API and vector store."""
