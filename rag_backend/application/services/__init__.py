"""Service orchestrators."""

from .rag_service import RagService
from .retrieval_service import RetrievalService, render_context

__all__ = [
    "RagService",
    "RetrievalService",
    "render_context",
]
