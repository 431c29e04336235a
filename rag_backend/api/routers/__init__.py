"""API routers."""

from .health import router as health_router
from .rag import router as rag_router
from .retrieval import router as retrieval_router
from .vector_store import router as vector_store_router

__all__ = [
    "health_router",
    "rag_router",
    "retrieval_router",
    "vector_store_router",
]
