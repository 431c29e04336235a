"""
API routes module.

FastAPI routers for all HTTP endpoints.
"""

from fastapi import APIRouter

from .routers import (
    health_router,
    rag_router,
    retrieval_router,
    vector_store_router,
)

api_router = APIRouter()

# Include all routers
api_router.include_router(health_router)
api_router.include_router(vector_store_router)
api_router.include_router(retrieval_router)
api_router.include_router(rag_router)

__all__ = ["api_router"]
