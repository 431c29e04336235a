"""
ASGI application for the retrieval backend.

Wires the versioned API under /api/v1, the tracing middleware and CORS,
and owns startup/shutdown of shared resources.

Dependencies: fastapi, uvicorn, rag_backend.api, rag_backend.observability, rag_backend.configs
System role: Process entry point
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rag_backend import __version__
from rag_backend.api import api_router
from rag_backend.api.deps import get_service_cache
from rag_backend.boundary.db import dispose_engine
from rag_backend.configs import get_settings
from rag_backend.observability.logger import configure_logging
from rag_backend.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Configure logging on startup; close the embedding HTTP client and the
    database engine on shutdown.
    """
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(
        "Application startup: logging configured",
        extra={
            "environment": settings.environment,
            "embedding_provider": settings.embedding.provider,
            "native_search": settings.vector_store.native_search,
        },
    )
    if not settings.embedding.api_key:
        logger.warning("EMBEDDING_API_KEY is not set; embedding endpoints will answer 503")

    yield

    # Shutdown
    await get_service_cache().aclose()
    await dispose_engine()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Build the application; tests call this to get an isolated instance."""
    app = FastAPI(
        title="RAG Retrieval API",
        description="Tenant-scoped chunk storage, similarity search and context assembly",
        version=__version__,
        lifespan=lifespan,
    )

    # Added first = innermost; correlation id is set before requests are logged
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rag_backend.main:app",
        host="0.0.0.0",
        port=8000,
    )
