"""
Retrieval API endpoints.

Routes:
- POST /retrieval/documents - Top-k chunks for a query
- POST /retrieval/prepare-context - Rendered context block for a query

Dependencies: rag_backend.application.services, rag_backend.models
System role: Retrieval HTTP API
"""

from fastapi import APIRouter, Depends

from rag_backend.api.deps import get_retrieval_service
from rag_backend.api.routers.error_handling import handle_service_errors
from rag_backend.application.services import RetrievalService
from rag_backend.boundary.vdb import VectorSearchResult
from rag_backend.models.retrieval import ContextResponse, RetrieveDocumentsRequest

router = APIRouter(prefix="/retrieval", tags=["retrieval"])


@router.post("/documents", response_model=list[VectorSearchResult])
@handle_service_errors
async def retrieve_documents(
    request: RetrieveDocumentsRequest,
    retrieval_service: RetrievalService = Depends(get_retrieval_service),
) -> list[VectorSearchResult]:
    """Embed the query and return the top-k chunks of the tenant."""
    return await retrieval_service.retrieve(
        request.bot_id,
        request.query,
        k=request.k,
        similarity_threshold=request.similarity_threshold,
    )


@router.post("/prepare-context", response_model=ContextResponse)
@handle_service_errors
async def prepare_context(
    request: RetrieveDocumentsRequest,
    retrieval_service: RetrievalService = Depends(get_retrieval_service),
) -> ContextResponse:
    """Embed the query and render the top-k chunks as a context block."""
    context = await retrieval_service.prepare_context(
        request.bot_id,
        request.query,
        k=request.k,
        similarity_threshold=request.similarity_threshold,
    )
    return ContextResponse(context=context)
