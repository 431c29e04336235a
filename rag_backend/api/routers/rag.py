"""
RAG API endpoints.

Routes:
- POST /rag/query - Context and sources for a question
- POST /rag/context - Annotated context only

Both routes answer with HTTP 200 and a user-facing message when retrieval
fails; the failure is reported in ``error``.

Dependencies: rag_backend.application.services, rag_backend.models
System role: RAG HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from rag_backend.api.deps import get_rag_service
from rag_backend.api.routers.error_handling import handle_service_errors
from rag_backend.application.services import RagService
from rag_backend.models.rag import RagQueryRequest, RagResponse, RelevantDocumentsResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rag", tags=["rag"])


@router.post("/query", response_model=RagResponse)
@handle_service_errors
async def query_rag(
    request: RagQueryRequest,
    rag_service: RagService = Depends(get_rag_service),
) -> RagResponse:
    """Retrieve context and sources for a question."""
    logger.info("RAG query request", extra={"bot_id": request.bot_id})
    return await rag_service.answer(request.bot_id, request.query, request.max_results)


@router.post(
    "/context",
    response_model=RelevantDocumentsResponse,
    response_model_exclude_none=True,
)
@handle_service_errors
async def relevant_documents(
    request: RagQueryRequest,
    rag_service: RagService = Depends(get_rag_service),
) -> RelevantDocumentsResponse:
    """Return ``{query, context}`` or ``{query, error}``."""
    return await rag_service.retrieve_relevant_documents(
        request.bot_id,
        request.query,
        request.max_results,
    )
