"""
RAG answer assembler.

Turns a question into a structured response: the retrieved context and
per-chunk sources. Answer text is produced by the downstream consumer, so
``answer`` carries either a fixed notice or a user-facing recovery message.
Failures never propagate to the caller; they become messages plus ``error``.

Dependencies: rag_backend.application.services.retrieval_service
System role: RAG response assembly
"""

import logging

from rag_backend.application.services.retrieval_service import RetrievalService
from rag_backend.boundary.vdb.vector_schemas import VectorSearchResult
from rag_backend.core.exceptions import (
    EmbeddingNotConfiguredError,
    EmbeddingProviderError,
    EmptyVectorError,
    RagBackendException,
)
from rag_backend.models.rag import RagResponse, RagSource, RelevantDocumentsResponse
from rag_backend.observability.log_utils import preview_text

logger = logging.getLogger(__name__)

EMPTY_QUESTION_ANSWER = "The question must not be empty. Please provide the question text."
NO_RESULTS_ANSWER = "No relevant information was found in the documents to answer this question."
UNAVAILABLE_ANSWER = "Sorry, the question cannot be processed right now. Please try again later."
NOT_CONFIGURED_ANSWER = "The embedding provider is not configured. Please contact the administrator."
UNEXPECTED_ERROR_ANSWER = "Sorry, an error occurred while processing the question. Please try again later."
DELEGATED_ANSWER = (
    "Answer generation is performed by the downstream consumer. "
    "Use the returned context and sources to build the final answer."
)

PREVIEW_LENGTH = 150


def build_source(result: VectorSearchResult) -> RagSource:
    """Provenance entry for one retrieved chunk."""
    metadata = result.metadata or {}
    return RagSource(
        document_id=str(metadata.get("documentId") or result.document_id or "unknown"),
        source=str(metadata.get("source") or "unknown"),
        similarity=result.score,
        text_preview=preview_text(result.text, PREVIEW_LENGTH),
    )


class RagService:
    """
    RAG answer assembler.

    Wraps RetrievalService with user-facing recovery for every failure
    mode of the retrieval path.
    """

    def __init__(self, retrieval_service: RetrievalService, similarity_threshold: float) -> None:
        """
        Initialize RAG service.

        Args:
            retrieval_service: Request-scoped retrieval orchestrator
            similarity_threshold: Minimum score for retrieved chunks
        """
        self.retrieval_service = retrieval_service
        self.similarity_threshold = similarity_threshold

    async def _search(self, bot_id: int, query: str, max_results: int) -> list[VectorSearchResult]:
        return await self.retrieval_service.retrieve(
            bot_id,
            query,
            k=max_results,
            similarity_threshold=self.similarity_threshold,
        )

    async def answer(self, bot_id: int, query: str, max_results: int = 5) -> RagResponse:
        """
        Assemble context and sources for a question.

        Args:
            bot_id: Tenant scope
            query: User question
            max_results: Maximum chunks to retrieve

        Returns:
            RagResponse: Notice plus context and sources, or a recovery message
        """
        logger.info(
            f"{__name__}:answer - Processing query {preview_text(query or '', 80)!r}",
            extra={"bot_id": bot_id, "max_results": max_results},
        )

        if not query or not query.strip():
            return RagResponse(query=query or "", answer=EMPTY_QUESTION_ANSWER)

        try:
            results = await self._search(bot_id, query, max_results)
        except EmbeddingNotConfiguredError as e:
            logger.error(f"{__name__}:answer - {e.message}", extra={"bot_id": bot_id})
            return RagResponse(query=query, answer=NOT_CONFIGURED_ANSWER, error=e.message)
        except (EmptyVectorError, EmbeddingProviderError) as e:
            logger.error(
                f"{__name__}:answer - Retrieval failed: {e.message}",
                extra={"bot_id": bot_id, "error_type": type(e).__name__},
            )
            return RagResponse(query=query, answer=UNAVAILABLE_ANSWER, error=e.message)
        except RagBackendException as e:
            logger.error(
                f"{__name__}:answer - {type(e).__name__}: {e.message}",
                extra={"bot_id": bot_id},
            )
            return RagResponse(query=query, answer=UNEXPECTED_ERROR_ANSWER, error=e.message)

        if not results:
            logger.warning(f"{__name__}:answer - No similar chunks", extra={"bot_id": bot_id})
            return RagResponse(query=query, answer=NO_RESULTS_ANSWER)

        for index, result in enumerate(results, start=1):
            logger.debug(
                f"[Chunk {index}] similarity={result.score:.4f} text={preview_text(result.text)!r}"
            )

        context = "\n\n".join(
            f"[Chunk {index}] {result.text}" for index, result in enumerate(results, start=1)
        )
        return RagResponse(
            query=query,
            answer=DELEGATED_ANSWER,
            context=context,
            sources=[build_source(result) for result in results],
        )

    async def retrieve_relevant_documents(
        self,
        bot_id: int,
        query: str,
        max_results: int = 5,
    ) -> RelevantDocumentsResponse:
        """
        Context-only variant of answer(): ``{query, context}`` or ``{query, error}``.

        Context blocks are annotated with source and similarity percentage.
        """
        if not query or not query.strip():
            return RelevantDocumentsResponse(query=query or "", error=EMPTY_QUESTION_ANSWER)

        try:
            results = await self._search(bot_id, query, max_results)
        except RagBackendException as e:
            logger.error(
                f"{__name__}:retrieve_relevant_documents - {type(e).__name__}: {e.message}",
                extra={"bot_id": bot_id},
            )
            return RelevantDocumentsResponse(query=query, error=e.message)

        if not results:
            return RelevantDocumentsResponse(query=query)

        context = "\n\n".join(
            f"[Chunk {index}] (Source: {(result.metadata or {}).get('source') or 'unknown'}, "
            f"Similarity: {result.score * 100:.2f}%)\n{result.text}"
            for index, result in enumerate(results, start=1)
        )
        return RelevantDocumentsResponse(query=query, context=context)
