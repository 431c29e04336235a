"""
Retrieval service orchestrator.

Embeds a query, runs tenant-scoped similarity search and renders the
ranked chunks into a context block for a downstream language model.

Dependencies: rag_backend.boundary.embedding, rag_backend.boundary.vdb
System role: Retrieval orchestration
"""

import logging

from rag_backend.boundary.embedding.provider import EmbeddingProvider
from rag_backend.boundary.vdb.pg_vector_store import PgVectorStore
from rag_backend.boundary.vdb.vector_schemas import VectorSearchResult
from rag_backend.core.exceptions import ValidationError
from rag_backend.core.vectors import require_vector
from rag_backend.observability.log_utils import preview_text

logger = logging.getLogger(__name__)


def render_context(results: list[VectorSearchResult]) -> str:
    """
    Render ranked results as numbered, attributed blocks.

    Returns:
        str: ``"[Document N from <file>]: <text>"`` blocks joined by blank lines,
        or ``""`` when there are no results
    """
    return "\n\n".join(
        f"[Document {index} from {result.display_name}]: {result.text}"
        for index, result in enumerate(results, start=1)
    )


class RetrievalService:
    """
    Retrieval service orchestrator.

    Coordinates the embedding provider and vector store for one request.
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        vector_store: PgVectorStore,
    ) -> None:
        """
        Initialize retrieval service.

        Args:
            embedding_provider: Provider used to embed query text
            vector_store: Request-scoped vector store
        """
        self.embedding_provider = embedding_provider
        self.vector_store = vector_store

    async def retrieve(
        self,
        bot_id: int,
        query_text: str,
        k: int = 5,
        similarity_threshold: float | None = None,
    ) -> list[VectorSearchResult]:
        """
        Retrieve the top-k chunks for a query.

        Without a threshold every chunk is ranked by exact scan; with one,
        the thresholded two-tier search is used.

        Args:
            bot_id: Tenant scope
            query_text: Natural-language query
            k: Maximum results
            similarity_threshold: Optional minimum score (exclusive)

        Returns:
            list[VectorSearchResult]: Results, highest score first

        Raises:
            ValidationError: Empty query text
            EmptyVectorError: Provider returned an empty embedding
            EmbeddingProviderError: Embedding API failure
        """
        if not query_text or not query_text.strip():
            raise ValidationError("Query text must not be empty", field="query")

        logger.info(
            f"{__name__}:retrieve - Query {preview_text(query_text, 80)!r}",
            extra={"bot_id": bot_id, "k": k, "threshold": similarity_threshold},
        )

        query_embedding = await self.embedding_provider.embed(query_text)
        require_vector(query_embedding, field="queryEmbedding")

        if similarity_threshold is None:
            return await self.vector_store.similarity_search(bot_id, query_embedding, k)
        return await self.vector_store.search(bot_id, query_embedding, k, similarity_threshold)

    async def prepare_context(
        self,
        bot_id: int,
        query_text: str,
        k: int = 5,
        similarity_threshold: float | None = None,
    ) -> str:
        """
        Retrieve chunks and render them as a context block.

        The threshold is passed to retrieve(); None ranks without one.

        Returns:
            str: Rendered context, ``""`` when nothing was retrieved
        """
        results = await self.retrieve(
            bot_id, query_text, k=k, similarity_threshold=similarity_threshold
        )
        context = render_context(results)
        logger.debug(
            f"{__name__}:prepare_context - {len(results)} chunks, {len(context)} chars",
            extra={"bot_id": bot_id},
        )
        return context
