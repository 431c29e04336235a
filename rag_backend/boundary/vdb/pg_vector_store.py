"""
PostgreSQL chunk store with similarity search.

Persists text chunks with their embeddings in the ``vector_chunk`` table and
answers tenant-scoped similarity queries. Thresholded search prefers the
pgvector ``<=>`` operator and falls back to an exact in-process scan when the
operator is unavailable; unthresholded similarity_search always scans.

Dependencies: sqlalchemy, rag_backend.boundary.db, rag_backend.boundary.vdb.search_strategies
System role: Vector persistence and retrieval (PostgreSQL / pgvector)
"""

import logging
from typing import Any, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rag_backend.boundary.db.CRUD.chunk_crud import chunk_crud
from rag_backend.boundary.db.models.chunk_model import ChunkModel
from rag_backend.boundary.vdb.search_strategies import (
    SearchStrategySelector,
    dimension_mismatch_from_error,
    is_vector_operator_error,
)
from rag_backend.boundary.vdb.vector_schemas import ChunkInput, VectorSearchResult
from rag_backend.configs.vector_store import VectorStoreSettings
from rag_backend.core.exceptions import DimensionMismatchError, ValidationError, VectorStoreError
from rag_backend.core.vectors import coerce_vector

logger = logging.getLogger(__name__)


class PgVectorStore:
    """
    Tenant-scoped chunk store over an AsyncSession.

    A store instance lives for one request (one session). The strategy
    selector is shared between instances so the pgvector capability probe
    and its fallback decision are made once per process.
    """

    def __init__(
        self,
        db: AsyncSession,
        settings: VectorStoreSettings,
        selector: SearchStrategySelector | None = None,
    ) -> None:
        """
        Initialize vector store.

        Args:
            db: Async database session
            settings: Search defaults and invalid element policy
            selector: Shared strategy selector; a private one is created if None
        """
        self.db = db
        self.settings = settings
        self.selector = selector or SearchStrategySelector(native_enabled=settings.native_search)

    def _validate_chunk(
        self,
        text: str,
        embedding: Any,
    ) -> list[float]:
        if not text or not text.strip():
            raise ValidationError("Chunk text must not be empty", field="text")
        return coerce_vector(embedding, policy=self.settings.invalid_element_policy)

    async def _commit(self, operation: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise VectorStoreError(f"Failed to {operation}: {e}", operation=operation) from e

    async def save(
        self,
        bot_id: int,
        document_id: str,
        text: str,
        embedding: Any,
        metadata: dict[str, Any] | None = None,
        filename: str | None = None,
    ) -> ChunkModel:
        """
        Persist one chunk.

        Args:
            bot_id: Tenant scope
            document_id: Source document identifier
            text: Chunk text (non-empty)
            embedding: Non-empty numeric vector
            metadata: Optional provenance metadata
            filename: Optional original file name

        Returns:
            ChunkModel: Stored chunk with id and timestamps

        Raises:
            EmptyVectorError: Missing or empty embedding
            ValidationError: Empty text, or non-numeric element under the "reject" policy
            VectorStoreError: Database failure
        """
        vector = self._validate_chunk(text, embedding)

        try:
            chunk = await chunk_crud.create(
                self.db,
                bot_id=bot_id,
                document_id=document_id,
                filename=filename,
                text=text,
                embedding=vector,
                chunk_metadata=metadata,
            )
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"{__name__}:save - {type(e).__name__}: {e}")
            raise VectorStoreError(f"Failed to save chunk: {e}", operation="save") from e
        await self._commit("save chunk")

        logger.info(
            f"{__name__}:save - Stored chunk {chunk.id}",
            extra={"bot_id": bot_id, "document_id": document_id, "dims": len(vector)},
        )
        return chunk

    async def save_batch(self, chunks: Sequence[ChunkInput]) -> list[ChunkModel]:
        """
        Persist several chunks as one unit.

        Every item is validated before anything is written; one invalid item
        rejects the whole batch.

        Args:
            chunks: Chunks to store

        Returns:
            list[ChunkModel]: Stored chunks in input order

        Raises:
            EmptyVectorError: An item has a missing or empty embedding
            ValidationError: An item has empty text or a rejected element
            VectorStoreError: Database failure (nothing is stored)
        """
        rows: list[dict[str, Any]] = []
        for index, chunk in enumerate(chunks):
            try:
                vector = self._validate_chunk(chunk.text, chunk.embedding)
            except ValidationError as e:
                e.details.setdefault("index", index)
                raise
            rows.append(
                {
                    "bot_id": chunk.bot_id,
                    "document_id": chunk.document_id,
                    "filename": chunk.filename,
                    "text": chunk.text,
                    "embedding": vector,
                    "chunk_metadata": chunk.metadata,
                }
            )

        if not rows:
            return []

        try:
            stored = await chunk_crud.create_many(self.db, rows)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"{__name__}:save_batch - {type(e).__name__}: {e}")
            raise VectorStoreError(f"Failed to save chunks: {e}", operation="save_batch") from e
        await self._commit("save chunks")

        logger.info(f"{__name__}:save_batch - Stored {len(stored)} chunks")
        return stored

    async def delete_by_document_id(self, document_id: str, bot_id: int | None = None) -> int:
        """
        Delete every chunk of a document.

        Args:
            document_id: Source document identifier
            bot_id: Restrict to one tenant when given

        Returns:
            int: Number of chunks deleted
        """
        try:
            deleted = await chunk_crud.delete_by_document_id(self.db, document_id, bot_id)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise VectorStoreError(f"Failed to delete chunks: {e}", operation="delete") from e
        await self._commit("delete chunks")

        logger.info(
            f"{__name__}:delete_by_document_id - Deleted {deleted} chunks",
            extra={"document_id": document_id, "bot_id": bot_id},
        )
        return deleted

    async def count_by_document_id(self, document_id: str, bot_id: int | None = None) -> int:
        """
        Count chunks of a document.

        Args:
            document_id: Source document identifier
            bot_id: Restrict to one tenant when given

        Returns:
            int: Number of chunks
        """
        try:
            return await chunk_crud.count_by_document_id(self.db, document_id, bot_id)
        except SQLAlchemyError as e:
            raise VectorStoreError(f"Failed to count chunks: {e}", operation="count") from e

    async def search(
        self,
        bot_id: int,
        query_embedding: Any,
        k: int | None = None,
        similarity_threshold: float | None = None,
    ) -> list[VectorSearchResult]:
        """
        Thresholded top-k search, native operator first.

        Args:
            bot_id: Tenant scope
            query_embedding: Non-empty query vector
            k: Maximum results (default from settings)
            similarity_threshold: Keep scores strictly above this (default from settings)

        Returns:
            list[VectorSearchResult]: Results, highest score first

        Raises:
            EmptyVectorError: Missing or empty query embedding
            DimensionMismatchError: Stored and query dimensions differ
            VectorStoreError: Database failure other than a missing operator
        """
        vector = coerce_vector(query_embedding, policy=self.settings.invalid_element_policy)
        k = k if k is not None else self.settings.top_k
        threshold = (
            similarity_threshold
            if similarity_threshold is not None
            else self.settings.similarity_threshold
        )

        strategy = await self.selector.select(self.db)
        used = strategy.name
        try:
            results = await strategy.search(self.db, bot_id, vector, k, threshold)
        except SQLAlchemyError as e:
            dimensions = dimension_mismatch_from_error(e)
            if dimensions is not None:
                raise DimensionMismatchError(*dimensions) from e
            if strategy is self.selector.fallback or not is_vector_operator_error(e):
                logger.error(f"{__name__}:search - {type(e).__name__}: {e}")
                raise VectorStoreError(f"Similarity search failed: {e}", operation="search") from e

            logger.warning(
                f"{__name__}:search - Vector operator unavailable, using in-process scan",
                extra={"bot_id": bot_id, "error": str(getattr(e, "orig", e))[:200]},
            )
            self.selector.mark_native_unavailable()
            vector = coerce_vector(vector, policy="reject", field="queryEmbedding")
            results = await self._scan(bot_id, vector, k, threshold)
            used = self.selector.fallback.name

        logger.info(
            f"{__name__}:search - Found {len(results)} results",
            extra={"bot_id": bot_id, "k": k, "threshold": threshold, "strategy": used},
        )
        return results

    async def similarity_search(
        self,
        bot_id: int,
        query_embedding: Any,
        k: int | None = None,
    ) -> list[VectorSearchResult]:
        """
        Unthresholded top-k search by exact in-process scan.

        Args:
            bot_id: Tenant scope
            query_embedding: Non-empty query vector
            k: Maximum results (default from settings)

        Returns:
            list[VectorSearchResult]: Results, highest score first

        Raises:
            EmptyVectorError: Missing or empty query embedding
            DimensionMismatchError: Stored and query dimensions differ
        """
        vector = coerce_vector(query_embedding, policy=self.settings.invalid_element_policy)
        k = k if k is not None else self.settings.top_k
        results = await self._scan(bot_id, vector, k, None)
        logger.info(
            f"{__name__}:similarity_search - Found {len(results)} results",
            extra={"bot_id": bot_id, "k": k},
        )
        return results

    async def _scan(
        self,
        bot_id: int,
        vector: list[float],
        k: int,
        threshold: float | None,
    ) -> list[VectorSearchResult]:
        try:
            return await self.selector.fallback.search(self.db, bot_id, vector, k, threshold)
        except SQLAlchemyError as e:
            raise VectorStoreError(f"Similarity search failed: {e}", operation="search") from e
