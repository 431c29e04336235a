"""
Chunk CRUD operations.

Provides tenant- and document-scoped queries over ChunkModel:
loading a tenant's chunks for in-process scans, bulk delete and
count by document.

Dependencies: sqlalchemy, rag_backend.boundary.db.models.chunk_model
System role: Chunk persistence operations
"""

from typing import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rag_backend.boundary.db.models.chunk_model import ChunkModel
from rag_backend.boundary.db.CRUD.base_crud import BaseCRUD


class ChunkCRUD(BaseCRUD[ChunkModel]):
    """
    CRUD operations for ChunkModel.

    Extends BaseCRUD with queries filtered by bot_id and document_id.
    """

    def __init__(self) -> None:
        """Initialize ChunkCRUD with ChunkModel."""
        super().__init__(ChunkModel)

    async def get_by_bot_id(
        self,
        session: AsyncSession,
        bot_id: int,
    ) -> Sequence[ChunkModel]:
        """
        Retrieve every chunk of a tenant in insertion order.

        Args:
            session: Async database session
            bot_id: Tenant scope

        Returns:
            Sequence of ChunkModels ordered by created_at
        """
        stmt = (
            select(ChunkModel)
            .where(ChunkModel.bot_id == bot_id)
            .order_by(ChunkModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_by_document_id(
        self,
        session: AsyncSession,
        document_id: str,
        bot_id: int | None = None,
    ) -> int:
        """
        Delete all chunks of a document.

        Args:
            session: Async database session
            document_id: Source document identifier
            bot_id: Restrict the delete to one tenant when given

        Returns:
            Number of rows deleted
        """
        stmt = delete(ChunkModel).where(ChunkModel.document_id == document_id)
        if bot_id is not None:
            stmt = stmt.where(ChunkModel.bot_id == bot_id)
        result = await session.execute(stmt)
        return result.rowcount or 0

    async def count_by_document_id(
        self,
        session: AsyncSession,
        document_id: str,
        bot_id: int | None = None,
    ) -> int:
        """
        Count chunks of a document.

        Args:
            session: Async database session
            document_id: Source document identifier
            bot_id: Restrict the count to one tenant when given

        Returns:
            Number of matching chunks
        """
        stmt = select(func.count()).select_from(ChunkModel).where(
            ChunkModel.document_id == document_id
        )
        if bot_id is not None:
            stmt = stmt.where(ChunkModel.bot_id == bot_id)
        result = await session.execute(stmt)
        return int(result.scalar_one())


chunk_crud = ChunkCRUD()
