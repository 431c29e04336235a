"""
Test suite for ChunkCRUD database operations.

Runs against the in-memory SQLite database from conftest.

System role: Verification of chunk persistence layer
"""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from rag_backend.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud
from rag_backend.boundary.db.models.chunk_model import ChunkModel


async def add_chunk(
    session: AsyncSession,
    bot_id: int,
    document_id: str,
    text: str = "chunk text",
    embedding: list[float] | None = None,
) -> ChunkModel:
    return await chunk_crud.create(
        session,
        bot_id=bot_id,
        document_id=document_id,
        text=text,
        embedding=embedding or [1.0, 0.0],
        chunk_metadata={"source": "test"},
    )


class TestChunkCRUDInit:
    """Test suite for ChunkCRUD initialization."""

    def test_init_should_set_model_to_chunk_model(self) -> None:
        assert ChunkCRUD().model == ChunkModel


class TestChunkCRUDCreate:
    """Test suite for create() and create_many()."""

    @pytest.mark.asyncio
    async def test_create_should_assign_id_and_timestamps(self, test_async_db: AsyncSession) -> None:
        chunk = await add_chunk(test_async_db, 1, "D1", embedding=[0.1, 0.2, 0.3])

        assert chunk.id is not None
        assert chunk.created_at is not None
        assert chunk.embedding == [0.1, 0.2, 0.3]
        assert chunk.chunk_metadata == {"source": "test"}

    @pytest.mark.asyncio
    async def test_create_many_should_keep_input_order(self, test_async_db: AsyncSession) -> None:
        rows = [
            {"bot_id": 1, "document_id": "D1", "text": f"t{i}", "embedding": [float(i)]}
            for i in range(3)
        ]

        created = await chunk_crud.create_many(test_async_db, rows)

        assert [chunk.text for chunk in created] == ["t0", "t1", "t2"]
        assert all(chunk.id is not None for chunk in created)


class TestChunkCRUDQueries:
    """Test suite for tenant/document scoped queries."""

    @pytest.mark.asyncio
    async def test_get_by_bot_id_should_only_return_tenant_chunks(
        self, test_async_db: AsyncSession
    ) -> None:
        await add_chunk(test_async_db, 1, "D1", text="mine")
        await add_chunk(test_async_db, 2, "D1", text="theirs")

        chunks = await chunk_crud.get_by_bot_id(test_async_db, 1)

        assert [chunk.text for chunk in chunks] == ["mine"]

    @pytest.mark.asyncio
    async def test_count_by_document_id_should_honour_optional_bot_scope(
        self, test_async_db: AsyncSession
    ) -> None:
        await add_chunk(test_async_db, 1, "D1")
        await add_chunk(test_async_db, 1, "D1")
        await add_chunk(test_async_db, 2, "D1")
        await add_chunk(test_async_db, 1, "D2")

        assert await chunk_crud.count_by_document_id(test_async_db, "D1") == 3
        assert await chunk_crud.count_by_document_id(test_async_db, "D1", bot_id=1) == 2
        assert await chunk_crud.count_by_document_id(test_async_db, "missing") == 0

    @pytest.mark.asyncio
    async def test_delete_by_document_id_with_bot_should_spare_other_tenants(
        self, test_async_db: AsyncSession
    ) -> None:
        await add_chunk(test_async_db, 1, "D1")
        await add_chunk(test_async_db, 2, "D1")

        deleted = await chunk_crud.delete_by_document_id(test_async_db, "D1", bot_id=1)

        assert deleted == 1
        assert await chunk_crud.count_by_document_id(test_async_db, "D1", bot_id=2) == 1

    @pytest.mark.asyncio
    async def test_delete_by_document_id_without_bot_should_remove_all(
        self, test_async_db: AsyncSession
    ) -> None:
        await add_chunk(test_async_db, 1, "D1")
        await add_chunk(test_async_db, 2, "D1")
        await add_chunk(test_async_db, 1, "D2")

        deleted = await chunk_crud.delete_by_document_id(test_async_db, "D1")

        assert deleted == 2
        assert await chunk_crud.count_by_document_id(test_async_db, "D2") == 1


class TestChunkCRUDGetByID:
    """Test suite for get_by_id()."""

    @pytest.mark.asyncio
    async def test_get_by_id_should_return_stored_chunk(self, test_async_db: AsyncSession) -> None:
        chunk = await add_chunk(test_async_db, 1, "D1", text="findable")

        found = await chunk_crud.get_by_id(test_async_db, chunk.id)

        assert found is not None
        assert found.text == "findable"

    @pytest.mark.asyncio
    async def test_get_by_id_should_return_none_for_unknown_id(
        self, test_async_db: AsyncSession
    ) -> None:
        assert await chunk_crud.get_by_id(test_async_db, uuid.uuid4()) is None
