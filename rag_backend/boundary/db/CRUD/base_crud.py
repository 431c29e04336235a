"""
Generic async CRUD helpers.

Writes only flush; committing is the caller's decision, so several CRUD
calls can share one transaction (the vector store commits once per
logical operation).

Dependencies: sqlalchemy
System role: Shared persistence primitives for model-specific CRUD classes
"""

from typing import Any, Generic, Iterable, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rag_backend.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Create/read operations bound to one model class.

    Type Parameters:
        ModelT: Mapped class with a UUID ``id`` column
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **values: Any) -> ModelT:
        """
        Insert one row and reload it so server-side values are populated.

        Args:
            session: Async database session
            **values: Column values

        Returns:
            The flushed instance
        """
        instance = self.model(**values)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def create_many(
        self,
        session: AsyncSession,
        rows: Iterable[dict[str, Any]],
    ) -> list[ModelT]:
        """
        Insert several rows with a single flush.

        Nothing is flushed if building any instance fails.

        Returns:
            Instances in the order of ``rows``
        """
        instances = [self.model(**values) for values in rows]
        session.add_all(instances)
        await session.flush()
        return instances

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        """Fetch by primary key, or None."""
        result = await session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()
