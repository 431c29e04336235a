"""
Similarity search strategies.

Two interchangeable ways of ranking a tenant's chunks against a query
embedding:

- NativeOperatorSearch: pgvector's cosine distance operator ``<=>``,
  evaluated in a single SQL statement inside a SAVEPOINT
- BruteForceSearch: loads every chunk of the tenant and scores it
  in-process with exact cosine similarity

SearchStrategySelector caches whether the native operator is usable and
hands out the right strategy. The capability is probed once (pg_extension
lookup on PostgreSQL, always unavailable on other dialects) and flipped
to unavailable when the operator fails at runtime.

Dependencies: sqlalchemy, rag_backend.boundary.db
System role: Ranking backends for the vector store
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Sequence

from sqlalchemy import Float, Text, cast, literal, select, text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.types import UserDefinedType

from rag_backend.boundary.db.CRUD.chunk_crud import chunk_crud
from rag_backend.boundary.db.models.chunk_model import ChunkModel
from rag_backend.boundary.vdb.vector_schemas import VectorSearchResult
from rag_backend.core.similarity import cosine_similarity
from rag_backend.core.vectors import format_pgvector

logger = logging.getLogger(__name__)

VECTOR_OPERATOR = "<=>"
DIMENSION_MISMATCH_PATTERN = re.compile(r"different vector dimensions (\d+) and (\d+)")


class PgVector(UserDefinedType):
    """pgvector ``vector`` column type, used only as a CAST target."""

    cache_ok = True

    def get_col_spec(self, **kw: Any) -> str:
        return "vector"


def _driver_message(exc: BaseException) -> str:
    source = exc.orig if isinstance(exc, DBAPIError) and exc.orig is not None else exc
    return str(source)


def is_vector_operator_error(exc: BaseException) -> bool:
    """
    Check whether a database error means the native vector operator is unusable.

    Looks at the driver message (not the rendered SQL, which always contains
    the operator) for the operator token or pgvector's missing-type error.
    """
    message = _driver_message(exc)
    return VECTOR_OPERATOR in message or 'type "vector" does not exist' in message


def dimension_mismatch_from_error(exc: BaseException) -> tuple[int, int] | None:
    """
    Extract the two dimensions from pgvector's "different vector dimensions" error.

    Returns:
        (stored, query) dimensions, or None for any other error
    """
    match = DIMENSION_MISMATCH_PATTERN.search(_driver_message(exc))
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


async def probe_native_vector_support(session: AsyncSession) -> bool:
    """
    Check whether the pgvector extension is installed.

    Returns:
        bool: True on PostgreSQL with the ``vector`` extension, False otherwise
    """
    dialect = session.get_bind().dialect.name
    if dialect != "postgresql":
        logger.info(f"Native vector search unavailable on dialect '{dialect}'")
        return False

    try:
        async with session.begin_nested():
            result = await session.execute(
                text("SELECT 1 FROM pg_extension WHERE extname = 'vector'")
            )
            available = result.first() is not None
    except SQLAlchemyError as e:
        logger.warning(
            f"pgvector capability probe failed: {type(e).__name__}",
            extra={"error": str(e)[:200]},
        )
        return False

    logger.info(f"pgvector extension {'found' if available else 'not installed'}")
    return available


def _load_metadata(raw: Any) -> dict[str, Any] | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return None
    return raw if isinstance(raw, dict) else None


def to_search_result(chunk: ChunkModel, score: float) -> VectorSearchResult:
    """Build a VectorSearchResult from a chunk row and its score."""
    return VectorSearchResult(
        id=str(chunk.id),
        document_id=chunk.document_id,
        bot_id=chunk.bot_id,
        filename=chunk.filename,
        text=chunk.text,
        score=float(score),
        metadata=_load_metadata(chunk.chunk_metadata),
    )


class SimilaritySearchStrategy(ABC):
    """Ranks a tenant's chunks by cosine similarity to a query vector."""

    name: str = "base"

    @abstractmethod
    async def search(
        self,
        session: AsyncSession,
        bot_id: int,
        query_embedding: list[float],
        k: int,
        similarity_threshold: float | None = None,
    ) -> list[VectorSearchResult]:
        """
        Return at most ``k`` results, best first.

        Args:
            session: Async database session
            bot_id: Tenant scope
            query_embedding: Validated, non-empty query vector
            k: Maximum number of results
            similarity_threshold: Keep only scores strictly above this value; None keeps all
        """


class NativeOperatorSearch(SimilaritySearchStrategy):
    """Ranking in SQL with pgvector's ``<=>`` cosine distance operator."""

    name = "native"

    async def search(
        self,
        session: AsyncSession,
        bot_id: int,
        query_embedding: list[float],
        k: int,
        similarity_threshold: float | None = None,
    ) -> list[VectorSearchResult]:
        # Bound as text and cast, so the driver never needs a vector codec
        query_vector = cast(cast(literal(format_pgvector(query_embedding)), Text), PgVector())
        distance = cast(ChunkModel.embedding, PgVector()).op(
            VECTOR_OPERATOR, return_type=Float
        )(query_vector)
        similarity = (1 - distance).label("similarity")

        stmt = select(ChunkModel, similarity).where(ChunkModel.bot_id == bot_id)
        if similarity_threshold is not None:
            stmt = stmt.where(similarity > similarity_threshold)
        stmt = stmt.order_by(similarity.desc(), ChunkModel.created_at).limit(k)

        # SAVEPOINT keeps the outer transaction usable if the operator is missing
        async with session.begin_nested():
            result = await session.execute(stmt)
            rows = result.all()

        return [to_search_result(chunk, score) for chunk, score in rows]


class BruteForceSearch(SimilaritySearchStrategy):
    """Exact in-process scan over every chunk of the tenant. O(n*d) per query."""

    name = "brute_force"

    async def search(
        self,
        session: AsyncSession,
        bot_id: int,
        query_embedding: list[float],
        k: int,
        similarity_threshold: float | None = None,
    ) -> list[VectorSearchResult]:
        chunks: Sequence[ChunkModel] = await chunk_crud.get_by_bot_id(session, bot_id)

        scored = [(cosine_similarity(query_embedding, chunk.embedding), chunk) for chunk in chunks]
        if similarity_threshold is not None:
            scored = [(score, chunk) for score, chunk in scored if score > similarity_threshold]

        # list.sort is stable, so ties keep load order
        scored.sort(key=lambda pair: pair[0], reverse=True)

        logger.debug(
            f"Brute-force scan scored {len(chunks)} chunks, {len(scored)} kept",
            extra={"bot_id": bot_id, "k": k},
        )
        return [to_search_result(chunk, score) for score, chunk in scored[:k]]


class SearchStrategySelector:
    """
    Picks the native or brute-force strategy from a cached capability flag.

    One selector is shared across requests so the probe runs once per
    process. ``mark_native_unavailable`` is called after a runtime operator
    failure and sticks until the process restarts.
    """

    def __init__(
        self,
        native: SimilaritySearchStrategy | None = None,
        fallback: SimilaritySearchStrategy | None = None,
        native_enabled: bool = True,
    ) -> None:
        self.native = native or NativeOperatorSearch()
        self.fallback = fallback or BruteForceSearch()
        self._native_available: bool | None = None if native_enabled else False

    @property
    def native_available(self) -> bool | None:
        """Cached capability; None until probed."""
        return self._native_available

    async def select(self, session: AsyncSession) -> SimilaritySearchStrategy:
        """Return the strategy to use, probing the database on first call."""
        if self._native_available is None:
            self._native_available = await probe_native_vector_support(session)
        return self.native if self._native_available else self.fallback

    def mark_native_unavailable(self) -> None:
        if self._native_available:
            logger.warning("Native vector operator disabled for this process")
        self._native_available = False
