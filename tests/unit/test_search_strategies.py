"""
Test suite for similarity search strategies.

Covers operator-error detection, the native SQL shape, and the cached
capability decision in SearchStrategySelector.

System role: Verification of ranking backends
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import DBAPIError, OperationalError

from rag_backend.boundary.vdb import search_strategies
from rag_backend.boundary.vdb.search_strategies import (
    BruteForceSearch,
    NativeOperatorSearch,
    SearchStrategySelector,
    dimension_mismatch_from_error,
    is_vector_operator_error,
)


def make_db_error(message: str) -> DBAPIError:
    return DBAPIError("SELECT 1 - (embedding <=> :q)", {}, Exception(message))


class TestIsVectorOperatorError:
    """Test suite for is_vector_operator_error()."""

    def test_operator_token_in_driver_message_should_match(self) -> None:
        error = make_db_error("operator does not exist: double precision[] <=> vector")
        assert is_vector_operator_error(error) is True

    def test_missing_vector_type_should_match(self) -> None:
        assert is_vector_operator_error(make_db_error('type "vector" does not exist')) is True

    def test_unrelated_error_should_not_match_even_though_sql_has_operator(self) -> None:
        error = make_db_error("connection reset by peer")
        assert "<=>" in str(error)
        assert is_vector_operator_error(error) is False

    def test_plain_exception_should_be_checked_by_message(self) -> None:
        assert is_vector_operator_error(RuntimeError("bad <=> usage")) is True


class TestDimensionMismatchFromError:
    """Test suite for dimension_mismatch_from_error()."""

    def test_pgvector_message_should_yield_both_dimensions(self) -> None:
        error = make_db_error("different vector dimensions 384 and 768")
        assert dimension_mismatch_from_error(error) == (384, 768)

    def test_other_errors_should_yield_none(self) -> None:
        assert dimension_mismatch_from_error(make_db_error("connection reset by peer")) is None

    def test_dimension_error_should_not_count_as_operator_error(self) -> None:
        assert is_vector_operator_error(make_db_error("different vector dimensions 3 and 2")) is False


class TestNativeOperatorSearch:
    """Test suite for NativeOperatorSearch SQL generation."""

    @pytest.mark.asyncio
    async def test_should_query_with_cosine_operator_inside_savepoint(self) -> None:
        # Arrange
        session = MagicMock()
        session.begin_nested = MagicMock(return_value=AsyncMock())
        result = MagicMock()
        result.all.return_value = []
        session.execute = AsyncMock(return_value=result)

        # Act
        results = await NativeOperatorSearch().search(session, 7, [0.1, 0.2], 3, 0.7)

        # Assert
        assert results == []
        session.begin_nested.assert_called_once()
        stmt = session.execute.call_args.args[0]
        sql = str(stmt.compile(dialect=postgresql.dialect()))
        assert "<=>" in sql
        assert "CAST(vector_chunk.embedding AS vector)" in sql
        assert "ORDER BY similarity DESC" in sql
        assert "LIMIT" in sql


class TestSearchStrategySelector:
    """Test suite for SearchStrategySelector."""

    @pytest.mark.asyncio
    async def test_should_probe_once_and_cache(self, monkeypatch) -> None:
        probe = AsyncMock(return_value=True)
        monkeypatch.setattr(search_strategies, "probe_native_vector_support", probe)
        selector = SearchStrategySelector()

        first = await selector.select(MagicMock())
        second = await selector.select(MagicMock())

        assert isinstance(first, NativeOperatorSearch)
        assert second is first
        probe.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_disabled_native_search_should_never_probe(self, monkeypatch) -> None:
        probe = AsyncMock(return_value=True)
        monkeypatch.setattr(search_strategies, "probe_native_vector_support", probe)
        selector = SearchStrategySelector(native_enabled=False)

        strategy = await selector.select(MagicMock())

        assert isinstance(strategy, BruteForceSearch)
        probe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mark_native_unavailable_should_switch_to_fallback(self, monkeypatch) -> None:
        monkeypatch.setattr(
            search_strategies, "probe_native_vector_support", AsyncMock(return_value=True)
        )
        selector = SearchStrategySelector()
        assert isinstance(await selector.select(MagicMock()), NativeOperatorSearch)

        selector.mark_native_unavailable()

        assert selector.native_available is False
        assert isinstance(await selector.select(MagicMock()), BruteForceSearch)


class TestProbeNativeVectorSupport:
    """Test suite for probe_native_vector_support()."""

    @pytest.mark.asyncio
    async def test_non_postgres_dialect_should_report_unavailable(self, test_async_db) -> None:
        assert await search_strategies.probe_native_vector_support(test_async_db) is False

    @pytest.mark.asyncio
    async def test_probe_failure_should_report_unavailable(self) -> None:
        session = MagicMock()
        session.get_bind.return_value.dialect.name = "postgresql"
        session.begin_nested = MagicMock(return_value=AsyncMock())
        session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("denied")))

        assert await search_strategies.probe_native_vector_support(session) is False
