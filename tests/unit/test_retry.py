"""
Test suite for the retry policy.

Uses a recording sleep so backoff delays are asserted without waiting.

System role: Verification of retry-with-backoff behaviour
"""

import pytest

from rag_backend.core.retry import RetryPolicy, with_retry


class FlakyOperation:
    """Fails a fixed number of times, then returns a value."""

    def __init__(self, failures: int, exc_type: type[Exception] = RuntimeError) -> None:
        self.failures = failures
        self.exc_type = exc_type
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc_type(f"failure {self.calls}")
        return "ok"


@pytest.fixture
def recorded_delays() -> list[float]:
    return []


@pytest.fixture
def fake_sleep(recorded_delays: list[float]):
    async def sleep(delay: float) -> None:
        recorded_delays.append(delay)

    return sleep


class TestRetryPolicy:
    """Test suite for RetryPolicy.call()."""

    @pytest.mark.asyncio
    async def test_two_failures_then_success_should_return_result(
        self, fake_sleep, recorded_delays: list[float]
    ) -> None:
        # Arrange
        operation = FlakyOperation(failures=2)
        policy = RetryPolicy(max_attempts=3, base_delay=1.0, sleep=fake_sleep)

        # Act
        result = await policy.call(operation)

        # Assert
        assert result == "ok"
        assert operation.calls == 3
        assert recorded_delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_exhausted_attempts_should_raise_last_error(
        self, fake_sleep, recorded_delays: list[float]
    ) -> None:
        operation = FlakyOperation(failures=3)
        policy = RetryPolicy(max_attempts=3, base_delay=0.5, sleep=fake_sleep)

        with pytest.raises(RuntimeError, match="failure 3"):
            await policy.call(operation)

        assert operation.calls == 3
        assert recorded_delays == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_non_retryable_error_should_raise_immediately(
        self, fake_sleep, recorded_delays: list[float]
    ) -> None:
        operation = FlakyOperation(failures=1, exc_type=KeyError)
        policy = RetryPolicy(max_attempts=3, retry_on=(RuntimeError,), sleep=fake_sleep)

        with pytest.raises(KeyError):
            await policy.call(operation)

        assert operation.calls == 1
        assert recorded_delays == []

    def test_delay_for_should_double_each_attempt(self) -> None:
        policy = RetryPolicy(base_delay=2.0)
        assert [policy.delay_for(n) for n in (1, 2, 3)] == [2.0, 4.0, 8.0]


class TestWithRetry:
    """Test suite for with_retry() helper."""

    @pytest.mark.asyncio
    async def test_should_succeed_on_first_attempt_without_sleeping(
        self, fake_sleep, recorded_delays: list[float]
    ) -> None:
        operation = FlakyOperation(failures=0)

        result = await with_retry(operation, max_attempts=3, base_delay=1.0, sleep=fake_sleep)

        assert result == "ok"
        assert recorded_delays == []
