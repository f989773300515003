"""Unit tests for the retry state machine."""

import pytest
from unittest.mock import AsyncMock

from newsagg.utils.retry import RetryPolicy, RetryState, linear_backoff


def test_linear_backoff_grows_with_attempt():
    """Later retries wait longer than earlier ones."""
    assert linear_backoff(1, 60.0) == 60.0
    assert linear_backoff(2, 60.0) == 120.0
    assert linear_backoff(3, 0.5) == 1.5


def test_policy_rejects_zero_attempts():
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0, base_delay=1.0)


@pytest.mark.asyncio
async def test_success_first_attempt():
    """Test a successful first attempt does not sleep."""
    sleep = AsyncMock()
    policy = RetryPolicy(max_attempts=3, base_delay=60.0, sleep=sleep)
    operation = AsyncMock(return_value="success")

    retry_run = policy.start("op")
    assert retry_run.state is RetryState.IDLE

    result = await retry_run.execute(operation)

    assert result == "success"
    assert operation.call_count == 1
    assert retry_run.state is RetryState.SUCCEEDED
    assert retry_run.attempt == 1
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_success_after_failures_waits_linearly():
    """Test backoff delays are base * attempt between attempts."""
    sleep = AsyncMock()
    policy = RetryPolicy(max_attempts=3, base_delay=60.0, sleep=sleep)
    operation = AsyncMock(side_effect=[ValueError("one"), ValueError("two"), "success"])

    retry_run = policy.start("op")
    result = await retry_run.execute(operation)

    assert result == "success"
    assert retry_run.delays == [60.0, 120.0]
    assert [call.args[0] for call in sleep.await_args_list] == [60.0, 120.0]
    assert retry_run.state is RetryState.SUCCEEDED
    assert retry_run.attempt == 3


@pytest.mark.asyncio
async def test_all_attempts_fail_raises_last_error():
    """Test the last error surfaces once attempts are exhausted."""
    sleep = AsyncMock()
    policy = RetryPolicy(max_attempts=3, base_delay=1.0, sleep=sleep)
    operation = AsyncMock(
        side_effect=[ValueError("first"), ValueError("second"), ValueError("third")]
    )

    retry_run = policy.start("op")
    with pytest.raises(ValueError, match="third"):
        await retry_run.execute(operation)

    assert operation.call_count == 3
    assert retry_run.state is RetryState.FAILED
    assert retry_run.delays == [1.0, 2.0]
    assert str(retry_run.last_error) == "third"


@pytest.mark.asyncio
async def test_non_retryable_exception_propagates_immediately():
    """Test only the listed exceptions are retried."""
    sleep = AsyncMock()
    policy = RetryPolicy(max_attempts=3, base_delay=1.0, sleep=sleep)
    operation = AsyncMock(side_effect=TypeError("bug"))

    retry_run = policy.start("op")
    with pytest.raises(TypeError):
        await retry_run.execute(operation, retry_on=(ValueError,))

    assert operation.call_count == 1
    assert retry_run.state is RetryState.FAILED
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_run_passes_arguments():
    policy = RetryPolicy(max_attempts=2, base_delay=0.0, sleep=AsyncMock())
    operation = AsyncMock(return_value=3)

    result = await policy.run(operation, 1, name="adder", b=2)

    assert result == 3
    operation.assert_awaited_once_with(1, b=2)


@pytest.mark.asyncio
async def test_run_cannot_be_restarted():
    policy = RetryPolicy(max_attempts=1, base_delay=0.0, sleep=AsyncMock())
    retry_run = policy.start("op")
    await retry_run.execute(AsyncMock(return_value=None))

    with pytest.raises(RuntimeError):
        await retry_run.execute(AsyncMock(return_value=None))
