"""Retry state machine with linearly growing backoff.

A call moves through ``IDLE -> ATTEMPTING(n) -> SUCCEEDED | FAILED``. Between
attempts the run waits ``linear_backoff(n) = base_delay * n`` seconds, so
later retries wait longer than earlier ones.
"""

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Type, TypeVar

from newsagg.core.config import settings
from newsagg.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Sleeper = Callable[[float], Awaitable[Any]]


class RetryState(str, Enum):
    """States of a single retried call."""

    IDLE = "idle"
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def linear_backoff(attempt: int, base_delay: float) -> float:
    """Delay to wait after failed attempt number ``attempt`` (1-based)."""
    return base_delay * attempt


class RetryRun:
    """One execution of a retried operation.

    Attributes:
        state: Current state of the run
        attempt: Number of the attempt in progress or last made (1-based)
        delays: Backoff delays waited so far, in order
        last_error: Exception raised by the most recent failed attempt
    """

    def __init__(self, max_attempts: int, base_delay: float, sleep: Sleeper, name: str) -> None:
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.name = name
        self._sleep = sleep

        self.state = RetryState.IDLE
        self.attempt = 0
        self.delays: list[float] = []
        self.last_error: BaseException | None = None

    async def execute(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        retry_on: tuple[Type[Exception], ...] = (Exception,),
        **kwargs: Any,
    ) -> T:
        """Run ``operation`` until it succeeds or the attempts are used up.

        Exceptions outside ``retry_on`` propagate at once and leave the run
        FAILED.

        Raises:
            Exception: The last error once every attempt failed
        """
        if self.state is not RetryState.IDLE:
            raise RuntimeError(f"Retry run for {self.name} already started")

        while True:
            self.attempt += 1
            self.state = RetryState.ATTEMPTING
            try:
                result = await operation(*args, **kwargs)
            except retry_on as e:
                self.last_error = e
                if self.attempt >= self.max_attempts:
                    self.state = RetryState.FAILED
                    logger.error(
                        f"All {self.max_attempts} attempts failed for {self.name}: {e}"
                    )
                    raise

                delay = linear_backoff(self.attempt, self.base_delay)
                logger.warning(
                    f"Attempt {self.attempt}/{self.max_attempts} failed for {self.name}: {e}. "
                    f"Retrying in {delay}s..."
                )
                self.delays.append(delay)
                await self._sleep(delay)
            except BaseException:
                self.state = RetryState.FAILED
                raise
            else:
                self.state = RetryState.SUCCEEDED
                return result


class RetryPolicy:
    """Bounded retry with linear backoff.

    The policy itself is stateless and can be shared between concurrent
    callers; every call gets its own ``RetryRun``.
    """

    def __init__(
        self,
        max_attempts: int | None = None,
        base_delay: float | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        """Initialize the policy.

        Args:
            max_attempts: Attempts per call (default from settings)
            base_delay: Backoff unit in seconds (default from settings)
            sleep: Awaitable used to wait between attempts
        """
        self.max_attempts = max_attempts if max_attempts is not None else settings.retry_max_attempts
        self.base_delay = base_delay if base_delay is not None else settings.retry_base_delay
        self._sleep = sleep

        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def start(self, name: str = "operation") -> RetryRun:
        """Create a fresh run in the IDLE state."""
        return RetryRun(self.max_attempts, self.base_delay, self._sleep, name)

    async def run(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        name: str | None = None,
        retry_on: tuple[Type[Exception], ...] = (Exception,),
        **kwargs: Any,
    ) -> T:
        """Execute ``operation`` under this policy."""
        retry_run = self.start(name or getattr(operation, "__name__", "operation"))
        return await retry_run.execute(operation, *args, retry_on=retry_on, **kwargs)
