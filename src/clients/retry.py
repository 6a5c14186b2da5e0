"""Bounded retry policy and executor for provider calls."""

import asyncio
from typing import Any, Awaitable, Callable, Literal, Optional, Union

from pydantic import BaseModel
from structlog import get_logger

from src.config import settings

logger = get_logger(__name__)


class RetryableError(Exception):
    """Base for errors that should trigger another attempt.

    ``kind`` tells a transport failure apart from a protocol failure in the
    terminal outcome.
    """

    kind: Literal["transport", "protocol"] = "transport"


class RetryPolicy(BaseModel):
    """How many times, how long to wait, and how long each attempt may take."""

    max_retries: int = 2
    retry_delay: float = 0.5
    base_timeout: float = 30.0
    timeout_step: float = 15.0

    class Config:
        frozen = True

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        """Build the policy from the rates API settings."""
        return cls(
            max_retries=settings.rates_api.max_retries,
            retry_delay=settings.rates_api.retry_delay,
            base_timeout=settings.rates_api.base_timeout,
            timeout_step=settings.rates_api.timeout_step,
        )

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def timeout_for(self, attempt: int) -> float:
        """Per-attempt timeout in seconds; attempt is zero-based."""
        return self.base_timeout + self.timeout_step * attempt

    def delay_for(self, attempt: int) -> float:
        """Wait in seconds after a failed attempt before the next one."""
        return self.retry_delay


class RetrySuccess(BaseModel):
    """An attempt returned a value."""

    value: Any
    attempts: int


class TerminalFailure(BaseModel):
    """Every attempt failed; ``cause`` describes the last failure."""

    cause: str
    attempts: int
    kind: Literal["transport", "protocol"] = "transport"


RetryOutcome = Union[RetrySuccess, TerminalFailure]


async def execute_with_retry(
    operation: Callable[[int], Awaitable[Any]],
    policy: RetryPolicy,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    log_context: Optional[dict[str, Any]] = None,
) -> RetryOutcome:
    """Run operation until it succeeds or the policy is exhausted.

    Args:
        operation: Called with the zero-based attempt index
        policy: Retry policy to apply
        sleep: Awaitable used for the inter-attempt delay
        log_context: Extra fields bound to every log line

    Returns:
        RetrySuccess with the first returned value, or TerminalFailure with
        the cause of the last failed attempt
    """
    log = logger.bind(**(log_context or {}))

    for attempt in range(policy.max_attempts):
        try:
            value = await operation(attempt)
        except RetryableError as e:
            if attempt < policy.max_retries:
                wait_time = policy.delay_for(attempt)
                log.warning(
                    "Provider attempt failed, retrying",
                    error=str(e),
                    attempt=attempt + 1,
                    max_attempts=policy.max_attempts,
                    wait_seconds=wait_time,
                )
                await sleep(wait_time)
                continue

            log.error(
                "Provider attempt failed, max retries exceeded",
                error=str(e),
                attempts=attempt + 1,
            )
            return TerminalFailure(cause=str(e), attempts=attempt + 1, kind=e.kind)

        if attempt > 0:
            log.info("Provider attempt succeeded after retry", attempts=attempt + 1)
        return RetrySuccess(value=value, attempts=attempt + 1)

    # max_attempts is always at least 1, so the loop returns before this
    return TerminalFailure(cause="No attempt was made", attempts=0)
