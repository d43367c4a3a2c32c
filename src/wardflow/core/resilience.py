"""
Bounded retry/backoff for outbound calls.

Every call to the record store or the AI oracle goes through
``ResilientCallExecutor`` with one of the named ``RetryPolicy`` objects
below, so the schedules live in one place instead of at each call site.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, TypeVar

from .errors import (
    ExternalServiceError,
    QuotaExceededError,
    RetryExhaustedError,
    TransientServiceError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

BackoffFn = Callable[[int, BaseException], float]
RetryPredicate = Callable[[BaseException], bool]


def linear_backoff(base_seconds: float) -> BackoffFn:
    """``base × attempt``: 1s, 2s, 3s ... for base=1."""

    def _delay(attempt: int, error: BaseException) -> float:
        return base_seconds * attempt

    return _delay


def exponential_backoff(base_seconds: float, cap_seconds: Optional[float] = None) -> BackoffFn:
    """``base × 2^(attempt-1)``, optionally capped."""

    def _delay(attempt: int, error: BaseException) -> float:
        delay = base_seconds * (2 ** (attempt - 1))
        if cap_seconds is not None:
            delay = min(delay, cap_seconds)
        return delay

    return _delay


def fixed_backoff(seconds: float) -> BackoffFn:
    def _delay(attempt: int, error: BaseException) -> float:
        return seconds

    return _delay


def split_backoff(on_status_error: BackoffFn, on_other_error: BackoffFn) -> BackoffFn:
    """Use one schedule when the remote answered with an HTTP status, another otherwise."""

    def _delay(attempt: int, error: BaseException) -> float:
        if isinstance(error, ExternalServiceError) and error.status_code is not None:
            return on_status_error(attempt, error)
        return on_other_error(attempt, error)

    return _delay


def is_retryable_error(error: BaseException) -> bool:
    """Default classification: only errors flagged retryable get another attempt."""
    return isinstance(error, ExternalServiceError) and error.retryable


def is_retryable_ai_error(error: BaseException) -> bool:
    """AI calls: a spent daily quota is final, plain rate limiting is not."""
    if isinstance(error, QuotaExceededError) and error.daily_quota_exhausted:
        return False
    return is_retryable_error(error)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try, how long to wait, and what is worth retrying."""

    name: str
    max_attempts: int
    backoff: BackoffFn
    is_retryable: RetryPredicate = field(default=is_retryable_error)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def delay_for(self, attempt: int, error: BaseException) -> float:
        return max(0.0, self.backoff(attempt, error))


PATIENT_SEARCH_POLICY = RetryPolicy(
    name="patient_search",
    max_attempts=3,
    backoff=linear_backoff(1.0),
)

VISIT_LISTING_POLICY = RetryPolicy(
    name="visit_listing",
    max_attempts=5,
    backoff=split_backoff(
        on_status_error=linear_backoff(2.0),
        on_other_error=exponential_backoff(2.0, cap_seconds=10.0),
    ),
)

AI_COMPLETION_POLICY = RetryPolicy(
    name="ai_completion",
    max_attempts=2,
    backoff=exponential_backoff(15.0),
    is_retryable=is_retryable_ai_error,
)

AI_CHAT_POLICY = RetryPolicy(
    name="ai_chat",
    max_attempts=2,
    backoff=fixed_backoff(10.0),
    is_retryable=is_retryable_ai_error,
)


def is_rejected_before_write(error: BaseException) -> bool:
    """Record creation is not idempotent: retry only when nothing can have been stored."""
    if isinstance(error, QuotaExceededError):
        return True
    return (
        isinstance(error, TransientServiceError)
        and error.status_code is None
        and error.details.get("request_sent") is False
    )


VISIT_CREATE_POLICY = RetryPolicy(
    name="visit_create",
    max_attempts=3,
    backoff=exponential_backoff(1.0),
    is_retryable=is_rejected_before_write,
)


class ResilientCallExecutor:
    """Runs an async operation under a retry policy; the policy decides what is safe to repeat."""

    def __init__(self, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self._sleep = sleep

    async def run(self, operation: Callable[[], Awaitable[T]], policy: RetryPolicy) -> T:
        """Execute ``operation``; raise the terminal error or ``RetryExhaustedError``."""
        last_error: Optional[BaseException] = None

        for attempt in range(1, policy.max_attempts + 1):
            logger.debug(f"🔁 {policy.name}: attempt {attempt}/{policy.max_attempts}")
            try:
                return await operation()
            except Exception as exc:
                last_error = exc
                if not policy.is_retryable(exc):
                    logger.warning(
                        f"❌ {policy.name}: non-retryable failure on attempt "
                        f"{attempt}/{policy.max_attempts}: {exc}"
                    )
                    raise

                if attempt >= policy.max_attempts:
                    break

                delay = policy.delay_for(attempt, exc)
                logger.warning(
                    f"⏳ {policy.name}: attempt {attempt}/{policy.max_attempts} failed "
                    f"({exc}); retrying in {delay:.1f}s"
                )
                await self._sleep(delay)

        logger.error(
            f"❌ {policy.name}: all {policy.max_attempts} attempts failed: {last_error}"
        )
        raise RetryExhaustedError(policy.name, policy.max_attempts, last_error)

    async def run_or_default(
        self,
        operation: Callable[[], Awaitable[T]],
        policy: RetryPolicy,
        default: Callable[[], T],
    ) -> T:
        """Read-path variant: degrade to ``default()`` instead of raising."""
        try:
            return await self.run(operation, policy)
        except ExternalServiceError as exc:
            logger.error(f"⚠️ {policy.name}: returning default result after failure: {exc}")
            return default()
