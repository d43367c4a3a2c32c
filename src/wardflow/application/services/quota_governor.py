"""
Daily AI call budget.

A single ``QuotaGovernor`` instance is shared by every request handler in
the process. A slot is reserved under a lock before each call and refunded
if the call does not succeed. The reset window is measured from the last
reset, not from wall-clock midnight. State is in memory only and starts
fresh on restart.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict

from ...core.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class QuotaStatus:
    used: int
    limit: int
    remaining: int
    percentage_used: int
    hours_until_reset: float
    is_limit_reached: bool
    last_reset: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "used": self.used,
            "limit": self.limit,
            "remaining": self.remaining,
            "percentage_used": self.percentage_used,
            "hours_until_reset": self.hours_until_reset,
            "is_limit_reached": self.is_limit_reached,
            "last_reset": self.last_reset.isoformat(),
        }


class QuotaGovernor:
    """Admit/deny decisions against a fixed daily limit."""

    def __init__(
        self,
        daily_limit: int,
        reset_window: timedelta = timedelta(hours=24),
        clock: Clock = utc_now,
    ):
        if daily_limit <= 0:
            raise ValueError("daily_limit must be positive")
        self._limit = daily_limit
        self._window = reset_window
        self._clock = clock
        self._lock = threading.Lock()
        self._used = 0
        self._last_reset = clock()

    @property
    def limit(self) -> int:
        return self._limit

    def _reset_if_due(self, now: datetime) -> None:
        # Caller holds the lock
        if now - self._last_reset >= self._window:
            logger.info(f"🔄 AI quota window elapsed; resetting counter (was {self._used})")
            self._used = 0
            self._last_reset = now

    def try_acquire(self) -> bool:
        """Reserve one AI call if the limit allows it.

        The check and the increment happen under one lock, so concurrent
        callers can never be admitted past the limit. A reservation that does
        not end in a successful call must be handed back with ``release``.
        """
        with self._lock:
            self._reset_if_due(self._clock())
            allowed = self._used < self._limit
            if allowed:
                self._used += 1
            used = self._used
        if allowed:
            logger.debug(f"📈 AI quota usage {used}/{self._limit}")
        else:
            logger.warning(f"🚫 AI quota exhausted ({self._limit}/{self._limit}); call denied")
        return allowed

    def release(self) -> None:
        """Refund a reservation whose call did not succeed."""
        with self._lock:
            if self._used > 0:
                self._used -= 1
            used = self._used
        logger.debug(f"↩️ AI quota reservation released ({used}/{self._limit})")

    def record_exhaustion(self) -> None:
        """The oracle itself reported quota exceeded: stop calling until reset."""
        with self._lock:
            self._used = self._limit
        logger.warning("🚫 AI oracle reported quota exceeded; local counter forced to limit")

    def status(self) -> QuotaStatus:
        """Snapshot for observability. Does not reset the counter."""
        with self._lock:
            now = self._clock()
            used, last_reset = self._used, self._last_reset

        window_elapsed = now - last_reset >= self._window
        if window_elapsed:
            used = 0
        remaining = max(0, self._limit - used)
        reset_at = last_reset + self._window
        hours_until_reset = max(0.0, (reset_at - now).total_seconds() / 3600)
        return QuotaStatus(
            used=used,
            limit=self._limit,
            remaining=remaining,
            percentage_used=round(used / self._limit * 100),
            hours_until_reset=round(hours_until_reset, 1),
            is_limit_reached=used >= self._limit,
            last_reset=last_reset,
        )
