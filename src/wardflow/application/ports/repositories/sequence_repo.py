"""
Monotonic sequence counters (token numbers, queue positions).
"""

from abc import ABC, abstractmethod


class SequenceRepository(ABC):
    @abstractmethod
    async def next_value(self, key: str) -> int:
        """Atomically increment the counter ``key`` and return the new value (first is 1)."""
        pass
