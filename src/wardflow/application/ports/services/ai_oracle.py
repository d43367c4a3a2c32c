"""
Text-completion oracle interface.
"""

from abc import ABC, abstractmethod
from typing import Dict, List


class AIOracle(ABC):
    """Opaque generative-AI service.

    Implementations translate transport and SDK failures into the
    ``wardflow.core.errors`` taxonomy so the retry layer can classify them.
    """

    @abstractmethod
    async def complete(self, prompt: str, *, temperature: float, max_tokens: int) -> str:
        """Single-turn completion."""
        pass

    @abstractmethod
    async def chat(
        self,
        messages: List[Dict[str, str]],
        *,
        system_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Multi-turn chat; ``messages`` are ordered ``{role, content}`` turns."""
        pass
