"""
Governed access to the AI oracle.

Every AI call goes governor -> executor -> oracle. Diagnostic assistance is
advisory: quota denial, oracle-side quota exhaustion, retry exhaustion and
malformed replies all degrade to a canned reply. Misconfiguration and
client-side timeouts are raised to the caller.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ...core.config import OpenAISettings
from ...core.errors import (
    AITimeoutError,
    ExternalServiceError,
    QuotaExceededError,
    RetryExhaustedError,
    ServiceConfigurationError,
)
from ...core.resilience import (
    AI_CHAT_POLICY,
    AI_COMPLETION_POLICY,
    ResilientCallExecutor,
    RetryPolicy,
)
from ..ports.services.ai_oracle import AIOracle
from .fallback_responses import CHAT_UNAVAILABLE_MESSAGE, generate_fallback_response
from .quota_governor import QuotaGovernor

logger = logging.getLogger(__name__)

MEDICAL_ASSISTANT_PREAMBLE = (
    "You are a helpful medical assistant AI. You provide informative responses "
    "about medical topics but always clarify that you're not providing medical "
    "diagnosis and encourage users to seek professional medical advice. Be "
    "thorough but cautious in your assessments, and always prioritize patient safety."
)


@dataclass(frozen=True)
class AIReply:
    """Text returned to the caller, and whether it came from the oracle."""

    text: str
    from_fallback: bool = False
    fallback_reason: Optional[str] = None


class AIGateway:
    def __init__(
        self,
        oracle: AIOracle,
        governor: QuotaGovernor,
        executor: ResilientCallExecutor,
        settings: OpenAISettings,
    ):
        self._oracle = oracle
        self._governor = governor
        self._executor = executor
        self._settings = settings

    @property
    def governor(self) -> QuotaGovernor:
        return self._governor

    async def analyze(
        self,
        prompt: str,
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> AIReply:
        """Single-turn completion with intent-based fallback."""
        temperature = self._settings.analysis_temperature if temperature is None else temperature
        max_tokens = max_tokens or self._settings.analysis_max_tokens

        async def _call() -> str:
            return await self._oracle.complete(
                prompt, temperature=temperature, max_tokens=max_tokens
            )

        return await self._governed(
            _call, AI_COMPLETION_POLICY, lambda: generate_fallback_response(prompt)
        )

    async def chat(self, messages: List[Dict[str, str]]) -> AIReply:
        """Multi-turn chat under the assistant preamble."""

        async def _call() -> str:
            return await self._oracle.chat(
                messages,
                system_prompt=MEDICAL_ASSISTANT_PREAMBLE,
                temperature=self._settings.chat_temperature,
                max_tokens=self._settings.chat_max_tokens,
            )

        return await self._governed(_call, AI_CHAT_POLICY, lambda: CHAT_UNAVAILABLE_MESSAGE)

    async def _run_reserved(self, call, policy: RetryPolicy) -> str:
        """Run on an already reserved quota slot; the slot is refunded unless the call succeeds."""
        try:
            return await self._executor.run(call, policy)
        except BaseException:
            self._governor.release()
            raise

    async def _governed(self, call, policy: RetryPolicy, fallback) -> AIReply:
        if not self._governor.try_acquire():
            logger.warning(f"⚠️ {policy.name}: AI quota limit reached, using fallback response")
            return AIReply(fallback(), True, "quota_limit_reached")

        try:
            text = await self._run_reserved(call, policy)
        except QuotaExceededError as exc:
            # Only a spent daily quota escapes the executor unwrapped
            logger.warning(f"🚫 {policy.name}: {exc}; switching to fallback mode")
            self._governor.record_exhaustion()
            return AIReply(fallback(), True, "oracle_quota_exhausted")
        except RetryExhaustedError as exc:
            logger.error(f"🔄 {policy.name}: all retries exhausted, using fallback response")
            return AIReply(fallback(), True, exc.error_code.lower())
        except (ServiceConfigurationError, AITimeoutError):
            raise
        except ExternalServiceError as exc:
            logger.error(f"🔄 {policy.name}: {exc.error_code}: {exc}; using fallback response")
            return AIReply(fallback(), True, exc.error_code.lower())

        logger.info(
            f"✅ {policy.name}: AI call successful "
            f"({self._governor.status().used}/{self._governor.limit} quota used)"
        )
        return AIReply(text)
