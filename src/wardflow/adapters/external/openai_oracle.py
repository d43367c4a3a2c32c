"""
OpenAI implementation of AIOracle.
"""

import asyncio
import logging
from typing import Dict, List, Optional

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AuthenticationError,
    InternalServerError,
    OpenAI,
    PermissionDeniedError,
    RateLimitError,
)

from wardflow.application.ports.services.ai_oracle import AIOracle
from wardflow.core.config import OpenAISettings
from wardflow.core.errors import (
    AITimeoutError,
    ExternalRequestError,
    MalformedResponseError,
    QuotaExceededError,
    ServiceConfigurationError,
    TransientServiceError,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "openai"

INVALID_KEY_MESSAGE = (
    "Invalid OpenAI API key. Please check that your API key is correct and has "
    "the necessary permissions."
)
PERMISSION_MESSAGE = (
    "API key doesn't have permission to access the requested model. Please check "
    "the project's model access settings."
)
MISSING_KEY_MESSAGE = "OPENAI_API_KEY is not set"


class OpenAIOracle(AIOracle):
    """Chat-completions client; retries belong to the caller's retry policy."""

    def __init__(self, settings: OpenAISettings, client: Optional[OpenAI] = None):
        self._settings = settings
        self._client = client

    def _get_client(self) -> OpenAI:
        if self._client is None:
            if not self._settings.api_key:
                raise ServiceConfigurationError(MISSING_KEY_MESSAGE, service=SERVICE_NAME)
            # Retries are applied by ResilientCallExecutor
            self._client = OpenAI(
                api_key=self._settings.api_key,
                timeout=self._settings.timeout_seconds,
                max_retries=0,
            )
        return self._client

    async def complete(self, prompt: str, *, temperature: float, max_tokens: int) -> str:
        return await self._chat_completion(
            [{"role": "user", "content": prompt}], temperature, max_tokens
        )

    async def chat(
        self,
        messages: List[Dict[str, str]],
        *,
        system_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        turns = [{"role": "system", "content": system_prompt}]
        turns.extend({"role": m["role"], "content": m["content"]} for m in messages)
        return await self._chat_completion(turns, temperature, max_tokens)

    async def _chat_completion(
        self, messages: List[Dict[str, str]], temperature: float, max_tokens: int
    ) -> str:
        """Run sync OpenAI chat.completions in a thread to keep async API."""
        client = self._get_client()

        def _run():
            return client.chat.completions.create(
                model=self._settings.model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )

        try:
            response = await asyncio.to_thread(_run)
        except APITimeoutError as exc:
            logger.error(f"⏱️ OpenAI request timed out after {self._settings.timeout_seconds}s")
            raise AITimeoutError(service=SERVICE_NAME) from exc
        except Exception as exc:
            translated = translate_openai_error(exc)
            if translated is exc:
                raise
            raise translated from exc

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices and choices[0].message else None
        if not content or not content.strip():
            raise MalformedResponseError(
                "No response received from the AI model", service=SERVICE_NAME
            )
        return content.strip()


def translate_openai_error(exc: Exception) -> Exception:
    """Map SDK exceptions onto the outbound error taxonomy."""
    if isinstance(exc, RateLimitError):
        message = str(exc)
        code = getattr(exc, "code", None)
        exhausted = code == "insufficient_quota" or "quota" in message.lower()
        return QuotaExceededError(
            message,
            daily_quota_exhausted=exhausted,
            service=SERVICE_NAME,
            status_code=429,
        )
    if isinstance(exc, AuthenticationError):
        return ServiceConfigurationError(
            INVALID_KEY_MESSAGE, service=SERVICE_NAME, status_code=401
        )
    if isinstance(exc, PermissionDeniedError):
        return ServiceConfigurationError(
            PERMISSION_MESSAGE, service=SERVICE_NAME, status_code=403
        )
    if isinstance(exc, InternalServerError):
        return TransientServiceError(
            str(exc), service=SERVICE_NAME, status_code=exc.status_code
        )
    if isinstance(exc, APIConnectionError):
        return TransientServiceError(str(exc), service=SERVICE_NAME)
    if isinstance(exc, APIStatusError):
        return ExternalRequestError(
            str(exc), service=SERVICE_NAME, status_code=exc.status_code
        )
    return exc
