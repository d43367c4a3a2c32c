"""
Error taxonomy for calls leaving the process (record store, AI oracle).

Domain rule violations live in ``wardflow.domain.errors``; these classes
describe how an outbound call failed so the retry layer can decide whether
another attempt is worthwhile.
"""

from typing import Any, Dict, Optional


class ExternalServiceError(Exception):
    """Base class for failures of an external collaborator."""

    retryable: bool = False
    error_code: str = "EXTERNAL_SERVICE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        service: str = "external",
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.service = service
        self.status_code = status_code
        self.details = details or {}


class TransientServiceError(ExternalServiceError):
    """5xx responses, dropped connections and similar short-lived failures."""

    retryable = True
    error_code = "SERVICE_UNAVAILABLE"


class QuotaExceededError(ExternalServiceError):
    """429 / quota signature from the remote side.

    ``daily_quota_exhausted`` distinguishes a spent budget (no point in
    retrying today) from ordinary rate limiting (back off and retry).
    """

    retryable = True
    error_code = "QUOTA_EXCEEDED"

    def __init__(self, message: str, *, daily_quota_exhausted: bool = False, **kwargs):
        super().__init__(message, **kwargs)
        self.daily_quota_exhausted = daily_quota_exhausted


class ServiceConfigurationError(ExternalServiceError):
    """Missing or invalid credentials, insufficient permissions."""

    error_code = "SERVICE_MISCONFIGURED"


class MalformedResponseError(ExternalServiceError):
    """The remote answered but the body lacks the expected fields."""

    error_code = "INVALID_RESPONSE_FORMAT"

    def __init__(self, message: str = "Invalid response format", **kwargs):
        super().__init__(message, **kwargs)


class ExternalRequestError(ExternalServiceError):
    """Non-2xx response that another attempt will not fix."""

    error_code = "EXTERNAL_REQUEST_FAILED"


class AITimeoutError(ExternalServiceError):
    """The AI request exceeded the client-side timeout and was aborted."""

    error_code = "AI_TIMEOUT"

    def __init__(
        self,
        message: str = "Request timeout - AI service took too long to respond",
        **kwargs,
    ):
        super().__init__(message, **kwargs)


QUOTA_EXHAUSTED_USER_MESSAGE = (
    "API quota exceeded. Please wait a few minutes before trying again, "
    "or consider upgrading your AI API plan for higher limits."
)


class RetryExhaustedError(ExternalServiceError):
    """Every attempt allowed by a retry policy failed."""

    error_code = "RETRIES_EXHAUSTED"

    def __init__(self, policy_name: str, attempts: int, last_error: BaseException):
        if isinstance(last_error, QuotaExceededError):
            message = QUOTA_EXHAUSTED_USER_MESSAGE
        else:
            message = f"{policy_name} failed after {attempts} attempts: {last_error}"
        super().__init__(
            message,
            service=getattr(last_error, "service", "external"),
            status_code=getattr(last_error, "status_code", None),
            details={"policy": policy_name, "attempts": attempts},
        )
        self.policy_name = policy_name
        self.attempts = attempts
        self.last_error = last_error
