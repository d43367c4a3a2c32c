import pytest

from wardflow.core.errors import (
    QUOTA_EXHAUSTED_USER_MESSAGE,
    ExternalRequestError,
    QuotaExceededError,
    RetryExhaustedError,
    TransientServiceError,
)
from wardflow.core.resilience import (
    AI_CHAT_POLICY,
    AI_COMPLETION_POLICY,
    PATIENT_SEARCH_POLICY,
    VISIT_CREATE_POLICY,
    VISIT_LISTING_POLICY,
    RetryPolicy,
    fixed_backoff,
)


class Flaky:
    """Fails with the scripted errors, then returns ``result``."""

    def __init__(self, *errors, result="ok"):
        self.errors = list(errors)
        self.result = result
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.result


async def test_first_attempt_success_does_not_sleep(executor, sleep):
    operation = Flaky()

    assert await executor.run(operation, PATIENT_SEARCH_POLICY) == "ok"
    assert operation.calls == 1
    assert sleep.delays == []


async def test_transient_failure_is_retried_with_linear_backoff(executor, sleep):
    operation = Flaky(TransientServiceError("502"), TransientServiceError("503"))

    assert await executor.run(operation, PATIENT_SEARCH_POLICY) == "ok"
    assert operation.calls == 3
    assert sleep.delays == [1.0, 2.0]


async def test_exhaustion_raises_with_last_error(executor, sleep):
    last = TransientServiceError("still down")
    operation = Flaky(TransientServiceError("down"), TransientServiceError("down"), last)

    with pytest.raises(RetryExhaustedError) as exc_info:
        await executor.run(operation, PATIENT_SEARCH_POLICY)

    assert exc_info.value.attempts == 3
    assert exc_info.value.last_error is last
    assert exc_info.value.policy_name == "patient_search"
    assert operation.calls == 3
    # no sleep after the final attempt
    assert sleep.delays == [1.0, 2.0]


async def test_non_retryable_error_is_raised_immediately(executor, sleep):
    operation = Flaky(ExternalRequestError("422 bad formula", status_code=422))

    with pytest.raises(ExternalRequestError):
        await executor.run(operation, PATIENT_SEARCH_POLICY)

    assert operation.calls == 1
    assert sleep.delays == []


async def test_programming_errors_are_not_retried(executor):
    operation = Flaky(KeyError("fields"))

    with pytest.raises(KeyError):
        await executor.run(operation, VISIT_LISTING_POLICY)

    assert operation.calls == 1


async def test_visit_listing_uses_linear_delay_for_status_errors(executor, sleep):
    errors = [TransientServiceError("503", status_code=503) for _ in range(5)]

    with pytest.raises(RetryExhaustedError):
        await executor.run(Flaky(*errors), VISIT_LISTING_POLICY)

    assert sleep.delays == [2.0, 4.0, 6.0, 8.0]


async def test_visit_listing_uses_capped_exponential_delay_for_network_errors(executor, sleep):
    errors = [TransientServiceError("connection reset") for _ in range(5)]

    with pytest.raises(RetryExhaustedError):
        await executor.run(Flaky(*errors), VISIT_LISTING_POLICY)

    assert sleep.delays == [2.0, 4.0, 8.0, 10.0]


async def test_spent_daily_quota_is_final_for_ai_calls(executor, sleep):
    exhausted = QuotaExceededError("insufficient_quota", daily_quota_exhausted=True)
    operation = Flaky(exhausted)

    with pytest.raises(QuotaExceededError) as exc_info:
        await executor.run(operation, AI_COMPLETION_POLICY)

    assert exc_info.value is exhausted
    assert operation.calls == 1
    assert sleep.delays == []


async def test_rate_limited_ai_call_is_retried_once_then_reports_quota(executor, sleep):
    operation = Flaky(
        QuotaExceededError("rate limited", status_code=429),
        QuotaExceededError("rate limited", status_code=429),
    )

    with pytest.raises(RetryExhaustedError) as exc_info:
        await executor.run(operation, AI_COMPLETION_POLICY)

    assert operation.calls == 2
    assert sleep.delays == [15.0]
    assert exc_info.value.message == QUOTA_EXHAUSTED_USER_MESSAGE


async def test_chat_policy_waits_a_fixed_interval(executor, sleep):
    operation = Flaky(TransientServiceError("overloaded", status_code=503))

    assert await executor.run(operation, AI_CHAT_POLICY) == "ok"
    assert sleep.delays == [10.0]


async def test_run_or_default_degrades_after_exhaustion(executor):
    errors = [TransientServiceError("down") for _ in range(5)]

    result = await executor.run_or_default(Flaky(*errors), VISIT_LISTING_POLICY, default=list)

    assert result == []


async def test_run_or_default_degrades_on_non_retryable_service_error(executor):
    operation = Flaky(ExternalRequestError("404", status_code=404))

    result = await executor.run_or_default(operation, VISIT_LISTING_POLICY, default=list)

    assert result == []
    assert operation.calls == 1


async def test_run_or_default_does_not_hide_programming_errors(executor):
    with pytest.raises(TypeError):
        await executor.run_or_default(Flaky(TypeError("boom")), VISIT_LISTING_POLICY, default=list)


@pytest.mark.parametrize(
    "error, retried",
    [
        (QuotaExceededError("429", status_code=429), True),
        (TransientServiceError("refused", details={"request_sent": False}), True),
        (TransientServiceError("read timed out"), False),
        (TransientServiceError("503", status_code=503), False),
        (ExternalRequestError("422", status_code=422), False),
    ],
)
def test_visit_create_retries_only_writes_rejected_before_storage(error, retried):
    assert VISIT_CREATE_POLICY.is_retryable(error) is retried


def test_policy_requires_at_least_one_attempt():
    with pytest.raises(ValueError):
        RetryPolicy(name="broken", max_attempts=0, backoff=fixed_backoff(1.0))
