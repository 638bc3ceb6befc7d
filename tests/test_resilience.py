"""
Tests for the resilience wrapper: per-attempt timeout, bounded retries with
exponential backoff, and reconnect before the first retry.
"""

import anyio
import httpx
import pytest

from adapters.backend_client import BackendResult
from adapters.resilience import RetryPolicy, resilient_call, with_retry
from app.exceptions import BackendError, StaleConnectionError


class Recorder:
    """Counts attempts and returns scripted outcomes in order."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.attempts = 0

    async def __call__(self):
        self.attempts += 1
        outcome = self.outcomes[min(self.attempts, len(self.outcomes)) - 1]
        if outcome == "hang":
            await anyio.sleep(10)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


# =============================================================================
# BACKOFF SCHEDULE
# =============================================================================


def test_backoff_doubles_and_is_capped():
    policy = RetryPolicy(max_retries=5, timeout=1.0, base_delay=1.0, max_delay=8.0)
    assert policy.backoff_schedule() == [1.0, 2.0, 4.0, 8.0, 8.0]
    assert policy.max_attempts == 6


def test_default_policy_worst_case():
    policy = RetryPolicy()
    # 3 attempts of 5s plus 1s and 2s of backoff
    assert policy.worst_case_duration() == 18.0


# =============================================================================
# TIMEOUTS
# =============================================================================


@pytest.mark.anyio
async def test_always_timing_out_fails_after_exact_attempts_within_bound():
    policy = RetryPolicy(max_retries=2, timeout=0.05, base_delay=0.01, max_delay=0.02)
    operation = Recorder("hang")

    start = anyio.current_time()
    with pytest.raises(StaleConnectionError) as excinfo:
        await with_retry(operation, policy, name="probe")
    elapsed = anyio.current_time() - start

    assert operation.attempts == policy.max_retries + 1
    assert excinfo.value.status == 0
    assert excinfo.value.timeout == 0.05
    assert elapsed <= policy.worst_case_duration() + 0.5


@pytest.mark.anyio
async def test_backoff_delays_are_slept_between_attempts():
    policy = RetryPolicy(max_retries=3, timeout=1.0, base_delay=1.0, max_delay=3.0)
    sleep = FakeSleep()
    operation = Recorder(httpx.ConnectError("refused"))

    with pytest.raises(httpx.ConnectError):
        await with_retry(operation, policy, sleep=sleep)

    assert operation.attempts == 4
    assert sleep.delays == [1.0, 2.0, 3.0]


# =============================================================================
# SUCCESS AND ENVELOPES
# =============================================================================


@pytest.mark.anyio
async def test_success_on_attempt_k_stops_retrying():
    policy = RetryPolicy(max_retries=4, timeout=1.0, base_delay=0.0)
    expected = BackendResult(data=[{"id": "r1"}])
    operation = Recorder(httpx.ReadError("reset"), httpx.ReadError("reset"), expected)

    result = await with_retry(operation, policy, sleep=FakeSleep())

    assert result is expected
    assert operation.attempts == 3


@pytest.mark.anyio
async def test_client_error_envelope_is_not_retried():
    envelope = BackendResult(error=BackendError("bad filter", code="PGRST100", status=400))
    operation = Recorder(envelope)

    result = await with_retry(operation, RetryPolicy(max_retries=3), sleep=FakeSleep())

    assert result is envelope
    assert operation.attempts == 1


@pytest.mark.anyio
async def test_server_error_envelope_is_retried_then_returned():
    first = BackendResult(error=BackendError("unavailable", status=503))
    last = BackendResult(error=BackendError("still unavailable", status=503))
    operation = Recorder(first, last)

    result = await with_retry(operation, RetryPolicy(max_retries=1), sleep=FakeSleep())

    assert result is last
    assert operation.attempts == 2


# =============================================================================
# RECONNECT
# =============================================================================


@pytest.mark.anyio
async def test_reconnect_runs_once_before_first_retry():
    reconnects = []

    async def reconnect():
        reconnects.append(operation.attempts)

    operation = Recorder(httpx.ConnectError("refused"))
    with pytest.raises(httpx.ConnectError):
        await with_retry(operation, RetryPolicy(max_retries=3), reconnect, sleep=FakeSleep())

    assert operation.attempts == 4
    # Called once, after the first attempt failed
    assert reconnects == [1]


@pytest.mark.anyio
async def test_failed_reconnect_does_not_stop_retries():
    async def reconnect():
        raise RuntimeError("factory exploded")

    operation = Recorder(httpx.ConnectError("refused"), BackendResult(data="ok"))
    result = await with_retry(operation, RetryPolicy(max_retries=2), reconnect, sleep=FakeSleep())

    assert result.data == "ok"


@pytest.mark.anyio
async def test_resilient_call_folds_network_errors_into_envelope():
    operation = Recorder(httpx.ConnectError("refused"))

    result = await resilient_call(operation, RetryPolicy(max_retries=1), sleep=FakeSleep())

    assert not result.ok
    assert isinstance(result.error, BackendError)
    assert result.error.status == 0
    assert result.error.is_transient


@pytest.mark.anyio
async def test_resilient_call_keeps_timeout_error_type():
    operation = Recorder("hang")

    result = await resilient_call(
        operation, RetryPolicy(max_retries=0, timeout=0.05), sleep=FakeSleep()
    )

    assert isinstance(result.error, StaleConnectionError)
