"""
Timeout, retry and reconnect around remote calls.

A long-idle connection to the hosted backend can look open while never
completing a request.  ``with_retry`` races each attempt against a timer,
treats a timeout as a stale connection, swaps in a fresh transport handle on
the first retry and backs off exponentially between attempts.

Worst case wall clock for one call is bounded by
``(max_retries + 1) * timeout + sum(backoff delays)``.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional
import logging

import anyio
import httpx

from adapters.backend_client import BackendResult
from app.exceptions import BackendError, StaleConnectionError

logger = logging.getLogger("cooksmart.resilience")

Operation = Callable[[], Awaitable[Any]]
Sleeper = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 2
    timeout: float = 5.0
    base_delay: float = 1.0
    max_delay: float = 8.0

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def backoff(self, retry_number: int) -> float:
        """Delay before retry ``retry_number`` (1-based)."""
        return min(self.base_delay * (2 ** (retry_number - 1)), self.max_delay)

    def backoff_schedule(self) -> List[float]:
        return [self.backoff(n) for n in range(1, self.max_retries + 1)]

    def worst_case_duration(self) -> float:
        return self.max_attempts * self.timeout + sum(self.backoff_schedule())

    @classmethod
    def from_settings(cls, settings) -> "RetryPolicy":
        return cls(
            max_retries=settings.max_retries,
            timeout=settings.request_timeout_sec,
            base_delay=settings.retry_base_delay_sec,
            max_delay=settings.retry_max_delay_sec,
        )


def _transient_envelope(result: Any) -> Optional[BackendError]:
    """The error carried by a result envelope, if it is worth retrying."""
    error = getattr(result, "error", None)
    if isinstance(error, BackendError) and error.is_transient:
        return error
    return None


async def with_retry(
    operation: Operation,
    policy: RetryPolicy = RetryPolicy(),
    reconnect: Optional[Callable[[], Awaitable[Any]]] = None,
    *,
    name: str = "remote call",
    sleep: Sleeper = anyio.sleep,
) -> Any:
    """Run ``operation`` with a per-attempt timeout and bounded retries.

    ``operation`` takes no arguments and returns a result envelope.  It must
    look up the transport handle when called (not capture it up front) so
    that the handle created by ``reconnect`` is used on the next attempt.

    Failures are raised transport errors, timeouts and envelopes whose error
    is transient (no response or 5xx).  Any other envelope, success or not,
    is returned straight away.  When every attempt fails the last exception
    is raised, or the last error envelope returned.
    """
    last_exc: Optional[BaseException] = None
    last_result: Any = None

    for attempt in range(1, policy.max_attempts + 1):
        if attempt > 1:
            retry_number = attempt - 1
            if retry_number == 1 and reconnect is not None:
                try:
                    await reconnect()
                except Exception:
                    logger.exception("Reconnect failed before retrying %s", name)
            delay = policy.backoff(retry_number)
            logger.warning(
                "%s: retry %d/%d in %.2fs", name, retry_number, policy.max_retries, delay
            )
            await sleep(delay)

        try:
            with anyio.fail_after(policy.timeout):
                result = await operation()
        except TimeoutError:
            last_exc = StaleConnectionError(
                f"{name} timed out after {policy.timeout}s", timeout=policy.timeout
            )
            last_result = None
            logger.warning("%s: attempt %d timed out", name, attempt)
            continue
        except (httpx.HTTPError, BackendError) as exc:
            last_exc = exc
            last_result = None
            logger.warning("%s: attempt %d failed: %s", name, attempt, exc)
            continue

        transient = _transient_envelope(result)
        if transient is None:
            if attempt > 1:
                logger.info("%s succeeded on attempt %d", name, attempt)
            return result

        last_exc = None
        last_result = result
        logger.warning(
            "%s: attempt %d returned HTTP %d: %s",
            name,
            attempt,
            transient.status,
            transient.message,
        )

    logger.error("%s failed after %d attempts", name, policy.max_attempts)
    if last_exc is not None:
        raise last_exc
    return last_result


async def resilient_call(
    operation: Operation,
    policy: RetryPolicy = RetryPolicy(),
    reconnect: Optional[Callable[[], Awaitable[Any]]] = None,
    *,
    name: str = "remote call",
    sleep: Sleeper = anyio.sleep,
) -> BackendResult:
    """``with_retry`` that always resolves to a ``BackendResult``.

    Timeouts and network failures that survive every retry are folded into
    the envelope's ``error`` so callers handle a single shape.
    """
    try:
        return await with_retry(operation, policy, reconnect, name=name, sleep=sleep)
    except BackendError as exc:
        return BackendResult(error=exc)
    except httpx.HTTPError as exc:
        return BackendResult(
            error=BackendError(f"Network error during {name}: {exc}", status=0)
        )
