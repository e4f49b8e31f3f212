"""
Resilient provider call policy.

One retry loop for every provider client:
- up to 3 attempts with exponential backoff (tenacity)
- 401/403 short-circuit as AuthenticationError, no retry
- anything else is retried, then wrapped in the provider's error class
- optional cancel event checked before each attempt and while backing off
- an unparseable response raises the provider error class, no retry

Usage:
    result = await resilient_call(
        "claude",
        lambda: client.messages.create(...),
        error_class=ClaudeError,
        cost_fn=lambda raw: (raw.content[0].text, estimate(...)),
    )
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, FrozenSet, Generic, Optional, Tuple, Type, TypeVar

from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .errors import (
    AuthenticationError,
    CallCancelledError,
    TransientProviderError,
)
from .pricing import CostEstimate

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Retry settings shared by all provider clients."""
    max_attempts: int = 3
    non_retryable_statuses: FrozenSet[int] = frozenset({401, 403})
    backoff_multiplier: float = 1.0
    backoff_min: float = 1.0
    backoff_max: float = 10.0

    def is_retryable(self, exc: BaseException) -> bool:
        if isinstance(exc, (CallCancelledError, asyncio.CancelledError)):
            return False
        return status_of(exc) not in self.non_retryable_statuses


DEFAULT_POLICY = RetryPolicy()


@dataclass(frozen=True)
class ProviderResult(Generic[T]):
    """Payload of a provider call plus its cost."""
    payload: T
    cost: CostEstimate = field(default_factory=CostEstimate)
    attempts: int = 1
    mock: bool = False


def status_of(exc: BaseException) -> Optional[int]:
    """
    Pull an HTTP status out of an SDK or HTTP client exception.

    Understands aiohttp (.status), anthropic/openai SDKs (.status_code),
    requests-style (.response.status_code) and googleapiclient (.resp.status).
    """
    for attr in ("status", "status_code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value

    response = getattr(exc, "response", None)
    if response is not None:
        value = getattr(response, "status_code", None)
        if not isinstance(value, int):
            value = getattr(response, "status", None)
        if isinstance(value, int):
            return value

    resp = getattr(exc, "resp", None)
    if resp is not None:
        try:
            return int(getattr(resp, "status", None))
        except (TypeError, ValueError):
            return None
    return None


def _cancellable_sleep(service: str, cancel_event: Optional[asyncio.Event]):
    async def sleep(seconds: float) -> None:
        if cancel_event is None:
            await asyncio.sleep(seconds)
            return
        if cancel_event.is_set():
            raise CallCancelledError(service, "Call cancelled during backoff")
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=max(seconds, 0))
        except asyncio.TimeoutError:
            return
        raise CallCancelledError(service, "Call cancelled during backoff")
    return sleep


def _log_retry(service: str, max_attempts: int):
    def before_sleep(state: RetryCallState) -> None:
        exc = state.outcome.exception() if state.outcome else None
        wait = state.next_action.sleep if state.next_action else 0
        logger.warning(
            f"[{service}] Retry {state.attempt_number}/{max_attempts} after {wait:.1f}s "
            f"({type(exc).__name__}, status={status_of(exc) if exc else None})"
        )
    return before_sleep


async def call_with_retry(
    service: str,
    operation: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy = DEFAULT_POLICY,
    error_class: Type[TransientProviderError] = TransientProviderError,
    cancel_event: Optional[asyncio.Event] = None,
) -> Tuple[T, int]:
    """
    Run operation under the retry policy.

    Returns:
        (raw result, attempts used)

    Raises:
        AuthenticationError: provider answered 401/403 (single attempt)
        CallCancelledError: cancel_event was set
        error_class: every attempt failed
    """
    attempts = 0
    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_exponential(
            multiplier=policy.backoff_multiplier,
            min=policy.backoff_min,
            max=policy.backoff_max,
        ),
        retry=retry_if_exception(policy.is_retryable),
        sleep=_cancellable_sleep(service, cancel_event),
        before_sleep=_log_retry(service, policy.max_attempts),
        reraise=True,
    )

    try:
        async for attempt in retrying:
            with attempt:
                if cancel_event is not None and cancel_event.is_set():
                    raise CallCancelledError(service, "Call cancelled")
                attempts = attempt.retry_state.attempt_number
                result = await operation()
    except (CallCancelledError, asyncio.CancelledError):
        logger.info(f"[{service}] Call cancelled after {attempts} attempt(s)")
        raise
    except Exception as exc:
        status = status_of(exc)
        if status in policy.non_retryable_statuses:
            logger.error(f"[{service}] Authentication failed (HTTP {status})")
            raise AuthenticationError(service, f"Authentication failed (HTTP {status})", status=status) from exc
        logger.error(f"[{service}] Failed after {attempts} attempt(s): {type(exc).__name__}")
        raise error_class(
            service,
            f"Call failed after {attempts} attempt(s)",
            status=status,
            attempts=attempts,
        ) from exc

    return result, attempts


async def resilient_call(
    service: str,
    operation: Callable[[], Awaitable[Any]],
    *,
    policy: RetryPolicy = DEFAULT_POLICY,
    error_class: Type[TransientProviderError] = TransientProviderError,
    cost_fn: Optional[Callable[[Any], Tuple[T, CostEstimate]]] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> ProviderResult[T]:
    """
    call_with_retry() plus cost calculation.

    cost_fn maps the raw provider response to (payload, CostEstimate);
    without it the raw response is the payload and the cost is zero.
    """
    raw, attempts = await call_with_retry(
        service,
        operation,
        policy=policy,
        error_class=error_class,
        cancel_event=cancel_event,
    )
    if cost_fn is None:
        return ProviderResult(payload=raw, cost=CostEstimate.zero(), attempts=attempts)

    # Parse failures are not retried
    try:
        payload, cost = cost_fn(raw)
    except Exception as exc:
        logger.error(f"[{service}] Malformed provider response: {type(exc).__name__}")
        raise error_class(service, "Malformed provider response", attempts=attempts) from exc
    return ProviderResult(payload=payload, cost=cost, attempts=attempts)
