"""
Retry Policy - Exponential backoff strategy for embedding provider calls.

A single reusable strategy object, parameterized by attempt budget and
backoff curve, built on tenacity.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Tuple, Type
import logging
import re
import time

import openai
from tenacity import (
    Retrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from match_engine.config_loader import RetryConfig

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS: Tuple[Type[BaseException], ...] = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
    TimeoutError,
    ConnectionError,
)

RATE_LIMIT_WAIT_CAP_SECONDS = 120.0


def _parse_reset_duration(value: str) -> float:
    """Parse a reset-timer header value like '1s', '500ms', '1m30s' into seconds."""
    total = 0.0
    for amount, unit in re.findall(r"([\d.]+)(ms|s|m|h)", value):
        a = float(amount)
        if unit == "ms":
            total += a / 1000
        elif unit == "s":
            total += a
        elif unit == "m":
            total += a * 60
        else:  # h
            total += a * 3600
    return total


def _wait_from_rate_limit_headers(exc: BaseException) -> float:
    """Extract the longest declared wait from rate-limit response headers.

    Reads (taking the maximum):
      - ``retry-after``                standard HTTP, plain seconds
      - ``x-ratelimit-reset-requests`` request-quota reset duration
      - ``x-ratelimit-reset-tokens``   token-quota reset duration

    Returns 0.0 if no usable header is present.
    """
    response = getattr(exc, "response", None)
    headers = getattr(response, "headers", None)
    if not headers:
        return 0.0

    candidates = []
    retry_after = headers.get("retry-after", "")
    if retry_after:
        try:
            candidates.append(float(retry_after))
        except ValueError:
            pass

    for header in ("x-ratelimit-reset-requests", "x-ratelimit-reset-tokens"):
        parsed = _parse_reset_duration(headers.get(header, "") or "")
        if parsed > 0:
            candidates.append(parsed)

    return max(candidates) if candidates else 0.0


def _log_retry(retry_state: RetryCallState) -> None:
    """Log a warning before each retry sleep."""
    exc = retry_state.outcome.exception()
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        "Embedding call failed (attempt %s). Waiting %.2fs before retry. Details: %s",
        retry_state.attempt_number, wait, exc,
    )


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff with jitter and a fixed attempt budget.

    Delay before attempt n+1 is ``base_delay * multiplier ** (n - 1)`` capped
    at ``max_delay``, plus up to ``jitter`` seconds of random noise. Rate-limit
    errors that declare a reset time wait for that instead.
    """
    max_attempts: int = 3
    base_delay: float = 1.0
    multiplier: float = 2.0
    max_delay: float = 30.0
    jitter: float = 0.5
    retry_on: Tuple[Type[BaseException], ...] = TRANSIENT_ERRORS
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False)

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            base_delay=config.base_delay_seconds,
            multiplier=config.multiplier,
            max_delay=config.max_delay_seconds,
            jitter=config.jitter_seconds,
        )

    def is_retryable(self, exc: BaseException) -> bool:
        return isinstance(exc, self.retry_on)

    def _wait(self, retry_state: RetryCallState) -> float:
        exc = retry_state.outcome.exception()
        if isinstance(exc, openai.RateLimitError):
            declared = _wait_from_rate_limit_headers(exc)
            if declared > 0:
                return min(declared, RATE_LIMIT_WAIT_CAP_SECONDS)

        backoff = wait_exponential(
            multiplier=self.base_delay,
            exp_base=self.multiplier,
            max=self.max_delay,
        )
        if self.jitter > 0:
            backoff = backoff + wait_random(0, self.jitter)
        return backoff(retry_state)

    def retrying(self) -> Retrying:
        return Retrying(
            retry=retry_if_exception_type(self.retry_on),
            wait=self._wait,
            stop=stop_after_attempt(self.max_attempts),
            before_sleep=_log_retry,
            sleep=self.sleep,
            reraise=True,
        )

    def call(self, fn: Callable[..., Any], *args, **kwargs) -> Any:
        """Run fn under this policy; the last failure propagates unchanged."""
        return self.retrying()(fn, *args, **kwargs)
