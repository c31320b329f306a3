"""Retry policy: Tenacity-based backoff around the downstream pipeline.

The retry policy re-invokes the rest of the chain (authentication, logging,
transport) after classifying the outcome of an attempt as transient:
- Transport failures flagged ``retryable`` (connect, read, timeout, protocol)
- Throttling (429, with Retry-After support)
- Request timeout (408) and gateway/server errors (500, 502, 503, 504)
- One 401 per request after the authentication policy invalidated the
  rejected token, resent at once with a fresh one

Design:
- **Bounded attempts**: never more than ``max_retries + 1`` sends
- **Wall-clock budget**: no retry is scheduled whose sleep would end past
  ``max_total_elapsed``
- **Full-jitter exponential backoff**: reduces synchronized retry storms
- **Retry-After support**: server guidance wins, capped at ``max_delay``
- **Last outcome surfaces**: the final response is returned unchanged, or the
  final transport error re-raised, so callers see what the service said

Example:
    >>> from AdoRest.Core.retry import RetryOptions, RetryPolicy
    >>> policy = RetryPolicy(RetryOptions.exponential(max_retries=3))
"""

from __future__ import annotations

import email.utils
import enum
import logging
import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Optional

import httpx
import tenacity
from tenacity import RetryCallState, retry_if_exception, retry_if_result

from .constants import (
    ATTEMPT_EXTENSION,
    AUTH_REFRESH_ATTEMPT,
    DEFAULT_INITIAL_DELAY,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_TOTAL_ELAPSED,
    META_EXTENSION,
    RETRY_AFTER,
    RETRYABLE_STATUS_CODES,
)
from .errors import ConfigurationError, TransportError
from .pipeline import NextPolicy, Policy

logger = logging.getLogger(__name__)


class RetryMode(str, enum.Enum):
    """Backoff shape between attempts."""

    EXPONENTIAL = "exponential"
    FIXED = "fixed"
    NONE = "none"


@dataclass(frozen=True)
class RetryOptions:
    """Retry configuration for one client."""

    mode: RetryMode = RetryMode.EXPONENTIAL
    max_retries: int = DEFAULT_MAX_RETRIES
    initial_delay: float = DEFAULT_INITIAL_DELAY
    max_delay: float = DEFAULT_MAX_DELAY
    max_total_elapsed: float = DEFAULT_MAX_TOTAL_ELAPSED

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.max_retries < 0:
            raise ConfigurationError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.initial_delay < 0:
            raise ConfigurationError(f"initial_delay must be >= 0, got {self.initial_delay}")
        if self.max_delay < 0:
            raise ConfigurationError(f"max_delay must be >= 0, got {self.max_delay}")
        if self.max_total_elapsed < 0:
            raise ConfigurationError(
                f"max_total_elapsed must be >= 0, got {self.max_total_elapsed}"
            )

    @classmethod
    def exponential(cls, **overrides) -> "RetryOptions":
        return cls(mode=RetryMode.EXPONENTIAL, **overrides)

    @classmethod
    def fixed(cls, delay: float = DEFAULT_INITIAL_DELAY, **overrides) -> "RetryOptions":
        return cls(mode=RetryMode.FIXED, initial_delay=delay, **overrides)

    @classmethod
    def none(cls) -> "RetryOptions":
        return cls(mode=RetryMode.NONE, max_retries=0)

    @property
    def max_attempts(self) -> int:
        """Total sends allowed, including the first one."""
        if self.mode is RetryMode.NONE:
            return 1
        return self.max_retries + 1

    def with_max_retries(self, max_retries: int) -> "RetryOptions":
        return replace(self, max_retries=max_retries)


# ============================================================================
# Classification
# ============================================================================


def is_retryable_status(status_code: int) -> bool:
    """Return ``True`` when ``status_code`` signals a transient service condition."""

    return status_code in RETRYABLE_STATUS_CODES


def is_retryable_error(exc: BaseException) -> bool:
    """Return ``True`` for transport failures worth another attempt."""

    if isinstance(exc, TransportError):
        return exc.retryable
    if isinstance(exc, httpx.TransportError):
        return not isinstance(exc, (httpx.UnsupportedProtocol, httpx.LocalProtocolError))
    return False


def is_auth_refresh_retry(request: httpx.Request, response: httpx.Response) -> bool:
    """Return ``True`` when this attempt's 401 invalidated a token and warrants a resend."""

    if response.status_code != 401:
        return False
    meta = request.extensions.get(META_EXTENSION) or {}
    return meta.get(AUTH_REFRESH_ATTEMPT) == request.extensions.get(ATTEMPT_EXTENSION)


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Convert a Retry-After header value (seconds or HTTP-date) into seconds."""

    if not value:
        return None

    try:
        delay = float(value)
    except ValueError:
        try:
            dt = email.utils.parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        delay = (dt - datetime.now(timezone.utc)).total_seconds()

    return max(0.0, delay)


class _WaitRetryAfter(tenacity.wait.wait_base):
    """Wait strategy that honours Retry-After before falling back to backoff."""

    def __init__(
        self,
        fallback: tenacity.wait.wait_base,
        cap_s: float,
        immediate: Callable[[httpx.Response], bool] = lambda response: False,
    ) -> None:
        self._fallback = fallback
        self._cap_s = cap_s
        self._immediate = immediate

    def __call__(self, retry_state: RetryCallState) -> float:
        outcome = retry_state.outcome
        if outcome is not None and not outcome.failed:
            response = outcome.result()
            if self._immediate(response):
                return 0.0
            delay = parse_retry_after(getattr(response, "headers", {}).get(RETRY_AFTER))
            if delay is not None:
                return min(delay, self._cap_s)
        return min(float(self._fallback(retry_state)), self._cap_s)


def _log_before_sleep(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    next_action = retry_state.next_action
    wait_ms = int(next_action.sleep * 1000) if next_action is not None else 0
    if outcome is not None and outcome.failed:
        reason = repr(outcome.exception())
    elif outcome is not None:
        reason = f"status={outcome.result().status_code}"
    else:
        reason = "unknown"
    logger.warning(
        "retrying request attempt=%d wait_ms=%d reason=%s",
        retry_state.attempt_number,
        wait_ms,
        reason,
    )


# ============================================================================
# Policy
# ============================================================================


class RetryPolicy(Policy):
    """Re-send the downstream chain on transient failures.

    Args:
        options: Retry configuration.
        sleep: Sleep function; injectable so tests run instantly.
    """

    def __init__(
        self,
        options: Optional[RetryOptions] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.options = options or RetryOptions()
        self._sleep = sleep

    def _build_retrying(self, request: httpx.Request) -> tenacity.Retrying:
        opts = self.options
        stop = tenacity.stop_after_attempt(opts.max_attempts)
        if opts.max_total_elapsed > 0:
            stop = stop | tenacity.stop_before_delay(opts.max_total_elapsed)

        def _retry_response(response: httpx.Response) -> bool:
            return is_retryable_status(response.status_code) or is_auth_refresh_retry(
                request, response
            )

        if opts.mode is RetryMode.FIXED:
            fallback: tenacity.wait.wait_base = tenacity.wait_fixed(opts.initial_delay)
        else:
            fallback = tenacity.wait_random_exponential(
                multiplier=opts.initial_delay,
                max=opts.max_delay,
            )

        return tenacity.Retrying(
            retry=(
                retry_if_exception(is_retryable_error)
                | retry_if_result(_retry_response)
            ),
            stop=stop,
            wait=_WaitRetryAfter(
                fallback,
                cap_s=opts.max_delay,
                immediate=lambda response: is_auth_refresh_retry(request, response),
            ),
            sleep=self._sleep,
            before_sleep=_log_before_sleep,
            retry_error_callback=_last_outcome,
            reraise=True,
        )

    def send(self, request: httpx.Request, next_policy: NextPolicy) -> httpx.Response:
        if self.options.max_attempts <= 1:
            request.extensions[ATTEMPT_EXTENSION] = 1
            return next_policy(request)

        def _attempt() -> httpx.Response:
            request.extensions[ATTEMPT_EXTENSION] = request.extensions.get(ATTEMPT_EXTENSION, 0) + 1
            return next_policy(request)

        request.extensions[ATTEMPT_EXTENSION] = 0
        return self._build_retrying(request)(_attempt)

    def __repr__(self) -> str:
        return f"RetryPolicy({self.options!r})"


def _last_outcome(retry_state: RetryCallState) -> httpx.Response:
    """Return the final response (or re-raise the final error) once retries are exhausted."""

    outcome = retry_state.outcome
    assert outcome is not None
    logger.warning(
        "retries exhausted after %d attempts",
        retry_state.attempt_number,
    )
    return outcome.result()


__all__ = [
    "RetryMode",
    "RetryOptions",
    "RetryPolicy",
    "is_retryable_status",
    "is_retryable_error",
    "is_auth_refresh_retry",
    "parse_retry_after",
]
