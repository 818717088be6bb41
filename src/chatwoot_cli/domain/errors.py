"""Raw error kinds raised by the Chatwoot transport and services.

These are the inputs to classification (see ``domain.error_codes``). Every kind
derives from :class:`ClientError`; wrapping uses explicit exception chaining
(``__cause__``) so classification can see through wrappers.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from typing import TypeVar

MAX_UNWRAP_DEPTH = 16

_E = TypeVar("_E", bound=BaseException)


class ClientError(Exception):
    """Base class for Chatwoot API errors."""


class APIError(ClientError):
    """Non-2xx HTTP result (status code, sanitized body, optional request id)."""

    def __init__(self, status_code: int, body: str, request_id: str = "") -> None:
        self.status_code = status_code
        self.body = body
        self.request_id = request_id
        super().__init__(f"API error (status {status_code}): {body}")


class RateLimitError(ClientError):
    """Request was rate limited (HTTP 429) and will not be retried further."""

    def __init__(self, retry_after: float) -> None:
        self.retry_after = float(retry_after)
        super().__init__(f"rate limit exceeded, retry after {format_duration(self.retry_after)}")


class AuthError(ClientError):
    """Authentication failed before or while talking to the API."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"authentication error: {reason}")


class CircuitBreakerError(ClientError):
    """The client's circuit breaker is open; no request was sent."""

    def __init__(self) -> None:
        super().__init__("circuit breaker is open, too many recent failures")


class ContextualError(ClientError):
    """Adds request context (method, URL, status) around an underlying cause."""

    def __init__(self, method: str, url: str, status_code: int, cause: BaseException) -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.cause = cause
        super().__init__(f"{method} {url} failed (status {status_code}): {cause}")
        self.__cause__ = cause


def wrap_error(method: str, url: str, status_code: int, err: BaseException) -> ContextualError:
    return ContextualError(method, url, status_code, err)


def iter_error_chain(err: BaseException | None) -> Iterator[BaseException]:
    """
    Yield ``err`` followed by its explicit causes.

    Stops after ``MAX_UNWRAP_DEPTH`` links or when a link repeats, so cyclic chains terminate.
    """
    seen: set[int] = set()
    current = err
    depth = 0
    while current is not None and depth < MAX_UNWRAP_DEPTH and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__
        depth += 1


def find_in_chain(err: BaseException | None, kind: type[_E]) -> _E | None:
    for link in iter_error_chain(err):
        if isinstance(link, kind):
            return link
    return None


def is_rate_limit_error(err: BaseException | None) -> bool:
    return find_in_chain(err, RateLimitError) is not None


def is_auth_error(err: BaseException | None) -> bool:
    return find_in_chain(err, AuthError) is not None


def is_circuit_breaker_error(err: BaseException | None) -> bool:
    return find_in_chain(err, CircuitBreakerError) is not None


def is_not_found_error(err: BaseException | None) -> bool:
    """
    Best-effort check for "resource not found" failures.

    True for a 404 ``APIError`` anywhere on the chain, or when the error body or rendered
    message mentions "not found" (case-insensitive). Some endpoints report missing resources
    with non-standard statuses, so the substring match is deliberately loose and can produce
    false positives on unrelated messages.
    """
    if err is None:
        return False
    api_err = find_in_chain(err, APIError)
    if api_err is not None:
        return api_err.status_code == 404 or "not found" in api_err.body.lower()
    return "not found" in str(err).lower()


def format_duration(seconds: float) -> str:
    """Render a duration compactly: ``0s``, ``500ms``, ``1.5s``, ``1m30s``, ``1h0m0s``."""
    if seconds == 0:
        return "0s"
    if not math.isfinite(seconds):
        return str(seconds)
    sign = "-" if seconds < 0 else ""
    seconds = abs(seconds)

    if seconds < 1:
        millis = seconds * 1000
        if millis >= 1:
            return f"{sign}{_trim_number(millis)}ms"
        micros = seconds * 1_000_000
        if micros >= 1:
            return f"{sign}{_trim_number(micros)}µs"
        return f"{sign}{_trim_number(seconds * 1_000_000_000)}ns"

    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    out = f"{_trim_number(secs)}s"
    if hours:
        return f"{sign}{int(hours)}h{int(minutes)}m{out}"
    if minutes:
        return f"{sign}{int(minutes)}m{out}"
    return f"{sign}{out}"


def _trim_number(value: float) -> str:
    # Up to nanosecond precision, without trailing zeros.
    text = f"{value:.9f}".rstrip("0").rstrip(".")
    return text or "0"
