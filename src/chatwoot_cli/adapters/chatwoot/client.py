from __future__ import annotations

import asyncio
import json as jsonlib
import math
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Literal, NoReturn

import httpx
import structlog

from chatwoot_cli.adapters.chatwoot.circuit_breaker import CircuitBreaker
from chatwoot_cli.adapters.http_util import request_id_from_headers, timeouts_for
from chatwoot_cli.domain.error_codes import ErrorCode, new_structured_error_with_context
from chatwoot_cli.domain.errors import (
    APIError,
    CircuitBreakerError,
    ClientError,
    RateLimitError,
    wrap_error,
)

log = structlog.get_logger(__name__)

Method = Literal["GET", "POST", "PATCH", "PUT", "DELETE"]

_IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})
REDACTED_BODY = "API request failed (response body redacted for security)"


@dataclass(frozen=True, slots=True)
class RetryConfig:
    max_rate_limit_retries: int = 3
    max_5xx_retries: int = 1
    rate_limit_base_delay: float = 1.0
    server_error_retry_delay: float = 1.0
    circuit_breaker_threshold: int = 5
    circuit_breaker_reset_seconds: float = 30.0

    def rate_limit_backoff(self, attempt: int) -> float:
        # attempt is the 0-based count of 429 retries already made.
        return self.rate_limit_base_delay * (2**attempt)


class AsyncChatwootClient:
    def __init__(
        self,
        *,
        base_url: str,
        api_token: str,
        account_id: int,
        timeout_seconds: float = 30.0,
        verify_tls: bool = True,
        trust_env: bool = False,
        user_agent: str | None = None,
        idempotency_key: str | None = None,
        retry: RetryConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        url = httpx.URL(base_url)
        if not url.scheme or not url.host:
            raise ValueError("base_url must include scheme and host, e.g. https://chatwoot.example")

        base_path = url.path.rstrip("/") + "/"
        self._base_url = url.copy_with(path=base_path)
        self.account_id = account_id

        self._sleep = sleep
        self._retry = retry or RetryConfig()
        self._idempotency_key = idempotency_key
        self._breaker = CircuitBreaker(
            threshold=self._retry.circuit_breaker_threshold,
            reset_seconds=self._retry.circuit_breaker_reset_seconds,
        )

        headers = {
            "api_access_token": api_token,
            "Accept": "application/json",
        }
        if user_agent:
            headers["User-Agent"] = user_agent

        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=timeouts_for(timeout_seconds),
            limits=httpx.Limits(
                max_connections=10,
                max_keepalive_connections=5,
                keepalive_expiry=30.0,
            ),
            verify=verify_tls,
            trust_env=trust_env,
            follow_redirects=False,
        )

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> AsyncChatwootClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: Any,
    ) -> None:
        await self.aclose()

    @property
    def retry_config(self) -> RetryConfig:
        return self._retry

    @property
    def circuit_breaker(self) -> CircuitBreaker:
        return self._breaker

    def reset_circuit_breaker(self) -> None:
        """Forget failures recorded so far, e.g. when reusing the client for a new session."""
        self._breaker.reset()

    def account_path(self, path: str) -> str:
        return f"api/v1/accounts/{self.account_id}/{path.lstrip('/')}"

    def v2_account_path(self, path: str) -> str:
        return f"api/v2/accounts/{self.account_id}/{path.lstrip('/')}"

    def public_path(self, path: str) -> str:
        return f"public/api/v1/{path.lstrip('/')}"

    async def request_json(
        self,
        method: Method,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any | None = None,
    ) -> Any:
        response = await self._request(method, path, params=params, json=json)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ClientError(
                "unexpected API response format (JSON decode failed) "
                f"(status={response.status_code}) at {response.request.url!s}"
            ) from exc

    async def _request(
        self,
        method: Method,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any | None = None,
    ) -> httpx.Response:
        if self._breaker.is_open():
            raise CircuitBreakerError()

        idempotent = method in _IDEMPOTENT_METHODS or bool(self._idempotency_key)
        headers: dict[str, str] = {}
        if json is not None:
            headers["Content-Type"] = "application/json"
        if self._idempotency_key and method not in _IDEMPOTENT_METHODS:
            headers["Idempotency-Key"] = self._idempotency_key

        retries_429 = 0
        retries_5xx = 0
        attempt = 0

        while True:
            attempt += 1
            started = time.monotonic()
            try:
                response = await self._http.request(
                    method, path, params=params, json=json, headers=headers
                )
            except httpx.TimeoutException as exc:
                log.debug("chatwoot.request_timeout", method=method, path=path, attempt=attempt)
                raise new_structured_error_with_context(
                    ErrorCode.TIMEOUT,
                    f"{method} {path} timed out",
                    {"method": method, "path": path},
                ) from exc
            except httpx.TransportError as exc:
                log.debug(
                    "chatwoot.request_failed",
                    method=method,
                    path=path,
                    attempt=attempt,
                    error=str(exc),
                )
                raise ClientError(f"request failed: {exc}") from exc

            status = response.status_code
            log.debug(
                "chatwoot.request_complete",
                method=method,
                path=path,
                status=status,
                attempt=attempt,
                duration_ms=round((time.monotonic() - started) * 1000, 1),
            )

            if status == 429:
                retry_after = parse_retry_after_seconds(response.headers.get("Retry-After"))
                if not idempotent or retries_429 >= self._retry.max_rate_limit_retries:
                    raise RateLimitError(
                        retry_after if retry_after is not None else self._retry.rate_limit_base_delay
                    )
                delay = (
                    retry_after
                    if retry_after is not None
                    else self._retry.rate_limit_backoff(retries_429)
                )
                log.info("chatwoot.rate_limited_retry", delay_seconds=delay, attempt=retries_429 + 1)
                await self._sleep(delay)
                retries_429 += 1
                continue

            if status >= 500:
                self._breaker.record_failure()
                if idempotent and retries_5xx < self._retry.max_5xx_retries:
                    log.info("chatwoot.server_error_retry", status=status, attempt=retries_5xx + 1)
                    await self._sleep(self._retry.server_error_retry_delay)
                    retries_5xx += 1
                    continue

            if status >= 400:
                self._raise_for_status(response)

            if 200 <= status < 300:
                self._breaker.record_success()
            return response

    def _raise_for_status(self, response: httpx.Response) -> NoReturn:
        status = response.status_code
        api_err = APIError(
            status_code=status,
            body=sanitize_error_body(response.text),
            request_id=request_id_from_headers(response.headers),
        )
        raise wrap_error(response.request.method, str(response.request.url), status, api_err)


def parse_retry_after_seconds(value: str | None, *, now: datetime | None = None) -> float | None:
    """Parse a Retry-After header given either as seconds or as an HTTP date."""
    if not value or not value.strip():
        return None
    raw = value.strip()
    try:
        seconds = float(raw)
    except ValueError:
        pass
    else:
        # float() also takes "inf", "nan" and overflowing exponents.
        return max(0.0, seconds) if math.isfinite(seconds) else None
    try:
        when = parsedate_to_datetime(raw)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    current = now or datetime.now(timezone.utc)
    return max(0.0, (when - current).total_seconds())


def sanitize_error_body(body: str) -> str:
    """
    Extract a safe message from an API error body.

    Only the `error`/`message` fields and field-level `errors` are kept; anything else is
    replaced so tokens or personal data in the response never reach the terminal or logs.
    """
    try:
        parsed = jsonlib.loads(body)
    except ValueError:
        return REDACTED_BODY
    if not isinstance(parsed, dict):
        return REDACTED_BODY

    result = ""
    for key in ("error", "message"):
        value = parsed.get(key)
        if isinstance(value, str) and value:
            result = value
            break

    validation = format_validation_errors(parsed.get("errors"))
    if validation:
        if result:
            return f"{result}\nValidation errors:\n{validation}"
        return f"Validation errors:\n{validation}"
    return result or REDACTED_BODY


def format_validation_errors(errors: Any) -> str:
    if not isinstance(errors, dict) or not errors:
        return ""

    lines: list[str] = []
    for field, value in errors.items():
        if isinstance(value, str):
            lines.append(f"  {field}: {value}")
        elif isinstance(value, list):
            lines.extend(f"  {field}: {msg}" for msg in value if isinstance(msg, str))
    return "\n".join(sorted(lines))
