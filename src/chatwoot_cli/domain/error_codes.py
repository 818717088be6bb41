"""Machine-readable error classification.

Any failure raised by the transport or services can be turned into a
:class:`StructuredError` carrying a closed :class:`ErrorCode`, a message, a
retryability flag, a remediation suggestion and free-form context. The CLI
uses it for exit codes and display; programmatic callers use ``retryable``
for retry decisions.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from chatwoot_cli.domain.errors import (
    APIError,
    AuthError,
    CircuitBreakerError,
    RateLimitError,
    find_in_chain,
    format_duration,
)


class ErrorCode(str, Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION_FAILED = "validation_failed"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    CIRCUIT_OPEN = "circuit_open"
    UNKNOWN = "unknown"

    @property
    def is_retryable(self) -> bool:
        """True when a blind retry of the same request may succeed."""
        return _RETRYABLE[self]

    @property
    def suggestion(self) -> str:
        return _SUGGESTIONS[self]


_RETRYABLE: dict[ErrorCode, bool] = {
    ErrorCode.BAD_REQUEST: False,
    ErrorCode.UNAUTHORIZED: False,
    ErrorCode.FORBIDDEN: False,
    ErrorCode.NOT_FOUND: False,
    ErrorCode.CONFLICT: False,
    ErrorCode.VALIDATION_FAILED: False,
    ErrorCode.RATE_LIMITED: True,
    ErrorCode.SERVER_ERROR: True,
    ErrorCode.TIMEOUT: True,
    ErrorCode.CIRCUIT_OPEN: True,
    ErrorCode.UNKNOWN: False,
}

_SUGGESTIONS: dict[ErrorCode, str] = {
    ErrorCode.BAD_REQUEST: "Check the request format and parameters",
    ErrorCode.UNAUTHORIZED: "Run 'chatwoot config validate' and check CHATWOOT_API_TOKEN",
    ErrorCode.FORBIDDEN: "Check your account permissions",
    ErrorCode.NOT_FOUND: "Verify the resource ID exists",
    ErrorCode.CONFLICT: "Refresh the resource and retry; its state may have changed",
    ErrorCode.VALIDATION_FAILED: "Check the input values",
    ErrorCode.RATE_LIMITED: "Wait a moment and retry",
    ErrorCode.SERVER_ERROR: "Try again later; the server encountered an error",
    ErrorCode.TIMEOUT: "Check network connectivity and retry",
    ErrorCode.CIRCUIT_OPEN: "Wait before retrying; too many recent failures",
    ErrorCode.UNKNOWN: "",
}

assert set(_RETRYABLE) == set(ErrorCode) == set(_SUGGESTIONS), "error code tables are incomplete"

_STATUS_CODES: dict[int, ErrorCode] = {
    400: ErrorCode.BAD_REQUEST,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION_FAILED,
    429: ErrorCode.RATE_LIMITED,
}


def error_code_from_status(status_code: int) -> ErrorCode:
    code = _STATUS_CODES.get(status_code)
    if code is not None:
        return code
    if 500 <= status_code < 600:
        return ErrorCode.SERVER_ERROR
    return ErrorCode.UNKNOWN


_OPTIONAL_FIELDS = ("suggestion", "context", "allowed_values")


class ErrorPayload(BaseModel):
    """Wire form of a structured error."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    code: ErrorCode
    message: str
    retryable: bool
    suggestion: str = ""
    context: dict[str, Any] = Field(default_factory=dict)
    allowed_values: tuple[str, ...] = ()

    def to_wire(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        for key in _OPTIONAL_FIELDS:
            if not data.get(key):
                data.pop(key, None)
        return data


class StructuredError(Exception):
    """Canonical, immutable, serializable error record."""

    def __init__(self, payload: ErrorPayload) -> None:
        super().__init__(f"[{payload.code.value}] {payload.message}")
        self.__dict__["_payload"] = payload

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "_payload" or name in ErrorPayload.model_fields:
            raise AttributeError(f"StructuredError.{name} is read-only")
        super().__setattr__(name, value)

    def __repr__(self) -> str:
        return f"StructuredError(code={self.code.value!r}, message={self.message!r})"

    def __reduce__(self) -> tuple[Any, ...]:
        return (self.__class__, (self._payload,))

    @property
    def payload(self) -> ErrorPayload:
        # The model is frozen but its context dict is not.
        return self._payload.model_copy(deep=True)

    @property
    def code(self) -> ErrorCode:
        return self._payload.code

    @property
    def message(self) -> str:
        return self._payload.message

    @property
    def retryable(self) -> bool:
        return self._payload.retryable

    @property
    def suggestion(self) -> str:
        return self._payload.suggestion

    @property
    def context(self) -> dict[str, Any]:
        return dict(self._payload.context)

    @property
    def allowed_values(self) -> tuple[str, ...]:
        return self._payload.allowed_values

    def to_dict(self) -> dict[str, Any]:
        return self._payload.to_wire()

    def to_json(self, *, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StructuredError:
        return cls(ErrorPayload.model_validate(dict(data)))

    @classmethod
    def from_json(cls, raw: str | bytes) -> StructuredError:
        return cls(ErrorPayload.model_validate_json(raw))


def _build(
    code: ErrorCode,
    message: str,
    *,
    context: Mapping[str, Any] | None = None,
    suggestion: str | None = None,
) -> StructuredError:
    return StructuredError(
        ErrorPayload(
            code=code,
            message=message,
            retryable=code.is_retryable,
            suggestion=code.suggestion if suggestion is None else suggestion,
            context=dict(context or {}),
        )
    )


def new_structured_error(code: ErrorCode, message: str) -> StructuredError:
    return _build(code, message)


def new_structured_error_with_context(
    code: ErrorCode, message: str, context: Mapping[str, Any]
) -> StructuredError:
    return _build(code, message, context=context)


def new_validation_error(field: str, got: str, allowed: Sequence[str]) -> StructuredError:
    """
    Validation failure that lists the allowed values.

    ``allowed_values`` keeps the caller's order so an agent can pick a valid value and retry
    without parsing the message.
    """
    joined = ", ".join(allowed)
    quoted = json.dumps(got, ensure_ascii=False)
    return StructuredError(
        ErrorPayload(
            code=ErrorCode.VALIDATION_FAILED,
            message=f"invalid {field} {quoted}: must be one of {joined}",
            retryable=False,
            suggestion=f"Use one of: {joined}",
            context={"field": field, "got": got},
            allowed_values=tuple(allowed),
        )
    )


def structured_error_from_api_error(api_err: APIError) -> StructuredError:
    context: dict[str, Any] = {"status_code": api_err.status_code}
    if api_err.request_id:
        context["request_id"] = api_err.request_id
    return _build(error_code_from_status(api_err.status_code), api_err.body, context=context)


def structured_error_from_error(err: BaseException | None) -> StructuredError | None:
    """
    Convert any error into a :class:`StructuredError`.

    Each known kind is looked up through the whole cause chain, in priority order: an existing
    StructuredError (returned as is), APIError, RateLimitError, AuthError, CircuitBreakerError.
    Anything else is ``unknown``. Never raises; returns None only for None.
    """
    if err is None:
        return None

    structured = find_in_chain(err, StructuredError)
    if structured is not None:
        return structured

    api_err = find_in_chain(err, APIError)
    if api_err is not None:
        return structured_error_from_api_error(api_err)

    rate_limit_err = find_in_chain(err, RateLimitError)
    if rate_limit_err is not None:
        return _build(
            ErrorCode.RATE_LIMITED,
            str(rate_limit_err),
            context={"retry_after": format_duration(rate_limit_err.retry_after)},
        )

    auth_err = find_in_chain(err, AuthError)
    if auth_err is not None:
        return _build(ErrorCode.UNAUTHORIZED, str(auth_err))

    cb_err = find_in_chain(err, CircuitBreakerError)
    if cb_err is not None:
        return _build(ErrorCode.CIRCUIT_OPEN, str(cb_err))

    return _build(ErrorCode.UNKNOWN, _safe_str(err), suggestion="")


def _safe_str(err: BaseException) -> str:
    try:
        return str(err)
    except Exception:  # noqa: BLE001
        return err.__class__.__name__
