from __future__ import annotations

from chatwoot_cli.domain.error_codes import (
    ErrorCode,
    new_structured_error,
    new_validation_error,
    structured_error_from_error,
)
from chatwoot_cli.domain.errors import (
    MAX_UNWRAP_DEPTH,
    APIError,
    AuthError,
    CircuitBreakerError,
    ClientError,
    RateLimitError,
    wrap_error,
)


def _chain(err: BaseException, wrappers: int) -> BaseException:
    current = err
    for i in range(wrappers):
        outer = RuntimeError(f"layer {i}")
        outer.__cause__ = current
        current = outer
    return current


def test_none_maps_to_none() -> None:
    assert structured_error_from_error(None) is None


def test_existing_structured_error_is_returned_unchanged() -> None:
    err = new_structured_error(ErrorCode.CONFLICT, "stale")
    assert structured_error_from_error(err) is err


def test_structured_error_found_behind_wrapper_is_returned_unchanged() -> None:
    inner = new_validation_error("type", "x", ["account", "agent"])
    outer = wrap_error("GET", "https://chatwoot.example/x", 0, inner)
    assert structured_error_from_error(outer) is inner


def test_api_error_not_found_with_request_id() -> None:
    err = APIError(status_code=404, body="resource not found", request_id="req-404")
    result = structured_error_from_error(err)

    assert result is not None
    assert result.code is ErrorCode.NOT_FOUND
    assert result.message == "resource not found"
    assert result.retryable is False
    assert result.context == {"status_code": 404, "request_id": "req-404"}


def test_api_error_without_request_id_has_only_status_context() -> None:
    result = structured_error_from_error(APIError(status_code=422, body="Name is blank"))
    assert result is not None
    assert result.code is ErrorCode.VALIDATION_FAILED
    assert result.context == {"status_code": 422}


def test_wrapped_server_error_is_classified_through_wrapper() -> None:
    err = wrap_error(
        "GET",
        "https://chatwoot.example/api/v1/accounts/1/webhooks",
        500,
        APIError(status_code=500, body="internal"),
    )
    result = structured_error_from_error(err)

    assert result is not None
    assert result.code is ErrorCode.SERVER_ERROR
    assert result.retryable is True
    assert result.message == "internal"


def test_api_error_reached_through_raise_from() -> None:
    try:
        try:
            raise APIError(status_code=401, body="Invalid token")
        except APIError as exc:
            raise ClientError("listing failed") from exc
    except ClientError as err:
        result = structured_error_from_error(err)

    assert result is not None
    assert result.code is ErrorCode.UNAUTHORIZED


def test_rate_limit_error_carries_retry_after_duration() -> None:
    result = structured_error_from_error(RateLimitError(90))

    assert result is not None
    assert result.code is ErrorCode.RATE_LIMITED
    assert result.retryable is True
    assert result.message == "rate limit exceeded, retry after 1m30s"
    assert result.context == {"retry_after": "1m30s"}


def test_auth_error_is_unauthorized_and_not_retryable() -> None:
    result = structured_error_from_error(AuthError("token revoked"))
    assert result is not None
    assert result.code is ErrorCode.UNAUTHORIZED
    assert result.retryable is False
    assert result.message == "authentication error: token revoked"


def test_circuit_breaker_error_is_circuit_open() -> None:
    result = structured_error_from_error(wrap_error("GET", "u", 0, CircuitBreakerError()))
    assert result is not None
    assert result.code is ErrorCode.CIRCUIT_OPEN
    assert result.retryable is True


def test_api_error_wins_over_rate_limit_on_same_chain() -> None:
    rate = RateLimitError(1)
    api = APIError(status_code=503, body="unavailable")
    api.__cause__ = rate
    result = structured_error_from_error(api)
    assert result is not None
    assert result.code is ErrorCode.SERVER_ERROR


def test_generic_error_is_unknown() -> None:
    result = structured_error_from_error(RuntimeError("disk on fire"))

    assert result is not None
    assert result.code is ErrorCode.UNKNOWN
    assert result.retryable is False
    assert result.suggestion == ""
    assert result.message == "disk on fire"


def test_cyclic_chain_terminates() -> None:
    a = RuntimeError("a")
    b = RuntimeError("b")
    a.__cause__ = b
    b.__cause__ = a

    result = structured_error_from_error(a)
    assert result is not None
    assert result.code is ErrorCode.UNKNOWN
    assert result.message == "a"


def test_known_kind_within_depth_limit_is_found() -> None:
    err = _chain(AuthError("expired"), MAX_UNWRAP_DEPTH - 1)
    result = structured_error_from_error(err)
    assert result is not None
    assert result.code is ErrorCode.UNAUTHORIZED


def test_known_kind_beyond_depth_limit_is_unknown() -> None:
    err = _chain(AuthError("expired"), MAX_UNWRAP_DEPTH)
    result = structured_error_from_error(err)
    assert result is not None
    assert result.code is ErrorCode.UNKNOWN


def test_implicit_context_is_not_followed() -> None:
    try:
        try:
            raise AuthError("expired")
        except AuthError:
            raise RuntimeError("cleanup failed")  # noqa: B904
    except RuntimeError as err:
        result = structured_error_from_error(err)

    assert result is not None
    assert result.code is ErrorCode.UNKNOWN


def test_unprintable_error_falls_back_to_class_name() -> None:
    class Broken(Exception):
        def __str__(self) -> str:
            raise RuntimeError("no")

    result = structured_error_from_error(Broken())
    assert result is not None
    assert result.code is ErrorCode.UNKNOWN
    assert result.message == "Broken"
