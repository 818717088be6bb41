from __future__ import annotations

import pytest

from chatwoot_cli.domain.errors import (
    APIError,
    AuthError,
    CircuitBreakerError,
    ClientError,
    ContextualError,
    RateLimitError,
    find_in_chain,
    format_duration,
    is_auth_error,
    is_circuit_breaker_error,
    is_not_found_error,
    is_rate_limit_error,
    iter_error_chain,
    wrap_error,
)


def test_error_kinds_render_messages() -> None:
    assert str(APIError(404, "gone")) == "API error (status 404): gone"
    assert str(RateLimitError(1.5)) == "rate limit exceeded, retry after 1.5s"
    assert str(AuthError("bad token")) == "authentication error: bad token"
    assert str(CircuitBreakerError()) == "circuit breaker is open, too many recent failures"


def test_all_kinds_are_client_errors() -> None:
    for err in (
        APIError(500, "x"),
        RateLimitError(1),
        AuthError("x"),
        CircuitBreakerError(),
        wrap_error("GET", "u", 500, RuntimeError("x")),
    ):
        assert isinstance(err, ClientError)


def test_wrap_error_exposes_cause() -> None:
    inner = APIError(403, "forbidden")
    err = wrap_error("DELETE", "https://chatwoot.example/api/v1/accounts/1/webhooks/2", 403, inner)

    assert isinstance(err, ContextualError)
    assert err.cause is inner
    assert err.__cause__ is inner
    assert err.method == "DELETE"
    assert err.status_code == 403
    assert str(err) == (
        "DELETE https://chatwoot.example/api/v1/accounts/1/webhooks/2 failed (status 403): "
        "API error (status 403): forbidden"
    )


def test_iter_error_chain_follows_causes() -> None:
    inner = AuthError("x")
    outer = wrap_error("GET", "u", 401, inner)
    assert list(iter_error_chain(outer)) == [outer, inner]
    assert list(iter_error_chain(None)) == []
    assert find_in_chain(outer, AuthError) is inner
    assert find_in_chain(outer, RateLimitError) is None


def test_kind_predicates_see_through_wrappers() -> None:
    assert is_rate_limit_error(wrap_error("GET", "u", 429, RateLimitError(2)))
    assert is_auth_error(wrap_error("GET", "u", 401, AuthError("x")))
    assert is_circuit_breaker_error(wrap_error("GET", "u", 0, CircuitBreakerError()))
    assert not is_rate_limit_error(RuntimeError("x"))
    assert not is_auth_error(None)
    assert not is_circuit_breaker_error(None)


def test_is_not_found_error_cases() -> None:
    assert not is_not_found_error(None)
    assert is_not_found_error(APIError(404, "missing"))
    assert is_not_found_error(wrap_error("GET", "u", 404, APIError(404, "")))
    assert is_not_found_error(APIError(400, "Conversation Not Found"))
    assert not is_not_found_error(APIError(500, "boom"))
    assert is_not_found_error(RuntimeError("contact NOT FOUND"))
    assert not is_not_found_error(RuntimeError("timeout"))


def test_is_not_found_error_substring_match_is_loose() -> None:
    # Best-effort: any message mentioning "not found" matches.
    assert is_not_found_error(RuntimeError("user preference not found in config, using default"))


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, "0s"),
        (0.5, "500ms"),
        (0.0015, "1.5ms"),
        (1, "1s"),
        (1.5, "1.5s"),
        (30, "30s"),
        (90, "1m30s"),
        (3600, "1h0m0s"),
        (3725, "1h2m5s"),
        (-2, "-2s"),
        (float("inf"), "inf"),
        (float("nan"), "nan"),
    ],
)
def test_format_duration(seconds: float, expected: str) -> None:
    assert format_duration(seconds) == expected


def test_rate_limit_error_accepts_non_finite_delay() -> None:
    err = RateLimitError(float("inf"))
    assert str(err) == "rate limit exceeded, retry after inf"
