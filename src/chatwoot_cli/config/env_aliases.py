"""Flat environment variable names mapped onto nested settings.

`CHATWOOT__BASE_URL` style nested variables work through pydantic-settings directly; this
module adds the documented flat names (`CHATWOOT_BASE_URL`, `CHATWOOT_MAX_5XX_RETRIES`, ...).
"""
from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from typing import Any


def _set_nested(data: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    node = data
    for part in path[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[path[-1]] = value


def _apply_alias_mappings(
    env: Mapping[str, str],
    data: dict[str, Any],
    mappings: Iterable[tuple[str, tuple[str, ...]]],
) -> None:
    for env_name, path in mappings:
        value = env.get(env_name)
        if value:
            _set_nested(data, path, value.strip())


FLAT_ENV_MAPPINGS: tuple[tuple[str, tuple[str, ...]], ...] = (
    # Chatwoot
    ("CHATWOOT_BASE_URL", ("chatwoot", "base_url")),
    ("CHATWOOT_API_TOKEN", ("chatwoot", "api_token")),
    ("CHATWOOT_ACCOUNT_ID", ("chatwoot", "account_id")),
    ("CHATWOOT_TIMEOUT_SECONDS", ("chatwoot", "timeout_seconds")),
    ("CHATWOOT_VERIFY_TLS", ("chatwoot", "verify_tls")),
    ("CHATWOOT_USER_AGENT", ("chatwoot", "user_agent")),
    ("CHATWOOT_IDEMPOTENCY_KEY", ("chatwoot", "idempotency_key")),
    # Retry / circuit breaker
    ("CHATWOOT_MAX_RATE_LIMIT_RETRIES", ("retry", "max_rate_limit_retries")),
    ("CHATWOOT_MAX_5XX_RETRIES", ("retry", "max_5xx_retries")),
    ("CHATWOOT_RATE_LIMIT_DELAY", ("retry", "rate_limit_base_delay")),
    ("CHATWOOT_SERVER_ERROR_DELAY", ("retry", "server_error_retry_delay")),
    ("CHATWOOT_CIRCUIT_BREAKER_THRESHOLD", ("retry", "circuit_breaker_threshold")),
    ("CHATWOOT_CIRCUIT_BREAKER_RESET_TIME", ("retry", "circuit_breaker_reset_seconds")),
    # Observability
    ("LOG_LEVEL", ("observability", "log_level")),
    ("LOG_FORMAT", ("observability", "log_format")),
    ("LOG_JSON", ("observability", "json_logs")),
    # Transport hardening
    ("CHATWOOT_TRUST_ENV", ("transport", "trust_env")),
    ("CHATWOOT_ALLOW_INSECURE_HTTP", ("transport", "allow_insecure_http")),
    ("CHATWOOT_ALLOW_INSECURE_TLS", ("transport", "allow_insecure_tls")),
)


def get_flat_env_settings_source() -> dict[str, Any]:
    data: dict[str, Any] = {}
    _apply_alias_mappings(os.environ, data, FLAT_ENV_MAPPINGS)
    return data
