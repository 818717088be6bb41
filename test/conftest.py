from __future__ import annotations

import os
import socket
import sys
from copy import deepcopy
from pathlib import Path
from typing import Any

import pytest

_ENV_PREFIXES = ("CHATWOOT_", "CHATWOOT__", "LOG_", "RETRY__", "OBSERVABILITY__", "TRANSPORT__")


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_path = repo_root / "src"
    sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer shells (CHATWOOT_API_TOKEN, LOG_LEVEL, ...) out of settings tests."""
    for key in list(os.environ):
        if key.startswith(_ENV_PREFIXES) or key == "CONFIG_PATH":
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _disable_network(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Prevent accidental real network calls in unit/integration tests.

    Respx mocks should still work because they intercept at the HTTP client layer.
    """
    if (os.environ.get("ALLOW_NETWORK_TESTS") or "").strip().lower() in {"1", "true", "yes"}:
        return

    def _blocked(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError(
            "Network access is disabled in tests (set ALLOW_NETWORK_TESTS=1 to override)."
        )

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket.socket, "connect", _blocked, raising=True)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


@pytest.fixture
def make_settings():
    """Factory for Settings built from a mapping (environment is not consulted)."""
    from chatwoot_cli.config.settings import Settings

    def _make(overrides: dict[str, Any] | None = None) -> Settings:
        data: dict[str, Any] = {
            "chatwoot": {
                "base_url": "https://chatwoot.example",
                "api_token": "test-token",
                "account_id": 1,
            },
        }
        if overrides:
            data = _deep_merge(data, overrides)
        return Settings.from_mapping(data)

    return _make
