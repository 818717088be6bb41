from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from chatwoot_cli.adapters.chatwoot.client import Method


class Requester(Protocol):
    """The request surface resource services depend on (implemented by AsyncChatwootClient)."""

    def account_path(self, path: str) -> str: ...

    def v2_account_path(self, path: str) -> str: ...

    def public_path(self, path: str) -> str: ...

    async def request_json(
        self,
        method: Method,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any | None = None,
    ) -> Any: ...
