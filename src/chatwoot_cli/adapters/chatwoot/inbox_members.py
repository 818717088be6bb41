from __future__ import annotations

import builtins

from pydantic import TypeAdapter

from chatwoot_cli.adapters.chatwoot.client import Method
from chatwoot_cli.adapters.chatwoot.models import Agent
from chatwoot_cli.adapters.chatwoot.requester import Requester

_LIST = TypeAdapter(list[Agent])


class InboxMembersService:
    """Agents assigned to an inbox."""

    def __init__(self, client: Requester) -> None:
        self._client = client

    async def list(self, inbox_id: int) -> builtins.list[Agent]:
        resp = await self._client.request_json(
            "GET", self._client.account_path(f"inbox_members/{inbox_id}")
        )
        payload = resp.get("payload") if isinstance(resp, dict) else resp
        return _LIST.validate_python(payload or [])

    async def add(self, inbox_id: int, user_ids: builtins.list[int]) -> None:
        await self._send("POST", inbox_id, user_ids)

    async def remove(self, inbox_id: int, user_ids: builtins.list[int]) -> None:
        await self._send("DELETE", inbox_id, user_ids)

    async def update(self, inbox_id: int, user_ids: builtins.list[int]) -> None:
        """Replace the member list."""
        await self._send("PATCH", inbox_id, user_ids)

    async def _send(self, method: Method, inbox_id: int, user_ids: builtins.list[int]) -> None:
        await self._client.request_json(
            method,
            self._client.account_path("inbox_members"),
            json={"inbox_id": inbox_id, "user_ids": user_ids},
        )
