from __future__ import annotations

import builtins
from typing import Any

from pydantic import TypeAdapter

from chatwoot_cli.adapters.chatwoot.models import AgentBot
from chatwoot_cli.adapters.chatwoot.requester import Requester
from chatwoot_cli.domain.errors import ClientError

_LIST = TypeAdapter(list[AgentBot])


class AgentBotsService:
    def __init__(self, client: Requester) -> None:
        self._client = client

    async def list(self) -> builtins.list[AgentBot]:
        resp = await self._client.request_json("GET", self._client.account_path("agent_bots"))
        return _LIST.validate_python(resp or [])

    async def get(self, bot_id: int) -> AgentBot:
        resp = await self._client.request_json(
            "GET", self._client.account_path(f"agent_bots/{bot_id}")
        )
        return AgentBot.model_validate(resp)

    async def create(self, name: str, outgoing_url: str) -> AgentBot:
        resp = await self._client.request_json(
            "POST",
            self._client.account_path("agent_bots"),
            json={"name": name, "outgoing_url": outgoing_url},
        )
        return AgentBot.model_validate(resp)

    async def update(
        self, bot_id: int, *, name: str | None = None, outgoing_url: str | None = None
    ) -> AgentBot:
        body: dict[str, Any] = {}
        if name:
            body["name"] = name
        if outgoing_url:
            body["outgoing_url"] = outgoing_url
        resp = await self._client.request_json(
            "PATCH", self._client.account_path(f"agent_bots/{bot_id}"), json=body
        )
        return AgentBot.model_validate(resp)

    async def delete(self, bot_id: int) -> None:
        await self._client.request_json("DELETE", self._client.account_path(f"agent_bots/{bot_id}"))

    async def delete_avatar(self, bot_id: int) -> None:
        await self._client.request_json(
            "DELETE", self._client.account_path(f"agent_bots/{bot_id}/avatar")
        )

    async def reset_access_token(self, bot_id: int) -> str:
        resp = await self._client.request_json(
            "POST", self._client.account_path(f"agent_bots/{bot_id}/reset_access_token")
        )
        token = resp.get("access_token") if isinstance(resp, dict) else None
        if not isinstance(token, str):
            raise ClientError(f"Chatwoot reset_access_token response for bot {bot_id} has no token")
        return token
