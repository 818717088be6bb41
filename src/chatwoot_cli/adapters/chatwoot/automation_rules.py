from __future__ import annotations

import builtins
from typing import Any

from pydantic import TypeAdapter

from chatwoot_cli.adapters.chatwoot.models import AutomationRule
from chatwoot_cli.adapters.chatwoot.requester import Requester

_LIST = TypeAdapter(list[AutomationRule])


def _unwrap_payload(resp: Any) -> Any:
    if isinstance(resp, dict) and "payload" in resp:
        return resp["payload"]
    return resp


class AutomationRulesService:
    def __init__(self, client: Requester) -> None:
        self._client = client

    async def list(self) -> builtins.list[AutomationRule]:
        resp = await self._client.request_json("GET", self._client.account_path("automation_rules"))
        return _LIST.validate_python(_unwrap_payload(resp) or [])

    async def get(self, rule_id: int) -> AutomationRule:
        resp = await self._client.request_json(
            "GET", self._client.account_path(f"automation_rules/{rule_id}")
        )
        return AutomationRule.model_validate(_unwrap_payload(resp))

    async def create(
        self,
        name: str,
        event_name: str,
        conditions: builtins.list[dict[str, Any]],
        actions: builtins.list[dict[str, Any]],
    ) -> AutomationRule:
        body = {
            "name": name,
            "event_name": event_name,
            "conditions": conditions,
            "actions": actions,
        }
        resp = await self._client.request_json(
            "POST", self._client.account_path("automation_rules"), json=body
        )
        return AutomationRule.model_validate(_unwrap_payload(resp))

    async def update(
        self,
        rule_id: int,
        *,
        name: str | None = None,
        conditions: builtins.list[dict[str, Any]] | None = None,
        actions: builtins.list[dict[str, Any]] | None = None,
        active: bool | None = None,
    ) -> AutomationRule:
        body: dict[str, Any] = {}
        if name:
            body["name"] = name
        if conditions is not None:
            body["conditions"] = conditions
        if actions is not None:
            body["actions"] = actions
        if active is not None:
            body["active"] = active

        resp = await self._client.request_json(
            "PATCH", self._client.account_path(f"automation_rules/{rule_id}"), json=body
        )
        return AutomationRule.model_validate(_unwrap_payload(resp))

    async def delete(self, rule_id: int) -> None:
        await self._client.request_json(
            "DELETE", self._client.account_path(f"automation_rules/{rule_id}")
        )

    async def clone(self, rule_id: int) -> AutomationRule:
        resp = await self._client.request_json(
            "POST", self._client.account_path(f"automation_rules/{rule_id}/clone")
        )
        return AutomationRule.model_validate(_unwrap_payload(resp))
