from __future__ import annotations

import builtins
from typing import Any

from pydantic import TypeAdapter

from chatwoot_cli.adapters.chatwoot.models import Webhook
from chatwoot_cli.adapters.chatwoot.requester import Requester
from chatwoot_cli.domain.errors import APIError, ClientError

_LIST = TypeAdapter(list[Webhook])


def _payload_field(resp: Any, field: str) -> Any:
    # Webhook endpoints answer {"payload": {"webhooks": [...]}} / {"payload": {"webhook": {...}}}.
    payload = resp.get("payload") if isinstance(resp, dict) else None
    if not isinstance(payload, dict) or field not in payload:
        raise ClientError(f"Chatwoot webhook response format unexpected: missing payload.{field}")
    return payload[field]


class WebhooksService:
    def __init__(self, client: Requester) -> None:
        self._client = client

    async def list(self) -> builtins.list[Webhook]:
        resp = await self._client.request_json("GET", self._client.account_path("webhooks"))
        return _LIST.validate_python(_payload_field(resp, "webhooks") or [])

    async def get(self, webhook_id: int) -> Webhook:
        for webhook in await self.list():
            if webhook.id == webhook_id:
                return webhook
        raise APIError(404, f"webhook with ID {webhook_id} not found")

    async def create(self, url: str, subscriptions: builtins.list[str]) -> Webhook:
        resp = await self._client.request_json(
            "POST",
            self._client.account_path("webhooks"),
            json={"url": url, "subscriptions": subscriptions},
        )
        return Webhook.model_validate(_payload_field(resp, "webhook"))

    async def update(
        self,
        webhook_id: int,
        *,
        url: str | None = None,
        subscriptions: builtins.list[str] | None = None,
    ) -> Webhook:
        body: dict[str, Any] = {}
        if url:
            body["url"] = url
        if subscriptions is not None:
            body["subscriptions"] = subscriptions

        resp = await self._client.request_json(
            "PATCH", self._client.account_path(f"webhooks/{webhook_id}"), json=body
        )
        return Webhook.model_validate(_payload_field(resp, "webhook"))

    async def delete(self, webhook_id: int) -> None:
        await self._client.request_json("DELETE", self._client.account_path(f"webhooks/{webhook_id}"))
