from __future__ import annotations

import builtins
from typing import Any

from pydantic import TypeAdapter

from chatwoot_cli.adapters.chatwoot.models import CannedResponse
from chatwoot_cli.adapters.chatwoot.requester import Requester
from chatwoot_cli.domain.errors import APIError

_LIST = TypeAdapter(list[CannedResponse])


class CannedResponsesService:
    def __init__(self, client: Requester) -> None:
        self._client = client

    async def list(self) -> builtins.list[CannedResponse]:
        resp = await self._client.request_json("GET", self._client.account_path("canned_responses"))
        return _LIST.validate_python(resp or [])

    async def get(self, response_id: int) -> CannedResponse:
        # The API has no single-item endpoint; look it up in the list.
        for item in await self.list():
            if item.id == response_id:
                return item
        raise APIError(404, f"canned response with ID {response_id} not found")

    async def create(self, short_code: str, content: str) -> CannedResponse:
        resp = await self._client.request_json(
            "POST",
            self._client.account_path("canned_responses"),
            json=_payload(short_code, content),
        )
        return CannedResponse.model_validate(resp)

    async def update(self, response_id: int, short_code: str, content: str) -> CannedResponse:
        resp = await self._client.request_json(
            "PATCH",
            self._client.account_path(f"canned_responses/{response_id}"),
            json=_payload(short_code, content),
        )
        return CannedResponse.model_validate(resp)

    async def delete(self, response_id: int) -> None:
        await self._client.request_json(
            "DELETE", self._client.account_path(f"canned_responses/{response_id}")
        )


def _payload(short_code: str, content: str) -> dict[str, Any]:
    return {"canned_response": {"short_code": short_code, "content": content}}
