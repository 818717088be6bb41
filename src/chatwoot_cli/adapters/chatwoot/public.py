from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter

from chatwoot_cli.adapters.chatwoot.models import PublicContact, PublicContactRequest, PublicInbox
from chatwoot_cli.adapters.chatwoot.requester import Requester

_CONVERSATIONS = TypeAdapter(list[dict[str, Any]])


class PublicService:
    """
    Client-facing (widget) API, addressed by inbox and contact identifiers.

    Conversations and messages are returned as plain dicts; their shape depends on the channel.
    """

    def __init__(self, client: Requester) -> None:
        self._client = client

    def _path(self, inbox: str, contact: str | None = None, conversation_id: int | None = None) -> str:
        path = f"inboxes/{inbox}"
        if contact is not None:
            path += f"/contacts/{contact}"
        if conversation_id is not None:
            path += f"/conversations/{conversation_id}"
        return self._client.public_path(path)

    async def get_inbox(self, inbox: str) -> PublicInbox:
        resp = await self._client.request_json("GET", self._path(inbox))
        return PublicInbox.model_validate(resp or {})

    async def create_contact(self, inbox: str, request: PublicContactRequest) -> PublicContact:
        resp = await self._client.request_json(
            "POST", self._path(inbox) + "/contacts", json=request.to_body()
        )
        return PublicContact.model_validate(resp or {})

    async def get_contact(self, inbox: str, contact: str) -> PublicContact:
        resp = await self._client.request_json("GET", self._path(inbox, contact))
        return PublicContact.model_validate(resp or {})

    async def update_contact(
        self, inbox: str, contact: str, request: PublicContactRequest
    ) -> PublicContact:
        resp = await self._client.request_json(
            "PATCH", self._path(inbox, contact), json=request.to_body()
        )
        return PublicContact.model_validate(resp or {})

    async def create_conversation(
        self, inbox: str, contact: str, custom_attributes: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if custom_attributes is not None:
            body["custom_attributes"] = custom_attributes
        resp = await self._client.request_json(
            "POST", self._path(inbox, contact) + "/conversations", json=body
        )
        return dict(resp or {})

    async def list_conversations(self, inbox: str, contact: str) -> list[dict[str, Any]]:
        resp = await self._client.request_json("GET", self._path(inbox, contact) + "/conversations")
        return _CONVERSATIONS.validate_python(resp or [])

    async def get_conversation(self, inbox: str, contact: str, conversation_id: int) -> dict[str, Any]:
        resp = await self._client.request_json("GET", self._path(inbox, contact, conversation_id))
        return dict(resp or {})

    async def resolve_conversation(
        self, inbox: str, contact: str, conversation_id: int
    ) -> dict[str, Any]:
        resp = await self._client.request_json(
            "POST", self._path(inbox, contact, conversation_id) + "/toggle_status"
        )
        return dict(resp or {})

    async def toggle_typing(
        self, inbox: str, contact: str, conversation_id: int, status: str
    ) -> None:
        await self._client.request_json(
            "POST",
            self._path(inbox, contact, conversation_id) + "/toggle_typing",
            json={"typing_status": status},
        )

    async def update_last_seen(self, inbox: str, contact: str, conversation_id: int) -> None:
        await self._client.request_json(
            "POST", self._path(inbox, contact, conversation_id) + "/update_last_seen"
        )

    async def create_message(
        self,
        inbox: str,
        contact: str,
        conversation_id: int,
        content: str,
        echo_id: str | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"content": content}
        if echo_id:
            body["echo_id"] = echo_id
        resp = await self._client.request_json(
            "POST", self._path(inbox, contact, conversation_id) + "/messages", json=body
        )
        return dict(resp or {})
