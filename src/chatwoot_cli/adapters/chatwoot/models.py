from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _ChatwootModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


# Report fields arrive as numbers or numeric strings depending on the server version.
FlexNumber = str | int | float | None


class CannedResponse(_ChatwootModel):
    id: int
    short_code: str = ""
    content: str = ""
    account_id: int | None = None


class AutomationRule(_ChatwootModel):
    id: int
    name: str = ""
    description: str | None = None
    event_name: str = ""
    conditions: list[dict[str, Any]] = Field(default_factory=list)
    actions: list[dict[str, Any]] = Field(default_factory=list)
    active: bool = False
    account_id: int | None = None


class Webhook(_ChatwootModel):
    id: int
    url: str = ""
    subscriptions: list[str] = Field(default_factory=list)
    account_id: int | None = None


class Agent(_ChatwootModel):
    id: int
    name: str = ""
    email: str | None = None
    role: str | None = None
    availability_status: str | None = None
    thumbnail: str | None = None
    confirmed_at: datetime | None = None


class AgentBot(_ChatwootModel):
    id: int
    name: str = ""
    description: str | None = None
    outgoing_url: str | None = None
    account_id: int | None = None


class ReportSummary(_ChatwootModel):
    avg_first_response_time: FlexNumber = None
    avg_resolution_time: FlexNumber = None
    conversations_count: int | None = None
    incoming_messages_count: int | None = None
    outgoing_messages_count: int | None = None
    resolutions_count: int | None = None
    previous: ReportSummary | None = None


class ReportDataPoint(_ChatwootModel):
    value: FlexNumber = None
    timestamp: int


class ConversationMetrics(_ChatwootModel):
    open: int = 0
    unattended: int = 0
    unassigned: int = 0


class AgentConversationMetric(_ChatwootModel):
    open: int = 0
    unattended: int = 0


class AgentMetrics(_ChatwootModel):
    id: int
    name: str = ""
    email: str | None = None
    thumbnail: str | None = None
    availability: str | None = None
    metric: AgentConversationMetric = Field(default_factory=AgentConversationMetric)


class ChannelSummary(_ChatwootModel):
    open: int = 0
    resolved: int = 0
    pending: int = 0
    snoozed: int = 0
    total: int = 0


class SummaryReportEntry(_ChatwootModel):
    id: int
    conversations_count: FlexNumber = None
    resolved_conversations_count: FlexNumber = None
    avg_resolution_time: FlexNumber = None
    avg_first_response_time: FlexNumber = None
    avg_reply_time: FlexNumber = None


class ReportingEvent(_ChatwootModel):
    id: int
    name: str = ""
    value: Any = None
    account_id: int | None = None
    inbox_id: int | None = None
    user_id: int | None = None
    created_at: str | None = None
    event_type: str | None = None


class PublicContact(_ChatwootModel):
    id: int | None = None
    source_id: str | None = None
    name: str | None = None
    email: str | None = None
    pubsub_token: str | None = None


class PublicInbox(_ChatwootModel):
    name: str = ""
    working_hours_enabled: bool = False
    timezone: str | None = None
    working_hours: list[Any] | None = None
    csat_survey_enabled: bool = False


class PublicContactRequest(_ChatwootModel):
    """Body for creating or updating a contact through the public API."""

    identifier: str | None = None
    identifier_hash: str | None = None
    email: str | None = None
    name: str | None = None
    phone_number: str | None = None
    avatar_url: str | None = None
    custom_attributes: dict[str, Any] | None = None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
