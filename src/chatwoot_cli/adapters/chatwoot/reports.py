from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter

from chatwoot_cli.adapters.chatwoot.models import (
    AgentMetrics,
    ChannelSummary,
    ConversationMetrics,
    ReportDataPoint,
    ReportingEvent,
    ReportSummary,
    SummaryReportEntry,
)
from chatwoot_cli.adapters.chatwoot.requester import Requester

_DATA_POINTS = TypeAdapter(list[ReportDataPoint])
_AGENT_METRICS = TypeAdapter(list[AgentMetrics])
_CHANNELS = TypeAdapter(dict[str, ChannelSummary])
_SUMMARY_ENTRIES = TypeAdapter(list[SummaryReportEntry])
_EVENTS = TypeAdapter(list[ReportingEvent])


def _range_params(
    since: str | None, until: str | None, business_hours: bool | None = None
) -> dict[str, str]:
    params: dict[str, str] = {}
    if since:
        params["since"] = since
    if until:
        params["until"] = until
    if business_hours is not None:
        params["business_hours"] = "true" if business_hours else "false"
    return params


class ReportsService:
    """Account reports (mostly the v2 reporting API)."""

    def __init__(self, client: Requester) -> None:
        self._client = client

    async def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        return await self._client.request_json(
            "GET", self._client.v2_account_path(path), params=params or None
        )

    async def summary(
        self, report_type: str, since: str, until: str, report_id: str | None = None
    ) -> ReportSummary:
        params = {"type": report_type, "since": since, "until": until}
        if report_id:
            params["id"] = report_id
        return ReportSummary.model_validate(await self._get("reports/summary", params))

    async def time_series(
        self,
        metric: str,
        report_type: str,
        since: str,
        until: str,
        report_id: str | None = None,
    ) -> list[ReportDataPoint]:
        params = {"metric": metric, "type": report_type, "since": since, "until": until}
        if report_id:
            params["id"] = report_id
        return _DATA_POINTS.validate_python(await self._get("reports", params) or [])

    async def conversation_metrics(self) -> ConversationMetrics:
        resp = await self._get("reports/conversations", {"type": "account"})
        return ConversationMetrics.model_validate(resp or {})

    async def agent_metrics(self, user_id: str | None = None) -> list[AgentMetrics]:
        params = {"type": "agent"}
        if user_id:
            params["user_id"] = user_id
        return _AGENT_METRICS.validate_python(await self._get("reports/conversations", params) or [])

    async def channel_summary(
        self,
        since: str | None = None,
        until: str | None = None,
        business_hours: bool | None = None,
    ) -> dict[str, ChannelSummary]:
        resp = await self._get("summary_reports/channel", _range_params(since, until, business_hours))
        return _CHANNELS.validate_python(resp or {})

    async def summary_by_inbox(
        self, since: str | None = None, until: str | None = None, business_hours: bool | None = None
    ) -> list[SummaryReportEntry]:
        return await self._summary_entries("summary_reports/inbox", since, until, business_hours)

    async def summary_by_agent(
        self, since: str | None = None, until: str | None = None, business_hours: bool | None = None
    ) -> list[SummaryReportEntry]:
        return await self._summary_entries("summary_reports/agent", since, until, business_hours)

    async def summary_by_team(
        self, since: str | None = None, until: str | None = None, business_hours: bool | None = None
    ) -> list[SummaryReportEntry]:
        return await self._summary_entries("summary_reports/team", since, until, business_hours)

    async def _summary_entries(
        self, path: str, since: str | None, until: str | None, business_hours: bool | None
    ) -> list[SummaryReportEntry]:
        resp = await self._get(path, _range_params(since, until, business_hours))
        return _SUMMARY_ENTRIES.validate_python(resp or [])

    async def list_events(
        self,
        since: str | None = None,
        until: str | None = None,
        event_type: str | None = None,
    ) -> list[ReportingEvent]:
        params = _range_params(since, until)
        if event_type:
            params["type"] = event_type
        resp = await self._client.request_json(
            "GET", self._client.account_path("reporting_events"), params=params or None
        )
        return _EVENTS.validate_python(resp or [])

    async def conversation_events(self, conversation_id: int) -> list[ReportingEvent]:
        resp = await self._client.request_json(
            "GET",
            self._client.account_path(f"conversations/{conversation_id}/reporting_events"),
        )
        return _EVENTS.validate_python(resp or [])
