"""Command line interface for the Chatwoot API.

Usage: ``chatwoot [--output text|json] [--config PATH] <group> <command> ...``

Every API command loads settings, opens one client for the duration of the command and prints
the result on stdout. Failures are classified into structured errors, rendered on stderr and
mapped to an exit code (see ``cli_errors``).
"""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from pydantic import BaseModel

from chatwoot_cli._version import __version__
from chatwoot_cli.adapters.chatwoot.agent_bots import AgentBotsService
from chatwoot_cli.adapters.chatwoot.automation_rules import AutomationRulesService
from chatwoot_cli.adapters.chatwoot.canned_responses import CannedResponsesService
from chatwoot_cli.adapters.chatwoot.client import AsyncChatwootClient
from chatwoot_cli.adapters.chatwoot.inbox_members import InboxMembersService
from chatwoot_cli.adapters.chatwoot.models import PublicContactRequest
from chatwoot_cli.adapters.chatwoot.public import PublicService
from chatwoot_cli.adapters.chatwoot.reports import ReportsService
from chatwoot_cli.adapters.chatwoot.webhooks import WebhooksService
from chatwoot_cli.cli_errors import EXIT_OK, report_error
from chatwoot_cli.config.load import load_settings
from chatwoot_cli.config.redact import redact_settings_dict
from chatwoot_cli.config.settings import Settings
from chatwoot_cli.domain.validation import (
    AUTOMATION_EVENTS,
    REPORT_METRICS,
    REPORT_TYPES,
    TYPING_STATUSES,
    WEBHOOK_EVENTS,
    normalize_enum,
    normalize_enum_list,
    parse_bool_flag,
)
from chatwoot_cli.observability.logger import configure_logging

log = structlog.get_logger(__name__)

Handler = Callable[[AsyncChatwootClient, argparse.Namespace], Awaitable[Any]]


def build_client(settings: Settings) -> AsyncChatwootClient:
    cw = settings.chatwoot
    return AsyncChatwootClient(
        base_url=str(cw.base_url),
        api_token=cw.api_token.get_secret_value(),
        account_id=cw.account_id,
        timeout_seconds=cw.timeout_seconds,
        verify_tls=cw.verify_tls,
        trust_env=settings.transport.trust_env,
        user_agent=cw.user_agent,
        idempotency_key=cw.idempotency_key,
        retry=settings.retry.to_retry_config(),
    )


# --- output ----------------------------------------------------------------------------------


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    return value


def _scalar(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def _summary_line(item: Any) -> str:
    if not isinstance(item, dict):
        return _scalar(item)
    parts = [
        f"{key}={_scalar(value)}"
        for key, value in item.items()
        if value not in (None, "") and not isinstance(value, (dict, list))
    ]
    return " ".join(parts)


def render_text(value: Any) -> str:
    data = _jsonable(value)
    if data is None:
        return "✓ Done"
    if isinstance(data, list):
        if not data:
            return "(no results)"
        return "\n".join(_summary_line(item) for item in data)
    if isinstance(data, dict):
        return "\n".join(f"{key}: {_scalar(item)}" for key, item in data.items())
    return str(data)


def emit(value: Any, output: str) -> None:
    if output == "json":
        print(json.dumps(_jsonable(value), indent=2, default=str))
    else:
        print(render_text(value))


# --- argument helpers ------------------------------------------------------------------------


def _json_arg(flag: str, raw: str | None) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise ValueError(f"{flag} must be valid JSON: {exc}") from exc


def _json_list_arg(flag: str, raw: str | None) -> list[dict[str, Any]] | None:
    value = _json_arg(flag, raw)
    if value is not None and not isinstance(value, list):
        raise ValueError(f"{flag} must be a JSON array")
    return value


def _csv(raw: str | None) -> list[str] | None:
    if raw is None:
        return None
    return [part.strip() for part in raw.split(",") if part.strip()]


def _int_csv(flag: str, raw: str) -> list[int]:
    try:
        return [int(part) for part in _csv(raw) or []]
    except ValueError as exc:
        raise ValueError(f"{flag} must be a comma-separated list of numeric IDs") from exc


def _subscriptions(raw: str | None) -> list[str] | None:
    values = _csv(raw)
    if values is None:
        return None
    return normalize_enum_list("subscription", values, WEBHOOK_EVENTS)


def _contact_request(args: argparse.Namespace) -> PublicContactRequest:
    return PublicContactRequest(
        identifier=args.identifier,
        identifier_hash=args.identifier_hash,
        email=args.email,
        name=args.name,
        phone_number=args.phone_number,
        custom_attributes=_json_arg("--custom-attributes", args.custom_attributes),
    )


# --- handlers --------------------------------------------------------------------------------


async def _canned_list(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await CannedResponsesService(client).list()


async def _canned_get(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await CannedResponsesService(client).get(args.id)


async def _canned_create(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await CannedResponsesService(client).create(args.short_code, args.content)


async def _canned_update(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await CannedResponsesService(client).update(args.id, args.short_code, args.content)


async def _canned_delete(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    await CannedResponsesService(client).delete(args.id)
    return None


async def _rules_list(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await AutomationRulesService(client).list()


async def _rules_get(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await AutomationRulesService(client).get(args.id)


async def _rules_create(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    event = normalize_enum("event_name", args.event, AUTOMATION_EVENTS)
    return await AutomationRulesService(client).create(
        args.name,
        event,
        _json_list_arg("--conditions", args.conditions) or [],
        _json_list_arg("--actions", args.actions) or [],
    )


async def _rules_update(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await AutomationRulesService(client).update(
        args.id,
        name=args.name,
        conditions=_json_list_arg("--conditions", args.conditions),
        actions=_json_list_arg("--actions", args.actions),
        active=parse_bool_flag("active", args.active),
    )


async def _rules_delete(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    await AutomationRulesService(client).delete(args.id)
    return None


async def _rules_clone(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await AutomationRulesService(client).clone(args.id)


async def _webhooks_list(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await WebhooksService(client).list()


async def _webhooks_get(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await WebhooksService(client).get(args.id)


async def _webhooks_create(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await WebhooksService(client).create(args.url, _subscriptions(args.subscriptions) or [])


async def _webhooks_update(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await WebhooksService(client).update(
        args.id, url=args.url, subscriptions=_subscriptions(args.subscriptions)
    )


async def _webhooks_delete(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    await WebhooksService(client).delete(args.id)
    return None


async def _members_list(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await InboxMembersService(client).list(args.inbox_id)


async def _members_add(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    await InboxMembersService(client).add(args.inbox_id, _int_csv("--user-ids", args.user_ids))
    return None


async def _members_remove(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    await InboxMembersService(client).remove(args.inbox_id, _int_csv("--user-ids", args.user_ids))
    return None


async def _members_update(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    await InboxMembersService(client).update(args.inbox_id, _int_csv("--user-ids", args.user_ids))
    return None


async def _bots_list(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await AgentBotsService(client).list()


async def _bots_get(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await AgentBotsService(client).get(args.id)


async def _bots_create(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await AgentBotsService(client).create(args.name, args.outgoing_url)


async def _bots_update(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await AgentBotsService(client).update(
        args.id, name=args.name, outgoing_url=args.outgoing_url
    )


async def _bots_delete(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    await AgentBotsService(client).delete(args.id)
    return None


async def _bots_delete_avatar(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    await AgentBotsService(client).delete_avatar(args.id)
    return None


async def _bots_reset_token(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return {"access_token": await AgentBotsService(client).reset_access_token(args.id)}


async def _reports_summary(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    report_type = normalize_enum("type", args.type, REPORT_TYPES)
    return await ReportsService(client).summary(report_type, args.since, args.until, args.id)


async def _reports_time_series(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    metric = normalize_enum("metric", args.metric, REPORT_METRICS)
    report_type = normalize_enum("type", args.type, REPORT_TYPES)
    return await ReportsService(client).time_series(
        metric, report_type, args.since, args.until, args.id
    )


async def _reports_conversations(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await ReportsService(client).conversation_metrics()


async def _reports_agents(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await ReportsService(client).agent_metrics(args.user_id)


async def _reports_channels(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await ReportsService(client).channel_summary(
        args.since, args.until, parse_bool_flag("business_hours", args.business_hours)
    )


async def _reports_inbox_summary(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await ReportsService(client).summary_by_inbox(
        args.since, args.until, parse_bool_flag("business_hours", args.business_hours)
    )


async def _reports_agent_summary(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await ReportsService(client).summary_by_agent(
        args.since, args.until, parse_bool_flag("business_hours", args.business_hours)
    )


async def _reports_team_summary(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await ReportsService(client).summary_by_team(
        args.since, args.until, parse_bool_flag("business_hours", args.business_hours)
    )


async def _reports_events(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await ReportsService(client).list_events(args.since, args.until, args.event_type)


async def _reports_conversation_events(
    client: AsyncChatwootClient, args: argparse.Namespace
) -> Any:
    return await ReportsService(client).conversation_events(args.conversation_id)


async def _public_inbox(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await PublicService(client).get_inbox(args.inbox)


async def _public_create_contact(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await PublicService(client).create_contact(args.inbox, _contact_request(args))


async def _public_get_contact(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await PublicService(client).get_contact(args.inbox, args.contact)


async def _public_update_contact(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await PublicService(client).update_contact(
        args.inbox, args.contact, _contact_request(args)
    )


async def _public_create_conversation(
    client: AsyncChatwootClient, args: argparse.Namespace
) -> Any:
    attributes = _json_arg("--custom-attributes", args.custom_attributes)
    return await PublicService(client).create_conversation(args.inbox, args.contact, attributes)


async def _public_conversations(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await PublicService(client).list_conversations(args.inbox, args.contact)


async def _public_get_conversation(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await PublicService(client).get_conversation(
        args.inbox, args.contact, args.conversation_id
    )


async def _public_resolve(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await PublicService(client).resolve_conversation(
        args.inbox, args.contact, args.conversation_id
    )


async def _public_typing(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    status = normalize_enum("typing_status", args.status, TYPING_STATUSES)
    await PublicService(client).toggle_typing(
        args.inbox, args.contact, args.conversation_id, status
    )
    return None


async def _public_last_seen(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    await PublicService(client).update_last_seen(args.inbox, args.contact, args.conversation_id)
    return None


async def _public_send_message(client: AsyncChatwootClient, args: argparse.Namespace) -> Any:
    return await PublicService(client).create_message(
        args.inbox, args.contact, args.conversation_id, args.content, args.echo_id
    )


# --- runners ---------------------------------------------------------------------------------


def _configure_logging(settings: Settings) -> None:
    obs = settings.observability
    configure_logging(
        log_level=obs.log_level,
        json_logs=obs.json_logs,
        log_format=obs.log_format,
    )


async def _call(settings: Settings, handler: Handler, args: argparse.Namespace) -> Any:
    async with build_client(settings) as client:
        return await handler(client, args)


def run_api_command(args: argparse.Namespace, handler: Handler) -> int:
    try:
        settings = load_settings(config_path=args.config)
        _configure_logging(settings)
        result = asyncio.run(_call(settings, handler, args))
    except Exception as exc:
        log.debug("cli.command_failed", command=args.command_name, error=str(exc))
        return report_error(exc, output=args.output)
    emit(result, args.output)
    return EXIT_OK


def cmd_validate_config(args: argparse.Namespace) -> int:
    """Validate configuration; exits non-zero with the problems on stderr when it is invalid."""
    try:
        settings = load_settings(config_path=args.config)
    except Exception as exc:
        return report_error(exc, output=args.output)

    summary = {
        "valid": True,
        "base_url": str(settings.chatwoot.base_url),
        "account_id": settings.chatwoot.account_id,
        "timeout_seconds": settings.chatwoot.timeout_seconds,
    }
    if args.output == "json":
        print(json.dumps(summary, indent=2))
    else:
        print("✓ Configuration is valid")
        print(f"  - Chatwoot URL: {summary['base_url']}")
        print(f"  - Account ID: {summary['account_id']}")
        print(f"  - Timeout: {summary['timeout_seconds']}s")
    return EXIT_OK


def cmd_dump_config(args: argparse.Namespace) -> int:
    """Dump current configuration as JSON (with secrets redacted)."""
    try:
        settings = load_settings(config_path=args.config)
    except Exception as exc:
        return report_error(exc, output=args.output)

    data = settings.model_dump(mode="json")
    print(json.dumps(redact_settings_dict(data), indent=2, default=str))
    return EXIT_OK


# --- parser ----------------------------------------------------------------------------------


def _api(parser: argparse.ArgumentParser, name: str, handler: Handler) -> None:
    parser.set_defaults(func=lambda args: run_api_command(args, handler), command_name=name)


def _add_id(
    parser: argparse.ArgumentParser, dest: str = "id", help_text: str = "Resource ID"
) -> None:
    parser.add_argument(dest, type=int, help=help_text)


def _add_range(parser: argparse.ArgumentParser, *, business_hours: bool = True) -> None:
    parser.add_argument("--since", default=None, help="Start (unix timestamp)")
    parser.add_argument("--until", default=None, help="End (unix timestamp)")
    if business_hours:
        parser.add_argument(
            "--business-hours", default=None, help="Only count business hours (true|false)"
        )


def _add_contact_fields(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--identifier", default=None)
    parser.add_argument("--identifier-hash", default=None)
    parser.add_argument("--email", default=None)
    parser.add_argument("--name", default=None)
    parser.add_argument("--phone-number", default=None)
    parser.add_argument("--custom-attributes", default=None, help="JSON object")


def _add_canned_responses(groups: argparse._SubParsersAction) -> None:
    group = groups.add_parser("canned-responses", help="Manage canned responses")
    cmds = group.add_subparsers(dest="action", required=True)

    _api(cmds.add_parser("list", help="List canned responses"), "canned-responses list", _canned_list)

    p = cmds.add_parser("get", help="Show one canned response")
    _add_id(p)
    _api(p, "canned-responses get", _canned_get)

    p = cmds.add_parser("create", help="Create a canned response")
    p.add_argument("--short-code", required=True)
    p.add_argument("--content", required=True)
    _api(p, "canned-responses create", _canned_create)

    p = cmds.add_parser("update", help="Update a canned response")
    _add_id(p)
    p.add_argument("--short-code", required=True)
    p.add_argument("--content", required=True)
    _api(p, "canned-responses update", _canned_update)

    p = cmds.add_parser("delete", help="Delete a canned response")
    _add_id(p)
    _api(p, "canned-responses delete", _canned_delete)


def _add_automation_rules(groups: argparse._SubParsersAction) -> None:
    group = groups.add_parser("automation-rules", help="Manage automation rules")
    cmds = group.add_subparsers(dest="action", required=True)

    _api(cmds.add_parser("list", help="List automation rules"), "automation-rules list", _rules_list)

    p = cmds.add_parser("get", help="Show one automation rule")
    _add_id(p)
    _api(p, "automation-rules get", _rules_get)

    p = cmds.add_parser("create", help="Create an automation rule")
    p.add_argument("--name", required=True)
    p.add_argument("--event", required=True, help=f"One of: {', '.join(AUTOMATION_EVENTS)}")
    p.add_argument("--conditions", default=None, help="JSON array of conditions")
    p.add_argument("--actions", default=None, help="JSON array of actions")
    _api(p, "automation-rules create", _rules_create)

    p = cmds.add_parser("update", help="Update an automation rule")
    _add_id(p)
    p.add_argument("--name", default=None)
    p.add_argument("--conditions", default=None, help="JSON array of conditions")
    p.add_argument("--actions", default=None, help="JSON array of actions")
    p.add_argument("--active", default=None, help="true|false")
    _api(p, "automation-rules update", _rules_update)

    p = cmds.add_parser("delete", help="Delete an automation rule")
    _add_id(p)
    _api(p, "automation-rules delete", _rules_delete)

    p = cmds.add_parser("clone", help="Clone an automation rule")
    _add_id(p)
    _api(p, "automation-rules clone", _rules_clone)


def _add_webhooks(groups: argparse._SubParsersAction) -> None:
    group = groups.add_parser("webhooks", help="Manage webhooks")
    cmds = group.add_subparsers(dest="action", required=True)

    _api(cmds.add_parser("list", help="List webhooks"), "webhooks list", _webhooks_list)

    p = cmds.add_parser("get", help="Show one webhook")
    _add_id(p)
    _api(p, "webhooks get", _webhooks_get)

    p = cmds.add_parser("create", help="Create a webhook")
    p.add_argument("--url", required=True)
    p.add_argument("--subscriptions", required=True, help="Comma-separated event names")
    _api(p, "webhooks create", _webhooks_create)

    p = cmds.add_parser("update", help="Update a webhook")
    _add_id(p)
    p.add_argument("--url", default=None)
    p.add_argument("--subscriptions", default=None, help="Comma-separated event names")
    _api(p, "webhooks update", _webhooks_update)

    p = cmds.add_parser("delete", help="Delete a webhook")
    _add_id(p)
    _api(p, "webhooks delete", _webhooks_delete)


def _add_inbox_members(groups: argparse._SubParsersAction) -> None:
    group = groups.add_parser("inbox-members", help="Manage agents assigned to an inbox")
    cmds = group.add_subparsers(dest="action", required=True)

    p = cmds.add_parser("list", help="List agents of an inbox")
    _add_id(p, "inbox_id", "Inbox ID")
    _api(p, "inbox-members list", _members_list)

    for action, handler, help_text in (
        ("add", _members_add, "Add agents to an inbox"),
        ("remove", _members_remove, "Remove agents from an inbox"),
        ("update", _members_update, "Replace the agents of an inbox"),
    ):
        p = cmds.add_parser(action, help=help_text)
        _add_id(p, "inbox_id", "Inbox ID")
        p.add_argument("--user-ids", required=True, help="Comma-separated agent IDs")
        _api(p, f"inbox-members {action}", handler)


def _add_agent_bots(groups: argparse._SubParsersAction) -> None:
    group = groups.add_parser("agent-bots", help="Manage agent bots")
    cmds = group.add_subparsers(dest="action", required=True)

    _api(cmds.add_parser("list", help="List agent bots"), "agent-bots list", _bots_list)

    p = cmds.add_parser("get", help="Show one agent bot")
    _add_id(p)
    _api(p, "agent-bots get", _bots_get)

    p = cmds.add_parser("create", help="Create an agent bot")
    p.add_argument("--name", required=True)
    p.add_argument("--outgoing-url", required=True)
    _api(p, "agent-bots create", _bots_create)

    p = cmds.add_parser("update", help="Update an agent bot")
    _add_id(p)
    p.add_argument("--name", default=None)
    p.add_argument("--outgoing-url", default=None)
    _api(p, "agent-bots update", _bots_update)

    for action, handler, help_text in (
        ("delete", _bots_delete, "Delete an agent bot"),
        ("delete-avatar", _bots_delete_avatar, "Remove an agent bot's avatar"),
        ("reset-token", _bots_reset_token, "Issue a new access token for an agent bot"),
    ):
        p = cmds.add_parser(action, help=help_text)
        _add_id(p)
        _api(p, f"agent-bots {action}", handler)


def _add_reports(groups: argparse._SubParsersAction) -> None:
    group = groups.add_parser("reports", help="Account reports")
    cmds = group.add_subparsers(dest="action", required=True)

    p = cmds.add_parser("summary", help="Summary for a period")
    p.add_argument("--type", required=True, help=f"One of: {', '.join(REPORT_TYPES)}")
    p.add_argument("--since", required=True)
    p.add_argument("--until", required=True)
    p.add_argument("--id", default=None, help="Agent/inbox/label/team ID for non-account types")
    _api(p, "reports summary", _reports_summary)

    p = cmds.add_parser("time-series", help="Metric values over time")
    p.add_argument("--metric", required=True, help=f"One of: {', '.join(REPORT_METRICS)}")
    p.add_argument("--type", required=True, help=f"One of: {', '.join(REPORT_TYPES)}")
    p.add_argument("--since", required=True)
    p.add_argument("--until", required=True)
    p.add_argument("--id", default=None)
    _api(p, "reports time-series", _reports_time_series)

    _api(
        cmds.add_parser("conversations", help="Open/unattended/unassigned conversation counts"),
        "reports conversations",
        _reports_conversations,
    )

    p = cmds.add_parser("agents", help="Conversation counts per agent")
    p.add_argument("--user-id", default=None)
    _api(p, "reports agents", _reports_agents)

    for action, handler, help_text in (
        ("channels", _reports_channels, "Conversation counts per channel"),
        ("inbox-summary", _reports_inbox_summary, "Summary per inbox"),
        ("agent-summary", _reports_agent_summary, "Summary per agent"),
        ("team-summary", _reports_team_summary, "Summary per team"),
    ):
        p = cmds.add_parser(action, help=help_text)
        _add_range(p)
        _api(p, f"reports {action}", handler)

    p = cmds.add_parser("events", help="Account reporting events")
    _add_range(p, business_hours=False)
    p.add_argument("--event-type", default=None)
    _api(p, "reports events", _reports_events)

    p = cmds.add_parser("conversation-events", help="Reporting events of one conversation")
    _add_id(p, "conversation_id", "Conversation ID")
    _api(p, "reports conversation-events", _reports_conversation_events)


def _add_public(groups: argparse._SubParsersAction) -> None:
    group = groups.add_parser("public", help="Client-facing API (inbox identifier based)")
    cmds = group.add_subparsers(dest="action", required=True)

    def with_contact(name: str, help_text: str) -> argparse.ArgumentParser:
        p = cmds.add_parser(name, help=help_text)
        p.add_argument("inbox", help="Inbox identifier")
        p.add_argument("contact", help="Contact identifier (source_id)")
        return p

    def with_conversation(name: str, help_text: str) -> argparse.ArgumentParser:
        p = with_contact(name, help_text)
        _add_id(p, "conversation_id", "Conversation ID")
        return p

    p = cmds.add_parser("inbox", help="Show public inbox details")
    p.add_argument("inbox", help="Inbox identifier")
    _api(p, "public inbox", _public_inbox)

    p = cmds.add_parser("create-contact", help="Create a contact")
    p.add_argument("inbox", help="Inbox identifier")
    _add_contact_fields(p)
    _api(p, "public create-contact", _public_create_contact)

    _api(with_contact("get-contact", "Show a contact"), "public get-contact", _public_get_contact)

    p = with_contact("update-contact", "Update a contact")
    _add_contact_fields(p)
    _api(p, "public update-contact", _public_update_contact)

    p = with_contact("create-conversation", "Start a conversation")
    p.add_argument("--custom-attributes", default=None, help="JSON object")
    _api(p, "public create-conversation", _public_create_conversation)

    _api(
        with_contact("conversations", "List a contact's conversations"),
        "public conversations",
        _public_conversations,
    )
    _api(
        with_conversation("get-conversation", "Show a conversation"),
        "public get-conversation",
        _public_get_conversation,
    )
    _api(
        with_conversation("resolve", "Resolve a conversation"),
        "public resolve",
        _public_resolve,
    )

    p = with_conversation("typing", "Toggle the typing indicator")
    p.add_argument("--status", required=True, help=f"One of: {', '.join(TYPING_STATUSES)}")
    _api(p, "public typing", _public_typing)

    _api(
        with_conversation("last-seen", "Mark a conversation as seen"),
        "public last-seen",
        _public_last_seen,
    )

    p = with_conversation("send-message", "Send a message")
    p.add_argument("--content", required=True)
    p.add_argument("--echo-id", default=None)
    _api(p, "public send-message", _public_send_message)


def _add_config(groups: argparse._SubParsersAction) -> None:
    group = groups.add_parser("config", help="Inspect configuration")
    cmds = group.add_subparsers(dest="action", required=True)

    p = cmds.add_parser("validate", help="Validate configuration and exit")
    p.set_defaults(func=cmd_validate_config, command_name="config validate")

    p = cmds.add_parser("dump", help="Dump configuration as JSON (secrets redacted)")
    p.set_defaults(func=cmd_dump_config, command_name="config dump")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chatwoot",
        description="Command line client for the Chatwoot API",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--output",
        choices=("text", "json"),
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML config file (default: $CONFIG_PATH or config/config.yaml)",
    )
    groups = parser.add_subparsers(dest="group", help="Available command groups")

    _add_canned_responses(groups)
    _add_automation_rules(groups)
    _add_webhooks(groups)
    _add_inbox_members(groups)
    _add_agent_bots(groups)
    _add_reports(groups)
    _add_public(groups)
    _add_config(groups)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.group is None:
        parser.print_help()
        return EXIT_OK

    # Until settings are loaded; keeps stdout free of log lines.
    configure_logging()
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
