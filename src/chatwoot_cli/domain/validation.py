from __future__ import annotations

from collections.abc import Iterable, Sequence

from chatwoot_cli.domain.error_codes import new_validation_error

REPORT_TYPES: tuple[str, ...] = ("account", "agent", "inbox", "label", "team")
REPORT_METRICS: tuple[str, ...] = (
    "conversations_count",
    "incoming_messages_count",
    "outgoing_messages_count",
    "avg_first_response_time",
    "avg_resolution_time",
    "resolutions_count",
    "reply_time",
)
TYPING_STATUSES: tuple[str, ...] = ("on", "off")
AUTOMATION_EVENTS: tuple[str, ...] = (
    "conversation_created",
    "conversation_updated",
    "conversation_opened",
    "message_created",
)
WEBHOOK_EVENTS: tuple[str, ...] = (
    "conversation_created",
    "conversation_status_changed",
    "conversation_updated",
    "contact_created",
    "contact_updated",
    "message_created",
    "message_updated",
    "webwidget_triggered",
    "inbox_created",
    "inbox_updated",
    "conversation_typing_on",
    "conversation_typing_off",
)
BOOLEAN_VALUES: tuple[str, ...] = ("true", "false")


def normalize_enum(field: str, value: str, allowed: Sequence[str]) -> str:
    """
    Resolve ``value`` to one of ``allowed``.

    Matching is case-insensitive: an exact match wins, otherwise a unique prefix is accepted.
    No match raises a ``validation_failed`` StructuredError listing the allowed values;
    an ambiguous prefix raises ValueError.
    """
    normalized = value.strip().lower()
    if not normalized:
        raise new_validation_error(field, normalized, allowed)

    if normalized in allowed:
        return normalized

    matches = [candidate for candidate in allowed if candidate.startswith(normalized)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise new_validation_error(field, normalized, allowed)
    raise ValueError(f"ambiguous {field} {normalized!r}: matches {', '.join(matches)}")


def normalize_enum_list(field: str, values: Iterable[str], allowed: Sequence[str]) -> list[str]:
    return [normalize_enum(field, value, allowed) for value in values]


def parse_bool_flag(field: str, value: str | None) -> bool | None:
    if value is None:
        return None
    return normalize_enum(field, value, BOOLEAN_VALUES) == "true"
