from __future__ import annotations

import pytest

from chatwoot_cli.domain.error_codes import ErrorCode, StructuredError
from chatwoot_cli.domain.validation import (
    REPORT_TYPES,
    TYPING_STATUSES,
    WEBHOOK_EVENTS,
    normalize_enum,
    normalize_enum_list,
    parse_bool_flag,
)


def test_exact_match_is_case_insensitive() -> None:
    assert normalize_enum("type", "  Agent ", REPORT_TYPES) == "agent"


def test_unique_prefix_is_accepted() -> None:
    assert normalize_enum("type", "acc", REPORT_TYPES) == "account"
    assert normalize_enum("typing_status", "of", TYPING_STATUSES) == "off"


def test_exact_match_wins_over_longer_candidates() -> None:
    assert normalize_enum("x", "on", ("on", "only")) == "on"


def test_unknown_value_raises_validation_error_with_allowed_values() -> None:
    with pytest.raises(StructuredError) as excinfo:
        normalize_enum("type", "galaxy", REPORT_TYPES)

    err = excinfo.value
    assert err.code is ErrorCode.VALIDATION_FAILED
    assert err.allowed_values == REPORT_TYPES
    assert err.context == {"field": "type", "got": "galaxy"}


def test_empty_value_is_a_validation_error() -> None:
    with pytest.raises(StructuredError):
        normalize_enum("type", "   ", REPORT_TYPES)


def test_ambiguous_prefix_raises_value_error() -> None:
    with pytest.raises(ValueError, match="ambiguous subscription"):
        normalize_enum("subscription", "conversation_", WEBHOOK_EVENTS)


def test_normalize_enum_list() -> None:
    assert normalize_enum_list("subscription", ["message_c", "contact_created"], WEBHOOK_EVENTS) == [
        "message_created",
        "contact_created",
    ]


def test_parse_bool_flag() -> None:
    assert parse_bool_flag("business_hours", None) is None
    assert parse_bool_flag("business_hours", "true") is True
    assert parse_bool_flag("business_hours", "F") is False
    with pytest.raises(StructuredError):
        parse_bool_flag("business_hours", "maybe")
