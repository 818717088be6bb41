from __future__ import annotations

import json

import httpx
import pytest
import respx

from chatwoot_cli import cli
from chatwoot_cli.config.validate import ConfigValidationError, ConfigValidationIssue

ACCOUNT = "https://chatwoot.example/api/v1/accounts/1"
V2 = "https://chatwoot.example/api/v2/accounts/1"


@pytest.fixture
def settings(make_settings, monkeypatch):
    # No 5xx retries: the retry delay would otherwise really sleep.
    current = make_settings({"retry": {"max_5xx_retries": 0}})
    monkeypatch.setattr(cli, "load_settings", lambda config_path=None: current)
    return current


def test_no_command_prints_help(capsys) -> None:
    assert cli.main([]) == 0
    assert "canned-responses" in capsys.readouterr().out


def test_canned_responses_list_text(settings, capsys) -> None:
    with respx.mock:
        respx.get(f"{ACCOUNT}/canned_responses").mock(
            return_value=httpx.Response(200, json=[{"id": 1, "short_code": "hi", "content": "Hello!"}])
        )
        rc = cli.main(["canned-responses", "list"])

    assert rc == 0
    assert capsys.readouterr().out.strip() == "id=1 short_code=hi content=Hello!"


def test_webhooks_list_json(settings, capsys) -> None:
    with respx.mock:
        respx.get(f"{ACCOUNT}/webhooks").mock(
            return_value=httpx.Response(
                200,
                json={"payload": {"webhooks": [{"id": 2, "url": "https://h.example", "subscriptions": []}]}},
            )
        )
        rc = cli.main(["--output", "json", "webhooks", "list"])

    assert rc == 0
    parsed = json.loads(capsys.readouterr().out)
    assert parsed == [
        {"id": 2, "url": "https://h.example", "subscriptions": [], "account_id": None}
    ]


def test_delete_prints_done(settings, capsys) -> None:
    with respx.mock:
        respx.delete(f"{ACCOUNT}/agent_bots/3").mock(return_value=httpx.Response(204))
        rc = cli.main(["agent-bots", "delete", "3"])
    assert rc == 0
    assert "Done" in capsys.readouterr().out


def test_not_found_json_error_goes_to_stderr(settings, capsys) -> None:
    with respx.mock:
        respx.get(f"{ACCOUNT}/webhooks").mock(
            return_value=httpx.Response(200, json={"payload": {"webhooks": []}})
        )
        rc = cli.main(["--output", "json", "webhooks", "get", "9"])

    captured = capsys.readouterr()
    assert rc == 4
    assert captured.out == ""
    err = json.loads(captured.err)
    assert err["code"] == "not_found"
    assert err["message"] == "webhook with ID 9 not found"
    assert err["retryable"] is False
    assert err["suggestion"] == "Verify the resource ID exists"


def test_unauthorized_text_error_shows_suggestion_and_request_id(settings, capsys) -> None:
    with respx.mock:
        respx.get(f"{ACCOUNT}/agent_bots").mock(
            return_value=httpx.Response(
                401, json={"error": "Invalid Access Token"}, headers={"X-Request-Id": "r-1"}
            )
        )
        rc = cli.main(["agent-bots", "list"])

    err = capsys.readouterr().err
    assert rc == 3
    assert "Error: Invalid Access Token" in err
    assert "Suggestion: Run 'chatwoot config validate'" in err
    assert "Request ID: r-1" in err


def test_forbidden_exit_code(settings) -> None:
    with respx.mock:
        respx.get(f"{ACCOUNT}/automation_rules").mock(return_value=httpx.Response(403, json={}))
        assert cli.main(["automation-rules", "list"]) == 5


def test_server_error_exit_code(settings) -> None:
    with respx.mock:
        respx.get(f"{V2}/reports/conversations").mock(return_value=httpx.Response(500))
        assert cli.main(["reports", "conversations"]) == 7


def test_rate_limited_write_exit_code(settings, capsys) -> None:
    with respx.mock:
        respx.post(f"{ACCOUNT}/canned_responses").mock(
            return_value=httpx.Response(429, headers={"Retry-After": "30"})
        )
        rc = cli.main(["canned-responses", "create", "--short-code", "hi", "--content", "Hello"])

    assert rc == 6
    assert "retry after 30s" in capsys.readouterr().err


def test_network_failure_exit_code(settings) -> None:
    with respx.mock:
        respx.get(f"{ACCOUNT}/canned_responses").mock(side_effect=httpx.ConnectError("refused"))
        assert cli.main(["canned-responses", "list"]) == 8


def test_timeout_exit_code(settings, capsys) -> None:
    with respx.mock:
        respx.get(f"{ACCOUNT}/canned_responses").mock(side_effect=httpx.ReadTimeout("slow"))
        rc = cli.main(["--output", "json", "canned-responses", "list"])

    assert rc == 8
    assert json.loads(capsys.readouterr().err)["code"] == "timeout"


def test_invalid_enum_value_is_validation_error_without_request(settings, capsys) -> None:
    with respx.mock:
        rc = cli.main(
            ["reports", "summary", "--type", "galaxy", "--since", "1", "--until", "2"]
        )

    err = capsys.readouterr().err
    assert rc == 2
    assert 'Error: invalid type "galaxy": must be one of account, agent, inbox, label, team' in err
    assert "Suggestion: Use one of: account, agent, inbox, label, team" in err


def test_invalid_enum_value_json_lists_allowed_values(settings, capsys) -> None:
    with respx.mock:
        rc = cli.main(["--output", "json", "public", "typing", "inbox-abc", "src-1", "9", "--status", "maybe"])

    assert rc == 2
    err = json.loads(capsys.readouterr().err)
    assert err["code"] == "validation_failed"
    assert err["allowed_values"] == ["on", "off"]
    assert err["context"] == {"field": "typing_status", "got": "maybe"}


def test_enum_prefix_is_expanded(settings) -> None:
    with respx.mock:
        route = respx.get(f"{V2}/reports/summary").mock(return_value=httpx.Response(200, json={}))
        rc = cli.main(["reports", "summary", "--type", "acc", "--since", "1", "--until", "2"])

    assert rc == 0
    assert route.calls.last.request.url.params["type"] == "account"


def test_ambiguous_prefix_is_usage_error(settings, capsys) -> None:
    with respx.mock:
        rc = cli.main(
            ["webhooks", "create", "--url", "https://h.example", "--subscriptions", "conversation_"]
        )
    assert rc == 2
    assert "ambiguous subscription" in capsys.readouterr().err


def test_webhook_subscriptions_are_normalized(settings) -> None:
    with respx.mock:
        route = respx.post(f"{ACCOUNT}/webhooks").mock(
            return_value=httpx.Response(200, json={"payload": {"webhook": {"id": 1}}})
        )
        rc = cli.main(
            [
                "webhooks",
                "create",
                "--url",
                "https://h.example",
                "--subscriptions",
                "message_created, CONTACT_CREATED",
            ]
        )

    assert rc == 0
    body = json.loads(route.calls.last.request.content)
    assert body["subscriptions"] == ["message_created", "contact_created"]


def test_inbox_members_add_parses_ids(settings) -> None:
    with respx.mock:
        route = respx.post(f"{ACCOUNT}/inbox_members").mock(return_value=httpx.Response(200))
        rc = cli.main(["inbox-members", "add", "4", "--user-ids", "1,2"])
    assert rc == 0
    assert json.loads(route.calls.last.request.content) == {"inbox_id": 4, "user_ids": [1, 2]}


def test_bad_json_argument_is_usage_error(settings, capsys) -> None:
    with respx.mock:
        rc = cli.main(
            [
                "automation-rules",
                "create",
                "--name",
                "r",
                "--event",
                "message_created",
                "--conditions",
                "{not json",
            ]
        )
    assert rc == 2
    assert "--conditions must be valid JSON" in capsys.readouterr().err


def test_reset_token_json_output(settings, capsys) -> None:
    with respx.mock:
        respx.post(f"{ACCOUNT}/agent_bots/4/reset_access_token").mock(
            return_value=httpx.Response(200, json={"access_token": "fresh"})
        )
        rc = cli.main(["--output", "json", "agent-bots", "reset-token", "4"])
    assert rc == 0
    assert json.loads(capsys.readouterr().out) == {"access_token": "fresh"}


def test_config_validate_ok(settings, capsys) -> None:
    assert cli.main(["config", "validate"]) == 0
    out = capsys.readouterr().out
    assert "Configuration is valid" in out
    assert "Account ID: 1" in out


def test_config_validate_reports_issues(monkeypatch, capsys) -> None:
    def _raise(config_path=None):
        raise ConfigValidationError(
            [ConfigValidationIssue("chatwoot.api_token", "Field required")]
        )

    monkeypatch.setattr(cli, "load_settings", _raise)
    rc = cli.main(["config", "validate"])

    assert rc == 2
    err = capsys.readouterr().err
    assert "Configuration is invalid" in err
    assert "chatwoot.api_token: Field required" in err


def test_config_dump_redacts_token(settings, capsys) -> None:
    assert cli.main(["config", "dump"]) == 0
    out = capsys.readouterr().out
    data = json.loads(out)
    assert data["chatwoot"]["api_token"] == "[redacted]"
    assert data["chatwoot"]["account_id"] == 1
    assert "test-token" not in out


def test_config_flag_is_passed_to_loader(make_settings, monkeypatch, tmp_path) -> None:
    seen: list[object] = []
    current = make_settings()

    def _load(config_path=None):
        seen.append(config_path)
        return current

    monkeypatch.setattr(cli, "load_settings", _load)
    assert cli.main(["--config", str(tmp_path / "c.yaml"), "config", "validate"]) == 0
    assert seen == [str(tmp_path / "c.yaml")]


def test_unknown_subcommand_exits_with_usage() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["webhooks", "explode"])
    assert excinfo.value.code == 2
