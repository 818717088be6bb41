"""Settings loading: `.env`, an optional YAML file, then the process environment."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from chatwoot_cli.config.env_aliases import FLAT_ENV_MAPPINGS
from chatwoot_cli.config.settings import ChatwootSettings, Settings
from chatwoot_cli.config.validate import (
    ConfigValidationError,
    ConfigValidationIssue,
    issues_from_pydantic_error,
    validate_settings,
)

DEFAULT_CONFIG_PATH = Path("config/config.yaml")

_ENV_NAMES: dict[str, str] = {".".join(path): name for name, path in FLAT_ENV_MAPPINGS}


def load_settings(*, config_path: str | Path | None = None) -> Settings:
    """
    Load the settings for one CLI invocation.

    `.env` in the working directory never overrides variables that are already set. A config
    file named by `config_path` or CONFIG_PATH must exist; `config/config.yaml` is optional.
    Environment variables win over YAML values.
    """
    if Path(".env").is_file():
        load_dotenv(dotenv_path=".env", override=False)

    path = _config_file(config_path)
    data = _read_yaml(path) if path is not None else {}

    try:
        settings = Settings(**data)
    except ValidationError as exc:
        issues = [_with_hint(issue) for issue in issues_from_pydantic_error(exc)]
        raise ConfigValidationError(issues) from exc

    validate_settings(settings)
    return settings


def _config_file(config_path: str | Path | None) -> Path | None:
    requested = config_path if config_path is not None else os.environ.get("CONFIG_PATH")
    if requested:
        path = Path(requested)
        if not path.exists():
            raise ConfigValidationError(
                [ConfigValidationIssue("CONFIG_PATH", f"Config file not found: {path}")]
            )
        return path
    return DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        label = "Invalid YAML" if isinstance(exc, yaml.YAMLError) else "Unable to read config file"
        raise ConfigValidationError([ConfigValidationIssue(str(path), f"{label}: {exc}")]) from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigValidationError(
            [ConfigValidationIssue(str(path), "YAML root must be a mapping/object")]
        )
    return raw


def _with_hint(issue: ConfigValidationIssue) -> ConfigValidationIssue:
    if issue.path == "chatwoot":
        # No chatwoot section at all: name every value without a default.
        names = [
            f"`{_ENV_NAMES[f'chatwoot.{field}']}`"
            for field, info in ChatwootSettings.model_fields.items()
            if info.is_required()
        ]
        hint = f"Set {', '.join(names)} (or the YAML `chatwoot` section)."
    elif issue.path in _ENV_NAMES:
        hint = f"Set `{_ENV_NAMES[issue.path]}` (or YAML `{issue.path}`)."
    else:
        return issue
    return ConfigValidationIssue(issue.path, f"{issue.message.rstrip('.')}. {hint}")
