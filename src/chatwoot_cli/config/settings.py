from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic.networks import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

from chatwoot_cli._version import __version__
from chatwoot_cli.adapters.chatwoot.client import RetryConfig
from chatwoot_cli.config.env_aliases import get_flat_env_settings_source


class _BaseSection(BaseModel):
    model_config = {"extra": "forbid"}


class ChatwootSettings(_BaseSection):
    base_url: AnyHttpUrl
    api_token: SecretStr
    account_id: int = Field(ge=1)
    timeout_seconds: float = Field(default=30.0, gt=0)
    verify_tls: bool = True
    user_agent: str = f"chatwoot-cli/{__version__}"
    # Sent as Idempotency-Key on writes; also makes writes eligible for retries.
    idempotency_key: str | None = None


class RetrySettings(_BaseSection):
    max_rate_limit_retries: int = Field(default=3, ge=0, le=20)
    max_5xx_retries: int = Field(default=1, ge=0, le=20)
    rate_limit_base_delay: float = Field(default=1.0, ge=0)
    server_error_retry_delay: float = Field(default=1.0, ge=0)
    circuit_breaker_threshold: int = Field(default=5, ge=1)
    circuit_breaker_reset_seconds: float = Field(default=30.0, gt=0)

    @field_validator(
        "rate_limit_base_delay",
        "server_error_retry_delay",
        "circuit_breaker_reset_seconds",
        mode="before",
    )
    @classmethod
    def _parse_duration(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_duration_seconds(value)
        return value

    def to_retry_config(self) -> RetryConfig:
        return RetryConfig(
            max_rate_limit_retries=self.max_rate_limit_retries,
            max_5xx_retries=self.max_5xx_retries,
            rate_limit_base_delay=self.rate_limit_base_delay,
            server_error_retry_delay=self.server_error_retry_delay,
            circuit_breaker_threshold=self.circuit_breaker_threshold,
            circuit_breaker_reset_seconds=self.circuit_breaker_reset_seconds,
        )


class ObservabilitySettings(_BaseSection):
    log_level: str = "WARNING"
    log_format: str | None = None  # json|human (overrides LOG_FORMAT/env when set)
    json_logs: bool = False

    @field_validator("log_format")
    @classmethod
    def _validate_log_format(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip().lower()
        if normalized in {"json", "human"}:
            return normalized
        raise ValueError("observability.log_format must be 'json' or 'human'")


class TransportHardeningSettings(_BaseSection):
    # If true, allow httpx to read HTTP_PROXY/HTTPS_PROXY/NO_PROXY and other env settings.
    trust_env: bool = False
    # Allow plaintext HTTP for the Chatwoot URL. Strongly discouraged.
    allow_insecure_http: bool = False
    # Allow disabling TLS verification. Strongly discouraged.
    allow_insecure_tls: bool = False


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="",
        env_nested_delimiter="__",
        extra="forbid",
    )

    chatwoot: ChatwootSettings
    retry: RetrySettings = Field(default_factory=RetrySettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    transport: TransportHardeningSettings = Field(default_factory=TransportHardeningSettings)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Settings:
        """
        Construct Settings from a mapping without reading environment variables.

        Useful in tests where we want to pass nested dicts and keep mypy happy.
        """
        class _InitOnlySettings(Settings):
            @classmethod
            def settings_customise_sources(
                cls,
                settings_cls,
                init_settings,
                env_settings,
                dotenv_settings,
                file_secret_settings,
            ):
                return (init_settings,)

        return _InitOnlySettings(**dict(data))

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            env_settings,
            get_flat_env_settings_source,
            init_settings,
            dotenv_settings,
            file_secret_settings,
        )


_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration_seconds(value: str) -> float:
    """Parse ``1.5``, ``500ms``, ``30s``, ``2m`` or ``1h`` into seconds."""
    raw = value.strip().lower()
    if not raw:
        raise ValueError("duration must not be empty")
    for suffix in ("ms", "s", "m", "h"):
        if raw.endswith(suffix):
            number = raw[: -len(suffix)]
            try:
                return float(number) * _DURATION_UNITS[suffix]
            except ValueError:
                raise ValueError(f"invalid duration {value!r}") from None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"invalid duration {value!r}") from None
