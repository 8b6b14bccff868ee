"""Pydantic settings loaded from YAML configuration and the environment."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")

WEBHOOK_URL_PREFIX = "https://discord.com/api/webhooks/"

PRODUCTION_WS_URL = "wss://api.p2pquake.net/v2/ws"
SANDBOX_WS_URL = "wss://api-realtime-sandbox.p2pquake.net/v2/ws"


class ConfigError(ValueError):
    """Settings are missing or invalid; fatal at startup."""


def split_list(value: str, sep: str = ",") -> list[str]:
    """Split a delimited setting, trimming whitespace and dropping blanks."""
    return [part.strip() for part in value.split(sep) if part.strip()]


class FeedConfig(BaseModel):
    """Upstream P2PQuake websocket configuration."""

    model_config = ConfigDict(frozen=True)

    run_mode: Literal["production", "development"] = "production"
    production_url: str = PRODUCTION_WS_URL
    sandbox_url: str = SANDBOX_WS_URL
    reconnect_base_secs: float = 5.0
    reconnect_cap_secs: float = 30.0
    # Minimum connected lifetime before the backoff counter resets.
    reconnect_stable_secs: float = 0.0

    @field_validator("run_mode", mode="before")
    @classmethod
    def _normalize_run_mode(cls, v: Any) -> Any:
        # Anything other than "development" runs against production.
        if isinstance(v, str):
            return "development" if v.strip().lower() == "development" else "production"
        return v

    @property
    def is_sandbox(self) -> bool:
        return self.run_mode == "development"

    @property
    def ws_url(self) -> str:
        return self.sandbox_url if self.is_sandbox else self.production_url


class DiscordConfig(BaseModel):
    """Discord webhook destinations and delivery options."""

    model_config = ConfigDict(frozen=True)

    webhook_urls: list[SecretStr] = []
    mention_enabled: bool = False
    timeout_secs: float = 10.0
    target_prefectures: list[str] = []

    @field_validator("webhook_urls", mode="before")
    @classmethod
    def _split_urls(cls, v: Any) -> Any:
        if isinstance(v, str):
            return split_list(v)
        return v

    @field_validator("target_prefectures", mode="before")
    @classmethod
    def _split_prefectures(cls, v: Any) -> Any:
        if isinstance(v, str):
            return split_list(v)
        if isinstance(v, list):
            return [str(p).strip() for p in v if str(p).strip()]
        return v

    @field_validator("webhook_urls")
    @classmethod
    def _check_prefix(cls, v: list[SecretStr]) -> list[SecretStr]:
        for url in v:
            if not url.get_secret_value().startswith(WEBHOOK_URL_PREFIX):
                raise ValueError(f"webhook URL must start with {WEBHOOK_URL_PREFIX}")
        return v

    def require_webhooks(self) -> None:
        """Raise ConfigError if no destination is configured."""
        if not self.webhook_urls:
            raise ConfigError("DISCORD_WEBHOOK_URL is not set.")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    format: str = "json"
    # Per-dispatch informational logs; warnings are always emitted.
    verbose: bool = True


class Settings(BaseModel):
    """Root settings container, built once at startup."""

    model_config = ConfigDict(frozen=True)

    feed: FeedConfig = FeedConfig()
    discord: DiscordConfig = DiscordConfig()
    logging: LoggingConfig = LoggingConfig()


class EnvSettings(BaseSettings):
    """The connector's environment variables, from the process or a ``.env`` file.

    Unset and empty variables are left as None so they never override the
    YAML values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    run_mode: str | None = Field(default=None, validation_alias="RUN_MODE")
    webhook_urls: str | None = Field(default=None, validation_alias="DISCORD_WEBHOOK_URL")
    mention_enabled: bool | None = Field(
        default=None, validation_alias="DISCORD_MENTION_ENABLED"
    )
    target_prefectures: str | None = Field(default=None, validation_alias="TARGET_PREFECTURES")
    verbose: bool | None = Field(default=None, validation_alias="ENABLE_LOGGER")
    log_level: str | None = Field(default=None, validation_alias="LOG_LEVEL")
    log_format: str | None = Field(default=None, validation_alias="LOG_FORMAT")

    @field_validator("mention_enabled", "verbose", mode="before")
    @classmethod
    def _only_true_enables(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower() == "true"
        return v

    def overrides(self) -> dict[str, dict[str, Any]]:
        """Group the variables that are set by settings section."""
        sections = {
            "feed": {"run_mode": self.run_mode},
            "discord": {
                "webhook_urls": self.webhook_urls,
                "mention_enabled": self.mention_enabled,
                "target_prefectures": self.target_prefectures,
            },
            "logging": {
                "verbose": self.verbose,
                "level": self.log_level,
                "format": self.log_format,
            },
        }
        out: dict[str, dict[str, Any]] = {}
        for section, values in sections.items():
            present = {k: v for k, v in values.items() if v is not None}
            if present:
                out[section] = present
        return out


def load_settings(
    path: str | Path | None = None,
    env_file: str | Path | None = ".env",
) -> Settings:
    """Load settings from a YAML file, then apply environment overrides.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.
        env_file: Dotenv file read alongside the process environment.
            Process variables win over the file. None disables it.

    Returns:
        A new, immutable Settings instance.

    Raises:
        ConfigError: If the merged values fail validation.
    """
    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    try:
        env = EnvSettings(_env_file=env_file)  # type: ignore[call-arg]
        for section, values in env.overrides().items():
            current = data.get(section)
            merged = dict(current) if isinstance(current, dict) else {}
            merged.update(values)
            data[section] = merged
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
