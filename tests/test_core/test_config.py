"""Tests for configuration loading: defaults, YAML, environment overrides."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from quakerelay.core.config import (
    PRODUCTION_WS_URL,
    SANDBOX_WS_URL,
    ConfigError,
    DiscordConfig,
    EnvSettings,
    FeedConfig,
    LoggingConfig,
    Settings,
    load_settings,
    split_list,
)

HOOK_A = "https://discord.com/api/webhooks/111/aaa"
HOOK_B = "https://discord.com/api/webhooks/222/bbb"

ENV_VARS = (
    "RUN_MODE",
    "DISCORD_WEBHOOK_URL",
    "DISCORD_MENTION_ENABLED",
    "TARGET_PREFECTURES",
    "ENABLE_LOGGER",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_default_feed_config(self) -> None:
        cfg = FeedConfig()
        assert cfg.run_mode == "production"
        assert cfg.reconnect_base_secs == 5.0
        assert cfg.reconnect_cap_secs == 30.0
        assert cfg.reconnect_stable_secs == 0.0
        assert not cfg.is_sandbox
        assert cfg.ws_url == PRODUCTION_WS_URL

    def test_development_uses_sandbox(self) -> None:
        cfg = FeedConfig(run_mode="development")
        assert cfg.is_sandbox
        assert cfg.ws_url == SANDBOX_WS_URL

    def test_default_discord_config(self) -> None:
        cfg = DiscordConfig()
        assert cfg.webhook_urls == []
        assert cfg.mention_enabled is False
        assert cfg.timeout_secs == 10.0
        assert cfg.target_prefectures == []

    def test_default_logging_config(self) -> None:
        cfg = LoggingConfig()
        assert cfg.level == "INFO"
        assert cfg.format == "json"
        assert cfg.verbose is True

    def test_settings_are_frozen(self) -> None:
        s = Settings()
        with pytest.raises(ValidationError):
            s.feed = FeedConfig(run_mode="development")  # type: ignore[misc]


class TestDiscordValidation:
    def test_comma_separated_urls_are_split(self) -> None:
        cfg = DiscordConfig(webhook_urls=f"{HOOK_A}, {HOOK_B}")  # type: ignore[arg-type]
        assert [u.get_secret_value() for u in cfg.webhook_urls] == [HOOK_A, HOOK_B]

    def test_invalid_prefix_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DiscordConfig(webhook_urls=["https://example.com/hook"])  # type: ignore[list-item]

    def test_target_prefectures_trimmed(self) -> None:
        cfg = DiscordConfig(target_prefectures=" Tokyo , Osaka ,")  # type: ignore[arg-type]
        assert cfg.target_prefectures == ["Tokyo", "Osaka"]

    def test_require_webhooks(self) -> None:
        with pytest.raises(ConfigError):
            DiscordConfig().require_webhooks()
        DiscordConfig(webhook_urls=HOOK_A).require_webhooks()  # type: ignore[arg-type]

    def test_repr_does_not_leak_url(self) -> None:
        cfg = DiscordConfig(webhook_urls=HOOK_A)  # type: ignore[arg-type]
        assert "aaa" not in repr(cfg)


class TestYamlLoading:
    def test_load_from_yaml(self, tmp_path: Path) -> None:
        config_data = {
            "feed": {"run_mode": "development", "reconnect_base_secs": 1.0},
            "discord": {
                "webhook_urls": [HOOK_A],
                "mention_enabled": True,
                "target_prefectures": ["Tokyo"],
            },
            "logging": {"level": "DEBUG", "format": "console"},
        }
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml.dump(config_data))

        settings = load_settings(config_file, env_file=None)

        assert settings.feed.is_sandbox
        assert settings.feed.reconnect_base_secs == 1.0
        assert settings.discord.webhook_urls[0].get_secret_value() == HOOK_A
        assert settings.discord.mention_enabled is True
        assert settings.discord.target_prefectures == ["Tokyo"]
        assert settings.logging.level == "DEBUG"

    def test_load_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "nonexistent.yaml", env_file=None)
        assert settings == Settings()

    def test_load_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        settings = load_settings(config_file, env_file=None)
        assert settings.feed.run_mode == "production"

    def test_invalid_yaml_values_raise_config_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad.yaml"
        config_file.write_text(yaml.dump({"feed": {"reconnect_base_secs": "soon"}}))
        with pytest.raises(ConfigError):
            load_settings(config_file, env_file=None)


class TestRunMode:
    def test_unrecognized_mode_runs_production(self) -> None:
        cfg = FeedConfig(run_mode="staging")  # type: ignore[arg-type]
        assert cfg.run_mode == "production"
        assert cfg.ws_url == PRODUCTION_WS_URL

    def test_development_is_case_insensitive(self) -> None:
        assert FeedConfig(run_mode=" Development ").is_sandbox  # type: ignore[arg-type]

    def test_unrecognized_env_mode_is_not_fatal(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("RUN_MODE", "prod")
        settings = load_settings(tmp_path / "none.yaml", env_file=None)
        assert not settings.feed.is_sandbox


class TestEnvironmentOverrides:
    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml.dump({"discord": {"timeout_secs": 5.0}}))
        monkeypatch.setenv("RUN_MODE", "development")
        monkeypatch.setenv("DISCORD_WEBHOOK_URL", f"{HOOK_A},{HOOK_B}")
        monkeypatch.setenv("DISCORD_MENTION_ENABLED", "true")
        monkeypatch.setenv("TARGET_PREFECTURES", "Tokyo, Chiba")
        monkeypatch.setenv("ENABLE_LOGGER", "false")

        settings = load_settings(config_file, env_file=None)

        assert settings.feed.is_sandbox
        assert len(settings.discord.webhook_urls) == 2
        assert settings.discord.mention_enabled is True
        assert settings.discord.target_prefectures == ["Tokyo", "Chiba"]
        assert settings.discord.timeout_secs == 5.0
        assert settings.logging.verbose is False

    def test_enable_logger_defaults_true(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ENABLE_LOGGER", "")
        settings = load_settings(tmp_path / "none.yaml", env_file=None)
        assert settings.logging.verbose is True

    def test_mention_only_true_string_enables(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DISCORD_MENTION_ENABLED", "yes")
        settings = load_settings(tmp_path / "none.yaml", env_file=None)
        assert settings.discord.mention_enabled is False

    def test_empty_target_prefectures_means_no_filter(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TARGET_PREFECTURES", "")
        settings = load_settings(tmp_path / "none.yaml", env_file=None)
        assert settings.discord.target_prefectures == []

    def test_bad_webhook_in_env_raises(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DISCORD_WEBHOOK_URL", "https://evil.example/hook")
        with pytest.raises(ConfigError):
            load_settings(tmp_path / "none.yaml", env_file=None)

    def test_dotenv_file_is_read(self, tmp_path: Path) -> None:
        dotenv = tmp_path / ".env"
        dotenv.write_text(f"DISCORD_WEBHOOK_URL={HOOK_A}\nRUN_MODE=development\n")

        settings = load_settings(tmp_path / "none.yaml", env_file=dotenv)

        assert settings.discord.webhook_urls[0].get_secret_value() == HOOK_A
        assert settings.feed.is_sandbox
        settings.discord.require_webhooks()

    def test_process_env_wins_over_dotenv(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        dotenv = tmp_path / ".env"
        dotenv.write_text("LOG_LEVEL=DEBUG\n")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        settings = load_settings(tmp_path / "none.yaml", env_file=dotenv)
        assert settings.logging.level == "WARNING"

    def test_missing_dotenv_is_ignored(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "none.yaml", env_file=tmp_path / "absent.env")
        assert settings == Settings()

    def test_overrides_only_set_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_FORMAT", "console")
        assert EnvSettings(_env_file=None).overrides() == {  # type: ignore[call-arg]
            "logging": {"format": "console"}
        }


class TestSplitList:
    def test_split_and_trim(self) -> None:
        assert split_list(" a, b ,,c ") == ["a", "b", "c"]

    def test_empty(self) -> None:
        assert split_list("") == []
