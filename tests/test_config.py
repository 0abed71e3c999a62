"""
tests/test_config.py

Environment-driven settings, startup validation, and development snapshots.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from app import config
from app.config import DevLogSettings
from app.dev_log import DevSnapshotLogger
from app.main import _validate_env

_ENV_NAMES = (
    "APP_ENV",
    "LLM_ADAPTER",
    "LLM_MODEL",
    "LLM_API_KEY",
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
    "LLM_MAX_TOKENS",
    "ANALYSIS_GUIDANCE_ENABLED",
    "AA_ORIGIN",
    "AA_KEY_ID",
    "AA_SECRET",
    "IDENTITY_MAX_BATCH_SIZE",
    "IDENTITY_REQUEST_DELAY_SECONDS",
    "DEV_LOG_DIR",
    "CUSTOMER_UPLOAD_MAX_ROWS",
)


def _clear_caches() -> None:
    config.get_identity_provider_settings.cache_clear()
    config.get_llm_settings.cache_clear()
    config.get_dev_log_settings.cache_clear()
    config.get_customer_upload_settings.cache_clear()
    config.get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    _clear_caches()
    yield
    _clear_caches()


class TestSettings:
    def test_defaults(self) -> None:
        settings = config.get_settings()

        assert settings.llm.adapter == "anthropic"
        assert settings.llm.api_key is None
        assert settings.llm.guidance_enabled is True
        assert settings.identity.is_configured is False
        assert settings.identity.max_batch_size == 100
        assert settings.identity.request_delay_seconds == 0.2
        assert settings.dev_log.enabled is False
        assert settings.upload.max_rows == 500

    def test_openai_key_resolution(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLM_ADAPTER", "OpenAI")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        llm = config.get_llm_settings()

        assert llm.adapter == "openai"
        assert llm.model == "gpt-4o-mini"
        assert llm.api_key == "sk-test"

    def test_explicit_key_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", "provider-key")
        monkeypatch.setenv("LLM_API_KEY", "explicit-key")
        assert config.get_llm_settings().api_key == "explicit-key"

    def test_identity_overrides_and_bounds(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AA_ORIGIN", "https://identity.example.test")
        monkeypatch.setenv("AA_KEY_ID", "key")
        monkeypatch.setenv("AA_SECRET", "secret")
        monkeypatch.setenv("IDENTITY_MAX_BATCH_SIZE", "0")
        monkeypatch.setenv("IDENTITY_REQUEST_DELAY_SECONDS", "not-a-number")

        identity = config.get_identity_provider_settings()

        assert identity.is_configured is True
        assert identity.max_batch_size == 1
        assert identity.request_delay_seconds == 0.2

    def test_guidance_can_be_disabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANALYSIS_GUIDANCE_ENABLED", "false")
        assert config.get_llm_settings().guidance_enabled is False

    def test_dev_log_only_in_development(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "Development")
        monkeypatch.setenv("DEV_LOG_DIR", "/tmp/brandintel-logs")

        dev_log = config.get_dev_log_settings()

        assert dev_log.enabled is True
        assert dev_log.log_dir == "/tmp/brandintel-logs"


class TestValidateEnv:
    def test_defaults_pass(self) -> None:
        _validate_env()

    def test_lists_every_invalid_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLM_ADAPTER", "bogus")
        monkeypatch.setenv("APP_ENV", "staging")

        with pytest.raises(RuntimeError) as exc_info:
            _validate_env()

        message = str(exc_info.value)
        assert "LLM_ADAPTER='bogus'" in message
        assert "APP_ENV='staging'" in message


class TestDevSnapshotLogger:
    def test_disabled_writes_nothing(self, tmp_path: Path) -> None:
        logger = DevSnapshotLogger(DevLogSettings(enabled=False, log_dir=str(tmp_path)))

        assert logger.log_snapshot({"a": 1}) is None
        assert list(tmp_path.iterdir()) == []

    def test_appends_json_lines(self, tmp_path: Path) -> None:
        logger = DevSnapshotLogger(DevLogSettings(enabled=True, log_dir=str(tmp_path / "logs")))

        first = logger.log_snapshot({"matchRate": 60}, label="aggregation")
        second = logger.log_snapshot({"matchRate": 70}, label="aggregation")

        assert first == second
        assert first is not None and first.name.startswith("enrichment-")
        lines = first.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["data"]["matchRate"] for line in lines] == [60, 70]

    def test_write_failure_is_swallowed(self, tmp_path: Path) -> None:
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("x", encoding="utf-8")
        logger = DevSnapshotLogger(DevLogSettings(enabled=True, log_dir=str(blocker)))

        assert logger.log_snapshot({"a": 1}) is None
