"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

ALLOWED_APP_ENVS = {"development", "production", "test"}
ALLOWED_LLM_ADAPTERS = {"anthropic", "openai", "mock"}

_DEFAULT_MODELS = {
    "anthropic": "claude-sonnet-4-20250514",
    "openai": "gpt-4o-mini",
    "mock": "mock",
}


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class IdentityProviderSettings:
    """
    Identity-resolution provider connection and pacing settings.
    """

    origin: str | None = None
    key_id: str | None = None
    secret: str | None = None
    timeout_seconds: float = 15.0
    request_delay_seconds: float = 0.2
    max_batch_size: int = 100

    @property
    def is_configured(self) -> bool:
        return bool(self.origin and self.key_id and self.secret)


@dataclass(frozen=True)
class LLMSettings:
    """
    Language model provider settings.
    """

    adapter: str = "anthropic"
    model: str = _DEFAULT_MODELS["anthropic"]
    api_key: str | None = None
    base_url: str | None = None
    max_tokens: int = 4096
    guidance_enabled: bool = True


@dataclass(frozen=True)
class DevLogSettings:
    """
    Development-mode file logging of aggregation snapshots.
    """

    enabled: bool = False
    log_dir: str = "logs"


@dataclass(frozen=True)
class CustomerUploadSettings:
    """
    Runtime settings for customer CSV uploads.
    """

    max_rows: int = 500
    max_validation_errors: int = 100


@dataclass(frozen=True)
class BrandIntelSettings:
    """
    Process-wide configuration, built once at startup and passed explicitly.
    """

    identity: IdentityProviderSettings
    llm: LLMSettings
    dev_log: DevLogSettings
    upload: CustomerUploadSettings


def get_app_env() -> str:
    """
    Return the normalized APP_ENV value (defaults to 'production').
    """

    return _get_str_env("APP_ENV", "production").lower()


def _resolve_llm_api_key(adapter: str) -> str | None:
    explicit = _get_optional_str_env("LLM_API_KEY")
    if explicit:
        return explicit
    if adapter == "anthropic":
        return _get_optional_str_env("ANTHROPIC_API_KEY")
    if adapter == "openai":
        return _get_optional_str_env("OPENAI_API_KEY")
    return None


@lru_cache(maxsize=1)
def get_identity_provider_settings() -> IdentityProviderSettings:
    """
    Return identity provider settings from environment variables.
    """

    return IdentityProviderSettings(
        origin=_get_optional_str_env("AA_ORIGIN"),
        key_id=_get_optional_str_env("AA_KEY_ID"),
        secret=_get_optional_str_env("AA_SECRET"),
        timeout_seconds=max(1.0, _get_float_env("IDENTITY_TIMEOUT_SECONDS", 15.0)),
        request_delay_seconds=max(0.0, _get_float_env("IDENTITY_REQUEST_DELAY_SECONDS", 0.2)),
        max_batch_size=max(1, _get_int_env("IDENTITY_MAX_BATCH_SIZE", 100)),
    )


@lru_cache(maxsize=1)
def get_llm_settings() -> LLMSettings:
    """
    Return LLM adapter settings from environment variables.
    """

    adapter = _get_str_env("LLM_ADAPTER", "anthropic").lower()
    return LLMSettings(
        adapter=adapter,
        model=_get_str_env("LLM_MODEL", _DEFAULT_MODELS.get(adapter, "")),
        api_key=_resolve_llm_api_key(adapter),
        base_url=_get_optional_str_env("LLM_BASE_URL"),
        max_tokens=max(256, _get_int_env("LLM_MAX_TOKENS", 4096)),
        guidance_enabled=_get_bool_env("ANALYSIS_GUIDANCE_ENABLED", True),
    )


@lru_cache(maxsize=1)
def get_dev_log_settings() -> DevLogSettings:
    """
    Return development logging settings; enabled only when APP_ENV=development.
    """

    return DevLogSettings(
        enabled=get_app_env() == "development",
        log_dir=_get_str_env("DEV_LOG_DIR", "logs"),
    )


@lru_cache(maxsize=1)
def get_customer_upload_settings() -> CustomerUploadSettings:
    """
    Return customer upload settings from environment variables.
    """

    return CustomerUploadSettings(
        max_rows=max(1, _get_int_env("CUSTOMER_UPLOAD_MAX_ROWS", 500)),
        max_validation_errors=max(1, _get_int_env("CUSTOMER_UPLOAD_MAX_VALIDATION_ERRORS", 100)),
    )


@lru_cache(maxsize=1)
def get_settings() -> BrandIntelSettings:
    """
    Return the composite settings object used to wire services.
    """

    return BrandIntelSettings(
        identity=get_identity_provider_settings(),
        llm=get_llm_settings(),
        dev_log=get_dev_log_settings(),
        upload=get_customer_upload_settings(),
    )
