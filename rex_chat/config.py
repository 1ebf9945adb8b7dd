"""Configuration loading and validation for the Rex chat client."""

from __future__ import annotations

from copy import deepcopy
import logging
import os
from pathlib import Path
import tomllib
from typing import Any
from urllib.parse import urlparse

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .exceptions import ConfigValidationError

LOGGER = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "rex-chat"
CONFIG_PATH = CONFIG_DIR / "config.toml"

VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _require_text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("Expected a string value.")
    normalized = value.strip()
    if not normalized:
        raise ValueError("String value must not be empty.")
    return normalized


class AppConfig(BaseModel):
    """Application metadata and terminal integration options."""

    model_config = ConfigDict(populate_by_name=True)
    title: str = "Rex Chat"
    window_class: str = Field(default="rex-chat", alias="class")

    @field_validator("title", "window_class", mode="before")
    @classmethod
    def _validate_non_empty_string(cls, value: Any) -> str:
        return _require_text(value)


class ServerConfig(BaseModel):
    """Location of the chat server and its two endpoints."""

    base_url: str = "http://192.168.1.19:9090"
    chat_path: str = "/chat"
    commands_path: str = "/commands"
    # None keeps the transport default.
    timeout_seconds: float | None = Field(default=None, gt=0, le=3600)

    @field_validator("base_url", mode="before")
    @classmethod
    def _validate_base_url(cls, value: Any) -> str:
        normalized = _require_text(value).rstrip("/")
        parsed = urlparse(normalized)
        if parsed.scheme.lower() not in {"http", "https"}:
            raise ValueError("server.base_url must use http or https scheme.")
        if not (parsed.hostname or "").strip():
            raise ValueError("server.base_url must include a hostname.")
        return normalized

    @field_validator("chat_path", "commands_path", mode="before")
    @classmethod
    def _validate_path(cls, value: Any) -> str:
        normalized = _require_text(value)
        if not normalized.startswith("/"):
            normalized = f"/{normalized}"
        return normalized

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}{self.chat_path}"

    @property
    def commands_url(self) -> str:
        return f"{self.base_url}{self.commands_path}"


class ChatConfig(BaseModel):
    """Fixed texts shown by the chat screen."""

    greeting: str = "Hey! I'm Rex, your C# mentor 🦖"
    fallback_reply: str = (
        "im a ai chatbot made for c# , i cant help with this, "
        "call your dad to fix this issue"
    )
    offline_notice: str = (
        "I couldn't reach the server 😢\n"
        "Make sure Python server.py is running and your IP is correct."
    )
    input_placeholder: str = "Ask Rex about C#…"

    @field_validator("greeting", mode="before")
    @classmethod
    def _normalize_greeting(cls, value: Any) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ValueError("greeting must be a string.")
        return value.strip()

    @field_validator(
        "fallback_reply", "offline_notice", "input_placeholder", mode="before"
    )
    @classmethod
    def _validate_required_text(cls, value: Any) -> str:
        return _require_text(value)


class SettingsScreenConfig(BaseModel):
    """Texts for the alert raised from the Settings tab."""

    alert_title: str = "Settings"
    alert_message: str = "Settings button pressed!"

    @field_validator("alert_title", "alert_message", mode="before")
    @classmethod
    def _validate_required_text(cls, value: Any) -> str:
        return _require_text(value)


class KeybindsConfig(BaseModel):
    """Keyboard action mapping."""

    show_commands: str = "ctrl+o"
    quit: str = "ctrl+q"
    scroll_up: str = "ctrl+k"
    scroll_down: str = "ctrl+j"

    @field_validator("*", mode="before")
    @classmethod
    def _validate_keybind(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Keybind must be a string.")
        return value.strip()


class LoggingConfig(BaseModel):
    """Logging behavior and output destinations."""

    level: str = "INFO"
    structured: bool = True
    log_to_file: bool = False
    log_file_path: str = "~/.local/state/rex-chat/app.log"

    @field_validator("level", mode="before")
    @classmethod
    def _validate_level(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Logging level must be a string.")
        normalized = value.strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(f"Unsupported log level {normalized!r}.")
        return normalized

    @field_validator("log_file_path", mode="before")
    @classmethod
    def _validate_log_file_path(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("log_file_path must be a string.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("log_file_path must not be empty.")
        return normalized


class Config(BaseModel):
    """Root configuration model for all sections."""

    model_config = ConfigDict(populate_by_name=True)
    app: AppConfig = AppConfig()
    server: ServerConfig = ServerConfig()
    chat: ChatConfig = ChatConfig()
    settings: SettingsScreenConfig = SettingsScreenConfig()
    keybinds: KeybindsConfig = KeybindsConfig()
    logging: LoggingConfig = LoggingConfig()


DEFAULT_CONFIG: dict[str, dict[str, Any]] = Config().model_dump(by_alias=True)


def ensure_config_dir(config_dir: Path | None = None) -> Path:
    """Ensure that the config directory exists and return its path."""
    directory = config_dir or CONFIG_DIR
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.warning("Unable to create config directory %s: %s", directory, exc)
    return directory


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override values onto base values."""
    merged: dict[str, Any] = deepcopy(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _enforce_private_permissions(path: Path) -> None:
    """Best-effort enforcement of private file permissions on POSIX systems."""
    if os.name != "posix" or not path.exists():
        return
    try:
        path.chmod(0o600)
    except OSError as exc:
        LOGGER.warning("Unable to enforce 0600 permissions for %s: %s", path, exc)


def _safe_default_config() -> dict[str, dict[str, Any]]:
    """Return a deep copy of validated default config data."""
    return deepcopy(DEFAULT_CONFIG)


def _validate_config(raw: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Validate merged config and fallback to safe defaults when possible."""
    try:
        config = Config.model_validate(raw)
        return config.model_dump(by_alias=True)
    except ValidationError as exc:
        LOGGER.warning("Configuration validation failed, using safe defaults: %s", exc)
        return _safe_default_config()
    except Exception as exc:  # noqa: BLE001 - unexpected model construction failure.
        raise ConfigValidationError(f"Unable to validate configuration: {exc}") from exc


def load_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> dict[str, dict[str, Any]]:
    """
    Load configuration from TOML, merge with defaults, and validate.

    ``overrides`` is merged last; the CLI uses it for ``--server-url``.
    """
    target_path = config_path or CONFIG_PATH
    ensure_config_dir(target_path.parent)

    raw_data: dict[str, Any] = {}
    if target_path.exists():
        _enforce_private_permissions(target_path)
        try:
            raw_data = tomllib.loads(target_path.read_text(encoding="utf-8"))
        except Exception as exc:  # noqa: BLE001 - invalid user config must not crash startup.
            LOGGER.warning("Failed to parse config at %s: %s", target_path, exc)
            raw_data = {}

    merged = (
        _deep_merge(DEFAULT_CONFIG, raw_data)
        if isinstance(raw_data, dict)
        else _safe_default_config()
    )
    if overrides:
        merged = _deep_merge(merged, overrides)
    return _validate_config(merged)


def server_settings(config: dict[str, dict[str, Any]]) -> ServerConfig:
    """Return the validated server section as a model with URL helpers."""
    return ServerConfig.model_validate(config.get("server", {}))
