"""Configuration management for Quill."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

QUILL_HOME = Path(os.environ.get("QUILL_HOME", Path.home() / "quill"))
CONFIG_FILE = QUILL_HOME / "config" / "quill.conf"
UNLOCK_FILE = QUILL_HOME / "config" / ".unlocked"

DEFAULT_PIN = "6432"

# Environment variables that win over the config file.
ENV_OVERRIDES = {
    "QUILL_PIN": "pin",
    "SUPABASE_URL": "supabase_url",
    "SUPABASE_KEY": "supabase_key",
    "OPENAI_API_KEY": "openai_api_key",
}


@dataclass
class Config:
    """Quill configuration."""

    pin: str = DEFAULT_PIN
    supabase_url: str = ""
    supabase_key: str = ""
    entries_table: str = "journal_entries"
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com"
    openai_model: str = "gpt-4o-mini"
    ai_max_chars: int = 1500
    request_timeout: float = 30.0
    timezone: str = "America/Chicago"
    # Telegram bot settings
    telegram_bot_token: str = ""
    telegram_allowed_users: list[int] = field(default_factory=list)


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def _apply(config: Config, key: str, value: str) -> None:
    match key:
        case "pin":
            config.pin = value or DEFAULT_PIN
        case "supabase_url":
            config.supabase_url = value
        case "supabase_key":
            config.supabase_key = value
        case "entries_table":
            config.entries_table = value
        case "openai_api_key":
            config.openai_api_key = value
        case "openai_base_url":
            config.openai_base_url = value
        case "openai_model":
            config.openai_model = value
        case "ai_max_chars":
            try:
                config.ai_max_chars = int(value)
            except ValueError:
                logger.warning(f"Invalid AI_MAX_CHARS: {value}")
        case "request_timeout":
            try:
                config.request_timeout = float(value)
            except ValueError:
                logger.warning(f"Invalid REQUEST_TIMEOUT: {value}")
        case "timezone":
            config.timezone = value
        case "telegram_bot_token":
            config.telegram_bot_token = value
        case "telegram_allowed_users":
            config.telegram_allowed_users = [int(u.strip()) for u in value.split(",") if u.strip()]


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from quill.conf, then apply environment overrides."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if config_file.exists():
        for line in config_file.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            _apply(config, key.strip().lower(), _unquote(value.strip()))

    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            _apply(config, key, value)

    return config
