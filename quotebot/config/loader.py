from __future__ import annotations

import logging
import math
import os
import sys
from pathlib import Path
from typing import Any, Callable, Mapping

import yaml
from dotenv import load_dotenv

from .settings import (
    AISettings,
    ClickUpSettings,
    DEFAULT_AI_API_URL,
    DEFAULT_AI_MODEL,
    DEFAULT_CLICKUP_API_URL,
    DEFAULT_CRON,
    DEFAULT_LANGUAGE,
    DEFAULT_MAX_TOKENS,
    DEFAULT_STATUS_MESSAGE,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEZONE,
    DiscordSettings,
    Settings,
)
from .validator import validate_config, ConfigValidationError


DEFAULT_CONFIG_FILE = "config.yaml"
CONFIG_ENV_VAR = "CONFIG_PATH"

# Environment variables recognised by the bot; YAML uses the lower-case names.
ENV_KEYS = (
    "DISCORD_BOT_TOKEN",
    "DISCORD_CHANNEL_ID",
    "DISCORD_WEBHOOK_URL",
    "AI_API_URL",
    "AI_MODEL",
    "AI_API_KEY",
    "AI_MAX_TOKENS",
    "AI_TEMPERATURE",
    "OPENROUTER_REFERER",
    "OPENROUTER_TITLE",
    "TIMEZONE",
    "DAILY_CRON",
    "LANGUAGE",
    "SEND_NOW",
    "CLICKUP_TOKEN",
    "CLICKUP_TEAM_ID",
    "CLICKUP_API_URL",
    "STATUS_MESSAGE",
)


def get_config_path(environ: Mapping[str, str] | None = None) -> tuple[str, bool]:
    """
    Resolve the YAML config path, preferring an explicit environment override.

    Returns (path, explicit) where `explicit` tells whether the path came from CONFIG_PATH.
    """
    env = os.environ if environ is None else environ
    env_path = env.get(CONFIG_ENV_VAR)
    if env_path:
        return env_path, True
    return DEFAULT_CONFIG_FILE, False


def _load_raw_config(path: str, required: bool) -> dict[str, Any]:
    if not Path(path).is_file():
        if required:
            logging.error("Config file not found: %s", path)
            sys.exit(1)
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logging.error("YAML parsing error in %s: %s", path, e)
        sys.exit(1)

    if not isinstance(data, dict):
        logging.error("Config root must be a mapping, got %s", type(data).__name__)
        sys.exit(1)

    return {str(k).lower(): v for k, v in data.items()}


def merge_environment(raw: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    """Overlay recognised environment variables (non-empty) on top of YAML values."""
    merged = dict(raw)
    for key in ENV_KEYS:
        value = environ.get(key)
        if value is not None and value != "":
            merged[key.lower()] = value
    return merged


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _number(value: Any, default: Any, cast: Callable[[Any], Any]) -> Any:
    # Unset, non-numeric and zero all mean "use the default".
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number) or not number:
        return default
    return cast(number)


def build_settings(cfg: dict[str, Any]) -> Settings:
    channel_id = _text(cfg.get("discord_channel_id"))
    return Settings(
        discord=DiscordSettings(
            bot_token=_text(cfg.get("discord_bot_token")),
            channel_id=int(channel_id) if channel_id and channel_id.isdigit() else None,
            webhook_url=_text(cfg.get("discord_webhook_url")),
            status_message=(_text(cfg.get("status_message")) or DEFAULT_STATUS_MESSAGE)[:128],
        ),
        ai=AISettings(
            api_url=_text(cfg.get("ai_api_url")) or DEFAULT_AI_API_URL,
            model=_text(cfg.get("ai_model")) or DEFAULT_AI_MODEL,
            api_key=_text(cfg.get("ai_api_key")),
            max_tokens=_number(cfg.get("ai_max_tokens"), DEFAULT_MAX_TOKENS, int),
            temperature=_number(cfg.get("ai_temperature"), DEFAULT_TEMPERATURE, float),
            openrouter_referer=_text(cfg.get("openrouter_referer")),
            openrouter_title=_text(cfg.get("openrouter_title")),
        ),
        clickup=ClickUpSettings(
            token=_text(cfg.get("clickup_token")),
            team_id=_text(cfg.get("clickup_team_id")),
            api_url=(_text(cfg.get("clickup_api_url")) or DEFAULT_CLICKUP_API_URL).rstrip("/"),
        ),
        timezone=_text(cfg.get("timezone")) or DEFAULT_TIMEZONE,
        cron=_text(cfg.get("daily_cron")) or DEFAULT_CRON,
        language=_text(cfg.get("language")) or DEFAULT_LANGUAGE,
        send_now=(_text(cfg.get("send_now")) or "").lower() in ("1", "true"),
    )


def get_config(path: str | None = None, environ: Mapping[str, str] | None = None) -> Settings:
    """
    Public helper for loading configuration.

    - Reads .env into the process environment (existing variables win).
    - Loads CONFIG_PATH (or config.yaml when present) as a base layer.
    - Environment variables override YAML values.
    - Exits with error code 1 if validation fails.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    if path:
        cfg_path, explicit = path, True
    else:
        cfg_path, explicit = get_config_path(environ)
    cfg = merge_environment(_load_raw_config(cfg_path, required=explicit), environ)

    try:
        validate_config(cfg, cfg_path if Path(cfg_path).is_file() else "environment")
    except ConfigValidationError:
        sys.exit(1)

    return build_settings(cfg)
