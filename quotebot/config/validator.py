"""
Configuration validator for the raw settings mapping.

Validates required fields per delivery mode, schedule and common
misconfigurations before any connection is attempted.
"""

from __future__ import annotations

import logging
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from apscheduler.triggers.cron import CronTrigger

from ..scheduler import parse_cron
from .settings import DEFAULT_TIMEZONE, LANGUAGES


logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Raised when config validation fails."""
    pass


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def validate_config(cfg: dict[str, Any], source: str = "environment") -> None:
    """
    Validate the merged configuration mapping (lower-case keys).

    Raises ConfigValidationError if validation fails.
    Logs detailed error messages before raising.

    Args:
        cfg: Merged mapping from YAML and environment variables
        source: Description of where the values came from (for error messages)

    Raises:
        ConfigValidationError: If validation fails
    """
    errors = []
    warnings = []

    # ── Delivery target ─────────────────────────────────────────────────────
    webhook_url = cfg.get("discord_webhook_url")
    if _is_blank(webhook_url):
        if _is_blank(cfg.get("discord_bot_token")):
            errors.append(
                "DISCORD_BOT_TOKEN is required when DISCORD_WEBHOOK_URL is not set"
            )
        channel_id = cfg.get("discord_channel_id")
        if _is_blank(channel_id):
            errors.append(
                "DISCORD_CHANNEL_ID is required when DISCORD_WEBHOOK_URL is not set"
            )
        elif not str(channel_id).strip().isdigit():
            errors.append(f"DISCORD_CHANNEL_ID must be a numeric id, got {channel_id!r}")
    elif not str(webhook_url).startswith(("http://", "https://")):
        errors.append(f"DISCORD_WEBHOOK_URL must be an http(s) URL, got {webhook_url!r}")

    # ── Schedule ────────────────────────────────────────────────────────────
    timezone = cfg.get("timezone")
    if _is_blank(timezone):
        timezone = DEFAULT_TIMEZONE
    else:
        try:
            ZoneInfo(str(timezone))
        except (ZoneInfoNotFoundError, ValueError):
            errors.append(f"Unknown TIMEZONE {timezone!r}")
            timezone = DEFAULT_TIMEZONE

    cron = cfg.get("daily_cron")
    if cron is not None:
        if len(str(cron).split()) != 5:
            errors.append(
                f"DAILY_CRON must have 5 fields (minute hour day month weekday), got {cron!r}"
            )
        else:
            try:
                CronTrigger(timezone=str(timezone), **parse_cron(str(cron)))
            except (ValueError, TypeError) as e:
                errors.append(f"Invalid DAILY_CRON {cron!r}: {e}")

    # ── Generation ──────────────────────────────────────────────────────────
    language = cfg.get("language")
    if not _is_blank(language) and str(language) not in LANGUAGES:
        warnings.append(
            f"LANGUAGE {language!r} is not one of {', '.join(LANGUAGES)}; English will be used"
        )

    if _is_blank(cfg.get("ai_api_key")):
        warnings.append("AI_API_KEY is not set; only fallback quotes will be posted")

    # ── Task context ────────────────────────────────────────────────────────
    has_token = not _is_blank(cfg.get("clickup_token"))
    has_team = not _is_blank(cfg.get("clickup_team_id"))
    if has_token != has_team:
        warnings.append(
            "Only one of CLICKUP_TOKEN / CLICKUP_TEAM_ID is set; task context is disabled"
        )

    # ── Log warnings ────────────────────────────────────────────────────────
    for warning in warnings:
        logger.warning("Config warning: %s", warning)

    # ── Log errors and raise if any ─────────────────────────────────────────
    if errors:
        logger.error("=" * 70)
        logger.error("CONFIG VALIDATION FAILED (%s)", source)
        logger.error("=" * 70)
        for i, error in enumerate(errors, 1):
            logger.error("[%d] %s", i, error)
        logger.error("=" * 70)
        logger.error("Please fix the errors above and restart the bot.")
        logger.error("=" * 70)
        raise ConfigValidationError(f"Config validation failed with {len(errors)} error(s)")
