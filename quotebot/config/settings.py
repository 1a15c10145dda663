from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


DEFAULT_AI_API_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_AI_MODEL = "qwen/qwen3-coder:free"
DEFAULT_MAX_TOKENS = 120
DEFAULT_TEMPERATURE = 0.8
DEFAULT_TIMEZONE = "Asia/Yangon"
DEFAULT_CRON = "0 9 * * *"
DEFAULT_LANGUAGE = "EN_MM"
DEFAULT_CLICKUP_API_URL = "https://api.clickup.com/api/v2"
DEFAULT_STATUS_MESSAGE = "Daily Dev Quotes"

LANGUAGES = ("EN", "MM", "EN_MM")


class DeliveryMode(str, Enum):
    WEBHOOK = "webhook"
    BOT = "bot"


@dataclass(frozen=True)
class AISettings:
    api_url: str = DEFAULT_AI_API_URL
    model: str = DEFAULT_AI_MODEL
    api_key: str | None = None
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    openrouter_referer: str | None = None
    openrouter_title: str | None = None


@dataclass(frozen=True)
class ClickUpSettings:
    token: str | None = None
    team_id: str | None = None
    api_url: str = DEFAULT_CLICKUP_API_URL

    @property
    def enabled(self) -> bool:
        return bool(self.token and self.team_id)


@dataclass(frozen=True)
class DiscordSettings:
    bot_token: str | None = None
    channel_id: int | None = None
    webhook_url: str | None = None
    status_message: str = DEFAULT_STATUS_MESSAGE


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration, built once at startup and passed explicitly
    to every component.
    """

    discord: DiscordSettings = field(default_factory=DiscordSettings)
    ai: AISettings = field(default_factory=AISettings)
    clickup: ClickUpSettings = field(default_factory=ClickUpSettings)
    timezone: str = DEFAULT_TIMEZONE
    cron: str = DEFAULT_CRON
    language: str = DEFAULT_LANGUAGE
    send_now: bool = False

    @property
    def delivery_mode(self) -> DeliveryMode:
        return DeliveryMode.WEBHOOK if self.discord.webhook_url else DeliveryMode.BOT
