from __future__ import annotations

import logging

import discord
import httpx

from ..config.settings import DeliveryMode, Settings


logger = logging.getLogger(__name__)

MESSAGE_HEADER = "🌞 **Daily Dev Motivation**"


def format_message(text: str) -> str:
    return f"{MESSAGE_HEADER}\n{text}"


class WebhookDispatcher:
    """Fire-and-forget delivery through a Discord webhook URL."""

    mode = DeliveryMode.WEBHOOK

    def __init__(self, webhook_url: str, http_client: httpx.AsyncClient):
        self.webhook_url = webhook_url
        self.http_client = http_client

    async def send(self, text: str) -> bool:
        try:
            response = await self.http_client.post(self.webhook_url, json={"content": format_message(text)})
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Webhook send failed: %s", e)
            return False
        logger.info("Sent daily quote via Discord Webhook.")
        return True


class ChannelDispatcher:
    """Delivery through the logged-in bot client to one guild text channel."""

    mode = DeliveryMode.BOT

    def __init__(self, client: discord.Client, channel_id: int):
        self.client = client
        self.channel_id = channel_id

    async def resolve_channel(self) -> discord.TextChannel | None:
        try:
            channel = self.client.get_channel(self.channel_id) or await self.client.fetch_channel(self.channel_id)
        except (discord.HTTPException, discord.InvalidData) as e:
            logger.error("Could not fetch channel %s: %s", self.channel_id, e)
            return None

        if not isinstance(channel, discord.TextChannel):
            logger.error("Channel %s not found or not a GuildText channel.", self.channel_id)
            return None
        return channel

    async def send(self, text: str) -> bool:
        channel = await self.resolve_channel()
        if channel is None:
            return False
        try:
            await channel.send(format_message(text))
        except discord.HTTPException as e:
            logger.error("Failed to send daily quote to channel %s: %s", self.channel_id, e)
            return False
        logger.info("Sent daily quote to #%s (%s).", channel.name, channel.id)
        return True


def build_dispatcher(
    settings: Settings,
    http_client: httpx.AsyncClient,
    client: discord.Client | None = None,
) -> WebhookDispatcher | ChannelDispatcher:
    if settings.delivery_mode is DeliveryMode.WEBHOOK:
        return WebhookDispatcher(settings.discord.webhook_url, http_client)
    if client is None:
        raise ValueError("Bot delivery mode needs a Discord client")
    return ChannelDispatcher(client, settings.discord.channel_id)
