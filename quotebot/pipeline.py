from __future__ import annotations

import logging

import httpx

from .config.settings import Settings
from .context.clickup import fetch_task_context
from .discord.delivery import ChannelDispatcher, WebhookDispatcher
from .llm.generator import QuoteGenerator
from .quotes.fallback import fallback_quote


logger = logging.getLogger(__name__)


class DailyQuoteJob:
    """
    One run of the daily quote: task context -> generation (or fallback) -> delivery.
    Every stage degrades on failure, so calling the job never raises.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient,
        dispatcher: WebhookDispatcher | ChannelDispatcher,
        generator: QuoteGenerator | None = None,
    ):
        self.settings = settings
        self.http_client = http_client
        self.dispatcher = dispatcher
        self.generator = generator or QuoteGenerator(settings.ai, settings.language, http_client)

    async def compose(self) -> str:
        context_lines = await fetch_task_context(self.settings.clickup, self.http_client)
        quote = await self.generator.generate(context_lines)
        if not quote:
            logger.warning("Using fallback quote (language=%s)", self.settings.language)
            return fallback_quote(self.settings.language)
        return quote

    async def run(self) -> str:
        text = await self.compose()
        await self.dispatcher.send(text)
        return text
