"""
Entrypoint for the daily quote bot.

Startup runs in two explicit phases: connect (log in and wait for the gateway
to be ready in bot mode, nothing to do in webhook mode), then schedule the
daily job. `python -m quotebot.main` runs the bot.
"""

from __future__ import annotations

import asyncio
from enum import Enum
import logging
import os

import discord
import httpx

from .config.loader import get_config
from .config.settings import DeliveryMode, Settings
from .discord.delivery import build_dispatcher
from .pipeline import DailyQuoteJob
from .scheduler import create_scheduler, schedule_daily_quote


HTTP_TIMEOUT_SECONDS = 30


class Phase(str, Enum):
    STARTING = "starting"
    CONNECTED = "connected"
    SCHEDULED = "scheduled"


def setup_logging() -> None:
    if os.environ.get("DEBUG"):
        logging.basicConfig(level=logging.DEBUG)
        logging.getLogger("httpx").setLevel(logging.DEBUG)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s: %(message)s")


def build_discord_client(settings: Settings) -> discord.Client:
    intents = discord.Intents.none()
    intents.guilds = True
    intents.guild_messages = True
    activity = discord.CustomActivity(name=settings.discord.status_message)
    return discord.Client(intents=intents, activity=activity, status=discord.Status.online)


class DailyQuoteApp:
    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
        scheduler=None,
        discord_client: discord.Client | None = None,
    ):
        self.settings = settings
        self.http_client = http_client or httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS)
        self.scheduler = scheduler or create_scheduler(settings.timezone)
        self.discord_client = discord_client
        if settings.delivery_mode is DeliveryMode.BOT and discord_client is None:
            self.discord_client = build_discord_client(settings)

        dispatcher = build_dispatcher(settings, self.http_client, self.discord_client)
        self.job = DailyQuoteJob(settings, self.http_client, dispatcher)
        self.phase = Phase.STARTING
        self._gateway: asyncio.Task | None = None

    # ── Phase 1: connection ─────────────────────────────────────────────────

    async def connect(self) -> None:
        if self.phase is not Phase.STARTING:
            raise RuntimeError(f"connect() called in phase {self.phase.value}")

        if self.settings.delivery_mode is DeliveryMode.WEBHOOK:
            logging.info("Running in Webhook mode (no Discord client).")
        else:
            await self._connect_gateway()
        self.phase = Phase.CONNECTED

    async def _connect_gateway(self) -> None:
        client = self.discord_client
        await client.login(self.settings.discord.bot_token)
        self._gateway = asyncio.create_task(client.connect(), name="discord-gateway")
        ready = asyncio.create_task(client.wait_until_ready())

        done, _ = await asyncio.wait({self._gateway, ready}, return_when=asyncio.FIRST_COMPLETED)
        if ready not in done:
            ready.cancel()
            self._gateway.result()
            raise RuntimeError("Discord gateway closed before the client became ready")

        logging.info(f"Logged in as {client.user} ({client.user.id})")
        logging.info(f"Status: online, ping={client.latency * 1000:.0f}ms")
        logging.info("Guilds: " + ", ".join(f"{g.name} ({g.id})" for g in client.guilds))

    # ── Phase 2: schedule ───────────────────────────────────────────────────

    def schedule(self) -> None:
        if self.phase is not Phase.CONNECTED:
            raise RuntimeError(f"schedule() called in phase {self.phase.value}")

        schedule_daily_quote(self.scheduler, self.job.run, self.settings.cron, self.settings.timezone)
        if not self.scheduler.running:
            self.scheduler.start()
            logging.info("Scheduler started")
        self.phase = Phase.SCHEDULED

    # ── Lifecycle ───────────────────────────────────────────────────────────

    async def wait_closed(self) -> None:
        if self._gateway is not None:
            await self._gateway
        else:
            await asyncio.Event().wait()

    async def close(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        if self.discord_client is not None and not self.discord_client.is_closed():
            await self.discord_client.close()
        await self.http_client.aclose()

    async def start(self) -> None:
        await self.connect()
        self.schedule()
        if self.settings.send_now:
            await self.job.run()
            logging.info("Test quote send attempted.")

    async def run(self) -> None:
        try:
            await self.start()
            await self.wait_closed()
        finally:
            await self.close()


async def run_bot(settings: Settings) -> None:
    await DailyQuoteApp(settings).run()


def main() -> None:
    setup_logging()
    settings = get_config()
    logging.info(
        f"🚀 Bot starting | mode: {settings.delivery_mode.value} | language: {settings.language} "
        f"| cron: '{settings.cron}' ({settings.timezone})"
    )
    try:
        asyncio.run(run_bot(settings))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
