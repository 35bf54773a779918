"""Discord runtime that wires the giveaway feature, sweep loop and tip webhook."""

from __future__ import annotations

import logging

import discord
from aiohttp import web
from discord import app_commands

from .config import EnvironmentConfig
from .giveaway import GiveawayFeature
from .outbound import OutboundMessenger
from .tips import create_tip_app, start_tip_webhook

log = logging.getLogger("giveaway-bot")


class GiveawayRuntime:
    def __init__(self, config: EnvironmentConfig) -> None:
        intents = discord.Intents.default()
        intents.guilds = True
        intents.members = True
        intents.guild_reactions = True

        self.config = config
        self.bot = discord.Client(intents=intents)
        self.tree = app_commands.CommandTree(self.bot)
        self.messenger = OutboundMessenger(self.bot, config.shadow)
        self.feature = GiveawayFeature(
            self.bot,
            config.giveaway,
            self.messenger,
            tip_recipient_address=config.tip_recipient_address,
        )
        self._tip_runner: web.AppRunner | None = None
        self._ready = False

    def configure(self) -> None:
        self.feature.register(self.tree)

        @self.bot.event
        async def on_ready() -> None:
            await self.on_ready()

        @self.bot.event
        async def on_raw_reaction_add(payload: discord.RawReactionActionEvent) -> None:
            await self.feature.on_raw_reaction_add(payload)

    async def on_ready(self) -> None:
        if self._ready:
            return
        self._ready = True
        await self.tree.sync()
        self.feature.start()
        if self.config.tip_webhook.enabled:
            webhook = self.config.tip_webhook
            app = create_tip_app(self.feature, webhook.secret)
            self._tip_runner = await start_tip_webhook(app, webhook.host, webhook.port)
        if self.messenger.shadow:
            log.info("Giveaway bot running in SHADOW mode")
        log.info("Giveaway bot ready as %s", self.bot.user)

    async def close(self) -> None:
        if self._tip_runner is not None:
            await self._tip_runner.cleanup()
            self._tip_runner = None

    async def run(self) -> None:
        self.configure()
        try:
            async with self.bot:
                await self.bot.start(self.config.discord_token)
        finally:
            await self.close()

    @classmethod
    def create(cls) -> "GiveawayRuntime":
        config = EnvironmentConfig.load()
        return cls(config)


async def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    runtime = GiveawayRuntime.create()
    await runtime.run()


__all__ = ["GiveawayRuntime", "main"]
