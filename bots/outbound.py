"""Fire-and-forget delivery of giveaway messages, with shadow-mode reporting."""

from __future__ import annotations

import logging

import discord

from .config import ShadowConfig

log = logging.getLogger(__name__)


class OutboundMessenger:
    """Sends messages and reactions to channels by id.

    Delivery failures are logged and swallowed: the ledger change that caused
    the send has already been committed. In shadow mode nothing is posted to
    the target channel; a ``[SHADOW]`` report goes to the shadow channel or the
    log instead.
    """

    def __init__(self, bot: discord.Client, config: ShadowConfig) -> None:
        self._bot = bot
        self._config = config

    @property
    def shadow(self) -> bool:
        return self._config.enabled

    async def _resolve(self, channel_id: int) -> discord.abc.Messageable | None:
        channel = self._bot.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self._bot.fetch_channel(channel_id)
            except discord.DiscordException as exc:
                log.warning("Unable to fetch channel %s: %s", channel_id, exc)
                return None
        if not isinstance(channel, discord.abc.Messageable):
            log.warning("Channel %s is not messageable", channel_id)
            return None
        return channel

    async def _report(self, message: str) -> None:
        if self._config.channel_id is None:
            log.info("[SHADOW] %s", message)
            return
        channel = await self._resolve(self._config.channel_id)
        if channel is None:
            log.info("[SHADOW] %s", message)
            return
        try:
            await channel.send(content=message)
        except discord.DiscordException as exc:
            log.warning(
                "Failed to send shadow report to channel %s: %s", self._config.channel_id, exc
            )

    async def post_message(self, channel_id: str, text: str) -> str | None:
        """Send ``text`` and return the new message id, or None if it was not sent."""
        if self.shadow:
            await self._report(f"[giveaway] would send to {channel_id}: {text}")
            return None
        channel = await self._resolve(int(channel_id))
        if channel is None:
            return None
        try:
            message = await channel.send(content=text)
        except discord.Forbidden:
            log.warning("No send permission in channel %s", channel_id)
            return None
        except discord.HTTPException as exc:
            log.exception("Failed to send message to %s: %s", channel_id, exc)
            return None
        return str(message.id)

    async def post_reaction(self, channel_id: str, message_id: str, symbol: str) -> None:
        if self.shadow:
            await self._report(f"[giveaway] would react {symbol} on {message_id} in {channel_id}")
            return
        channel = await self._resolve(int(channel_id))
        if channel is None or not hasattr(channel, "get_partial_message"):
            return
        try:
            await channel.get_partial_message(int(message_id)).add_reaction(symbol)
        except discord.Forbidden:
            log.warning("No reaction permission in channel %s", channel_id)
        except discord.HTTPException as exc:
            log.exception("Failed to add reaction in %s: %s", channel_id, exc)


__all__ = ["OutboundMessenger"]
