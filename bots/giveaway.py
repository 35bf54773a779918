"""Discord side of the tip-weighted giveaway bot.

Translates slash commands, reactions and tip notifications into calls on the
``GiveawayOrchestrator`` and posts the replies.
"""

from __future__ import annotations

import logging
import shlex

import discord
from discord import app_commands
from discord.ext import tasks

from giveaway_engine import (
    AdminAction,
    AdminCommand,
    GiveawayError,
    GiveawayOrchestrator,
    NoActiveGiveaway,
    PricingContext,
    ReactionEvent,
    TipEvent,
    TipOutcome,
    TipResult,
    parse_create_args,
    parse_fiat,
)

from . import messages
from .config import GiveawaySettings
from .outbound import OutboundMessenger

log = logging.getLogger("giveaway-bot")

ACTION_CHOICES = [app_commands.Choice(name=action.value, value=action.value) for action in AdminAction]


class GiveawayFeature:
    def __init__(
        self,
        bot: discord.Client,
        settings: GiveawaySettings,
        messenger: OutboundMessenger,
        *,
        tip_recipient_address: str,
        orchestrator: GiveawayOrchestrator | None = None,
    ) -> None:
        self.bot = bot
        self.settings = settings
        self.messenger = messenger
        self.tip_recipient_address = tip_recipient_address
        self.orchestrator = orchestrator or GiveawayOrchestrator(
            PricingContext(
                rate=settings.token_price,
                default_fee=settings.default_tip_fee,
                default_cap=settings.default_tip_cap,
            ),
            is_admin=self.is_admin,
        )
        self.sweep_loop = tasks.loop(seconds=settings.sweep_interval_seconds)(self.sweep)

    # ----- Permissions -----
    def is_admin(self, actor_id: str, space_id: str | None) -> bool:
        if space_id is None:
            return False
        guild = self.bot.get_guild(int(space_id))
        if guild is None:
            return False
        if guild.owner_id == int(actor_id):
            return True
        member = guild.get_member(int(actor_id))
        if member is None:
            return False
        permissions = member.guild_permissions
        return permissions.administrator or permissions.manage_guild

    # ----- Admin commands -----
    async def handle_command(self, command: AdminCommand) -> str:
        """Run an admin command and return the reply for the invoking user."""
        try:
            return await self._dispatch(command)
        except GiveawayError as exc:
            return f"❌ {exc.user_message}"
        except Exception as exc:  # pylint: disable=broad-except
            log.exception("Giveaway command %s failed: %s", command.kind.value, exc)
            return "❌ Something went wrong. Please try again."

    async def _dispatch(self, command: AdminCommand) -> str:
        orchestrator = self.orchestrator
        channel_id = command.channel_id
        who = dict(actor_id=command.actor_id, space_id=command.space_id)

        if command.kind is AdminAction.CREATE:
            request = parse_create_args(command.args)
            giveaway = orchestrator.create(
                channel_id,
                request.prize,
                request.duration,
                fee=request.fee,
                cap=request.cap,
                **who,
            )
            await self.announce(channel_id)
            return f"✅ Giveaway for **{giveaway.prize}** created."

        if command.kind is AdminAction.END:
            result = orchestrator.end(channel_id, **who)
            await self.messenger.post_message(channel_id, messages.end_text(result))
            return "✅ Giveaway ended."

        if command.kind is AdminAction.STATUS:
            status = orchestrator.status(channel_id, self.settings.status_top_n)
            return messages.status_text(status, orchestrator.now())

        if not command.args:
            return messages.USAGE[command.kind.value]
        value = command.args[0]

        if command.kind is AdminAction.SET_FEE:
            fee = parse_fiat(value)
            giveaway = orchestrator.set_fee(channel_id, fee, **who)
            return messages.fee_updated_text(giveaway, orchestrator.fee_in_fiat(giveaway))

        if command.kind is AdminAction.SET_CAP:
            giveaway = orchestrator.set_cap(channel_id, value, **who)
            return messages.cap_updated_text(giveaway, orchestrator.fee_in_fiat(giveaway))

        if command.kind is AdminAction.SET_RATE:
            rate = orchestrator.set_rate(parse_fiat(value), **who)
            return messages.rate_updated_text(rate)

        fee = orchestrator.set_default_fee(parse_fiat(value), **who)
        return messages.default_fee_updated_text(fee)

    async def announce(self, channel_id: str) -> str | None:
        giveaway = self.orchestrator.get(channel_id)
        if giveaway is None:
            return None
        text = messages.announcement_text(
            giveaway,
            self.orchestrator.fee_in_fiat(giveaway),
            self.settings.entry_emoji,
            self.orchestrator.now(),
        )
        message_id = await self.messenger.post_message(channel_id, text)
        if message_id is None:
            log.warning("Announcement for %s was not posted; reactions cannot be counted", channel_id)
            return None
        try:
            self.orchestrator.attach_announcement(channel_id, message_id)
        except NoActiveGiveaway:
            return None
        await self.messenger.post_reaction(channel_id, message_id, self.settings.entry_emoji)
        return message_id

    def help_text(self, channel_id: str) -> str:
        status = None
        try:
            status = self.orchestrator.status(channel_id)
        except NoActiveGiveaway:
            pass
        return messages.help_text(
            self.settings.entry_emoji,
            self.orchestrator.pricing.default_fee,
            status,
            self.orchestrator.now(),
        )

    # ----- Entries -----
    async def handle_reaction(self, event: ReactionEvent) -> bool:
        if event.symbol != self.settings.entry_emoji:
            return False
        outcome = self.orchestrator.record_reaction(
            event.channel_id, event.participant_id, event.message_id
        )
        if not outcome.credited:
            log.debug(
                "Reaction from %s in %s not credited: %s",
                event.participant_id,
                event.channel_id,
                outcome.result.value,
            )
            return False
        await self.messenger.post_message(
            event.channel_id, messages.reaction_reply(event.participant_id, outcome.total_entries)
        )
        return True

    async def handle_tip(self, event: TipEvent) -> TipOutcome | None:
        if event.recipient_address.lower() != self.tip_recipient_address.lower():
            return None
        outcome = self.orchestrator.record_tip(
            event.channel_id, event.sender_address, event.token_amount
        )
        if outcome.result is TipResult.INACTIVE:
            return outcome
        giveaway = self.orchestrator.get(event.channel_id)
        if giveaway is not None:
            reply = messages.tip_reply(
                event.sender_address, outcome, giveaway, self.orchestrator.fee_in_fiat(giveaway)
            )
            if reply:
                await self.messenger.post_message(event.channel_id, reply)
        return outcome

    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent) -> None:
        if payload.member is not None and payload.member.bot:
            return
        if self.bot.user is not None and payload.user_id == self.bot.user.id:
            return
        await self.handle_reaction(
            ReactionEvent(
                channel_id=str(payload.channel_id),
                participant_id=str(payload.user_id),
                message_id=str(payload.message_id),
                symbol=str(payload.emoji),
            )
        )

    # ----- Expiry -----
    async def sweep(self) -> list[str]:
        return self.orchestrator.sweep()

    def start(self) -> None:
        if not self.sweep_loop.is_running():
            self.sweep_loop.start()

    # ----- Registration -----
    def register(self, tree: app_commands.CommandTree) -> None:
        feature = self

        @tree.command(name="help", description="Get help with giveaway commands")
        async def help_command(interaction: discord.Interaction) -> None:
            await interaction.response.send_message(feature.help_text(str(interaction.channel_id)))

        @tree.command(name="giveaway", description="Manage giveaways (admin only)")
        @app_commands.describe(
            action="What to do",
            args="Arguments, e.g. `100 USDC 24h fee:1.00 cap:20` for create",
        )
        @app_commands.choices(action=ACTION_CHOICES)
        async def giveaway_command(
            interaction: discord.Interaction,
            action: app_commands.Choice[str],
            args: str = "",
        ) -> None:
            kind = AdminAction.parse(action.value)
            if kind is None:
                await interaction.response.send_message(messages.SUBCOMMANDS_TEXT, ephemeral=True)
                return
            try:
                parts = tuple(shlex.split(args))
            except ValueError:
                parts = tuple(args.split())
            command = AdminCommand(
                kind=kind,
                channel_id=str(interaction.channel_id),
                actor_id=str(interaction.user.id),
                space_id=str(interaction.guild_id) if interaction.guild_id else None,
                args=parts,
            )
            await interaction.response.defer(ephemeral=kind is not AdminAction.STATUS)
            reply = await feature.handle_command(command)
            await interaction.followup.send(reply, ephemeral=kind is not AdminAction.STATUS)


__all__ = ["GiveawayFeature", "ACTION_CHOICES"]
