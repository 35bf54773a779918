"""Tests for the Discord giveaway feature."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from conftest import ADMIN_ID, GUILD_ID, admin_only

from bots.config import GiveawaySettings
from bots.giveaway import GiveawayFeature
from giveaway_engine import (
    AdminAction,
    AdminCommand,
    GiveawayOrchestrator,
    NotAuthorized,
    PricingContext,
    ReactionEvent,
    TipEvent,
    TipResult,
)

EMOJI = "\U0001f381"
BOT_ADDRESS = "0xB0T"


def settings() -> GiveawaySettings:
    return GiveawaySettings(
        token_price=Decimal("3000"),
        default_tip_fee=Decimal("0.50"),
        default_tip_cap=10,
        sweep_interval_seconds=60,
        entry_emoji=EMOJI,
        status_top_n=5,
    )


@pytest.fixture
def messenger():
    out = Mock()
    out.post_message = AsyncMock(return_value="ann-1")
    out.post_reaction = AsyncMock()
    return out


@pytest.fixture
def feature(messenger, clock):
    orchestrator = GiveawayOrchestrator(PricingContext(), is_admin=admin_only, clock=clock)
    return GiveawayFeature(
        Mock(),
        settings(),
        messenger,
        tip_recipient_address=BOT_ADDRESS,
        orchestrator=orchestrator,
    )


def command(kind: AdminAction, *args: str, actor: str = ADMIN_ID) -> AdminCommand:
    return AdminCommand(kind=kind, channel_id="10", actor_id=actor, space_id=GUILD_ID, args=args)


async def create(feature) -> None:
    reply = await feature.handle_command(command(AdminAction.CREATE, "100", "USDC", "24h"))
    assert reply == "✅ Giveaway for **100 USDC** created."


@pytest.mark.asyncio
async def test_create_posts_announcement_and_reacts(feature, messenger):
    await create(feature)
    giveaway = feature.orchestrator.get("10")
    assert giveaway.announcement_id == "ann-1"
    text = messenger.post_message.await_args.args[1]
    assert "GIVEAWAY STARTED" in text
    messenger.post_reaction.assert_awaited_once_with("10", "ann-1", EMOJI)


@pytest.mark.asyncio
async def test_create_when_announcement_fails_keeps_giveaway(feature, messenger):
    messenger.post_message.return_value = None
    await create(feature)
    assert feature.orchestrator.get("10").announcement_id is None
    messenger.post_reaction.assert_not_awaited()


@pytest.mark.asyncio
async def test_errors_become_replies(feature):
    reply = await feature.handle_command(command(AdminAction.CREATE, "prize", "24h", actor="nobody"))
    assert reply == "❌ Only admins can manage giveaways."

    reply = await feature.handle_command(command(AdminAction.CREATE, "prize", "soon"))
    assert reply.startswith("❌ Invalid duration format")

    reply = await feature.handle_command(command(AdminAction.END))
    assert reply == "❌ No active giveaway in this channel."

    await create(feature)
    reply = await feature.handle_command(command(AdminAction.CREATE, "again", "1h"))
    assert reply.startswith("❌ There is already a giveaway")


@pytest.mark.asyncio
async def test_unexpected_errors_are_logged(feature, monkeypatch):
    monkeypatch.setattr(feature.orchestrator, "status", Mock(side_effect=RuntimeError("boom")))
    reply = await feature.handle_command(command(AdminAction.STATUS))
    assert reply == "❌ Something went wrong. Please try again."


@pytest.mark.asyncio
async def test_reaction_and_tip_flow(feature, messenger):
    await create(feature)
    messenger.post_message.reset_mock()

    assert await feature.handle_reaction(ReactionEvent("10", "alice", "ann-1", EMOJI)) is True
    assert "<@alice> now has 1 entry" in messenger.post_message.await_args.args[1]

    assert await feature.handle_reaction(ReactionEvent("10", "alice", "ann-1", EMOJI)) is False
    assert await feature.handle_reaction(ReactionEvent("10", "bob", "ann-1", "\U0001f44d")) is False
    assert messenger.post_message.await_count == 1

    fee = feature.orchestrator.get("10").tip_entry_fee
    outcome = await feature.handle_tip(TipEvent("10", BOT_ADDRESS.lower(), "0xabc", fee * 3))
    assert outcome.result is TipResult.GRANTED
    assert outcome.granted == 3
    assert "received 3 additional entries" in messenger.post_message.await_args.args[1]

    small = await feature.handle_tip(TipEvent("10", BOT_ADDRESS, "0xabc", fee - 1))
    assert small.result is TipResult.TOO_SMALL
    assert "tips must be at least" in messenger.post_message.await_args.args[1]


@pytest.mark.asyncio
async def test_tips_to_other_recipients_are_ignored(feature, messenger):
    await create(feature)
    messenger.post_message.reset_mock()
    assert await feature.handle_tip(TipEvent("10", "0xsomeoneelse", "0xabc", 10**18)) is None
    messenger.post_message.assert_not_awaited()


@pytest.mark.asyncio
async def test_tip_without_giveaway_posts_nothing(feature, messenger):
    outcome = await feature.handle_tip(TipEvent("10", BOT_ADDRESS, "0xabc", 10**18))
    assert outcome.result is TipResult.INACTIVE
    messenger.post_message.assert_not_awaited()


@pytest.mark.asyncio
async def test_end_announces_winner(feature, messenger):
    await create(feature)
    await feature.handle_reaction(ReactionEvent("10", "alice", "ann-1", EMOJI))
    reply = await feature.handle_command(command(AdminAction.END))
    assert reply == "✅ Giveaway ended."
    assert "**Winner:** <@alice>" in messenger.post_message.await_args.args[1]
    assert feature.orchestrator.get("10") is None


@pytest.mark.asyncio
async def test_status_and_setters(feature):
    await create(feature)
    status = await feature.handle_command(command(AdminAction.STATUS, actor="anyone"))
    assert "**Prize:** 100 USDC" in status
    assert "**Tip entry fee:** $0.50" in status

    assert (await feature.handle_command(command(AdminAction.SET_FEE))).startswith("Usage:")
    reply = await feature.handle_command(command(AdminAction.SET_FEE, "1.00"))
    assert reply.startswith("✅ Tip entry fee updated to $1.00")
    reply = await feature.handle_command(command(AdminAction.SET_CAP, "20"))
    assert reply.startswith("✅ Tip entry cap updated to 20 entries")
    reply = await feature.handle_command(command(AdminAction.SET_RATE, "2500"))
    assert reply == "✅ Token price updated to $2500.00"
    reply = await feature.handle_command(command(AdminAction.SET_DEFAULT_FEE, "$2"))
    assert reply == "✅ Default tip entry fee for new giveaways updated to $2.00"
    reply = await feature.handle_command(command(AdminAction.SET_CAP, "lots"))
    assert reply == "❌ Invalid number. Please provide a positive integer."


@pytest.mark.asyncio
async def test_sweep_expires(feature, clock):
    await create(feature)
    clock.advance(days=2)
    assert await feature.sweep() == ["10"]
    assert feature.orchestrator.get("10").is_active is False


def test_help_text_includes_active_giveaway(feature):
    assert "Active Giveaway" not in feature.help_text("10")
    feature.orchestrator.create("10", "Gold Pass", "1h", actor_id=ADMIN_ID, space_id=GUILD_ID)
    text = feature.help_text("10")
    assert "• Prize: Gold Pass" in text
    assert "• Time remaining: 1h 0m" in text


class TestIsAdmin:
    def build(self, guild):
        bot = Mock()
        bot.get_guild.return_value = guild
        return GiveawayFeature(bot, settings(), Mock(), tip_recipient_address=BOT_ADDRESS)

    def test_no_guild(self):
        feature = self.build(None)
        assert feature.is_admin("1", None) is False
        assert feature.is_admin("1", "500") is False

    def test_owner_and_permissions(self):
        guild = MagicMock(owner_id=1)
        member = MagicMock()
        member.guild_permissions.administrator = False
        member.guild_permissions.manage_guild = True
        guild.get_member.return_value = member
        feature = self.build(guild)
        assert feature.is_admin("1", "500") is True
        assert feature.is_admin("2", "500") is True

        member.guild_permissions.manage_guild = False
        assert feature.is_admin("2", "500") is False

        guild.get_member.return_value = None
        assert feature.is_admin("3", "500") is False

    def test_default_orchestrator_uses_guild_permissions(self):
        feature = self.build(None)
        assert feature.orchestrator.pricing.default_cap == 10
        with pytest.raises(NotAuthorized):
            feature.orchestrator.create("10", "prize", "1h", actor_id="1", space_id="500")


@pytest.mark.asyncio
async def test_raw_reaction_ignores_bots(feature):
    feature.handle_reaction = AsyncMock()
    payload = Mock(member=Mock(bot=True), user_id=5, channel_id=10, message_id=1, emoji=EMOJI)
    await feature.on_raw_reaction_add(payload)
    feature.handle_reaction.assert_not_awaited()

    feature.bot.user = Mock(id=99)
    payload = Mock(member=Mock(bot=False), user_id=5, channel_id=10, message_id=1, emoji=EMOJI)
    await feature.on_raw_reaction_add(payload)
    event = feature.handle_reaction.await_args.args[0]
    assert event == ReactionEvent("10", "5", "1", EMOJI)
