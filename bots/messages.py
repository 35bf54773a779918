"""User-facing message text for giveaway commands and events."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from giveaway_engine import (
    DrawResult,
    Giveaway,
    GiveawayStatus,
    TipOutcome,
    TipResult,
    format_fiat,
    format_token,
)


def _plural(count: int, one: str = "entry", many: str = "entries") -> str:
    return one if count == 1 else many


def mention(participant: str) -> str:
    return f"<@{participant}>"


def format_time_remaining(end_time: datetime, now: datetime) -> str:
    remaining = int((end_time - now).total_seconds())
    if remaining <= 0:
        return "Ended"
    minutes, seconds = divmod(remaining, 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)
    if days:
        return f"{days}d {hours}h"
    if hours:
        return f"{hours}h {minutes}m"
    if minutes:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def _timestamp(value: datetime) -> str:
    return f"<t:{int(value.timestamp())}:F>"


def help_text(
    emoji: str,
    default_fee: Decimal,
    status: GiveawayStatus | None = None,
    now: datetime | None = None,
) -> str:
    lines = ["**\U0001f381 Giveaway Bot Commands:**", ""]
    if status is not None and status.is_active and now is not None:
        lines += [
            "**Active Giveaway:**",
            f"• Prize: {status.prize}",
            f"• Time remaining: {format_time_remaining(status.end_time, now)}",
            f"• Entries: {status.total_entries} total",
            f"• Participants: {status.participant_count}",
            "",
        ]
    lines += [
        "**How to Enter:**",
        f"• React with {emoji} to a giveaway message (1 entry)",
        f"• Tip the bot for additional entries (every {format_fiat(default_fee)} in tokens = 1 entry)",
        "",
        "**Admin Commands:**",
        "• `/giveaway create <prize> <duration> [fee:0.50] [cap:10]` - Create a new giveaway",
        "• `/giveaway end` - End the current giveaway and draw a winner",
        "• `/giveaway status` - Check giveaway status",
        "• `/giveaway set-fee <usd-amount>` - Set the tip entry fee for this giveaway",
        "• `/giveaway set-cap <max-entries>` - Set max tip entries per user",
        "• `/giveaway set-rate <price>` - Update the token price in USD",
        "• `/giveaway set-default-fee <usd-amount>` - Set the fee used for new giveaways",
    ]
    return "\n".join(lines)


def announcement_text(giveaway: Giveaway, fee_fiat: Decimal, emoji: str, now: datetime) -> str:
    cap_fiat = fee_fiat * giveaway.tip_entry_cap
    return (
        "\U0001f389 **GIVEAWAY STARTED!** \U0001f389\n\n"
        f"**Prize:** {giveaway.prize}\n"
        f"**Ends:** {_timestamp(giveaway.end_time)}\n"
        f"**Time remaining:** {format_time_remaining(giveaway.end_time, now)}\n\n"
        "**How to Enter:**\n"
        f"• React with {emoji} to this message (1 entry)\n"
        f"• Tip this bot for additional entries (every {format_fiat(fee_fiat)} in tokens = 1 entry)\n"
        f"• Maximum additional entries from tips: {giveaway.tip_entry_cap} "
        f"(tip up to {format_fiat(cap_fiat)} in tokens)\n\n"
        "Good luck! \U0001f340"
    )


def reaction_reply(participant: str, total: int) -> str:
    return (
        f"✅ Entry added! {mention(participant)} now has {total} {_plural(total)}. "
        "Good luck! \U0001f340"
    )


def tip_reply(participant: str, outcome: TipOutcome, giveaway: Giveaway, fee_fiat: Decimal) -> str | None:
    cap_fiat = fee_fiat * giveaway.tip_entry_cap
    if outcome.result is TipResult.INACTIVE:
        return None
    if outcome.result is TipResult.TOO_SMALL:
        return (
            "\U0001f4b0 Thank you for the tip! However, tips must be at least "
            f"{format_token(giveaway.tip_entry_fee)} tokens ({format_fiat(fee_fiat)}) "
            "to count as an entry."
        )
    if outcome.result is TipResult.CAP_REACHED:
        return (
            "\U0001f4b0 Thank you for the tip! However, you've already reached the maximum of "
            f"{giveaway.tip_entry_cap} additional entries from tips.\n"
            f"You've already tipped the cap amount of {format_fiat(cap_fiat)} in tokens."
        )
    text = (
        f"\U0001f4b0 Thank you for the tip! {mention(participant)} received {outcome.granted} "
        f"additional {_plural(outcome.granted)}!\n"
        f"You now have {outcome.total_entries} total {_plural(outcome.total_entries)} "
        f"({outcome.tip_entries}/{giveaway.tip_entry_cap} tip entries). Good luck! \U0001f340\n"
    )
    if outcome.remaining_cap > 0:
        text += (
            f"You can still tip up to {format_fiat(fee_fiat * outcome.remaining_cap)} in tokens "
            f"for {outcome.remaining_cap} more {_plural(outcome.remaining_cap)} "
            f"(cap: {format_fiat(cap_fiat)} total)."
        )
    else:
        text += f"You've reached the maximum tip entries cap of {format_fiat(cap_fiat)} in tokens."
    return text


def end_text(result: DrawResult) -> str:
    if not result.has_winner:
        return "\U0001f381 Giveaway ended. No entries were received."
    return (
        "\U0001f389 **GIVEAWAY ENDED!** \U0001f389\n\n"
        f"**Prize:** {result.prize}\n"
        f"**Winner:** {mention(result.winner)}\n"
        f"**Winner's entries:** {result.winner_entries}\n"
        f"**Total entries:** {result.total_entries}\n"
        f"**Participants:** {result.participant_count}\n\n"
        "Congratulations to the winner! \U0001f38a"
    )


def status_text(status: GiveawayStatus, now: datetime) -> str:
    lines = [
        "**\U0001f381 Giveaway Status**",
        "",
        f"**Prize:** {status.prize}",
        f"**State:** {status.state.value}",
        f"**Started:** {_timestamp(status.start_time)}",
        f"**Ends:** {_timestamp(status.end_time)}",
        f"**Time remaining:** {format_time_remaining(status.end_time, now)}",
        f"**Tip entry fee:** {format_fiat(status.tip_entry_fee_fiat)} "
        f"({format_token(status.tip_entry_fee)} tokens)",
        f"**Max tip entries:** {status.tip_entry_cap} "
        f"(cap: {format_fiat(status.cap_amount_fiat)} in tokens)",
        "",
        "**Entries:**",
        f"• Total entries: {status.total_entries}",
        f"• Participants: {status.participant_count}",
    ]
    if status.top:
        lines += ["", "**Top Participants:**"]
        for standing in status.top:
            lines.append(
                f"• {mention(standing.participant)}: {standing.total} {_plural(standing.total)} "
                f"({standing.reaction_entries} reactions, {standing.tip_entries} tips, "
                f"{status.win_chances.get(standing.participant, 0.0):.1%} chance)"
            )
    return "\n".join(lines)


def fee_updated_text(giveaway: Giveaway, fee_fiat: Decimal) -> str:
    return (
        f"✅ Tip entry fee updated to {format_fiat(fee_fiat)} "
        f"({format_token(giveaway.tip_entry_fee)} tokens)\n"
        f"New cap amount: {format_fiat(fee_fiat * giveaway.tip_entry_cap)} in tokens "
        f"for {giveaway.tip_entry_cap} entries"
    )


def cap_updated_text(giveaway: Giveaway, fee_fiat: Decimal) -> str:
    return (
        f"✅ Tip entry cap updated to {giveaway.tip_entry_cap} entries\n"
        f"Users can tip up to {format_fiat(fee_fiat * giveaway.tip_entry_cap)} in tokens "
        "for additional entries"
    )


def rate_updated_text(rate: Decimal) -> str:
    return f"✅ Token price updated to {format_fiat(rate)}"


def default_fee_updated_text(fee: Decimal) -> str:
    return f"✅ Default tip entry fee for new giveaways updated to {format_fiat(fee)}"


SUBCOMMANDS_TEXT = (
    "Available subcommands:\n"
    "• `create` - Create a new giveaway\n"
    "• `end` - End current giveaway\n"
    "• `status` - Check giveaway status\n"
    "• `set-fee` - Set tip entry fee\n"
    "• `set-cap` - Set max tip entries per user\n"
    "• `set-rate` - Update token price\n"
    "• `set-default-fee` - Set the default tip entry fee"
)

USAGE = {
    "set-fee": "Usage: `/giveaway set-fee <usd-amount>`\nExample: `/giveaway set-fee 1.00`",
    "set-cap": "Usage: `/giveaway set-cap <max-entries>`\nExample: `/giveaway set-cap 20`",
    "set-rate": "Usage: `/giveaway set-rate <price>`\nExample: `/giveaway set-rate 3000`",
    "set-default-fee": (
        "Usage: `/giveaway set-default-fee <usd-amount>`\n"
        "Example: `/giveaway set-default-fee 0.50`"
    ),
}
