"""Entry accounting for a single giveaway.

Two independent sources feed the ledger: free reaction entries and paid tip
entries. Only the tip side is capped. The ledger does not deduplicate
reactions; callers decide whether a participant may react more than once.
"""

from __future__ import annotations

import logging

from .errors import InvalidAmount
from .models import Giveaway, ParticipantStanding

log = logging.getLogger("giveaway-engine")


def credit_reaction(giveaway: Giveaway, participant: str) -> bool:
    if not giveaway.is_active:
        log.debug("Ignoring reaction from %s: giveaway %s inactive", participant, giveaway.channel_id)
        return False
    giveaway.reaction_entries[participant] = giveaway.reaction_entries.get(participant, 0) + 1
    return True


def credit_tip(giveaway: Giveaway, participant: str, token_amount: int) -> int:
    """Convert a tip into entries and return how many were granted.

    Whatever part of the tip exceeds the granted entries is forfeited.
    """
    if isinstance(token_amount, bool) or not isinstance(token_amount, int) or token_amount <= 0:
        raise InvalidAmount("Tip amount must be a positive number of token units.")
    if not giveaway.is_active:
        log.debug("Ignoring tip from %s: giveaway %s inactive", participant, giveaway.channel_id)
        return 0

    potential = token_amount // giveaway.tip_entry_fee
    if potential < 1:
        return 0

    current = giveaway.tip_entries.get(participant, 0)
    remaining = giveaway.tip_entry_cap - current
    if remaining <= 0:
        return 0

    granted = min(potential, remaining)
    giveaway.tip_entries[participant] = current + granted
    if granted < potential:
        log.info(
            "Tip from %s capped at %s of %s entries in %s",
            participant,
            granted,
            potential,
            giveaway.channel_id,
        )
    return granted


def total_entries(giveaway: Giveaway, participant: str) -> int:
    return giveaway.reaction_entries.get(participant, 0) + giveaway.tip_entries.get(participant, 0)


def remaining_cap(giveaway: Giveaway, participant: str) -> int:
    return max(giveaway.tip_entry_cap - giveaway.tip_entries.get(participant, 0), 0)


def participants(giveaway: Giveaway) -> list[str]:
    """Every participant with entries: reaction entrants first, then tip-only entrants."""
    seen = dict.fromkeys(giveaway.reaction_entries)
    seen.update(dict.fromkeys(giveaway.tip_entries))
    return list(seen)


def grand_total(giveaway: Giveaway) -> int:
    return sum(total_entries(giveaway, p) for p in participants(giveaway))


def standings(giveaway: Giveaway, limit: int | None = None) -> list[ParticipantStanding]:
    ranked = sorted(
        (
            ParticipantStanding(
                participant=p,
                reaction_entries=giveaway.reaction_entries.get(p, 0),
                tip_entries=giveaway.tip_entries.get(p, 0),
            )
            for p in participants(giveaway)
        ),
        key=lambda standing: standing.total,
        reverse=True,
    )
    return ranked if limit is None else ranked[:limit]


__all__ = [
    "credit_reaction",
    "credit_tip",
    "total_entries",
    "remaining_cap",
    "participants",
    "grand_total",
    "standings",
]
