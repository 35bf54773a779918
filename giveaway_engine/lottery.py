"""Weighted winner selection.

The chance of winning is ``entries / total entries``. The draw picks one
uniform index in ``[0, total)`` and walks the participants' cumulative entry
counts to find whose range it falls in, so memory does not grow with the
number of entries. Pass a seeded ``random.Random`` to make it reproducible.
"""

from __future__ import annotations

import logging
import random

from .ledger import participants, total_entries
from .models import Giveaway

log = logging.getLogger("giveaway-engine")

_system_random = random.SystemRandom()


def entry_weights(giveaway: Giveaway) -> list[tuple[str, int]]:
    """Participants holding at least one entry, in first-seen order."""
    weights = []
    for participant in participants(giveaway):
        entries = total_entries(giveaway, participant)
        if entries > 0:
            weights.append((participant, entries))
    return weights


def select_winner(giveaway: Giveaway, rng: random.Random | None = None) -> str | None:
    if not participants(giveaway):
        return None
    weights = entry_weights(giveaway)
    total = sum(entries for _, entries in weights)
    if total == 0:
        log.warning("Giveaway %s has participants but no entries", giveaway.channel_id)
        return None
    index = (rng or _system_random).randrange(total)
    cumulative = 0
    for participant, entries in weights:
        cumulative += entries
        if index < cumulative:
            log.info(
                "Drew %s for %s (total entries %s, index %s)",
                participant,
                giveaway.channel_id,
                total,
                index,
            )
            return participant
    raise AssertionError("draw index outside the entry range")


def win_probabilities(giveaway: Giveaway) -> dict[str, float]:
    weights = entry_weights(giveaway)
    total = sum(entries for _, entries in weights)
    if total == 0:
        return {}
    return {participant: entries / total for participant, entries in weights}


__all__ = ["entry_weights", "select_winner", "win_probabilities"]
