from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal

from .currency import parse_fiat, validate_cap
from .errors import InvalidDuration, InvalidPrize

_DURATION_PATTERN = re.compile(r"^([0-9]{1,12})([mhd])$", re.IGNORECASE)
_UNIT_SECONDS = {"m": 60, "h": 60 * 60, "d": 24 * 60 * 60}

# keeps now + duration inside the range datetime can represent
_MAX_DURATION = timedelta(days=36500)


def parse_duration(raw: str) -> timedelta:
    """Parse ``30m``, ``24h`` or ``2d`` into a ``timedelta``."""
    match = _DURATION_PATTERN.match(raw.strip()) if raw else None
    if not match:
        raise InvalidDuration()
    value = int(match.group(1))
    if value <= 0:
        raise InvalidDuration("Duration must be greater than zero.")
    seconds = value * _UNIT_SECONDS[match.group(2).lower()]
    if seconds > _MAX_DURATION.total_seconds():
        raise InvalidDuration("Duration is too long.")
    return timedelta(seconds=seconds)


def validate_prize(prize: str) -> str:
    cleaned = " ".join(prize.split())
    if not cleaned:
        raise InvalidPrize()
    return cleaned


@dataclass(slots=True, frozen=True)
class CreateRequest:
    prize: str
    duration: str
    fee: Decimal | None = None
    cap: int | None = None


def parse_create_args(args: Sequence[str]) -> CreateRequest:
    """Split ``<prize words...> <duration> [fee:0.50] [cap:10]``.

    The duration is the last word that is not a ``fee:``/``cap:`` option.
    """
    fee: Decimal | None = None
    cap: int | None = None
    words: list[str] = []
    for arg in args:
        lowered = arg.lower()
        if lowered.startswith("fee:"):
            fee = parse_fiat(arg.split(":", 1)[1])
        elif lowered.startswith("cap:"):
            cap = validate_cap(arg.split(":", 1)[1])
        elif arg.strip():
            words.append(arg.strip())
    if len(words) < 2:
        raise InvalidPrize(
            "Usage: `/giveaway create <prize description> <duration> [fee:0.50] [cap:10]`"
        )
    duration = words[-1]
    parse_duration(duration)
    return CreateRequest(
        prize=validate_prize(" ".join(words[:-1])),
        duration=duration,
        fee=fee,
        cap=cap,
    )


__all__ = ["parse_duration", "validate_prize", "CreateRequest", "parse_create_args"]
