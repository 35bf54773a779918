from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal


def utc_now() -> datetime:
    return datetime.now(UTC)


class GiveawayState(enum.Enum):
    ACTIVE = "active"
    EXPIRED = "expired"


@dataclass(slots=True)
class Giveaway:
    """One giveaway hosted in a channel.

    ``tip_entry_fee`` is the price of one tip entry in smallest token units.
    ``tip_entries[p]`` never exceeds ``tip_entry_cap``.
    """

    channel_id: str
    prize: str
    start_time: datetime
    end_time: datetime
    tip_entry_fee: int
    tip_entry_cap: int
    reaction_entries: dict[str, int] = field(default_factory=dict)
    tip_entries: dict[str, int] = field(default_factory=dict)
    is_active: bool = True
    announcement_id: str | None = None
    created_by: str | None = None

    def __post_init__(self) -> None:
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        if self.tip_entry_fee <= 0:
            raise ValueError("tip_entry_fee must be positive")
        if self.tip_entry_cap <= 0:
            raise ValueError("tip_entry_cap must be positive")

    @property
    def state(self) -> GiveawayState:
        return GiveawayState.ACTIVE if self.is_active else GiveawayState.EXPIRED

    def is_expired(self, now: datetime) -> bool:
        return now > self.end_time


@dataclass(slots=True, frozen=True)
class ParticipantStanding:
    participant: str
    reaction_entries: int
    tip_entries: int

    @property
    def total(self) -> int:
        return self.reaction_entries + self.tip_entries


@dataclass(slots=True, frozen=True)
class GiveawayStatus:
    """Read-only snapshot of a giveaway for display."""

    channel_id: str
    prize: str
    start_time: datetime
    end_time: datetime
    tip_entry_fee: int
    tip_entry_cap: int
    reaction_entries: dict[str, int]
    tip_entries: dict[str, int]
    is_active: bool
    announcement_id: str | None
    state: GiveawayState
    total_entries: int
    participant_count: int
    tip_entry_fee_fiat: Decimal
    cap_amount_fiat: Decimal
    top: list[ParticipantStanding]
    win_chances: dict[str, float] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class DrawResult:
    channel_id: str
    prize: str
    winner: str | None
    winner_entries: int
    total_entries: int
    participant_count: int

    @property
    def has_winner(self) -> bool:
        return self.winner is not None


class TipResult(enum.Enum):
    GRANTED = "granted"
    TOO_SMALL = "too_small"
    CAP_REACHED = "cap_reached"
    INACTIVE = "inactive"


@dataclass(slots=True, frozen=True)
class TipOutcome:
    granted: int
    result: TipResult
    tip_entries: int = 0
    total_entries: int = 0
    remaining_cap: int = 0


class ReactionResult(enum.Enum):
    CREDITED = "credited"
    DUPLICATE = "duplicate"
    WRONG_MESSAGE = "wrong_message"
    INACTIVE = "inactive"


@dataclass(slots=True, frozen=True)
class ReactionOutcome:
    result: ReactionResult
    total_entries: int = 0

    @property
    def credited(self) -> bool:
        return self.result is ReactionResult.CREDITED


__all__ = [
    "utc_now",
    "GiveawayState",
    "Giveaway",
    "ParticipantStanding",
    "GiveawayStatus",
    "DrawResult",
    "TipResult",
    "TipOutcome",
    "ReactionResult",
    "ReactionOutcome",
]
