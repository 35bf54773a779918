"""Inbound events the channel gateway hands to the orchestrator."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class ReactionEvent:
    channel_id: str
    participant_id: str
    message_id: str
    symbol: str


@dataclass(slots=True, frozen=True)
class TipEvent:
    channel_id: str
    recipient_address: str
    sender_address: str
    token_amount: int


class AdminAction(enum.Enum):
    CREATE = "create"
    END = "end"
    STATUS = "status"
    SET_FEE = "set-fee"
    SET_CAP = "set-cap"
    SET_RATE = "set-rate"
    SET_DEFAULT_FEE = "set-default-fee"

    @classmethod
    def parse(cls, raw: str) -> AdminAction | None:
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(slots=True, frozen=True)
class AdminCommand:
    kind: AdminAction
    channel_id: str
    actor_id: str
    space_id: str | None = None
    args: tuple[str, ...] = field(default_factory=tuple)


__all__ = ["ReactionEvent", "TipEvent", "AdminAction", "AdminCommand"]
