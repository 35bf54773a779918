"""Entry accounting and weighted lottery for channel giveaways."""

from .currency import (
    PricingContext,
    fiat_to_token,
    format_fiat,
    format_token,
    parse_fiat,
    parse_token_units,
    token_to_fiat,
)
from .errors import (
    AlreadyActive,
    GiveawayError,
    InvalidAmount,
    InvalidDuration,
    InvalidPrize,
    NoActiveGiveaway,
    NotAuthorized,
    Unrepresentable,
)
from .events import AdminAction, AdminCommand, ReactionEvent, TipEvent
from .models import (
    DrawResult,
    Giveaway,
    GiveawayState,
    GiveawayStatus,
    ParticipantStanding,
    ReactionOutcome,
    ReactionResult,
    TipOutcome,
    TipResult,
    utc_now,
)
from .orchestrator import GiveawayOrchestrator
from .registry import GiveawayRegistry
from .validation import CreateRequest, parse_create_args, parse_duration

__all__ = [
    "PricingContext",
    "fiat_to_token",
    "format_fiat",
    "format_token",
    "parse_fiat",
    "parse_token_units",
    "token_to_fiat",
    "AlreadyActive",
    "GiveawayError",
    "InvalidAmount",
    "InvalidDuration",
    "InvalidPrize",
    "NoActiveGiveaway",
    "NotAuthorized",
    "Unrepresentable",
    "AdminAction",
    "AdminCommand",
    "ReactionEvent",
    "TipEvent",
    "DrawResult",
    "Giveaway",
    "GiveawayState",
    "GiveawayStatus",
    "ParticipantStanding",
    "ReactionOutcome",
    "ReactionResult",
    "TipOutcome",
    "TipResult",
    "utc_now",
    "GiveawayOrchestrator",
    "GiveawayRegistry",
    "CreateRequest",
    "parse_create_args",
    "parse_duration",
]
