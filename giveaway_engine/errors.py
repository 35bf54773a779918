from __future__ import annotations


class GiveawayError(ValueError):
    """Base exception for expected, user-facing giveaway failures."""

    default_message = "Something went wrong with the giveaway."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def user_message(self) -> str:
        return str(self)


class InvalidAmount(GiveawayError):
    """Raised for non-positive or non-numeric fiat amounts, token amounts or rates."""

    default_message = "Invalid amount. Please provide a positive number."


class InvalidDuration(GiveawayError):
    """Raised when a duration token does not match ``<integer><m|h|d>``."""

    default_message = "Invalid duration format. Use: 30m (minutes), 1h (hours), 2d (days)"


class InvalidPrize(GiveawayError):
    default_message = "A prize description is required."


class AlreadyActive(GiveawayError):
    default_message = (
        "There is already a giveaway in this channel. End it first with `/giveaway end`"
    )


class NoActiveGiveaway(GiveawayError):
    default_message = "No active giveaway in this channel."


class NotAuthorized(GiveawayError):
    default_message = "Only admins can manage giveaways."


class Unrepresentable(GiveawayError):
    """Raised when a conversion result cannot be represented in token units."""

    default_message = "That amount is too large to convert."


__all__ = [
    "GiveawayError",
    "InvalidAmount",
    "InvalidDuration",
    "InvalidPrize",
    "AlreadyActive",
    "NoActiveGiveaway",
    "NotAuthorized",
    "Unrepresentable",
]
