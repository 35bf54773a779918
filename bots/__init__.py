"""Discord gateway for the tip-weighted giveaway bot.

The accounting and lottery live in ``giveaway_engine``; this package only
adapts Discord events, slash commands and tip notifications to it.
"""

__all__ = ["config", "giveaway", "messages", "outbound", "runtime", "tips"]
