"""Fiat/token conversion for tip entry fees.

Token amounts are integers in the smallest unit (18 decimals, like wei).
Every fee comparison in the ledger happens on those integers; fiat values are
``Decimal`` and only rounded to cents when formatted for display.
"""

from __future__ import annotations

import decimal
import logging
from dataclasses import dataclass, field
from decimal import Decimal

from .errors import InvalidAmount, Unrepresentable

log = logging.getLogger("giveaway-engine")

TOKEN_DECIMALS = 18
UNITS_PER_TOKEN = 10**TOKEN_DECIMALS
MAX_TOKEN_UNITS = 2**256 - 1

DEFAULT_RATE = Decimal("3000")
DEFAULT_TIP_FEE = Decimal("0.50")
DEFAULT_TIP_CAP = 10
MAX_TIP_CAP = 1_000_000_000

_CENT = Decimal("0.01")
_CONTEXT = decimal.Context(
    prec=100,
    rounding=decimal.ROUND_FLOOR,
    traps=[decimal.InvalidOperation, decimal.Overflow, decimal.DivisionByZero],
)

Number = Decimal | int | float | str


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, bool):
        raise InvalidAmount(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            # str() keeps floats at their shortest repr instead of binary noise
            result = Decimal(str(value).strip())
        except decimal.InvalidOperation as exc:
            raise InvalidAmount(f"Invalid amount: {value!r}") from exc
    if not result.is_finite():
        raise InvalidAmount(f"Invalid amount: {value!r}")
    return result


def _require_positive(value: Number, what: str) -> Decimal:
    amount = _to_decimal(value)
    if amount <= 0:
        raise InvalidAmount(f"{what} must be a positive number.")
    return amount


def fiat_to_token(fiat_amount: Number, rate: Number) -> int:
    """Return the token amount (smallest unit) worth ``fiat_amount`` at ``rate``.

    The result is rounded down to a whole unit.
    """
    fiat = _require_positive(fiat_amount, "Amount")
    price = _require_positive(rate, "Rate")
    try:
        units = _CONTEXT.multiply(_CONTEXT.divide(fiat, price), UNITS_PER_TOKEN)
        whole = units.to_integral_value(rounding=decimal.ROUND_FLOOR, context=_CONTEXT)
    except (decimal.Overflow, decimal.InvalidOperation) as exc:
        raise Unrepresentable() from exc
    result = int(whole)
    if result > MAX_TOKEN_UNITS:
        raise Unrepresentable()
    return result


def token_to_fiat(token_amount: int, rate: Number) -> Decimal:
    """Return the fiat value of ``token_amount`` smallest units. Display only."""
    if isinstance(token_amount, bool) or not isinstance(token_amount, int):
        raise InvalidAmount(f"Invalid token amount: {token_amount!r}")
    if token_amount < 0:
        raise InvalidAmount("Token amount cannot be negative.")
    price = _require_positive(rate, "Rate")
    try:
        return _CONTEXT.divide(_CONTEXT.multiply(Decimal(token_amount), price), UNITS_PER_TOKEN)
    except (decimal.Overflow, decimal.InvalidOperation) as exc:
        raise Unrepresentable() from exc


def parse_fiat(raw: str) -> Decimal:
    """Parse an operator supplied fiat amount such as ``"0.50"`` or ``"$1"``."""
    text = str(raw).strip()
    if text.startswith("$"):
        text = text[1:]
    if not text:
        raise InvalidAmount()
    return _require_positive(text, "Amount")


def parse_token_units(raw: str | int) -> int:
    """Parse a positive integer count of smallest token units."""
    if isinstance(raw, bool):
        raise InvalidAmount(f"Invalid token amount: {raw!r}")
    if isinstance(raw, int):
        units = raw
    else:
        text = str(raw).strip()
        if not (text.isascii() and text.isdigit()):
            raise InvalidAmount(f"Invalid token amount: {raw!r}")
        units = int(text)
    if units <= 0:
        raise InvalidAmount("Token amount must be positive.")
    if units > MAX_TOKEN_UNITS:
        raise Unrepresentable()
    return units


def format_fiat(value: Decimal) -> str:
    return f"${value.quantize(_CENT, rounding=decimal.ROUND_HALF_UP, context=_CONTEXT)}"


def format_token(token_amount: int) -> str:
    """Render smallest units as a plain decimal token string (``0.0001666``)."""
    value = Decimal(token_amount).scaleb(-TOKEN_DECIMALS, context=_CONTEXT)
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


@dataclass(slots=True)
class PricingContext:
    """Process-wide pricing owned by the orchestrator.

    Values are read when a giveaway is created and frozen into it; changing
    them later does not touch existing giveaways.
    """

    rate: Decimal = field(default=DEFAULT_RATE)
    default_fee: Decimal = field(default=DEFAULT_TIP_FEE)
    default_cap: int = DEFAULT_TIP_CAP

    def __post_init__(self) -> None:
        self.rate = _require_positive(self.rate, "Rate")
        self.default_fee = _require_positive(self.default_fee, "Fee")
        self.default_cap = validate_cap(self.default_cap)

    def set_rate(self, rate: Number) -> Decimal:
        self.rate = _require_positive(rate, "Rate")
        log.info("Token price updated to %s", self.rate)
        return self.rate

    def set_default_fee(self, fee: Number) -> Decimal:
        self.default_fee = _require_positive(fee, "Fee")
        log.info("Default tip entry fee updated to %s", self.default_fee)
        return self.default_fee

    def fee_in_tokens(self, fee: Number | None = None) -> int:
        units = fiat_to_token(self.default_fee if fee is None else fee, self.rate)
        if units == 0:
            raise InvalidAmount("Fee is smaller than one token unit.")
        return units

    def to_fiat(self, token_amount: int) -> Decimal:
        return token_to_fiat(token_amount, self.rate)


def validate_cap(cap: int | str) -> int:
    if isinstance(cap, bool):
        raise InvalidAmount("Invalid number. Please provide a positive integer.")
    try:
        value = int(str(cap).strip())
    except ValueError as exc:
        raise InvalidAmount("Invalid number. Please provide a positive integer.") from exc
    if value <= 0:
        raise InvalidAmount("Invalid number. Please provide a positive integer.")
    if value > MAX_TIP_CAP:
        raise InvalidAmount(f"Cap cannot be more than {MAX_TIP_CAP:,} entries.")
    return value


__all__ = [
    "TOKEN_DECIMALS",
    "UNITS_PER_TOKEN",
    "MAX_TOKEN_UNITS",
    "DEFAULT_RATE",
    "DEFAULT_TIP_FEE",
    "DEFAULT_TIP_CAP",
    "MAX_TIP_CAP",
    "PricingContext",
    "fiat_to_token",
    "token_to_fiat",
    "parse_fiat",
    "parse_token_units",
    "format_fiat",
    "format_token",
    "validate_cap",
]
