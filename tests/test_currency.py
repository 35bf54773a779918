from decimal import Decimal

import pytest

from giveaway_engine import (
    InvalidAmount,
    PricingContext,
    Unrepresentable,
    fiat_to_token,
    format_fiat,
    format_token,
    parse_fiat,
    parse_token_units,
    token_to_fiat,
)
from giveaway_engine.currency import MAX_TIP_CAP, MAX_TOKEN_UNITS, UNITS_PER_TOKEN, validate_cap


def test_fiat_to_token_uses_18_decimal_units():
    assert fiat_to_token(Decimal("3000"), Decimal("3000")) == UNITS_PER_TOKEN
    assert fiat_to_token("1.5", 3000) == UNITS_PER_TOKEN // 2000


def test_fiat_to_token_rounds_down():
    # 0.50 / 3000 = 0.000166666... tokens
    assert fiat_to_token(Decimal("0.50"), Decimal("3000")) == 166_666_666_666_666


@pytest.mark.parametrize("fiat, rate", [(0, 3000), ("-1", 3000), (1, 0), (1, "-5")])
def test_fiat_to_token_rejects_non_positive(fiat, rate):
    with pytest.raises(InvalidAmount):
        fiat_to_token(fiat, rate)


@pytest.mark.parametrize("value", ["NaN", "Infinity", "abc", True])
def test_fiat_to_token_rejects_non_numbers(value):
    with pytest.raises(InvalidAmount):
        fiat_to_token(value, 3000)


def test_fiat_to_token_rejects_results_too_large():
    with pytest.raises(Unrepresentable):
        fiat_to_token(Decimal("1e70"), Decimal("1e-10"))


def test_token_to_fiat_inverse_for_display():
    assert token_to_fiat(UNITS_PER_TOKEN, Decimal("3000")) == Decimal("3000")
    fee = fiat_to_token(Decimal("0.50"), Decimal("3000"))
    assert format_fiat(token_to_fiat(fee, Decimal("3000"))) == "$0.50"


def test_token_to_fiat_validation():
    with pytest.raises(InvalidAmount):
        token_to_fiat(-1, 3000)
    with pytest.raises(InvalidAmount):
        token_to_fiat(10, 0)
    with pytest.raises(InvalidAmount):
        token_to_fiat(1.5, 3000)


def test_parse_fiat_accepts_dollar_prefix():
    assert parse_fiat("$1") == Decimal("1")
    assert parse_fiat(" 0.50 ") == Decimal("0.50")


@pytest.mark.parametrize("raw", ["", "$", "0", "-2", "abc", "nan", "inf"])
def test_parse_fiat_rejects_invalid(raw):
    with pytest.raises(InvalidAmount):
        parse_fiat(raw)


def test_parse_token_units():
    assert parse_token_units("500") == 500
    assert parse_token_units(42) == 42
    for raw in ["0", "-1", "1.5", "0x10", "", True, 0]:
        with pytest.raises(InvalidAmount):
            parse_token_units(raw)
    with pytest.raises(Unrepresentable):
        parse_token_units(MAX_TOKEN_UNITS + 1)


def test_format_token_trims_zeros():
    assert format_token(UNITS_PER_TOKEN) == "1"
    assert format_token(166_666_666_666_666) == "0.000166666666666666"
    assert format_token(0) == "0"


def test_format_fiat_rounds_to_cents():
    assert format_fiat(Decimal("0.499")) == "$0.50"
    assert format_fiat(Decimal("3000")) == "$3000.00"


def test_validate_cap():
    assert validate_cap("20") == 20
    assert validate_cap(3) == 3
    for raw in ["0", "-3", "x", "1.5", True]:
        with pytest.raises(InvalidAmount):
            validate_cap(raw)


def test_validate_cap_upper_bound():
    assert validate_cap(MAX_TIP_CAP) == MAX_TIP_CAP
    for raw in [MAX_TIP_CAP + 1, "1000000000000"]:
        with pytest.raises(InvalidAmount):
            validate_cap(raw)


class TestPricingContext:
    def test_defaults(self):
        pricing = PricingContext()
        assert pricing.rate == Decimal("3000")
        assert pricing.default_fee == Decimal("0.50")
        assert pricing.default_cap == 10

    def test_rejects_invalid_values(self):
        with pytest.raises(InvalidAmount):
            PricingContext(rate=Decimal("0"))
        with pytest.raises(InvalidAmount):
            PricingContext(default_cap=0)

    def test_setters_and_fee_conversion(self):
        pricing = PricingContext()
        pricing.set_rate("1500")
        assert pricing.fee_in_tokens() == fiat_to_token(Decimal("0.50"), Decimal("1500"))
        pricing.set_default_fee(Decimal("1"))
        assert pricing.fee_in_tokens() == fiat_to_token(1, 1500)
        assert pricing.fee_in_tokens(Decimal("3")) == fiat_to_token(3, 1500)
        with pytest.raises(InvalidAmount):
            pricing.set_rate(-1)
        assert pricing.rate == Decimal("1500")

    def test_fee_below_one_unit_is_rejected(self):
        pricing = PricingContext(rate=Decimal("3000"))
        with pytest.raises(InvalidAmount):
            pricing.fee_in_tokens(Decimal("1e-20"))
