import math

import pytest

from shipping.services.money import MAX_MONEY_UNITS, NANOS_MULTIPLE, Money, Quote, normalize


def test_normalize_known_values():
    assert normalize(10.99) == Quote(units=10, subunits=99)
    assert normalize(0.01) == Quote(units=0, subunits=1)
    assert normalize(100.00) == Quote(units=100, subunits=0)


def test_normalize_zero():
    assert normalize(0.0) == Quote(0, 0)


def test_normalize_truncates_instead_of_rounding():
    # 0.999 * 100 == 99.9 -> floor 99, never rounded up into the next unit
    assert normalize(0.999) == Quote(units=0, subunits=99)
    assert normalize(12.345) == Quote(units=12, subunits=34)


@pytest.mark.parametrize("value", [0.0, 0.5, 1.23, 7.77, 19.99, 42.0, 99.995, 1234.56, 1e9 + 0.75])
def test_normalize_invariants(value):
    quote = normalize(value)
    assert 0 <= quote.subunits < 100
    assert quote.units == math.floor(value)


def test_normalize_negative_saturates_to_zero():
    assert normalize(-3.5) == Quote(0, 0)


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_normalize_rejects_non_finite(value):
    with pytest.raises(ValueError):
        normalize(value)


def test_quote_display_has_no_zero_padding():
    assert str(Quote(units=10, subunits=99)) == "10.99"
    assert str(Quote(units=0, subunits=1)) == "0.1"


def test_quote_rejects_out_of_range_parts():
    with pytest.raises(ValueError):
        Quote(units=1, subunits=100)
    with pytest.raises(ValueError):
        Quote(units=-1, subunits=0)


def test_quote_is_immutable():
    quote = Quote(1, 2)
    with pytest.raises(AttributeError):
        quote.units = 5


def test_to_money_scales_subunits_into_nanos():
    assert Quote(12, 34).to_money() == Money(currency_code="USD", units=12, nanos=34 * NANOS_MULTIPLE)
    assert Quote(0, 1).to_money().nanos == 10_000_000


def test_normalize_huge_finite_value_has_no_fraction():
    # value * 100 overflows to inf; such a float is a whole number anyway
    quote = normalize(1e307)
    assert quote.units == math.floor(1e307)
    assert quote.subunits == 0


def test_to_money_caps_units_at_wire_range():
    money = normalize(1e307).to_money()
    assert money.units == MAX_MONEY_UNITS
    assert money.nanos == 0
