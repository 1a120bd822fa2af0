"""Conversion of raw oracle prices into structured currency amounts.

``normalize`` splits a float price into whole units and hundredths. The
hundredths come from the *scaled* value (``floor(value * 100) % 100``) rather
than from ``(value - units) * 100`` so representation error near unit
boundaries truncates instead of rounding, e.g. ``0.01`` keeps one subunit.
"""

from __future__ import annotations

from dataclasses import dataclass
import math


# Fixed shipping currency.
CURRENCY_CODE = "USD"
SUBUNITS_PER_UNIT = 100
# One subunit (1/100) expressed in the nanos field of the wire Money type.
NANOS_MULTIPLE = 10_000_000
# Wire Money.units is a signed 64-bit integer.
MAX_MONEY_UNITS = 2**63 - 1


@dataclass(frozen=True)
class Money:
    currency_code: str
    units: int
    nanos: int


@dataclass(frozen=True)
class Quote:
    units: int
    subunits: int

    def __post_init__(self) -> None:
        if self.units < 0:
            raise ValueError(f"units must be non-negative, got {self.units}")
        if not 0 <= self.subunits < SUBUNITS_PER_UNIT:
            raise ValueError(f"subunits must be in [0, {SUBUNITS_PER_UNIT}), got {self.subunits}")

    def __str__(self) -> str:
        # Subunits are not zero padded: Quote(0, 1) renders "0.1".
        return f"{self.units}.{self.subunits}"

    def to_money(self, currency_code: str = CURRENCY_CODE) -> Money:
        return Money(
            currency_code=currency_code,
            units=min(self.units, MAX_MONEY_UNITS),
            nanos=self.subunits * NANOS_MULTIPLE,
        )


def normalize(value: float) -> Quote:
    """Return the Quote for ``value``.

    Pure. Non-finite values raise ``ValueError``. Negative values saturate to
    ``Quote(0, 0)``, mirroring an unsigned conversion; the pricing client
    already reports them.
    """
    if not math.isfinite(value):
        raise ValueError(f"cannot normalize non-finite price {value!r}")
    if value < 0:
        return Quote(units=0, subunits=0)
    scaled = value * SUBUNITS_PER_UNIT
    # Values large enough to overflow when scaled carry no fraction.
    subunits = math.floor(scaled) % SUBUNITS_PER_UNIT if math.isfinite(scaled) else 0
    return Quote(units=math.floor(value), subunits=subunits)
