"""Pricing output types.

Black-Scholes works in Decimal (human units: spot 1500, vol 0.8). The quote
engine converts these to fixed-point ints at its boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import final


@final
@dataclass(frozen=True, slots=True)
class BlackScholesGreeks:
    """First and second order sensitivities of one option.

    vega and rho are per 1.0 of vol and rate; theta is per calendar day.
    """

    delta: Decimal = Decimal("0")
    gamma: Decimal = Decimal("0")
    vega: Decimal = Decimal("0")
    theta: Decimal = Decimal("0")
    rho: Decimal = Decimal("0")
