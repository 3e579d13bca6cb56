"""Collaborator signatures consumed by the quote engine.

The engine is parameterised over these so a caller (or a test) can swap
the per-sub-trade step or the Greeks model without touching the loop.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from ammquote.market.types import Option, OptionKind
from ammquote.pricing.types import BlackScholesGreeks
from ammquote.quote.types import QuoteIteration


class QuoteIterationStep(Protocol):
    """Price one sub-trade from the current vol state. Must be pure."""

    def __call__(  # noqa: PLR0913
        self,
        option: Option,
        is_buy: bool,
        size: int,
        base_iv: int,
        skew: int,
        net_std_vega: int,
        pre_trade_amm_net_std_vega: int,
        is_force_close: bool,
    ) -> QuoteIteration: ...


class GreeksModel(Protocol):
    """Analytic Greeks from human-unit Decimal inputs."""

    def __call__(  # noqa: PLR0913
        self,
        tte: Decimal,
        vol: Decimal,
        spot: Decimal,
        strike: Decimal,
        rate: Decimal,
        kind: OptionKind,
    ) -> BlackScholesGreeks: ...
