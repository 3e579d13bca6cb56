"""Quote and quote-iteration value types.

All amounts are fixed-point ints. A Quote is built once per request and
never mutated; a disabled Quote is a normal result whose monetary fields
are zero and whose Greeks are the option's cached values.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, final

from ammquote.infra.config import DEFAULT_ITERATIONS
from ammquote.market.types import Board, Market, Option, Strike


class QuoteDisabledReason(Enum):
    """Why the AMM would refuse the trade. Declared in precedence order."""

    EMPTY_SIZE = "EmptySize"
    EXPIRED = "Expired"
    TRADING_CUTOFF = "TradingCutoff"
    INSUFFICIENT_LIQUIDITY = "InsufficientLiquidity"
    DELTA_OUT_OF_RANGE = "DeltaOutOfRange"
    VOL_TOO_HIGH = "VolTooHigh"
    VOL_TOO_LOW = "VolTooLow"
    IV_TOO_HIGH = "IVTooHigh"
    IV_TOO_LOW = "IVTooLow"
    SKEW_TOO_HIGH = "SkewTooHigh"
    SKEW_TOO_LOW = "SkewTooLow"


# ---------------------------------------------------------------------------
# Fee components
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class VegaUtilFeeComponents:
    pre_trade_amm_net_std_vega: int
    post_trade_amm_net_std_vega: int
    vega_util: int
    vol_traded: int
    nav: int
    vega_util_fee: int


@final
@dataclass(frozen=True, slots=True)
class VarianceFeeComponents:
    variance_fee_coefficient: int
    vega: int
    vega_coefficient: int
    skew: int
    skew_coefficient: int
    iv_variance: int
    iv_variance_coefficient: int
    variance_fee: int


@final
@dataclass(frozen=True, slots=True)
class FeeComponents:
    """The four fees charged on a trade. fee == total by construction."""

    option_price_fee: int
    spot_price_fee: int
    vega_util_fee: int
    variance_fee: int

    ZERO: ClassVar[FeeComponents]  # Assigned after class definition

    @property
    def total(self) -> int:
        return self.option_price_fee + self.spot_price_fee + self.vega_util_fee + self.variance_fee

    @staticmethod
    def sum_of(parts: Iterable[FeeComponents]) -> FeeComponents:
        """Component-wise integer sum."""
        option_price_fee = spot_price_fee = vega_util_fee = variance_fee = 0
        for p in parts:
            option_price_fee += p.option_price_fee
            spot_price_fee += p.spot_price_fee
            vega_util_fee += p.vega_util_fee
            variance_fee += p.variance_fee
        return FeeComponents(
            option_price_fee=option_price_fee,
            spot_price_fee=spot_price_fee,
            vega_util_fee=vega_util_fee,
            variance_fee=variance_fee,
        )


FeeComponents.ZERO = FeeComponents(0, 0, 0, 0)


# ---------------------------------------------------------------------------
# Iteration
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class VolState:
    """State threaded from one sub-trade to the next."""

    base_iv: int
    skew: int
    amm_net_std_vega: int


@final
@dataclass(frozen=True, slots=True)
class QuoteIteration:
    """Result of one sub-trade.

    new_base_iv, new_skew and post_trade_amm_net_std_vega are the inputs of
    the next sub-trade.
    """

    size: int
    premium: int
    option_price_fee: int
    spot_price_fee: int
    vega_util_fee: VegaUtilFeeComponents
    variance_fee: VarianceFeeComponents
    force_close_penalty: int
    vol_traded: int
    new_base_iv: int
    new_skew: int
    post_trade_amm_net_std_vega: int

    @property
    def fee_components(self) -> FeeComponents:
        return FeeComponents(
            option_price_fee=self.option_price_fee,
            spot_price_fee=self.spot_price_fee,
            vega_util_fee=self.vega_util_fee.vega_util_fee,
            variance_fee=self.variance_fee.variance_fee,
        )

    @property
    def fee(self) -> int:
        return self.fee_components.total

    @property
    def next_state(self) -> VolState:
        return VolState(
            base_iv=self.new_base_iv,
            skew=self.new_skew,
            amm_net_std_vega=self.post_trade_amm_net_std_vega,
        )


# ---------------------------------------------------------------------------
# Quote
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class QuoteOptions:
    is_force_close: bool = False
    iterations: int = DEFAULT_ITERATIONS


@final
@dataclass(frozen=True, slots=True)
class QuoteGreeks:
    delta: int
    vega: int
    gamma: int
    theta: int
    rho: int


@final
@dataclass(frozen=True, slots=True)
class Quote:
    """Price of one (option, direction, size) request against the AMM."""

    _option: Option
    is_buy: bool
    size: int
    price_per_option: int
    premium: int
    fee: int
    fee_components: FeeComponents
    iv: int
    greeks: QuoteGreeks
    force_close_penalty: int
    is_force_close: bool
    break_even: int
    disabled_reason: QuoteDisabledReason | None
    iterations: tuple[QuoteIteration, ...]

    def __post_init__(self) -> None:
        if self.fee != self.fee_components.total:
            raise TypeError(
                f"Quote.fee ({self.fee}) must equal the sum of fee components "
                f"({self.fee_components.total})"
            )
        if self.disabled_reason is not None and self.iterations:
            raise TypeError("A disabled Quote carries no iterations")
        if self.disabled_reason is not None and self.is_force_close:
            raise TypeError("A disabled Quote is never a force close")

    @property
    def is_disabled(self) -> bool:
        return self.disabled_reason is not None

    def market(self) -> Market:
        return self._option.market()

    def board(self) -> Board:
        return self._option.board()

    def strike(self) -> Strike:
        return self._option.strike()

    def option(self) -> Option:
        return self._option


@final
@dataclass(frozen=True, slots=True)
class BidAsk:
    """Sell-side (bid) and buy-side (ask) quotes of the same option and size."""

    bid: Quote
    ask: Quote
