"""On-chain trade and transfer records, and the reconstructed trade.

TradeEvent and TransferEvent are the already-decoded log records the
reconstructor consumes. TradeEventData is the canonical, self-contained
description of one trade built from them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, final

from ammquote.quote.types import FeeComponents, VarianceFeeComponents, VegaUtilFeeComponents


class OptionType(Enum):
    """Position type as encoded by the option market contract."""

    LONG_CALL = 0
    LONG_PUT = 1
    SHORT_CALL_BASE = 2
    SHORT_CALL_QUOTE = 3
    SHORT_PUT_QUOTE = 4


class TradeDirection(Enum):
    OPEN = 0
    CLOSE = 1
    LIQUIDATE = 2


def is_call(option_type: OptionType) -> bool:
    return option_type in (
        OptionType.LONG_CALL, OptionType.SHORT_CALL_BASE, OptionType.SHORT_CALL_QUOTE,
    )


def is_long(option_type: OptionType) -> bool:
    return option_type in (OptionType.LONG_CALL, OptionType.LONG_PUT)


def is_buy(option_type: OptionType, is_open: bool) -> bool:
    """Opening a long or closing a short buys from the AMM."""
    return is_open if is_long(option_type) else not is_open


def is_base_collateral(option_type: OptionType) -> bool:
    return option_type is OptionType.SHORT_CALL_BASE


class OrderedEvent(Protocol):
    """Anything with a position in the chain's log order."""

    @property
    def block_number(self) -> int: ...

    @property
    def log_index(self) -> int: ...


# ---------------------------------------------------------------------------
# Raw records
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class TradeResult:
    """One fill of a trade, as emitted by the option market."""

    amount: int
    premium: int
    option_price_fee: int
    spot_price_fee: int
    vega_util_fee: VegaUtilFeeComponents
    variance_fee: VarianceFeeComponents
    total_fee: int
    total_cost: int
    vol_traded: int
    new_base_iv: int
    new_skew: int


@final
@dataclass(frozen=True, slots=True)
class TradeParameters:
    option_type: OptionType
    trade_direction: TradeDirection
    amount: int
    expiry: int
    strike_price: int
    is_force_close: bool
    spot_price: int
    set_collateral_to: int


@final
@dataclass(frozen=True, slots=True)
class LiquidationInfo:
    reward_beneficiary: str
    caller: str
    return_collateral: int
    lp_premiums: int
    lp_fee: int
    liquidator_fee: int
    sm_fee: int
    insolvent_amount: int


@final
@dataclass(frozen=True, slots=True)
class TradeEvent:
    """A Trade log: who traded which position, with every fill result."""

    transaction_hash: str
    block_number: int
    log_index: int
    trader: str
    position_id: int
    strike_id: int
    trade: TradeParameters
    trade_results: tuple[TradeResult, ...]
    liquidation: LiquidationInfo | None = None

    def __post_init__(self) -> None:
        if not self.trade_results:
            raise TypeError("TradeEvent.trade_results must be non-empty")


@final
@dataclass(frozen=True, slots=True)
class TransferEvent:
    """A position-token Transfer log. to_address of ZERO_ADDRESS is a burn."""

    transaction_hash: str
    block_number: int
    log_index: int
    from_address: str
    to_address: str
    token_id: int


# ---------------------------------------------------------------------------
# Reconstructed trade
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class CollateralTarget:
    """Collateral a short position was set to, and in which asset."""

    set_collateral_to: int
    is_base_collateral: bool


@final
@dataclass(frozen=True, slots=True)
class NotApplicable:
    """Long positions carry no collateral."""


NOT_APPLICABLE = NotApplicable()

type Collateral = CollateralTarget | NotApplicable


@final
@dataclass(frozen=True, slots=True)
class TradeEventData:
    """Canonical record of one executed trade.

    premium and fees are summed over every fill; iv, skew, base_iv and
    vol_traded are the state after the last fill.
    """

    timestamp: int
    transaction_hash: str
    block_number: int
    log_index: int
    market_name: str
    market_address: str
    position_id: int
    strike_id: int
    strike_price: int
    expiry_timestamp: int
    trader: str
    size: int
    premium: int
    fee: int
    fee_components: FeeComponents
    price_per_option: int
    spot_price: int
    is_open: bool
    is_call: bool
    is_long: bool
    is_buy: bool
    is_force_close: bool
    is_liquidation: bool
    collateral: Collateral
    liquidation: LiquidationInfo | None
    iv: int
    skew: int
    base_iv: int
    vol_traded: int

    def __post_init__(self) -> None:
        if self.fee != self.fee_components.total:
            raise TypeError(
                f"TradeEventData.fee ({self.fee}) must equal the sum of fee components "
                f"({self.fee_components.total})"
            )
        if self.is_long != isinstance(self.collateral, NotApplicable):
            raise TypeError("TradeEventData: collateral applies to short positions only")
        if self.liquidation is not None and not self.is_liquidation:
            raise TypeError("TradeEventData: liquidation details require a liquidation")
