"""Market and event builders plus Hypothesis strategies for ammquote tests.

The builders produce one realistic ETH market: spot 1500, one 30-day
board at 80% base IV and three strikes (ATM, out-of-the-money and a
far-out strike whose delta is outside the tradable range). Every
parameter can be overridden with keyword arguments.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from hypothesis import strategies as st
from hypothesis.strategies import SearchStrategy

from ammquote.core.fixed_point import UNIT, from_units
from ammquote.core.result import unwrap
from ammquote.events.types import (
    OptionType,
    TradeDirection,
    TradeEvent,
    TradeParameters,
    TradeResult,
    TransferEvent,
)
from ammquote.infra.config import SECONDS_PER_DAY
from ammquote.market.types import (
    Board,
    CachedGreeks,
    ForceCloseParams,
    Market,
    MarketParameters,
    MarketSnapshot,
    Option,
    OptionKind,
    PricingParams,
    Strike,
    TradeLimitParams,
    VarianceFeeParams,
)
from ammquote.quote.types import VarianceFeeComponents, VegaUtilFeeComponents

# ===================================================================
# MARKET BUILDERS
# ===================================================================

NOW = 1_700_000_000
MARKET_ADDRESS = "0x919E5e0C096002cb8a21397D724C4e3EbE77bC15"
TRADER = "0x1111111111111111111111111111111111111111"
ATM_STRIKE_ID = 1
OTM_STRIKE_ID = 2
FAR_STRIKE_ID = 3
BOARD_ID = 7


def pricing_params(**overrides: Any) -> PricingParams:
    base = PricingParams(
        option_price_fee_coefficient=from_units("0.01"),
        option_price_fee_1x_point=6 * 7 * SECONDS_PER_DAY,
        option_price_fee_2x_point=12 * 7 * SECONDS_PER_DAY,
        spot_price_fee_coefficient=from_units("0.001"),
        spot_price_fee_1x_point=6 * 7 * SECONDS_PER_DAY,
        spot_price_fee_2x_point=12 * 7 * SECONDS_PER_DAY,
        vega_fee_coefficient=from_units("6000"),
        standard_size=from_units("5"),
        skew_adjustment_factor=from_units("0.75"),
    )
    return replace(base, **overrides)


def trade_limit_params(**overrides: Any) -> TradeLimitParams:
    base = TradeLimitParams(
        min_delta=from_units("0.15"),
        min_force_close_delta=from_units("0.05"),
        trading_cutoff=12 * 60 * 60,
        min_base_iv=from_units("0.1"),
        max_base_iv=from_units("3"),
        min_skew=from_units("0.5"),
        max_skew=from_units("2"),
        min_vol=from_units("0.1"),
        max_vol=from_units("3"),
        abs_min_skew=from_units("0.1"),
        abs_max_skew=from_units("5"),
    )
    return replace(base, **overrides)


def variance_fee_params(**overrides: Any) -> VarianceFeeParams:
    base = VarianceFeeParams(
        default_variance_fee_coefficient=from_units("0.5"),
        force_close_variance_fee_coefficient=from_units("1"),
        skew_adjustment_coefficient=UNIT,
        reference_skew=UNIT,
        minimum_static_skew_adjustment=UNIT,
        vega_coefficient=from_units("0.01"),
        minimum_static_vega=0,
        iv_variance_coefficient=UNIT,
        minimum_static_iv_variance=UNIT,
    )
    return replace(base, **overrides)


def market_parameters(
    *,
    pricing: PricingParams | None = None,
    trade_limits: TradeLimitParams | None = None,
    variance_fee: VarianceFeeParams | None = None,
    iv_adjustment: int = from_units("1.2"),
) -> MarketParameters:
    return MarketParameters(
        pricing=pricing or pricing_params(),
        trade_limits=trade_limits or trade_limit_params(),
        variance_fee=variance_fee or variance_fee_params(),
        force_close=ForceCloseParams(iv_adjustment=iv_adjustment),
    )


def make_market(params: MarketParameters | None = None, **overrides: Any) -> Market:
    base = Market(
        address=MARKET_ADDRESS,
        name="ETH",
        spot_price=from_units("1500"),
        rate_and_carry=from_units("0.05"),
        net_std_vega=0,
        nav=from_units("10000000"),
        free_liquidity=from_units("1000000"),
        params=params or market_parameters(),
    )
    return replace(base, **overrides)


def make_board(**overrides: Any) -> Board:
    base = Board(
        board_id=BOARD_ID,
        expiry=NOW + 30 * SECONDS_PER_DAY,
        base_iv=from_units("0.8"),
        variance_gwav_iv=from_units("0.8"),
    )
    return replace(base, **overrides)


def make_strike(
    strike_id: int = ATM_STRIKE_ID,
    strike_price: str = "1500",
    call_delta: str = "0.52",
    **overrides: Any,
) -> Strike:
    delta = from_units(call_delta)
    base = Strike(
        strike_id=strike_id,
        board_id=BOARD_ID,
        strike_price=from_units(strike_price),
        skew=UNIT,
        vega=from_units("171"),
        gamma=from_units("0.0011"),
        call=CachedGreeks(delta=delta, theta=-from_units("2.2"), rho=from_units("0.6")),
        put=CachedGreeks(delta=delta - UNIT, theta=-from_units("2.0"), rho=-from_units("0.6")),
    )
    return replace(base, **overrides)


def default_strikes() -> tuple[Strike, ...]:
    return (
        make_strike(ATM_STRIKE_ID, "1500", "0.52"),
        make_strike(OTM_STRIKE_ID, "1700", "0.25"),
        make_strike(FAR_STRIKE_ID, "4000", "0.01"),
    )


def make_snapshot(
    *,
    market: Market | None = None,
    board: Board | None = None,
    strikes: tuple[Strike, ...] | None = None,
    timestamp: int = NOW,
) -> MarketSnapshot:
    return unwrap(MarketSnapshot.create(
        market or make_market(),
        (board or make_board(),),
        strikes if strikes is not None else default_strikes(),
        timestamp,
    ))


def make_option(
    snapshot: MarketSnapshot | None = None,
    strike_id: int = ATM_STRIKE_ID,
    kind: OptionKind = OptionKind.CALL,
) -> Option:
    return unwrap((snapshot or make_snapshot()).option(strike_id, kind))


# ===================================================================
# EVENT BUILDERS
# ===================================================================


def make_trade_result(
    amount: int = from_units("1"),
    total_cost: int = from_units("100"),
    option_price_fee: int = from_units("1"),
    spot_price_fee: int = from_units("1.5"),
    vega_util_fee: int = from_units("0.25"),
    variance_fee: int = from_units("0.75"),
    new_base_iv: int = from_units("0.8"),
    new_skew: int = UNIT,
) -> TradeResult:
    return TradeResult(
        amount=amount,
        premium=total_cost,
        option_price_fee=option_price_fee,
        spot_price_fee=spot_price_fee,
        vega_util_fee=VegaUtilFeeComponents(
            pre_trade_amm_net_std_vega=0,
            post_trade_amm_net_std_vega=-from_units("100"),
            vega_util=from_units("0.01"),
            vol_traded=scaled(new_base_iv, new_skew),
            nav=from_units("10000000"),
            vega_util_fee=vega_util_fee,
        ),
        variance_fee=VarianceFeeComponents(
            variance_fee_coefficient=from_units("0.5"),
            vega=from_units("171"),
            vega_coefficient=from_units("1.71"),
            skew=new_skew,
            skew_coefficient=UNIT,
            iv_variance=0,
            iv_variance_coefficient=UNIT,
            variance_fee=variance_fee,
        ),
        total_fee=option_price_fee + spot_price_fee + vega_util_fee + variance_fee,
        total_cost=total_cost,
        vol_traded=scaled(new_base_iv, new_skew),
        new_base_iv=new_base_iv,
        new_skew=new_skew,
    )


def scaled(a: int, b: int) -> int:
    return a * b // UNIT


def make_trade_event(
    *,
    transaction_hash: str = "0xaaa",
    block_number: int = 100,
    log_index: int = 3,
    trader: str = TRADER,
    option_type: OptionType = OptionType.LONG_CALL,
    direction: TradeDirection = TradeDirection.OPEN,
    amount: int = from_units("1"),
    is_force_close: bool = False,
    set_collateral_to: int = 0,
    results: tuple[TradeResult, ...] | None = None,
) -> TradeEvent:
    return TradeEvent(
        transaction_hash=transaction_hash,
        block_number=block_number,
        log_index=log_index,
        trader=trader,
        position_id=42,
        strike_id=ATM_STRIKE_ID,
        trade=TradeParameters(
            option_type=option_type,
            trade_direction=direction,
            amount=amount,
            expiry=NOW + 30 * SECONDS_PER_DAY,
            strike_price=from_units("1500"),
            is_force_close=is_force_close,
            spot_price=from_units("1500"),
            set_collateral_to=set_collateral_to,
        ),
        trade_results=results if results is not None else (make_trade_result(amount=amount),),
    )


def make_transfer(
    to_address: str,
    *,
    transaction_hash: str = "0xaaa",
    block_number: int = 100,
    log_index: int = 4,
    from_address: str = "0x0000000000000000000000000000000000000000",
) -> TransferEvent:
    return TransferEvent(
        transaction_hash=transaction_hash,
        block_number=block_number,
        log_index=log_index,
        from_address=from_address,
        to_address=to_address,
        token_id=42,
    )


# ===================================================================
# STRATEGIES
# ===================================================================


def fixed_amounts(
    min_value: str = "0.01",
    max_value: str = "50",
) -> SearchStrategy[int]:
    """Fixed-point sizes on a 0.01 grid."""
    lo = int(from_units(min_value) // 10**16)
    hi = int(from_units(max_value) // 10**16)
    return st.integers(min_value=lo, max_value=hi).map(lambda n: n * 10**16)


def signed_fixed(bound: int = 10**40) -> SearchStrategy[int]:
    return st.integers(min_value=-bound, max_value=bound)


def addresses() -> SearchStrategy[str]:
    return st.text(alphabet="0123456789abcdef", min_size=40, max_size=40).map(lambda s: "0x" + s)


@st.composite
def transfer_events(draw: st.DrawFn, transaction_hash: str = "0xaaa") -> TransferEvent:
    return TransferEvent(
        transaction_hash=draw(st.sampled_from([transaction_hash, "0xbbb"])),
        block_number=draw(st.integers(min_value=99, max_value=102)),
        log_index=draw(st.integers(min_value=0, max_value=20)),
        from_address=draw(addresses()),
        to_address=draw(st.one_of(
            addresses(), st.just("0x0000000000000000000000000000000000000000"),
        )),
        token_id=42,
    )
