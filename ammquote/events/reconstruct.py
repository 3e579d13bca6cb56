"""Rebuild canonical trade records from Trade and Transfer logs.

reconstruct_trade is total and pure: a TradeEvent cannot exist without at
least one fill, so every field below is defined.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from ammquote.core.errors import FieldViolation, InvalidArgumentError, invalid_argument
from ammquote.core.fixed_point import scaled_div, scaled_mul
from ammquote.core.result import Err, Ok
from ammquote.events import types as ev
from ammquote.events.ordering import latest_event, sort_events
from ammquote.events.types import (
    NOT_APPLICABLE,
    Collateral,
    CollateralTarget,
    TradeDirection,
    TradeEvent,
    TradeEventData,
    TransferEvent,
)
from ammquote.infra.config import ZERO_ADDRESS
from ammquote.market.types import Market
from ammquote.quote.types import FeeComponents


def resolve_trader(trade: TradeEvent, transfers: Iterable[TransferEvent]) -> str:
    """Recipient of the latest non-burn transfer in the trade's transaction, else the trader."""
    latest = latest_event(
        t for t in transfers
        if t.transaction_hash == trade.transaction_hash and t.to_address != ZERO_ADDRESS
    )
    return trade.trader if latest is None else latest.to_address


def _collateral(trade: TradeEvent) -> Collateral:
    option_type = trade.trade.option_type
    if ev.is_long(option_type):
        return NOT_APPLICABLE
    return CollateralTarget(
        set_collateral_to=trade.trade.set_collateral_to,
        is_base_collateral=ev.is_base_collateral(option_type),
    )


def reconstruct_trade(
    market: Market,
    trade: TradeEvent,
    transfers: Iterable[TransferEvent],
    timestamp: int,
) -> TradeEventData:
    """Canonical TradeEventData for one Trade log observed at block `timestamp`."""
    params = trade.trade
    results = trade.trade_results
    last = results[-1]

    fee_components = FeeComponents.sum_of(
        FeeComponents(
            option_price_fee=r.option_price_fee,
            spot_price_fee=r.spot_price_fee,
            vega_util_fee=r.vega_util_fee.vega_util_fee,
            variance_fee=r.variance_fee.variance_fee,
        )
        for r in results
    )
    premium = sum(r.total_cost for r in results)
    size = params.amount
    is_open = params.trade_direction is TradeDirection.OPEN
    is_liquidation = params.trade_direction is TradeDirection.LIQUIDATE

    return TradeEventData(
        timestamp=timestamp,
        transaction_hash=trade.transaction_hash,
        block_number=trade.block_number,
        log_index=trade.log_index,
        market_name=market.name,
        market_address=market.address,
        position_id=trade.position_id,
        strike_id=trade.strike_id,
        strike_price=params.strike_price,
        expiry_timestamp=params.expiry,
        trader=resolve_trader(trade, transfers),
        size=size,
        premium=premium,
        fee=fee_components.total,
        fee_components=fee_components,
        price_per_option=scaled_div(premium, size) if size > 0 else 0,
        spot_price=params.spot_price,
        is_open=is_open,
        is_call=ev.is_call(params.option_type),
        is_long=ev.is_long(params.option_type),
        is_buy=ev.is_buy(params.option_type, is_open),
        is_force_close=params.is_force_close,
        is_liquidation=is_liquidation,
        collateral=_collateral(trade),
        liquidation=trade.liquidation if is_liquidation else None,
        iv=scaled_mul(last.new_base_iv, last.new_skew),
        skew=last.new_skew,
        base_iv=last.new_base_iv,
        vol_traded=last.vol_traded,
    )


def reconstruct_trades(
    market: Market,
    trades: Iterable[TradeEvent],
    transfers: Iterable[TransferEvent],
    block_timestamps: Mapping[int, int],
) -> Ok[tuple[TradeEventData, ...]] | Err[InvalidArgumentError]:
    """Reconstruct every trade in chain order. Err if any block has no timestamp."""
    ordered = sort_events(trades)
    missing = sorted({t.block_number for t in ordered if t.block_number not in block_timestamps})
    if missing:
        return Err(invalid_argument(
            "reconstruct.reconstruct_trades",
            "MISSING_BLOCK_TIMESTAMP",
            *(
                FieldViolation(
                    path=f"block_timestamps[{b}]", constraint="required", actual_value="missing",
                )
                for b in missing
            ),
        ))
    transfer_list = tuple(transfers)
    return Ok(tuple(
        reconstruct_trade(market, t, transfer_list, block_timestamps[t.block_number])
        for t in ordered
    ))


def trades_for_trader(
    records: Iterable[TradeEventData], trader: str,
) -> tuple[TradeEventData, ...]:
    """Trades whose resolved trader is `trader` (case-insensitive), in chain order."""
    wanted = trader.lower()
    return sort_events(r for r in records if r.trader.lower() == wanted)
