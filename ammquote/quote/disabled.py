"""Disablement policy: would the AMM refuse this trade, and why.

Checks run in QuoteDisabledReason declaration order; the first failing
check wins. Force-close trades skip the trading cutoff and the vol/IV
bounds, use the force-close delta floor, and are held to the absolute
skew bounds instead of the normal ones.
"""

from __future__ import annotations

from ammquote.core.fixed_point import UNIT
from ammquote.market.types import Option
from ammquote.quote.types import QuoteDisabledReason


def disabled_reason(  # noqa: PLR0911, PLR0913
    option: Option,
    size: int,
    min_liquidity: int,
    iv: int,
    skew: int,
    base_iv: int,
    is_buy: bool,
    is_force_close: bool,
) -> QuoteDisabledReason | None:
    """Return the first reason the trade is disabled, or None if it may trade.

    iv, skew and base_iv are the post-trade values. min_liquidity only
    applies to buys (the AMM locks collateral to sell) and a value of 0
    turns the liquidity check off.
    """
    now = option.snapshot.timestamp
    market = option.market()
    board = option.board()
    limits = market.params.trade_limits

    if size <= 0:
        return QuoteDisabledReason.EMPTY_SIZE
    if board.is_expired(now):
        return QuoteDisabledReason.EXPIRED
    if not is_force_close and board.is_trading_cutoff(now, limits.trading_cutoff):
        return QuoteDisabledReason.TRADING_CUTOFF
    if is_buy and min_liquidity > 0 and market.free_liquidity < min_liquidity:
        return QuoteDisabledReason.INSUFFICIENT_LIQUIDITY

    # Delta bounds are defined on the call delta of the strike for both kinds.
    min_delta = limits.min_force_close_delta if is_force_close else limits.min_delta
    call_delta = option.strike().call.delta
    if call_delta < min_delta or call_delta > UNIT - min_delta:
        return QuoteDisabledReason.DELTA_OUT_OF_RANGE

    if not is_force_close:
        if iv > limits.max_vol:
            return QuoteDisabledReason.VOL_TOO_HIGH
        if iv < limits.min_vol:
            return QuoteDisabledReason.VOL_TOO_LOW
        if base_iv > limits.max_base_iv:
            return QuoteDisabledReason.IV_TOO_HIGH
        if base_iv < limits.min_base_iv:
            return QuoteDisabledReason.IV_TOO_LOW

    max_skew = limits.abs_max_skew if is_force_close else limits.max_skew
    min_skew = limits.abs_min_skew if is_force_close else limits.min_skew
    if skew > max_skew:
        return QuoteDisabledReason.SKEW_TOO_HIGH
    if skew < min_skew:
        return QuoteDisabledReason.SKEW_TOO_LOW

    return None
