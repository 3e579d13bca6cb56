"""One sub-trade against the AMM: IV impact, premium and fee breakdown.

Mirrors the option market pricer's integer math: every product and
quotient of scaled quantities goes through scaled_mul / scaled_div, and
Black-Scholes outputs are truncated to fixed point before use.

Per sub-trade of `size`:

    order_size   = size / standard_size
    base_iv     += order_size // 100                   (buy: +, sell: -)
    skew        += (order_size // 100) * skew_adj_factor
    vol_traded   = base_iv * skew
    premium      = price(vol_traded) * size + fees      (buy)
                 = max(price * size - fees, 0)          (sell)
"""

from __future__ import annotations

from decimal import Decimal, localcontext

from ammquote.core.decimal_math import sqrt_d
from ammquote.core.fixed_point import DECIMAL_CONTEXT, UNIT, from_fixed, scaled_div, scaled_mul, to_fixed
from ammquote.market.types import Option, PricingParams, VarianceFeeParams
from ammquote.pricing.black_scholes import option_price, vega
from ammquote.quote.types import QuoteIteration, VarianceFeeComponents, VegaUtilFeeComponents


def time_weighted_fee(
    time_to_expiry: int, point_1x: int, point_2x: int, coefficient: int,
) -> int:
    """coefficient at or inside point_1x seconds, scaling linearly to 2x at point_2x."""
    if time_to_expiry <= point_1x:
        return coefficient
    return scaled_mul(
        coefficient, UNIT + (time_to_expiry - point_1x) * UNIT // (point_2x - point_1x),
    )


def iv_impact(
    size: int, base_iv: int, skew: int, pricing: PricingParams, is_buy: bool,
) -> tuple[int, int]:
    """New (base_iv, skew) after trading size. Buys push both up, sells down."""
    order_size = scaled_div(size, pricing.standard_size)
    move_base_iv = order_size // 100
    move_skew = scaled_mul(move_base_iv, pricing.skew_adjustment_factor)
    if is_buy:
        return base_iv + move_base_iv, skew + move_skew
    return base_iv - move_base_iv, skew - move_skew


def standardized_vega(option_vega: int, time_to_expiry: int, standard_tenor: int) -> int:
    """vega * sqrt(standard_tenor / time_to_expiry); zero once expired."""
    if time_to_expiry <= 0:
        return 0
    with localcontext(DECIMAL_CONTEXT):
        factor = sqrt_d(Decimal(standard_tenor) / Decimal(time_to_expiry))
    return scaled_mul(option_vega, to_fixed(factor))


def vega_util_fee(
    pre_trade_amm_net_std_vega: int,
    post_trade_amm_net_std_vega: int,
    vol_traded: int,
    nav: int,
    vega_fee_coefficient: int,
    size: int,
) -> VegaUtilFeeComponents:
    """Charged only when the trade grows the AMM's absolute vega exposure."""
    if abs(pre_trade_amm_net_std_vega) >= abs(post_trade_amm_net_std_vega) or nav <= 0:
        vega_util = 0
        fee = 0
    else:
        vega_util = scaled_div(scaled_mul(vol_traded, abs(post_trade_amm_net_std_vega)), nav)
        fee = scaled_mul(scaled_mul(vega_fee_coefficient, vega_util), size)
    return VegaUtilFeeComponents(
        pre_trade_amm_net_std_vega=pre_trade_amm_net_std_vega,
        post_trade_amm_net_std_vega=post_trade_amm_net_std_vega,
        vega_util=vega_util,
        vol_traded=vol_traded,
        nav=nav,
        vega_util_fee=fee,
    )


def variance_fee(  # noqa: PLR0913
    option_vega: int,
    new_skew: int,
    new_base_iv: int,
    variance_gwav_iv: int,
    params: VarianceFeeParams,
    is_force_close: bool,
    size: int,
) -> VarianceFeeComponents:
    """coefficient * vega_coef * skew_coef * iv_variance_coef * size; zero with a zero coefficient."""
    coefficient = (
        params.force_close_variance_fee_coefficient
        if is_force_close
        else params.default_variance_fee_coefficient
    )
    vega_coefficient = params.minimum_static_vega + scaled_mul(option_vega, params.vega_coefficient)
    skew_coefficient = params.minimum_static_skew_adjustment + scaled_mul(
        abs(new_skew - params.reference_skew), params.skew_adjustment_coefficient,
    )
    iv_variance = abs(variance_gwav_iv - new_base_iv)
    iv_variance_coefficient = params.minimum_static_iv_variance + scaled_mul(
        iv_variance, params.iv_variance_coefficient,
    )
    fee = scaled_mul(
        scaled_mul(
            scaled_mul(scaled_mul(coefficient, vega_coefficient), skew_coefficient),
            iv_variance_coefficient,
        ),
        size,
    )
    return VarianceFeeComponents(
        variance_fee_coefficient=coefficient,
        vega=option_vega,
        vega_coefficient=vega_coefficient,
        skew=new_skew,
        skew_coefficient=skew_coefficient,
        iv_variance=iv_variance,
        iv_variance_coefficient=iv_variance_coefficient,
        variance_fee=fee,
    )


def quote_iteration(  # noqa: PLR0913
    option: Option,
    is_buy: bool,
    size: int,
    base_iv: int,
    skew: int,
    net_std_vega: int,  # noqa: ARG001
    pre_trade_amm_net_std_vega: int,
    is_force_close: bool,
) -> QuoteIteration:
    """Price one sub-trade of `size` starting from (base_iv, skew, AMM net std vega).

    net_std_vega is the market's trader-side exposure before the whole trade;
    the running AMM exposure arrives in pre_trade_amm_net_std_vega.
    """
    now = option.snapshot.timestamp
    market = option.market()
    board = option.board()
    strike = option.strike()
    params = market.params
    pricing = params.pricing

    time_to_expiry = board.time_to_expiry(now)
    tte = board.time_to_expiry_annualized(now)
    spot = from_fixed(market.spot_price)
    strike_price = from_fixed(strike.strike_price)
    rate = from_fixed(market.rate_and_carry)

    def price_at(vol: int) -> int:
        return to_fixed(option_price(tte, from_fixed(vol), spot, strike_price, rate, option.kind))

    new_base_iv, new_skew = iv_impact(size, base_iv, skew, pricing, is_buy)
    vol_traded = scaled_mul(new_base_iv, new_skew)

    price = price_at(vol_traded)
    force_close_penalty = 0
    if is_force_close:
        adjustment = params.force_close.iv_adjustment
        forced_vol = (
            scaled_mul(vol_traded, adjustment) if is_buy else scaled_div(vol_traded, adjustment)
        )
        forced_price = price_at(forced_vol)
        force_close_penalty = scaled_mul(abs(forced_price - price), size)
        price = forced_price

    option_vega = to_fixed(vega(tte, from_fixed(vol_traded), spot, strike_price, rate))

    option_price_fee = scaled_mul(
        scaled_mul(
            time_weighted_fee(
                time_to_expiry,
                pricing.option_price_fee_1x_point,
                pricing.option_price_fee_2x_point,
                pricing.option_price_fee_coefficient,
            ),
            price,
        ),
        size,
    )
    spot_price_fee = scaled_mul(
        scaled_mul(
            time_weighted_fee(
                time_to_expiry,
                pricing.spot_price_fee_1x_point,
                pricing.spot_price_fee_2x_point,
                pricing.spot_price_fee_coefficient,
            ),
            market.spot_price,
        ),
        size,
    )

    # The AMM takes the other side: a trader buy shortens the AMM's vega.
    vega_moved = scaled_mul(
        standardized_vega(option_vega, time_to_expiry, pricing.standard_vega_tenor), size,
    )
    post_trade_amm_net_std_vega = (
        pre_trade_amm_net_std_vega - vega_moved if is_buy
        else pre_trade_amm_net_std_vega + vega_moved
    )

    vega_util = vega_util_fee(
        pre_trade_amm_net_std_vega,
        post_trade_amm_net_std_vega,
        vol_traded,
        market.nav,
        pricing.vega_fee_coefficient,
        size,
    )
    variance = variance_fee(
        option_vega,
        new_skew,
        new_base_iv,
        board.variance_gwav_iv,
        params.variance_fee,
        is_force_close,
        size,
    )

    fees = option_price_fee + spot_price_fee + vega_util.vega_util_fee + variance.variance_fee
    base_premium = scaled_mul(price, size)
    premium = base_premium + fees if is_buy else max(base_premium - fees, 0)

    return QuoteIteration(
        size=size,
        premium=premium,
        option_price_fee=option_price_fee,
        spot_price_fee=spot_price_fee,
        vega_util_fee=vega_util,
        variance_fee=variance,
        force_close_penalty=force_close_penalty,
        vol_traded=vol_traded,
        new_base_iv=new_base_iv,
        new_skew=new_skew,
        post_trade_amm_net_std_vega=post_trade_amm_net_std_vega,
    )
