"""Black-Scholes price and Greeks in pure Decimal.

Inputs are human-unit Decimals: time to expiry in years, vol and rate as
fractions (0.8 == 80%), spot and strike in quote currency. With no time
left or a non-positive vol the option is worth its intrinsic value and
every sensitivity except delta is zero.
"""

from __future__ import annotations

from decimal import Decimal, localcontext

from ammquote.core.decimal_math import exp_d, ln_d, norm_cdf_d, norm_pdf_d, sqrt_d
from ammquote.core.fixed_point import DECIMAL_CONTEXT
from ammquote.market.types import OptionKind
from ammquote.pricing.types import BlackScholesGreeks

_ZERO = Decimal("0")
_ONE = Decimal("1")
_TWO = Decimal("2")
_DAYS_PER_YEAR = Decimal("365")


def _is_degenerate(tte: Decimal, vol: Decimal) -> bool:
    return tte <= _ZERO or vol <= _ZERO


def d1_d2(
    tte: Decimal, vol: Decimal, spot: Decimal, strike: Decimal, rate: Decimal,
) -> tuple[Decimal, Decimal]:
    """d1 = (ln(S/K) + (r + vol^2/2) t) / (vol sqrt t); d2 = d1 - vol sqrt t."""
    with localcontext(DECIMAL_CONTEXT):
        vol_sqrt_t = vol * sqrt_d(tte)
        d1 = (ln_d(spot / strike) + (rate + vol * vol / _TWO) * tte) / vol_sqrt_t
        return d1, d1 - vol_sqrt_t


def option_price(
    tte: Decimal, vol: Decimal, spot: Decimal, strike: Decimal, rate: Decimal,
    kind: OptionKind,
) -> Decimal:
    """Premium per unit of underlying, never negative."""
    if _is_degenerate(tte, vol):
        if kind is OptionKind.CALL:
            return max(spot - strike, _ZERO)
        return max(strike - spot, _ZERO)

    d1, d2 = d1_d2(tte, vol, spot, strike, rate)
    with localcontext(DECIMAL_CONTEXT):
        discounted_strike = strike * exp_d(-rate * tte)
        if kind is OptionKind.CALL:
            price = spot * norm_cdf_d(d1) - discounted_strike * norm_cdf_d(d2)
        else:
            price = discounted_strike * norm_cdf_d(-d2) - spot * norm_cdf_d(-d1)
        return max(price, _ZERO)


def vega(
    tte: Decimal, vol: Decimal, spot: Decimal, strike: Decimal, rate: Decimal,
) -> Decimal:
    """S * phi(d1) * sqrt(t), identical for calls and puts."""
    if _is_degenerate(tte, vol):
        return _ZERO
    d1, _ = d1_d2(tte, vol, spot, strike, rate)
    with localcontext(DECIMAL_CONTEXT):
        return spot * norm_pdf_d(d1) * sqrt_d(tte)


def black_scholes_greeks(
    tte: Decimal, vol: Decimal, spot: Decimal, strike: Decimal, rate: Decimal,
    kind: OptionKind,
) -> BlackScholesGreeks:
    """Delta, gamma, vega, theta (per day) and rho of one option."""
    if _is_degenerate(tte, vol):
        if kind is OptionKind.CALL:
            delta = _ONE if spot > strike else _ZERO
        else:
            delta = -_ONE if spot < strike else _ZERO
        return BlackScholesGreeks(delta=delta)

    d1, d2 = d1_d2(tte, vol, spot, strike, rate)
    with localcontext(DECIMAL_CONTEXT):
        sqrt_t = sqrt_d(tte)
        pdf_d1 = norm_pdf_d(d1)
        discounted_strike = strike * exp_d(-rate * tte)
        decay = -(spot * pdf_d1 * vol) / (_TWO * sqrt_t)

        gamma = pdf_d1 / (spot * vol * sqrt_t)
        vega_ = spot * pdf_d1 * sqrt_t
        if kind is OptionKind.CALL:
            delta = norm_cdf_d(d1)
            theta_annual = decay - rate * discounted_strike * norm_cdf_d(d2)
            rho = discounted_strike * tte * norm_cdf_d(d2)
        else:
            delta = norm_cdf_d(d1) - _ONE
            theta_annual = decay + rate * discounted_strike * norm_cdf_d(-d2)
            rho = -discounted_strike * tte * norm_cdf_d(-d2)

        return BlackScholesGreeks(
            delta=delta,
            gamma=gamma,
            vega=vega_,
            theta=theta_annual / _DAYS_PER_YEAR,
            rho=rho,
        )
