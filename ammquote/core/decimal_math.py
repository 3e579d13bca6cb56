"""Pure-Decimal transcendental functions for the Black-Scholes layer.

All public functions return values rounded to DECIMAL_CONTEXT (prec=28,
ROUND_HALF_EVEN). No float, no math module: the Greeks fed back into
fixed-point quotes must not depend on the platform's libm.

Functions
---------
exp_d      : e^x (Taylor series with range reduction)
ln_d       : natural log (ValueError on non-positive input)
sqrt_d     : square root (ValueError on negative input)
norm_pdf_d : standard normal density
norm_cdf_d : standard normal cumulative distribution
"""

from __future__ import annotations

from decimal import Decimal, localcontext

from ammquote.core.fixed_point import DECIMAL_CONTEXT

# Compute with guard digits, then round back to DECIMAL_CONTEXT.prec.
_GUARD_DIGITS = 10
_INTERNAL_PREC = DECIMAL_CONTEXT.prec + _GUARD_DIGITS  # 38

_ZERO = Decimal("0")
_ONE = Decimal("1")
_TWO = Decimal("2")
_HALF = Decimal("0.5")

_PI = Decimal("3.14159265358979323846264338327950288419716939937510")

# Beyond this |x| the normal tail is below 1e-32 and truncates to zero in fixed point.
_CDF_CUTOFF = Decimal("12")


def _to_output(value: Decimal) -> Decimal:
    with localcontext(DECIMAL_CONTEXT):
        return value + _ZERO  # forces rounding to prec=28


def _converged(term: Decimal, prec: int) -> bool:
    return abs(term) < Decimal(10) ** (-(prec + 2))


def _ln2(prec: int) -> Decimal:
    """ln(2) = 2 * atanh(1/3), summed to the requested precision."""
    with localcontext(DECIMAL_CONTEXT) as ctx:
        ctx.prec = prec + 5
        third = _ONE / Decimal(3)
        third_sq = third * third
        term = third
        total = third
        for k in range(1, 300):
            term = term * third_sq
            contrib = term / Decimal(2 * k + 1)
            total = total + contrib
            if _converged(contrib, ctx.prec):
                break
        return total * _TWO


def exp_d(x: Decimal) -> Decimal:
    """Compute e^x.

    Writes x = k*ln2 + r with |r| <= ln2/2, sums the Taylor series for e^r
    and scales by 2^k exactly.
    """
    with localcontext(DECIMAL_CONTEXT) as ctx:
        ctx.prec = _INTERNAL_PREC

        if x == _ZERO:
            return _ONE

        ln2 = _ln2(ctx.prec)
        k = int((x / ln2).to_integral_value())
        r = x - Decimal(k) * ln2

        exp_r = _ONE
        term = _ONE
        for n in range(1, 200):
            term = term * r / Decimal(n)
            exp_r = exp_r + term
            if _converged(term, ctx.prec):
                break

        result = exp_r * (_TWO ** k) if k >= 0 else exp_r / (_TWO ** (-k))
        return _to_output(result)


def ln_d(x: Decimal) -> Decimal:
    """Compute ln(x) for x > 0.

    Halves or doubles x into [0.5, 2), then ln(m) = 2 * atanh((m-1)/(m+1)).

    Raises
    ------
    ValueError
        If x <= 0.
    """
    if x <= _ZERO:
        raise ValueError(f"ln_d requires x > 0, got {x}")
    if x == _ONE:
        return _ZERO

    with localcontext(DECIMAL_CONTEXT) as ctx:
        ctx.prec = _INTERNAL_PREC

        val = x + _ZERO
        e = 0
        while val >= _TWO:
            val = val / _TWO
            e += 1
        while val < _HALF:
            val = val * _TWO
            e -= 1

        u = (val - _ONE) / (val + _ONE)  # |u| < 1/3
        u_sq = u * u
        term = u
        ln_val = u
        for k in range(1, 300):
            term = term * u_sq
            contrib = term / Decimal(2 * k + 1)
            ln_val = ln_val + contrib
            if _converged(contrib, ctx.prec):
                break

        return _to_output(ln_val * _TWO + Decimal(e) * _ln2(ctx.prec))


def sqrt_d(x: Decimal) -> Decimal:
    """Square root in DECIMAL_CONTEXT.

    Raises
    ------
    ValueError
        If x < 0.
    """
    if x < _ZERO:
        raise ValueError(f"sqrt_d requires x >= 0, got {x}")
    with localcontext(DECIMAL_CONTEXT):
        return x.sqrt()


def norm_pdf_d(x: Decimal) -> Decimal:
    """phi(x) = e^(-x^2/2) / sqrt(2*pi)."""
    with localcontext(DECIMAL_CONTEXT) as ctx:
        ctx.prec = _INTERNAL_PREC
        density = exp_d(-(x * x) / _TWO) / (_TWO * _PI).sqrt()
    return _to_output(density)


def _erf(z: Decimal) -> Decimal:
    """erf(z) = 2/sqrt(pi) * e^(-z^2) * sum 2^n z^(2n+1) / (2n+1)!!.

    Every term has the sign of z, so there is no cancellation.
    """
    with localcontext(DECIMAL_CONTEXT) as ctx:
        ctx.prec = _INTERNAL_PREC
        z_sq2 = _TWO * z * z
        term = z
        total = z
        for n in range(1, 2000):
            term = term * z_sq2 / Decimal(2 * n + 1)
            total = total + term
            if not term or abs(term) < abs(total) * Decimal(10) ** (-(ctx.prec + 2)):
                break
        return _TWO / _PI.sqrt() * exp_d(-(z * z)) * total


def norm_cdf_d(x: Decimal) -> Decimal:
    """N(x) = (1 + erf(x / sqrt(2))) / 2, clamped to 0 or 1 far in the tails."""
    if x >= _CDF_CUTOFF:
        return _ONE
    if x <= -_CDF_CUTOFF:
        return _ZERO
    with localcontext(DECIMAL_CONTEXT) as ctx:
        ctx.prec = _INTERNAL_PREC
        cdf = (_ONE + _erf(x / _TWO.sqrt())) / _TWO
    return _to_output(cdf)
