"""Fixed-point integer arithmetic matching the AMM contract's 18-decimal math.

Every monetary or rate quantity in ammquote is a Python int scaled by
UNIT = 10**18. Multiplication and division rescale and truncate toward zero,
which is what the contract's signed and unsigned decimal libraries do (and
equals floor for non-negative operands).

Decimal is used only at the boundary with the Black-Scholes functions:
from_fixed is exact, to_fixed truncates.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Context, Decimal, DivisionByZero, InvalidOperation, Overflow
from decimal import ROUND_HALF_EVEN as _ROUND_HALF_EVEN
from decimal import localcontext

UNIT: int = 10**18
DECIMALS: int = 18
ZERO: int = 0

DECIMAL_CONTEXT = Context(
    prec=28,
    rounding=_ROUND_HALF_EVEN,
    Emin=-999999,
    Emax=999999,
    capitals=1,
    clamp=0,
    flags=[],
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

# Wide enough to hold any 256-bit integer plus 18 fractional digits exactly.
_CONVERSION_CONTEXT = Context(
    prec=100,
    rounding=ROUND_DOWN,
    Emin=-999999,
    Emax=999999,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)


def _div_toward_zero(numerator: int, denominator: int) -> int:
    if denominator == 0:
        raise ZeroDivisionError("fixed-point division by zero")
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def scaled_mul(a: int, b: int) -> int:
    """a * b / UNIT, truncated toward zero."""
    return _div_toward_zero(a * b, UNIT)


def scaled_div(a: int, b: int) -> int:
    """a * UNIT / b, truncated toward zero.

    Raises
    ------
    ZeroDivisionError
        If b == 0.
    """
    return _div_toward_zero(a * UNIT, b)


def to_fixed(value: Decimal) -> int:
    """Scale a Decimal to a fixed-point int, dropping digits past the 18th decimal."""
    if not value.is_finite():
        raise ValueError(f"to_fixed requires a finite Decimal, got {value}")
    with localcontext(_CONVERSION_CONTEXT):
        return int(value.scaleb(DECIMALS).to_integral_value(rounding=ROUND_DOWN))


def from_fixed(value: int) -> Decimal:
    """Exact Decimal for a fixed-point int."""
    with localcontext(_CONVERSION_CONTEXT):
        return Decimal(value).scaleb(-DECIMALS)


def from_units(value: int | str | Decimal) -> int:
    """Fixed-point int for a human amount, e.g. from_units("2.5") == 25 * 10**17."""
    return to_fixed(Decimal(str(value)) if not isinstance(value, Decimal) else value)
