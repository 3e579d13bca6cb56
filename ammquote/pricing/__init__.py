"""ammquote.pricing -- Black-Scholes in pure Decimal."""

from ammquote.pricing.black_scholes import (
    black_scholes_greeks as black_scholes_greeks,
)
from ammquote.pricing.black_scholes import (
    option_price as option_price,
)
from ammquote.pricing.black_scholes import (
    vega as vega,
)
from ammquote.pricing.types import (
    BlackScholesGreeks as BlackScholesGreeks,
)
