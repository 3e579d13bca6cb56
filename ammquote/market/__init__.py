"""ammquote.market -- read-only market snapshot and option views."""

from ammquote.market.types import Board as Board
from ammquote.market.types import CachedGreeks as CachedGreeks
from ammquote.market.types import ForceCloseParams as ForceCloseParams
from ammquote.market.types import Market as Market
from ammquote.market.types import MarketParameters as MarketParameters
from ammquote.market.types import MarketSnapshot as MarketSnapshot
from ammquote.market.types import Option as Option
from ammquote.market.types import OptionKind as OptionKind
from ammquote.market.types import PricingParams as PricingParams
from ammquote.market.types import Strike as Strike
from ammquote.market.types import TradeLimitParams as TradeLimitParams
from ammquote.market.types import VarianceFeeParams as VarianceFeeParams
