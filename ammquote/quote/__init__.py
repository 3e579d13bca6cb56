"""ammquote.quote -- AMM quote engine: iteration step, disablement, aggregation."""

from ammquote.quote.disabled import (
    disabled_reason as disabled_reason,
)
from ammquote.quote.engine import (
    break_even_price as break_even_price,
)
from ammquote.quote.engine import (
    create_quote as create_quote,
)
from ammquote.quote.engine import (
    quote_bid_ask as quote_bid_ask,
)
from ammquote.quote.engine import (
    split_size as split_size,
)
from ammquote.quote.iteration import (
    quote_iteration as quote_iteration,
)
from ammquote.quote.protocols import (
    GreeksModel as GreeksModel,
)
from ammquote.quote.protocols import (
    QuoteIterationStep as QuoteIterationStep,
)
from ammquote.quote.types import (
    BidAsk as BidAsk,
)
from ammquote.quote.types import (
    FeeComponents as FeeComponents,
)
from ammquote.quote.types import (
    Quote as Quote,
)
from ammquote.quote.types import (
    QuoteDisabledReason as QuoteDisabledReason,
)
from ammquote.quote.types import (
    QuoteGreeks as QuoteGreeks,
)
from ammquote.quote.types import (
    QuoteIteration as QuoteIteration,
)
from ammquote.quote.types import (
    QuoteOptions as QuoteOptions,
)
from ammquote.quote.types import (
    VarianceFeeComponents as VarianceFeeComponents,
)
from ammquote.quote.types import (
    VegaUtilFeeComponents as VegaUtilFeeComponents,
)
from ammquote.quote.types import (
    VolState as VolState,
)
