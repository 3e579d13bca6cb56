"""ammquote.events -- trade/transfer log records and trade reconstruction."""

from ammquote.events.ordering import (
    latest_event as latest_event,
)
from ammquote.events.ordering import (
    sort_events as sort_events,
)
from ammquote.events.parser import (
    parse_trade_event as parse_trade_event,
)
from ammquote.events.parser import (
    parse_transfer_event as parse_transfer_event,
)
from ammquote.events.reconstruct import (
    reconstruct_trade as reconstruct_trade,
)
from ammquote.events.reconstruct import (
    reconstruct_trades as reconstruct_trades,
)
from ammquote.events.reconstruct import (
    resolve_trader as resolve_trader,
)
from ammquote.events.reconstruct import (
    trades_for_trader as trades_for_trader,
)
from ammquote.events.types import (
    NOT_APPLICABLE as NOT_APPLICABLE,
)
from ammquote.events.types import (
    CollateralTarget as CollateralTarget,
)
from ammquote.events.types import (
    LiquidationInfo as LiquidationInfo,
)
from ammquote.events.types import (
    NotApplicable as NotApplicable,
)
from ammquote.events.types import (
    OptionType as OptionType,
)
from ammquote.events.types import (
    TradeDirection as TradeDirection,
)
from ammquote.events.types import (
    TradeEvent as TradeEvent,
)
from ammquote.events.types import (
    TradeEventData as TradeEventData,
)
from ammquote.events.types import (
    TradeParameters as TradeParameters,
)
from ammquote.events.types import (
    TradeResult as TradeResult,
)
from ammquote.events.types import (
    TransferEvent as TransferEvent,
)
