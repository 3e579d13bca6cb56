"""Activity and workflow I/O for the quote service.

All types: @final @dataclass(frozen=True, slots=True). Outputs carry
exactly one of a result or an error so that a failed request is data, not
an activity failure that Temporal would retry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

from ammquote.core.errors import PricingError
from ammquote.events.types import TradeEvent, TradeEventData, TransferEvent
from ammquote.infra.config import DEFAULT_ITERATIONS
from ammquote.market.types import Market, MarketSnapshot, OptionKind
from ammquote.quote.types import Quote, QuoteOptions

# ---------------------------------------------------------------------------
# Activity I/O: quoting
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class QuoteRequest:
    """Quote `size` of (strike_id, kind) against the supplied snapshot."""

    snapshot: MarketSnapshot
    strike_id: int
    kind: OptionKind
    is_buy: bool
    size: int
    options: QuoteOptions = QuoteOptions()

    @property
    def instrument(self) -> str:
        return f"{self.snapshot.market.name}-{self.strike_id}-{self.kind.value}"


@final
@dataclass(frozen=True, slots=True)
class QuoteOutput:
    """Output of price_quote activity."""

    quote: Quote | None = None
    error: PricingError | None = None

    def __post_init__(self) -> None:
        if (self.quote is None) == (self.error is None):
            raise TypeError("QuoteOutput must have exactly one of quote or error")


# ---------------------------------------------------------------------------
# Activity I/O: reconstruction
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class ReconstructionInput:
    market: Market
    trade: TradeEvent
    transfers: tuple[TransferEvent, ...]
    timestamp: int


@final
@dataclass(frozen=True, slots=True)
class ReconstructionOutput:
    """Output of reconstruct_trade_activity. record_hash is the content hash of result."""

    result: TradeEventData | None = None
    record_hash: str | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if (self.result is None) == (self.error is None):
            raise TypeError("ReconstructionOutput must have exactly one of result or error")
        if (self.result is None) != (self.record_hash is None):
            raise TypeError("ReconstructionOutput.record_hash accompanies a result")


# ---------------------------------------------------------------------------
# Workflow I/O: reconciliation
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class ReconciliationInput:
    """An executed trade and the market state it traded against.

    tolerance is the largest absolute premium or fee difference (fixed
    point) still reported as a match.
    """

    snapshot: MarketSnapshot
    trade: TradeEvent
    transfers: tuple[TransferEvent, ...]
    timestamp: int
    iterations: int = DEFAULT_ITERATIONS
    tolerance: int = 0

    def __post_init__(self) -> None:
        if self.tolerance < 0:
            raise TypeError(f"ReconciliationInput.tolerance must be >= 0, got {self.tolerance}")


@final
@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    """On-chain trade versus off-chain quote. Differences are quote minus chain."""

    transaction_hash: str
    position_id: int
    matched: bool
    premium_difference: int = 0
    fee_difference: int = 0
    record: TradeEventData | None = None
    record_hash: str | None = None
    quote: Quote | None = None
    error: str | None = None
