"""Activity implementations for the quote service.

Activities are thin wrappers. All domain logic lives in the pure library
layer (ammquote.quote, ammquote.events); the market data arrives in the
activity input, so every activity is a pure function of its input.

Each activity:
- Is decorated with @activity.defn
- Takes a single frozen-dataclass input
- Returns a frozen-dataclass output (with optional error field)
"""

from __future__ import annotations

from temporalio import activity

from ammquote.core.errors import PricingError
from ammquote.core.result import Err, Ok
from ammquote.core.serialization import content_hash
from ammquote.core.types import UtcDatetime
from ammquote.events.reconstruct import reconstruct_trade
from ammquote.quote.engine import create_quote
from ammquote.workflow.types import (
    QuoteOutput,
    QuoteRequest,
    ReconstructionInput,
    ReconstructionOutput,
)


def _pricing_error(request: QuoteRequest, code: str, reason: str) -> PricingError:
    return PricingError(
        message=f"Cannot quote {request.instrument}: {reason}",
        code=code,
        timestamp=UtcDatetime.from_timestamp(request.snapshot.timestamp),
        source="activities.price_quote",
        instrument=request.instrument,
        reason=reason,
    )


# ---------------------------------------------------------------------------
# 1. price_quote
# ---------------------------------------------------------------------------


@activity.defn(name="price_quote")
async def price_quote(request: QuoteRequest) -> QuoteOutput:
    """Quote one option against the supplied snapshot.

    Timeout: 30s | Retries: 1 (deterministic -- no retry)
    """
    activity.logger.info(
        "Pricing %s %s size %d",
        "buy" if request.is_buy else "sell",
        request.instrument,
        request.size,
    )

    match request.snapshot.option(request.strike_id, request.kind):
        case Err(e):
            return QuoteOutput(error=_pricing_error(request, "UNKNOWN_STRIKE", e))
        case Ok(option):
            pass

    match create_quote(option, request.is_buy, request.size, request.options):
        case Err(e):
            return QuoteOutput(error=_pricing_error(request, e.code, e.message))
        case Ok(quote):
            return QuoteOutput(quote=quote)


# ---------------------------------------------------------------------------
# 2. reconstruct_trade_activity
# ---------------------------------------------------------------------------


@activity.defn(name="reconstruct_trade")
async def reconstruct_trade_activity(inp: ReconstructionInput) -> ReconstructionOutput:
    """Rebuild the canonical record of one Trade log.

    Timeout: 30s | Retries: 1
    """
    activity.logger.info(
        "Reconstructing trade %s (position %d) on %s",
        inp.trade.transaction_hash,
        inp.trade.position_id,
        inp.market.name,
    )
    try:
        record = reconstruct_trade(inp.market, inp.trade, inp.transfers, inp.timestamp)
    except (TypeError, ValueError) as exc:
        return ReconstructionOutput(error=str(exc))
    match content_hash(record):
        case Err(e):
            return ReconstructionOutput(error=e)
        case Ok(digest):
            return ReconstructionOutput(result=record, record_hash=digest)
