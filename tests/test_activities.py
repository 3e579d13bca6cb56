"""Tests for ammquote.workflow.activities -- run outside a worker."""

from __future__ import annotations

import pytest
from builders import NOW, make_market, make_snapshot, make_trade_event, make_transfer
from temporalio.testing import ActivityEnvironment

from ammquote.core.fixed_point import UNIT
from ammquote.core.result import unwrap
from ammquote.core.serialization import content_hash
from ammquote.core.types import UtcDatetime
from ammquote.market.types import OptionKind
from ammquote.quote.types import QuoteOptions
from ammquote.workflow.activities import price_quote, reconstruct_trade_activity
from ammquote.workflow.types import QuoteRequest, ReconstructionInput, ReconstructionOutput

_BUYER = "0x2222222222222222222222222222222222222222"


def _request(strike_id: int = 1, size: int = UNIT, iterations: int = 1) -> QuoteRequest:
    return QuoteRequest(
        snapshot=make_snapshot(),
        strike_id=strike_id,
        kind=OptionKind.CALL,
        is_buy=True,
        size=size,
        options=QuoteOptions(iterations=iterations),
    )


class TestPriceQuote:
    @pytest.mark.asyncio
    async def test_quote(self) -> None:
        out = await ActivityEnvironment().run(price_quote, _request())
        assert out.error is None
        assert out.quote is not None
        assert out.quote.premium > 0

    @pytest.mark.asyncio
    async def test_unknown_strike(self) -> None:
        out = await ActivityEnvironment().run(price_quote, _request(strike_id=999))
        assert out.quote is None
        assert out.error is not None
        assert out.error.code == "UNKNOWN_STRIKE"
        assert out.error.instrument == "ETH-999-Call"
        assert out.error.timestamp == UtcDatetime.from_timestamp(NOW)

    @pytest.mark.asyncio
    async def test_invalid_request_is_data(self) -> None:
        out = await ActivityEnvironment().run(price_quote, _request(size=-1, iterations=0))
        assert out.error is not None
        assert out.error.code == "INVALID_QUOTE_REQUEST"
        assert "options.iterations" in out.error.reason
        assert "size" in out.error.reason


class TestReconstructTradeActivity:
    @pytest.mark.asyncio
    async def test_reconstruct(self) -> None:
        inp = ReconstructionInput(
            market=make_market(),
            trade=make_trade_event(),
            transfers=(make_transfer(_BUYER),),
            timestamp=NOW,
        )
        out = await ActivityEnvironment().run(reconstruct_trade_activity, inp)
        assert out.error is None
        assert out.result is not None
        assert out.result.trader == _BUYER
        assert out.result.timestamp == NOW
        assert out.record_hash == unwrap(content_hash(out.result))


class TestReconstructionOutput:
    def test_hash_requires_result(self) -> None:
        with pytest.raises(TypeError, match="record_hash"):
            ReconstructionOutput(error="bad log", record_hash="00")
