"""Durable workflow reconciling an executed trade against an off-chain quote.

Steps: reconstruct the on-chain trade -> re-price it against the pre-trade
snapshot with the same direction, size and force-close flag -> compare.

Determinism contract: this module contains NO I/O, NO randomness,
NO system clock access, NO mutable globals. All work is delegated to
Activities.
"""

from __future__ import annotations

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from ammquote.events.types import TradeEventData
    from ammquote.infra.config import ActivityTimeouts
    from ammquote.market.types import OptionKind
    from ammquote.quote.types import Quote, QuoteOptions
    from ammquote.workflow.activities import price_quote, reconstruct_trade_activity
    from ammquote.workflow.types import (
        QuoteRequest,
        ReconciliationInput,
        ReconciliationResult,
        ReconstructionInput,
    )

TIMEOUTS = ActivityTimeouts()

# Both activities are deterministic over their input; a retry cannot help.
NO_RETRY = RetryPolicy(maximum_attempts=1)


def compare(
    record: TradeEventData, quote: Quote, tolerance: int,
) -> tuple[int, int, bool]:
    """(premium_difference, fee_difference, matched), differences as quote minus chain."""
    premium_difference = quote.premium - record.premium
    fee_difference = quote.fee - record.fee
    matched = (
        not quote.is_disabled
        and abs(premium_difference) <= tolerance
        and abs(fee_difference) <= tolerance
    )
    return premium_difference, fee_difference, matched


@workflow.defn(name="TradeReconciliation")
class TradeReconciliationWorkflow:
    """Reconstruct one trade and check the AMM would have charged the same.

    Invariants maintained:
    - Every input reaches exactly one ReconciliationResult
    - A result with an error is never reported as matched
    """

    def __init__(self) -> None:
        self._status: str = "RECEIVED"

    @workflow.query
    def get_status(self) -> str:
        """Current workflow phase."""
        return self._status

    @workflow.run
    async def run(self, inp: ReconciliationInput) -> ReconciliationResult:
        trade = inp.trade

        # --- Step 1: Reconstruct ---
        self._status = "RECONSTRUCTING"
        reconstructed = await workflow.execute_activity(
            reconstruct_trade_activity,
            ReconstructionInput(
                market=inp.snapshot.market,
                trade=trade,
                transfers=inp.transfers,
                timestamp=inp.timestamp,
            ),
            start_to_close_timeout=TIMEOUTS.reconstruct_trade,
            retry_policy=NO_RETRY,
        )
        if reconstructed.error is not None:
            self._status = "FAILED"
            return ReconciliationResult(
                transaction_hash=trade.transaction_hash,
                position_id=trade.position_id,
                matched=False,
                error=f"Reconstruction failed: {reconstructed.error}",
            )
        record = reconstructed.result
        assert record is not None  # guaranteed when error is None
        record_hash = reconstructed.record_hash

        # --- Step 2: Re-price ---
        self._status = "PRICING"
        priced = await workflow.execute_activity(
            price_quote,
            QuoteRequest(
                snapshot=inp.snapshot,
                strike_id=trade.strike_id,
                kind=OptionKind.CALL if record.is_call else OptionKind.PUT,
                is_buy=record.is_buy,
                size=record.size,
                options=QuoteOptions(
                    is_force_close=record.is_force_close, iterations=inp.iterations,
                ),
            ),
            start_to_close_timeout=TIMEOUTS.price_quote,
            retry_policy=NO_RETRY,
        )
        if priced.error is not None:
            self._status = "FAILED"
            return ReconciliationResult(
                transaction_hash=trade.transaction_hash,
                position_id=trade.position_id,
                matched=False,
                record=record,
                record_hash=record_hash,
                error=f"Pricing failed: {priced.error.message}",
            )
        quote = priced.quote
        assert quote is not None

        # --- Step 3: Compare ---
        premium_difference, fee_difference, matched = compare(record, quote, inp.tolerance)
        if not matched:
            workflow.logger.warning(
                "Trade %s position %d mismatch: premium diff %d, fee diff %d, disabled %s",
                trade.transaction_hash,
                trade.position_id,
                premium_difference,
                fee_difference,
                quote.disabled_reason,
            )
        self._status = "DONE"
        return ReconciliationResult(
            transaction_hash=trade.transaction_hash,
            position_id=trade.position_id,
            matched=matched,
            premium_difference=premium_difference,
            fee_difference=fee_difference,
            record=record,
            record_hash=record_hash,
            quote=quote,
        )
