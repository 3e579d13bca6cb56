"""Raw log dicts to typed TradeEvent / TransferEvent records.

Input is an already ABI-decoded log: numeric fields may be ints, decimal
strings or 0x-prefixed hex strings. Parsing is total: it returns Ok or an
Err listing every violation, and never raises.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum

from ammquote.core.errors import FieldViolation, InvalidArgumentError, invalid_argument
from ammquote.core.result import Err, Ok
from ammquote.events.types import (
    LiquidationInfo,
    OptionType,
    TradeDirection,
    TradeEvent,
    TradeParameters,
    TradeResult,
    TransferEvent,
)
from ammquote.quote.types import VarianceFeeComponents, VegaUtilFeeComponents

_VEGA_UTIL_FIELDS = (
    "pre_trade_amm_net_std_vega",
    "post_trade_amm_net_std_vega",
    "vega_util",
    "vol_traded",
    "nav",
    "vega_util_fee",
)
_VARIANCE_FIELDS = (
    "variance_fee_coefficient",
    "vega",
    "vega_coefficient",
    "skew",
    "skew_coefficient",
    "iv_variance",
    "iv_variance_coefficient",
    "variance_fee",
)
_TRADE_RESULT_INT_FIELDS = (
    "amount",
    "premium",
    "option_price_fee",
    "spot_price_fee",
    "total_fee",
    "total_cost",
    "vol_traded",
    "new_base_iv",
    "new_skew",
)
_TRADE_INT_FIELDS = ("amount", "expiry", "strike_price", "spot_price", "set_collateral_to")
_LIQUIDATION_INT_FIELDS = (
    "return_collateral",
    "lp_premiums",
    "lp_fee",
    "liquidator_fee",
    "sm_fee",
    "insolvent_amount",
)


def _parse_int(val: object) -> int | None:
    if isinstance(val, bool):
        return None
    if isinstance(val, int):
        return val
    if isinstance(val, str):
        text = val.strip()
        negative = text.startswith("-")
        digits = text[1:] if negative else text
        try:
            if digits[:2].lower() == "0x":
                parsed = int(digits[2:], 16)
            else:
                parsed = int(digits, 10)
        except ValueError:
            return None
        return -parsed if negative else parsed
    return None


class _Fields:
    """Accumulates violations while extracting fields under a path prefix."""

    def __init__(self, raw: Mapping[str, object], prefix: str, violations: list[FieldViolation]) -> None:
        self._raw = raw
        self._prefix = prefix
        self._violations = violations

    def _path(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def _fail(self, key: str, constraint: str) -> None:
        self._violations.append(FieldViolation(
            path=self._path(key), constraint=constraint, actual_value=repr(self._raw.get(key)),
        ))

    def int_(self, key: str, *, non_negative: bool = False) -> int:
        val = _parse_int(self._raw.get(key))
        if val is None:
            self._fail(key, "required integer (int, decimal or 0x-hex string)")
            return 0
        if non_negative and val < 0:
            self._fail(key, "must be >= 0")
        return val

    def str_(self, key: str) -> str:
        val = self._raw.get(key)
        if isinstance(val, str) and val:
            return val
        self._fail(key, "required non-empty string")
        return ""

    def bool_(self, key: str) -> bool:
        val = self._raw.get(key)
        if isinstance(val, bool):
            return val
        self._fail(key, "required bool")
        return False

    def mapping(self, key: str) -> Mapping[str, object]:
        val = self._raw.get(key)
        if isinstance(val, Mapping):
            return val
        self._fail(key, "required object")
        return {}

    def sequence(self, key: str) -> Sequence[object]:
        val = self._raw.get(key)
        if isinstance(val, Sequence) and not isinstance(val, (str, bytes)):
            return val
        self._fail(key, "required list")
        return ()

    def enum_[E: Enum](self, key: str, enum_type: type[E], constraint: str) -> E | None:
        try:
            return enum_type(_parse_int(self._raw.get(key)))
        except ValueError:
            self._fail(key, constraint)
            return None

    def child(self, raw: Mapping[str, object], key: str) -> _Fields:
        return _Fields(raw, f"{self._path(key)}.", self._violations)


def _parse_trade_parameters(f: _Fields) -> TradeParameters | None:
    option_type = f.enum_("option_type", OptionType, "must be 0..4")
    direction = f.enum_(
        "trade_direction", TradeDirection, "must be 0 (open), 1 (close) or 2 (liquidate)",
    )
    ints = {k: f.int_(k, non_negative=True) for k in _TRADE_INT_FIELDS}
    is_force_close = f.bool_("is_force_close")
    if option_type is None or direction is None:
        return None
    return TradeParameters(
        option_type=option_type,
        trade_direction=direction,
        is_force_close=is_force_close,
        **ints,
    )


def _parse_trade_result(f: _Fields) -> TradeResult:
    ints = {k: f.int_(k) for k in _TRADE_RESULT_INT_FIELDS}
    vega_util = f.child(f.mapping("vega_util_fee"), "vega_util_fee")
    variance = f.child(f.mapping("variance_fee"), "variance_fee")
    return TradeResult(
        vega_util_fee=VegaUtilFeeComponents(**{k: vega_util.int_(k) for k in _VEGA_UTIL_FIELDS}),
        variance_fee=VarianceFeeComponents(**{k: variance.int_(k) for k in _VARIANCE_FIELDS}),
        **ints,
    )


def _parse_liquidation(f: _Fields) -> LiquidationInfo:
    return LiquidationInfo(
        reward_beneficiary=f.str_("reward_beneficiary"),
        caller=f.str_("caller"),
        **{k: f.int_(k) for k in _LIQUIDATION_INT_FIELDS},
    )


def parse_trade_event(raw: Mapping[str, object]) -> Ok[TradeEvent] | Err[InvalidArgumentError]:
    """Parse a decoded Trade log into a TradeEvent."""
    violations: list[FieldViolation] = []
    f = _Fields(raw, "", violations)

    transaction_hash = f.str_("transaction_hash")
    block_number = f.int_("block_number", non_negative=True)
    log_index = f.int_("log_index", non_negative=True)
    trader = f.str_("trader")
    position_id = f.int_("position_id", non_negative=True)
    strike_id = f.int_("strike_id", non_negative=True)

    trade = _parse_trade_parameters(f.child(f.mapping("trade"), "trade"))

    results_raw = f.sequence("trade_results")
    if not results_raw and isinstance(raw.get("trade_results"), (list, tuple)):
        violations.append(FieldViolation(
            path="trade_results", constraint="must contain at least one fill", actual_value="[]",
        ))
    results: list[TradeResult] = []
    for i, item in enumerate(results_raw):
        if not isinstance(item, Mapping):
            violations.append(FieldViolation(
                path=f"trade_results[{i}]", constraint="required object", actual_value=repr(item),
            ))
            continue
        results.append(_parse_trade_result(_Fields(item, f"trade_results[{i}].", violations)))

    liquidation: LiquidationInfo | None = None
    if raw.get("liquidation") is not None:
        liquidation = _parse_liquidation(f.child(f.mapping("liquidation"), "liquidation"))

    if violations or trade is None:
        return Err(invalid_argument("parser.parse_trade_event", "INVALID_TRADE_EVENT", *violations))

    return Ok(TradeEvent(
        transaction_hash=transaction_hash,
        block_number=block_number,
        log_index=log_index,
        trader=trader,
        position_id=position_id,
        strike_id=strike_id,
        trade=trade,
        trade_results=tuple(results),
        liquidation=liquidation,
    ))


def parse_transfer_event(raw: Mapping[str, object]) -> Ok[TransferEvent] | Err[InvalidArgumentError]:
    """Parse a decoded position-token Transfer log into a TransferEvent."""
    violations: list[FieldViolation] = []
    f = _Fields(raw, "", violations)

    transaction_hash = f.str_("transaction_hash")
    block_number = f.int_("block_number", non_negative=True)
    log_index = f.int_("log_index", non_negative=True)
    from_address = f.str_("from_address")
    to_address = f.str_("to_address")
    token_id = f.int_("token_id", non_negative=True)

    if violations:
        return Err(invalid_argument(
            "parser.parse_transfer_event", "INVALID_TRANSFER_EVENT", *violations,
        ))
    return Ok(TransferEvent(
        transaction_hash=transaction_hash,
        block_number=block_number,
        log_index=log_index,
        from_address=from_address,
        to_address=to_address,
        token_id=token_id,
    ))
