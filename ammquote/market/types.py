"""Market state mirrored from chain: markets, boards, strikes, option views.

A MarketSnapshot is one consistent, read-only picture of a market at an
observation timestamp. Boards and strikes are stored once in the snapshot
and referenced by id; an Option is a non-owning view (strike id + kind)
resolved through the snapshot on demand, so nothing holds a back-pointer
with its own lifetime.

All monetary and rate fields are fixed-point ints (UNIT = 10**18). Time
fields are unix seconds.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from decimal import Decimal, localcontext
from enum import Enum
from typing import final

from ammquote.core.fixed_point import DECIMAL_CONTEXT, UNIT
from ammquote.core.result import Err, Ok, sequence
from ammquote.core.types import FrozenMap
from ammquote.infra.config import SECONDS_PER_DAY, SECONDS_PER_YEAR


class OptionKind(Enum):
    """Call or put. The pricing formulas branch on this tag."""

    CALL = "Call"
    PUT = "Put"


# ---------------------------------------------------------------------------
# Market parameters
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class PricingParams:
    """Fee and IV-impact parameters of the option market pricer."""

    option_price_fee_coefficient: int
    option_price_fee_1x_point: int  # seconds to expiry
    option_price_fee_2x_point: int
    spot_price_fee_coefficient: int
    spot_price_fee_1x_point: int
    spot_price_fee_2x_point: int
    vega_fee_coefficient: int
    standard_size: int
    skew_adjustment_factor: int
    standard_vega_tenor: int = 30 * SECONDS_PER_DAY

    def __post_init__(self) -> None:
        if self.standard_size <= 0:
            raise TypeError(f"PricingParams.standard_size must be > 0, got {self.standard_size}")
        if self.option_price_fee_2x_point <= self.option_price_fee_1x_point:
            raise TypeError("PricingParams: option price fee 2x point must be after 1x point")
        if self.spot_price_fee_2x_point <= self.spot_price_fee_1x_point:
            raise TypeError("PricingParams: spot price fee 2x point must be after 1x point")
        if self.standard_vega_tenor <= 0:
            raise TypeError("PricingParams.standard_vega_tenor must be > 0")


@final
@dataclass(frozen=True, slots=True)
class TradeLimitParams:
    """Bounds checked by the disablement policy."""

    min_delta: int
    min_force_close_delta: int
    trading_cutoff: int  # seconds before expiry
    min_base_iv: int
    max_base_iv: int
    min_skew: int
    max_skew: int
    min_vol: int
    max_vol: int
    abs_min_skew: int
    abs_max_skew: int

    def __post_init__(self) -> None:
        if self.min_base_iv > self.max_base_iv:
            raise TypeError("TradeLimitParams: min_base_iv > max_base_iv")
        if self.min_skew > self.max_skew:
            raise TypeError("TradeLimitParams: min_skew > max_skew")
        if self.abs_min_skew > self.abs_max_skew:
            raise TypeError("TradeLimitParams: abs_min_skew > abs_max_skew")
        if self.min_vol > self.max_vol:
            raise TypeError("TradeLimitParams: min_vol > max_vol")


@final
@dataclass(frozen=True, slots=True)
class VarianceFeeParams:
    """Coefficients of the variance fee."""

    default_variance_fee_coefficient: int
    force_close_variance_fee_coefficient: int
    skew_adjustment_coefficient: int
    reference_skew: int
    minimum_static_skew_adjustment: int
    vega_coefficient: int
    minimum_static_vega: int
    iv_variance_coefficient: int
    minimum_static_iv_variance: int


@final
@dataclass(frozen=True, slots=True)
class ForceCloseParams:
    """Vol penalty applied to force-close trades."""

    iv_adjustment: int = UNIT

    def __post_init__(self) -> None:
        if self.iv_adjustment < UNIT:
            raise TypeError(f"ForceCloseParams.iv_adjustment must be >= UNIT, got {self.iv_adjustment}")


@final
@dataclass(frozen=True, slots=True)
class MarketParameters:
    pricing: PricingParams
    trade_limits: TradeLimitParams
    variance_fee: VarianceFeeParams
    force_close: ForceCloseParams = ForceCloseParams()


# ---------------------------------------------------------------------------
# Market, Board, Strike
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class Market:
    """One option market (one base asset).

    net_std_vega is the global net standardized vega of traders; the AMM
    holds the opposite exposure.
    """

    address: str
    name: str
    spot_price: int
    rate_and_carry: int
    net_std_vega: int
    nav: int
    free_liquidity: int
    params: MarketParameters

    def __post_init__(self) -> None:
        if not self.address:
            raise TypeError("Market.address must be non-empty")
        if self.spot_price <= 0:
            raise TypeError(f"Market.spot_price must be > 0, got {self.spot_price}")


@final
@dataclass(frozen=True, slots=True)
class Board:
    """All strikes sharing one expiry and one base IV."""

    board_id: int
    expiry: int
    base_iv: int
    variance_gwav_iv: int

    def time_to_expiry(self, now: int) -> int:
        """Seconds to expiry, floored at zero."""
        return max(self.expiry - now, 0)

    def time_to_expiry_annualized(self, now: int) -> Decimal:
        with localcontext(DECIMAL_CONTEXT):
            return Decimal(self.time_to_expiry(now)) / Decimal(SECONDS_PER_YEAR)

    def is_expired(self, now: int) -> bool:
        return self.time_to_expiry(now) <= 0

    def is_trading_cutoff(self, now: int, trading_cutoff: int) -> bool:
        return self.time_to_expiry(now) < trading_cutoff


@final
@dataclass(frozen=True, slots=True)
class CachedGreeks:
    """Per-kind Greeks last written by the greek cache."""

    delta: int
    theta: int
    rho: int


@final
@dataclass(frozen=True, slots=True)
class Strike:
    """One strike on a board. skew multiplies the board's base IV."""

    strike_id: int
    board_id: int
    strike_price: int
    skew: int
    vega: int
    gamma: int
    call: CachedGreeks
    put: CachedGreeks

    def __post_init__(self) -> None:
        if self.strike_price <= 0:
            raise TypeError(f"Strike.strike_price must be > 0, got {self.strike_price}")

    def cached(self, kind: OptionKind) -> CachedGreeks:
        return self.call if kind is OptionKind.CALL else self.put


# ---------------------------------------------------------------------------
# Snapshot and option view
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True)
class MarketSnapshot:
    """Read-only market state observed at `timestamp` (unix seconds)."""

    market: Market
    boards: FrozenMap[int, Board]
    strikes: FrozenMap[int, Strike]
    timestamp: int

    @staticmethod
    def create(
        market: Market,
        boards: Iterable[Board],
        strikes: Iterable[Strike],
        timestamp: int,
    ) -> Ok[MarketSnapshot] | Err[str]:
        """Index boards and strikes by id. Err if a strike names a missing board."""
        board_list = tuple(boards)
        strike_list = tuple(strikes)
        board_ids = {b.board_id for b in board_list}
        if len(board_ids) != len(board_list):
            return Err("MarketSnapshot: duplicate board_id")
        if len({s.strike_id for s in strike_list}) != len(strike_list):
            return Err("MarketSnapshot: duplicate strike_id")
        for s in strike_list:
            if s.board_id not in board_ids:
                return Err(f"MarketSnapshot: strike {s.strike_id} references unknown board {s.board_id}")
        match sequence((
            FrozenMap.create((b.board_id, b) for b in board_list),
            FrozenMap.create((s.strike_id, s) for s in strike_list),
        )):
            case Err(e):
                return Err(e)
            case Ok((board_map, strike_map)):
                pass
        return Ok(MarketSnapshot(
            market=market, boards=board_map, strikes=strike_map, timestamp=timestamp,
        ))

    def board(self, board_id: int) -> Board:
        return self.boards[board_id]

    def strike(self, strike_id: int) -> Strike:
        return self.strikes[strike_id]

    def option(self, strike_id: int, kind: OptionKind) -> Ok[Option] | Err[str]:
        if strike_id not in self.strikes:
            return Err(f"MarketSnapshot: unknown strike {strike_id}")
        return Ok(Option(snapshot=self, strike_id=strike_id, kind=kind))

    def options(self) -> Iterator[Option]:
        """Every (strike, kind) pair, strikes in id order, call before put."""
        for strike_id in self.strikes:
            yield Option(snapshot=self, strike_id=strike_id, kind=OptionKind.CALL)
            yield Option(snapshot=self, strike_id=strike_id, kind=OptionKind.PUT)


@final
@dataclass(frozen=True, slots=True)
class Option:
    """A call or put on one strike, viewed through a snapshot."""

    snapshot: MarketSnapshot
    strike_id: int
    kind: OptionKind

    def __post_init__(self) -> None:
        if self.strike_id not in self.snapshot.strikes:
            raise TypeError(f"Option: strike {self.strike_id} not in snapshot")

    def market(self) -> Market:
        return self.snapshot.market

    def strike(self) -> Strike:
        return self.snapshot.strike(self.strike_id)

    def board(self) -> Board:
        return self.snapshot.board(self.strike().board_id)

    @property
    def is_call(self) -> bool:
        return self.kind is OptionKind.CALL

    @property
    def delta(self) -> int:
        return self.strike().cached(self.kind).delta

    @property
    def theta(self) -> int:
        return self.strike().cached(self.kind).theta

    @property
    def rho(self) -> int:
        return self.strike().cached(self.kind).rho
