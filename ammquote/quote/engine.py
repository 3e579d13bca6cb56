"""Quote aggregation: split a trade into sub-trades and fold them.

create_quote() is pure. It validates the request, runs the iteration
step sequentially over N sub-sizes (each step's post-trade vol state is
the next step's input), applies the disablement policy to the final
state, and aggregates premium and fees into one Quote.
"""

from __future__ import annotations

from functools import reduce

from ammquote.core.errors import FieldViolation, InvalidArgumentError, invalid_argument
from ammquote.core.fixed_point import from_fixed, scaled_div, scaled_mul, to_fixed
from ammquote.core.result import Err, Ok
from ammquote.infra.config import QUOTE_MIN_LIQUIDITY
from ammquote.market.types import Option, OptionKind
from ammquote.pricing.black_scholes import black_scholes_greeks
from ammquote.quote.disabled import disabled_reason
from ammquote.quote.iteration import quote_iteration
from ammquote.quote.protocols import GreeksModel, QuoteIterationStep
from ammquote.quote.types import (
    BidAsk,
    FeeComponents,
    Quote,
    QuoteDisabledReason,
    QuoteGreeks,
    QuoteIteration,
    QuoteOptions,
    VolState,
)


def split_size(size: int, iterations: int) -> tuple[int, ...]:
    """size // iterations each; the last sub-size absorbs the remainder."""
    part = size // iterations
    return (part,) * (iterations - 1) + (size - part * (iterations - 1),)


def break_even_price(kind: OptionKind, strike_price: int, price_per_option: int) -> int:
    """Spot at expiry where a long position recovers its premium."""
    if kind is OptionKind.CALL:
        return strike_price + price_per_option
    return strike_price - price_per_option


def _validate(size: int, options: QuoteOptions) -> InvalidArgumentError | None:
    violations: list[FieldViolation] = []
    if options.iterations < 1:
        violations.append(FieldViolation(
            path="options.iterations", constraint="must be >= 1",
            actual_value=str(options.iterations),
        ))
    if size < 0:
        violations.append(FieldViolation(
            path="size", constraint="must be >= 0", actual_value=str(size),
        ))
    if violations:
        return invalid_argument("engine.create_quote", "INVALID_QUOTE_REQUEST", *violations)
    return None


def _disabled_quote(
    option: Option, is_buy: bool, size: int, reason: QuoteDisabledReason,
) -> Quote:
    """Zero monetary fields, cached Greeks, pre-trade iv. Never a force close."""
    board = option.board()
    strike = option.strike()
    return Quote(
        _option=option,
        is_buy=is_buy,
        size=size,
        price_per_option=0,
        premium=0,
        fee=0,
        fee_components=FeeComponents.ZERO,
        iv=scaled_mul(strike.skew, board.base_iv),
        greeks=QuoteGreeks(
            delta=option.delta,
            vega=strike.vega,
            gamma=strike.gamma,
            theta=option.theta,
            rho=option.rho,
        ),
        force_close_penalty=0,
        is_force_close=False,
        break_even=0,
        disabled_reason=reason,
        iterations=(),
    )


def create_quote(  # noqa: PLR0913
    option: Option,
    is_buy: bool,
    size: int,
    options: QuoteOptions = QuoteOptions(),
    *,
    step: QuoteIterationStep = quote_iteration,
    greeks_model: GreeksModel = black_scholes_greeks,
) -> Ok[Quote] | Err[InvalidArgumentError]:
    """Price buying (is_buy) or selling `size` of `option` against the AMM.

    Returns Err only for unusable requests (iterations < 1, negative size).
    A trade the AMM would refuse is still Ok, with disabled_reason set.
    """
    error = _validate(size, options)
    if error is not None:
        return Err(error)

    market = option.market()
    board = option.board()
    strike = option.strike()
    is_force_close = options.is_force_close

    def fold(
        acc: tuple[VolState, tuple[QuoteIteration, ...]], sub_size: int,
    ) -> tuple[VolState, tuple[QuoteIteration, ...]]:
        state, done = acc
        it = step(
            option,
            is_buy,
            sub_size,
            state.base_iv,
            state.skew,
            market.net_std_vega,
            state.amm_net_std_vega,
            is_force_close,
        )
        return it.next_state, (*done, it)

    initial = VolState(
        base_iv=board.base_iv,
        skew=strike.skew,
        amm_net_std_vega=-market.net_std_vega,
    )
    final_state, iterations = reduce(fold, split_size(size, options.iterations), (initial, ()))

    iv = scaled_mul(final_state.base_iv, final_state.skew)
    reason = disabled_reason(
        option,
        size,
        QUOTE_MIN_LIQUIDITY,
        iv,
        final_state.skew,
        final_state.base_iv,
        is_buy,
        is_force_close,
    )
    if reason is not None:
        return Ok(_disabled_quote(option, is_buy, size, reason))

    bs = greeks_model(
        board.time_to_expiry_annualized(option.snapshot.timestamp),
        from_fixed(iv),
        from_fixed(market.spot_price),
        from_fixed(strike.strike_price),
        from_fixed(market.rate_and_carry),
        option.kind,
    )

    premium = sum(it.premium for it in iterations)
    fee_components = FeeComponents.sum_of(it.fee_components for it in iterations)
    price_per_option = scaled_div(premium, size)

    return Ok(Quote(
        _option=option,
        is_buy=is_buy,
        size=size,
        price_per_option=price_per_option,
        premium=premium,
        fee=fee_components.total,
        fee_components=fee_components,
        iv=iv,
        greeks=QuoteGreeks(
            delta=to_fixed(bs.delta),
            vega=to_fixed(bs.vega),
            gamma=to_fixed(bs.gamma),
            theta=to_fixed(bs.theta),
            rho=to_fixed(bs.rho),
        ),
        force_close_penalty=sum(it.force_close_penalty for it in iterations),
        is_force_close=is_force_close,
        break_even=break_even_price(option.kind, strike.strike_price, price_per_option),
        disabled_reason=None,
        iterations=iterations,
    ))


def quote_bid_ask(
    option: Option, size: int, options: QuoteOptions = QuoteOptions(),
) -> Ok[BidAsk] | Err[InvalidArgumentError]:
    """Sell (bid) and buy (ask) quotes of the same option and size."""
    match create_quote(option, False, size, options):
        case Err() as e:
            return e
        case Ok(bid):
            pass
    match create_quote(option, True, size, options):
        case Err() as e:
            return e
        case Ok(ask):
            pass
    return Ok(BidAsk(bid=bid, ask=ask))
