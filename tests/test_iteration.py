"""Tests for ammquote.quote.iteration -- one sub-trade: IV impact, fees, premium."""

from __future__ import annotations

from builders import (
    NOW,
    fixed_amounts,
    make_board,
    make_market,
    make_option,
    make_snapshot,
    market_parameters,
    pricing_params,
    variance_fee_params,
)
from hypothesis import given

from ammquote.core.fixed_point import UNIT, from_fixed, from_units, scaled_mul, to_fixed
from ammquote.infra.config import SECONDS_PER_DAY
from ammquote.market.types import Option
from ammquote.pricing.black_scholes import option_price
from ammquote.quote.iteration import (
    iv_impact,
    quote_iteration,
    standardized_vega,
    time_weighted_fee,
    variance_fee,
    vega_util_fee,
)
from ammquote.quote.types import QuoteIteration

_BASE_IV = from_units("0.8")


def _iterate(
    option: Option,
    size: int,
    *,
    is_buy: bool = True,
    pre: int = 0,
    is_force_close: bool = False,
) -> QuoteIteration:
    return quote_iteration(
        option,
        is_buy,
        size,
        option.board().base_iv,
        option.strike().skew,
        option.market().net_std_vega,
        pre,
        is_force_close,
    )


class TestIvImpact:
    def test_standard_size_moves_one_percent(self) -> None:
        new_base_iv, new_skew = iv_impact(from_units("5"), _BASE_IV, UNIT, pricing_params(), True)
        assert new_base_iv == from_units("0.81")
        assert new_skew == from_units("1.0075")

    def test_sell_moves_down(self) -> None:
        new_base_iv, new_skew = iv_impact(from_units("5"), _BASE_IV, UNIT, pricing_params(), False)
        assert new_base_iv == from_units("0.79")
        assert new_skew == from_units("0.9925")

    def test_zero_size_no_move(self) -> None:
        assert iv_impact(0, _BASE_IV, UNIT, pricing_params(), True) == (_BASE_IV, UNIT)


class TestTimeWeightedFee:
    def test_flat_inside_1x_point(self) -> None:
        assert time_weighted_fee(100, 1000, 2000, UNIT) == UNIT
        assert time_weighted_fee(1000, 1000, 2000, UNIT) == UNIT

    def test_linear_to_double(self) -> None:
        assert time_weighted_fee(1500, 1000, 2000, UNIT) == from_units("1.5")
        assert time_weighted_fee(2000, 1000, 2000, UNIT) == 2 * UNIT


class TestStandardizedVega:
    def test_at_standard_tenor_is_vega(self) -> None:
        tenor = 30 * SECONDS_PER_DAY
        assert standardized_vega(from_units("171"), tenor, tenor) == from_units("171")

    def test_scales_with_root_time(self) -> None:
        tenor = 30 * SECONDS_PER_DAY
        assert standardized_vega(from_units("10"), tenor // 4, tenor) == from_units("20")

    def test_expired_is_zero(self) -> None:
        assert standardized_vega(from_units("10"), 0, 30 * SECONDS_PER_DAY) == 0


class TestVegaUtilFee:
    def test_zero_when_exposure_shrinks(self) -> None:
        comps = vega_util_fee(-from_units("100"), -from_units("50"), _BASE_IV, UNIT, UNIT, UNIT)
        assert comps.vega_util_fee == 0
        assert comps.vega_util == 0

    def test_zero_without_nav(self) -> None:
        comps = vega_util_fee(0, -from_units("50"), _BASE_IV, 0, UNIT, UNIT)
        assert comps.vega_util_fee == 0

    def test_charged_when_exposure_grows(self) -> None:
        comps = vega_util_fee(0, -from_units("50"), _BASE_IV, from_units("1000"), from_units("2"), UNIT)
        # vega_util = 0.8 * 50 / 1000 = 0.04; fee = 2 * 0.04 * 1
        assert comps.vega_util == from_units("0.04")
        assert comps.vega_util_fee == from_units("0.08")
        assert comps.post_trade_amm_net_std_vega == -from_units("50")


class TestVarianceFee:
    def test_zero_coefficient_zero_fee(self) -> None:
        params = variance_fee_params(default_variance_fee_coefficient=0)
        comps = variance_fee(from_units("171"), UNIT, _BASE_IV, _BASE_IV, params, False, UNIT)
        assert comps.variance_fee == 0
        assert comps.variance_fee_coefficient == 0

    def test_product_of_coefficients(self) -> None:
        params = variance_fee_params(
            default_variance_fee_coefficient=UNIT,
            vega_coefficient=0,
            minimum_static_vega=UNIT,
            skew_adjustment_coefficient=0,
            iv_variance_coefficient=0,
        )
        comps = variance_fee(from_units("171"), UNIT, _BASE_IV, _BASE_IV, params, False, from_units("3"))
        assert comps.variance_fee == from_units("3")

    def test_force_close_coefficient(self) -> None:
        params = variance_fee_params()
        comps = variance_fee(from_units("171"), UNIT, _BASE_IV, _BASE_IV, params, True, UNIT)
        assert comps.variance_fee_coefficient == params.force_close_variance_fee_coefficient

    def test_coefficients_follow_distance_from_reference(self) -> None:
        params = variance_fee_params()
        comps = variance_fee(
            from_units("100"), from_units("1.2"), from_units("0.9"), _BASE_IV, params, False, UNIT,
        )
        # vega_coef = 0 + 100 * 0.01; skew_coef = 1 + |1.2 - 1| * 1; iv_var_coef = 1 + |0.8 - 0.9| * 1
        assert comps.vega_coefficient == UNIT
        assert comps.skew_coefficient == from_units("1.2")
        assert comps.iv_variance == from_units("0.1")
        assert comps.iv_variance_coefficient == from_units("1.1")
        assert comps.variance_fee == scaled_mul(
            scaled_mul(scaled_mul(from_units("0.5"), UNIT), from_units("1.2")), from_units("1.1"),
        )


class TestQuoteIteration:
    def test_buy_premium_is_price_plus_fees(self) -> None:
        option = make_option()
        size = from_units("5")
        it = _iterate(option, size)
        assert it.new_base_iv == from_units("0.81")
        assert it.vol_traded == scaled_mul(it.new_base_iv, it.new_skew)
        price = to_fixed(option_price(
            option.board().time_to_expiry_annualized(NOW),
            from_fixed(it.vol_traded),
            from_fixed(option.market().spot_price),
            from_fixed(option.strike().strike_price),
            from_fixed(option.market().rate_and_carry),
            option.kind,
        ))
        assert it.premium == scaled_mul(price, size) + it.fee
        assert it.force_close_penalty == 0

    def test_fee_is_sum_of_components(self) -> None:
        it = _iterate(make_option(), from_units("3"))
        assert it.fee == (
            it.option_price_fee
            + it.spot_price_fee
            + it.vega_util_fee.vega_util_fee
            + it.variance_fee.variance_fee
        )
        assert it.fee > 0

    def test_buy_shortens_amm_vega(self) -> None:
        it = _iterate(make_option(), UNIT)
        assert it.post_trade_amm_net_std_vega < 0
        assert it.vega_util_fee.vega_util_fee > 0

    def test_sell_reducing_amm_short_pays_no_vega_fee(self) -> None:
        it = _iterate(make_option(), UNIT, is_buy=False, pre=-from_units("1000"))
        assert it.post_trade_amm_net_std_vega > -from_units("1000")
        assert it.vega_util_fee.vega_util_fee == 0

    def test_sell_premium_never_negative(self) -> None:
        # Far out of the money: the option is worth less than the fees.
        option = make_option(strike_id=3)
        it = _iterate(option, UNIT, is_buy=False)
        assert it.premium >= 0

    def test_spot_fee_time_weighted_beyond_1x_point(self) -> None:
        long_board = make_board(expiry=NOW + 9 * 7 * SECONDS_PER_DAY)
        long_option = make_option(make_snapshot(board=long_board))
        short_option = make_option()
        spot_fee_long = _iterate(long_option, UNIT).spot_price_fee
        spot_fee_short = _iterate(short_option, UNIT).spot_price_fee
        # 9 weeks sits halfway between the 6 and 12 week points.
        assert spot_fee_short == scaled_mul(from_units("0.001"), from_units("1500"))
        assert spot_fee_long == scaled_mul(from_units("0.0015"), from_units("1500"))

    def test_force_close_buy_prices_at_higher_vol(self) -> None:
        option = make_option()
        normal = _iterate(option, UNIT)
        forced = _iterate(option, UNIT, is_force_close=True)
        assert forced.force_close_penalty > 0
        assert forced.premium > normal.premium
        assert forced.vol_traded == normal.vol_traded

    def test_force_close_sell_prices_at_lower_vol(self) -> None:
        option = make_option()
        normal = _iterate(option, UNIT, is_buy=False)
        forced = _iterate(option, UNIT, is_buy=False, is_force_close=True)
        assert forced.force_close_penalty > 0
        assert forced.premium < normal.premium

    def test_no_penalty_without_adjustment(self) -> None:
        snap = make_snapshot(market=make_market(params=market_parameters(iv_adjustment=UNIT)))
        forced = _iterate(make_option(snap), UNIT, is_force_close=True)
        assert forced.force_close_penalty == 0

    def test_expired_board_prices_intrinsic(self) -> None:
        option = make_option(make_snapshot(board=make_board(expiry=NOW)))
        it = _iterate(option, UNIT)
        # ATM intrinsic is zero; the buyer pays fees only.
        assert it.premium == it.fee
        assert it.post_trade_amm_net_std_vega == 0

    @given(fixed_amounts())
    def test_pure(self, size: int) -> None:
        option = make_option()
        assert _iterate(option, size) == _iterate(option, size)
