"""Tests for present value, sensitivities and price classification."""

from __future__ import annotations

import numpy as np
import pytest

from bondyield.bond.pricing import (
    PriceRegime,
    classify_price,
    convexity,
    current_yield,
    macaulay_duration,
    modified_duration,
    premium_discount_percent,
    present_value,
    present_value_derivative,
    price_and_derivative,
    price_from_yield,
)
from bondyield.bond.schedule import CashFlowSchedule, InvalidBondInput


@pytest.fixture()
def ten_year() -> CashFlowSchedule:
    """10y semi-annual 5% bond with 1000 face."""
    return CashFlowSchedule(face_value=1000.0, coupon_rate=5.0, payments_per_year=2, years=10)


class TestPresentValue:
    def test_par_when_rate_equals_coupon(self) -> None:
        assert present_value(0.025, 25.0, 20, 1000.0) == pytest.approx(1000.0, rel=1e-12)

    def test_zero_rate_is_undiscounted_sum(self) -> None:
        assert present_value(0.0, 25.0, 4, 1000.0) == pytest.approx(1100.0)

    def test_single_period(self) -> None:
        assert present_value(0.1, 10.0, 1, 100.0) == pytest.approx(100.0)

    def test_derivative_matches_finite_difference(self) -> None:
        h = 1e-6
        numeric = (
            present_value(0.03 + h, 25.0, 20, 1000.0) - present_value(0.03 - h, 25.0, 20, 1000.0)
        ) / (2 * h)
        assert present_value_derivative(0.03, 25.0, 20, 1000.0) == pytest.approx(numeric, rel=1e-6)

    def test_paired_evaluation_matches_separate_calls(self) -> None:
        price, deriv = price_and_derivative(0.04, 30.0, 12, 1020.0)
        assert price == pytest.approx(present_value(0.04, 30.0, 12, 1020.0))
        assert deriv == pytest.approx(present_value_derivative(0.04, 30.0, 12, 1020.0))

    def test_strictly_decreasing_in_rate(self) -> None:
        rates = np.linspace(-0.3, 1.0, 27)
        prices = np.array([present_value(r, 25.0, 20, 1000.0) for r in rates])
        assert np.all(np.diff(prices) < 0)

    def test_decreasing_for_zero_coupon(self) -> None:
        assert present_value(0.01, 0.0, 10, 1000.0) > present_value(0.02, 0.0, 10, 1000.0)

    @pytest.mark.parametrize(
        "rate, coupon, periods, redemption",
        [
            (-1.0, 25.0, 20, 1000.0),
            (0.02, 25.0, 0, 1000.0),
            (0.02, 25.0, 2.5, 1000.0),
            (0.02, -1.0, 20, 1000.0),
            (0.02, 25.0, 20, -5.0),
        ],
    )
    def test_invalid_inputs(self, rate, coupon, periods, redemption) -> None:
        with pytest.raises(InvalidBondInput):
            present_value(rate, coupon, periods, redemption)


class TestPriceFromYield:
    def test_par(self, ten_year: CashFlowSchedule) -> None:
        assert price_from_yield(ten_year, 5.0) == pytest.approx(1000.0)

    def test_discount_above_coupon(self, ten_year: CashFlowSchedule) -> None:
        assert price_from_yield(ten_year, 6.0) < 1000.0

    def test_call_redemption(self, ten_year: CashFlowSchedule) -> None:
        called = ten_year.to_call(3, 1020.0)
        expected = present_value(0.025, 25.0, 6, 1020.0)
        assert price_from_yield(called, 5.0) == pytest.approx(expected)


class TestDuration:
    def test_zero_coupon_macaulay_equals_maturity(self) -> None:
        zero = CashFlowSchedule(1000.0, 0.0, 2, 5)
        assert macaulay_duration(zero, 4.0) == pytest.approx(5.0)

    def test_macaulay_below_maturity_for_coupon_bond(self, ten_year: CashFlowSchedule) -> None:
        assert 0 < macaulay_duration(ten_year, 5.0) < 10

    def test_modified_from_macaulay(self, ten_year: CashFlowSchedule) -> None:
        assert modified_duration(ten_year, 6.0) == pytest.approx(
            macaulay_duration(ten_year, 6.0) / 1.03
        )

    def test_modified_matches_price_sensitivity(self, ten_year: CashFlowSchedule) -> None:
        h = 1e-4  # percent
        price = price_from_yield(ten_year, 6.0)
        slope = (price_from_yield(ten_year, 6.0 + h) - price_from_yield(ten_year, 6.0 - h)) / (
            2 * h / 100.0
        )
        assert modified_duration(ten_year, 6.0) == pytest.approx(-slope / price, rel=1e-5)

    def test_convexity_matches_second_difference(self, ten_year: CashFlowSchedule) -> None:
        h = 0.01  # percent
        price = price_from_yield(ten_year, 6.0)
        up = price_from_yield(ten_year, 6.0 + h)
        down = price_from_yield(ten_year, 6.0 - h)
        numeric = (up + down - 2 * price) / ((h / 100.0) ** 2 * price)
        assert convexity(ten_year, 6.0) == pytest.approx(numeric, rel=1e-4)


class TestCurrentYieldAndClassification:
    def test_current_yield(self, ten_year: CashFlowSchedule) -> None:
        assert current_yield(ten_year, 950.0) == pytest.approx(50.0 / 950.0 * 100.0)

    def test_current_yield_rejects_non_positive_price(self, ten_year: CashFlowSchedule) -> None:
        with pytest.raises(InvalidBondInput):
            current_yield(ten_year, 0.0)

    def test_premium_discount_percent(self) -> None:
        assert premium_discount_percent(1050.0, 1000.0) == pytest.approx(5.0)
        assert premium_discount_percent(950.0, 1000.0) == pytest.approx(-5.0)

    @pytest.mark.parametrize(
        "price, regime",
        [
            (1050.0, PriceRegime.PREMIUM),
            (950.0, PriceRegime.DISCOUNT),
            (1000.0, PriceRegime.PAR),
        ],
    )
    def test_classify_price(self, price: float, regime: PriceRegime) -> None:
        assert classify_price(price, 1000.0) is regime
