"""Present value, price sensitivities and price classification."""

from __future__ import annotations

from enum import Enum
from typing import Tuple

import numpy as np

from bondyield.bond.schedule import CashFlowSchedule, InvalidBondInput, _require_positive


class PriceRegime(Enum):
    """Where a bond trades relative to its face value."""

    PREMIUM = "PREMIUM"
    DISCOUNT = "DISCOUNT"
    PAR = "PAR"


def _validate_pv_inputs(rate: float, coupon: float, periods: int, redemption: float) -> None:
    if not rate > -1.0:
        raise InvalidBondInput(f"periodic rate must be greater than -100%, got {rate!r}")
    if isinstance(periods, bool) or int(periods) != periods or periods < 1:
        raise InvalidBondInput(f"periods must be a positive integer, got {periods!r}")
    if coupon < 0:
        raise InvalidBondInput("coupon must be non-negative")
    if redemption < 0:
        raise InvalidBondInput("redemption must be non-negative")


def _discount_terms(rate: float, periods: int) -> Tuple[np.ndarray, np.ndarray]:
    t = np.arange(1, int(periods) + 1, dtype=float)
    return t, (1.0 + rate) ** -t


def present_value(rate: float, coupon: float, periods: int, redemption: float) -> float:
    """PV of ``periods`` coupons plus redemption at periodic ``rate``."""
    _validate_pv_inputs(rate, coupon, periods, redemption)
    _, discount = _discount_terms(rate, periods)
    return float(coupon * discount.sum() + redemption * discount[-1])


def present_value_derivative(rate: float, coupon: float, periods: int, redemption: float) -> float:
    """dPV/d(rate) for the same cash flows, per unit of periodic rate."""
    return price_and_derivative(rate, coupon, periods, redemption)[1]


def price_and_derivative(
    rate: float, coupon: float, periods: int, redemption: float
) -> Tuple[float, float]:
    """Return (PV, dPV/d(rate)) from a single pass over the cash flows."""
    _validate_pv_inputs(rate, coupon, periods, redemption)
    t, discount = _discount_terms(rate, periods)
    base = 1.0 + rate
    price = coupon * discount.sum() + redemption * discount[-1]
    deriv = -(coupon * (t * discount).sum() + redemption * t[-1] * discount[-1]) / base
    return float(price), float(deriv)


def _periodic_rate(schedule: CashFlowSchedule, yield_percent: float) -> float:
    return float(yield_percent) / 100.0 / int(schedule.payments_per_year)


def _flows(schedule: CashFlowSchedule) -> Tuple[np.ndarray, np.ndarray]:
    n = schedule.periods
    t = np.arange(1, n + 1, dtype=float)
    flows = np.full(n, schedule.coupon_per_period, dtype=float)
    flows[-1] += schedule.redemption
    return t, flows


def price_from_yield(schedule: CashFlowSchedule, yield_percent: float) -> float:
    """Price of the schedule at an annual yield in percent."""
    return present_value(
        _periodic_rate(schedule, yield_percent),
        schedule.coupon_per_period,
        schedule.periods,
        schedule.redemption,
    )


def macaulay_duration(schedule: CashFlowSchedule, yield_percent: float) -> float:
    """Macaulay duration in years."""
    rate = _periodic_rate(schedule, yield_percent)
    price = price_from_yield(schedule, yield_percent)
    t, flows = _flows(schedule)
    pv = flows * (1.0 + rate) ** -t
    return float((t * pv).sum() / price / int(schedule.payments_per_year))


def modified_duration(schedule: CashFlowSchedule, yield_percent: float) -> float:
    """Modified duration in years: Macaulay / (1 + periodic yield)."""
    rate = _periodic_rate(schedule, yield_percent)
    return macaulay_duration(schedule, yield_percent) / (1.0 + rate)


def convexity(schedule: CashFlowSchedule, yield_percent: float) -> float:
    """Annualised convexity, (1/P) d2P/dy2 for an annual yield y."""
    rate = _periodic_rate(schedule, yield_percent)
    price = price_from_yield(schedule, yield_percent)
    t, flows = _flows(schedule)
    pv = flows * (1.0 + rate) ** -t
    freq = int(schedule.payments_per_year)
    return float((t * (t + 1.0) * pv).sum() / (price * (1.0 + rate) ** 2 * freq**2))


def current_yield(schedule: CashFlowSchedule, price: float) -> float:
    """Annual coupon income over price, in percent."""
    price = _require_positive("price", price)
    annual_coupon = schedule.coupon_per_period * int(schedule.payments_per_year)
    return annual_coupon / price * 100.0


def premium_discount_percent(price: float, face_value: float) -> float:
    """Premium (+) or discount (-) to face value, in percent of face."""
    price = _require_positive("price", price)
    face_value = _require_positive("face_value", face_value)
    return (price - face_value) / face_value * 100.0


def classify_price(price: float, face_value: float) -> PriceRegime:
    premium = premium_discount_percent(price, face_value)
    if premium > 0:
        return PriceRegime.PREMIUM
    if premium < 0:
        return PriceRegime.DISCOUNT
    return PriceRegime.PAR
