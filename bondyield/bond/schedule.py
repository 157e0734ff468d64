"""Cash flow schedules for plain fixed-coupon bonds."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import List, Optional, Union

import numpy as np
import pandas as pd
from dateutil.relativedelta import relativedelta

DateLike = Union[str, date, datetime, pd.Timestamp]

DATE_FMT = "%Y-%m-%d"
COMPACT_FMT = "%Y%m%d"
MONTHS_IN_YEAR = 12
_PERIOD_EPS = 1e-9


class InvalidBondInput(ValueError):
    """Raised when bond or solver inputs are outside their valid domain."""


def _require_positive(name: str, value: float) -> float:
    value = float(value)
    if not value > 0:
        raise InvalidBondInput(f"{name} must be positive, got {value!r}")
    return value


def to_date(date_like: DateLike) -> date:
    """Convert a date-like value to a date.

    Accepts 'YYYY-MM-DD' and 'YYYYMMDD' string formats.
    """
    if isinstance(date_like, pd.Timestamp):
        return date_like.date()
    if isinstance(date_like, datetime):
        return date_like.date()
    if isinstance(date_like, date):
        return date_like
    if isinstance(date_like, str):
        for fmt in (DATE_FMT, COMPACT_FMT):
            try:
                return datetime.strptime(date_like, fmt).date()
            except ValueError:
                continue
        raise InvalidBondInput(f"Unsupported date string format: {date_like!r}")
    raise TypeError(f"Unsupported type for date: {type(date_like)}")


def period_count(years: float, payments_per_year: int) -> int:
    """Number of cash flow dates in ``years`` at ``payments_per_year``."""
    raw = float(years) * int(payments_per_year)
    if not math.isfinite(raw):
        raise InvalidBondInput(f"years must be finite, got {years!r}")
    periods = int(round(raw))
    if periods < 1 or abs(raw - periods) > _PERIOD_EPS:
        raise InvalidBondInput(
            f"years * payments_per_year must be a positive whole number of periods, "
            f"got {years!r} * {payments_per_year!r} = {raw!r}"
        )
    return periods


@dataclass(frozen=True)
class CallOption:
    """One call date of a callable bond.

    Attributes:
        years_to_call: Years from today to the call date
        call_price: Redemption amount paid if the bond is called
    """

    years_to_call: float
    call_price: float

    def __post_init__(self) -> None:
        _require_positive("years_to_call", self.years_to_call)
        _require_positive("call_price", self.call_price)


@dataclass(frozen=True)
class CashFlowSchedule:
    """Remaining cash flows of a fixed-coupon bond.

    Attributes:
        face_value: Par amount
        coupon_rate: Annual coupon rate in percent (e.g., 5.0)
        payments_per_year: Coupon payments per year
        years: Horizon in years (to maturity, or to call)
        redemption_value: Amount repaid at the horizon; defaults to face_value
    """

    face_value: float
    coupon_rate: float
    payments_per_year: int
    years: float
    redemption_value: Optional[float] = None

    def __post_init__(self) -> None:
        _require_positive("face_value", self.face_value)
        if not float(self.coupon_rate) >= 0:
            raise InvalidBondInput(
                f"coupon_rate must be non-negative, got {self.coupon_rate!r}"
            )
        freq = self.payments_per_year
        if isinstance(freq, bool) or not float(freq).is_integer():
            raise InvalidBondInput(
                f"payments_per_year must be an integer, got {self.payments_per_year!r}"
            )
        _require_positive("payments_per_year", self.payments_per_year)
        _require_positive("years", self.years)
        if self.redemption_value is not None:
            _require_positive("redemption_value", self.redemption_value)
        period_count(self.years, self.payments_per_year)

    @property
    def periods(self) -> int:
        return period_count(self.years, self.payments_per_year)

    @property
    def coupon_per_period(self) -> float:
        return float(self.face_value) * float(self.coupon_rate) / 100.0 / int(self.payments_per_year)

    @property
    def redemption(self) -> float:
        if self.redemption_value is None:
            return float(self.face_value)
        return float(self.redemption_value)

    def to_call(self, years_to_call: float, call_price: float) -> "CashFlowSchedule":
        """Schedule truncated at a call date and redeemed at the call price."""
        return replace(self, years=years_to_call, redemption_value=call_price)


def payment_dates(schedule: CashFlowSchedule, settlement_date: DateLike) -> List[date]:
    """Cash flow dates stepping forward from settlement, one per period."""
    freq = int(schedule.payments_per_year)
    if MONTHS_IN_YEAR % freq != 0:
        raise InvalidBondInput(
            f"payment dates need a frequency dividing 12 months, got {freq}"
        )
    months = MONTHS_IN_YEAR // freq
    start = to_date(settlement_date)
    # Offsets from the start date keep month-end anchors stable.
    return [start + relativedelta(months=months * i) for i in range(1, schedule.periods + 1)]


def cashflow_table(
    schedule: CashFlowSchedule,
    yield_percent: float,
    settlement_date: Optional[DateLike] = None,
) -> pd.DataFrame:
    """Per-period breakdown of cash flows discounted at ``yield_percent``.

    Columns: period, time_years, cashflow, discount_factor, present_value and,
    when ``settlement_date`` is given, payment_date.
    """
    freq = int(schedule.payments_per_year)
    rate = float(yield_percent) / 100.0 / freq
    if rate <= -1.0:
        raise InvalidBondInput("1 + yield/payments_per_year must be positive")

    n = schedule.periods
    periods = np.arange(1, n + 1)
    flows = np.full(n, schedule.coupon_per_period, dtype=float)
    flows[-1] += schedule.redemption
    discount = (1.0 + rate) ** -periods.astype(float)

    table = pd.DataFrame(
        {
            "period": periods,
            "time_years": periods / freq,
            "cashflow": flows,
            "discount_factor": discount,
            "present_value": flows * discount,
        }
    )
    if settlement_date is not None:
        table["payment_date"] = payment_dates(schedule, settlement_date)
    return table
