"""Yield-to-maturity, yield-to-call and yield-to-worst solvers.

All three reduce to one routine, :func:`solve_yield`, which searches for the
annual yield whose present value reproduces an observed price. The iterate is
the annual decimal rate ``y``; cash flows are discounted at the periodic rate
``y / payments_per_year`` and the analytic derivative is scaled by the same
factor. Results are reported as annual percentages.

Non-convergence is not an error: the last iterate is returned with
``SolveStatus.BEST_EFFORT`` so callers can still display a number while being
able to tell it apart from a converged one.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

import logging

import numpy as np

from bondyield.bond.pricing import price_and_derivative
from bondyield.bond.schedule import (
    CallOption,
    CashFlowSchedule,
    InvalidBondInput,
    _require_positive,
)
from bondyield.bond.utils.rootfinding import safeguarded_newton
from bondyield.config import DEFAULT_SETTINGS, SolverSettings

logger = logging.getLogger(__name__)

MATURITY = "maturity"


class SolveStatus(Enum):
    CONVERGED = "CONVERGED"
    BEST_EFFORT = "BEST_EFFORT"


@dataclass(frozen=True)
class YieldResult:
    """Outcome of one yield solve.

    Attributes:
        yield_percent: Annual yield in percent
        status: CONVERGED if the price tolerance was met, else BEST_EFFORT
        iterations: Solver iterations used
        residual: |PV(yield) - target price| at the returned yield
    """

    yield_percent: float
    status: SolveStatus
    iterations: int
    residual: float

    @property
    def converged(self) -> bool:
        return self.status is SolveStatus.CONVERGED


@dataclass(frozen=True)
class CallableYieldResult:
    """Yield-to-maturity, yields-to-call and the worst of them.

    Attributes:
        ytm: Yield to maturity
        ytcs: One yield-to-call per call option, in call schedule order
        ytw: Minimum of ytm and every ytc, in percent
        worst_case: "maturity" or "call@<years>" for the scenario giving ytw
    """

    ytm: YieldResult
    ytcs: Tuple[YieldResult, ...]
    ytw: float
    worst_case: str

    @property
    def ytc(self) -> YieldResult:
        return self.ytcs[0]

    @property
    def converged(self) -> bool:
        return self.ytm.converged and all(r.converged for r in self.ytcs)


def solve_yield(
    target_price: float,
    coupon_per_period: float,
    periods: int,
    redemption_value: float,
    payments_per_year: int,
    initial_guess: float,
    settings: Optional[SolverSettings] = None,
) -> YieldResult:
    """Annual yield (percent) whose present value equals ``target_price``.

    ``initial_guess`` is an annual decimal rate.
    """
    settings = settings or DEFAULT_SETTINGS
    target = _require_positive("target_price", target_price)
    if isinstance(payments_per_year, bool) or not float(payments_per_year).is_integer():
        raise InvalidBondInput(
            f"payments_per_year must be an integer, got {payments_per_year!r}"
        )
    freq = int(payments_per_year)
    if freq <= 0:
        raise InvalidBondInput("payments_per_year must be positive")
    if isinstance(periods, bool) or int(periods) != periods or periods < 1:
        raise InvalidBondInput(f"periods must be a positive integer, got {periods!r}")
    if coupon_per_period < 0:
        raise InvalidBondInput("coupon_per_period must be non-negative")
    _require_positive("redemption_value", redemption_value)

    def func_and_deriv(y: float) -> Tuple[float, float]:
        with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
            price, deriv = price_and_derivative(
                y / freq, coupon_per_period, int(periods), redemption_value
            )
        return price - target, deriv / freq

    result = safeguarded_newton(
        func_and_deriv,
        initial_guess,
        tol_value=settings.tolerance,
        max_iter=settings.max_iterations,
        bounds=settings.bounds,
        nudge=settings.nudge,
        derivative_floor=settings.derivative_floor,
    )
    status = SolveStatus.CONVERGED if result.converged else SolveStatus.BEST_EFFORT
    logger.debug(
        "Yield solved after %s iterations via %s: %s%% (%s)",
        result.iterations,
        result.method,
        result.root * 100.0,
        status.value,
    )
    return YieldResult(result.root * 100.0, status, result.iterations, result.residual)


def yield_from_price(
    schedule: CashFlowSchedule,
    price: float,
    *,
    guess: Optional[float] = None,
    settings: Optional[SolverSettings] = None,
) -> YieldResult:
    """Solve the yield of ``schedule`` from a price.

    The starting point defaults to the coupon rate (as a decimal).
    """
    initial = guess if guess is not None else float(schedule.coupon_rate) / 100.0
    return solve_yield(
        price,
        schedule.coupon_per_period,
        schedule.periods,
        schedule.redemption,
        schedule.payments_per_year,
        initial,
        settings,
    )


def yield_to_maturity(
    current_price: float,
    face_value: float,
    coupon_rate: float,
    payments_per_year: int,
    years_to_maturity: float,
    settings: Optional[SolverSettings] = None,
) -> YieldResult:
    """Yield to maturity in percent, redeeming at face value."""
    schedule = CashFlowSchedule(face_value, coupon_rate, payments_per_year, years_to_maturity)
    return yield_from_price(schedule, current_price, settings=settings)


def yield_to_call(
    current_price: float,
    face_value: float,
    coupon_rate: float,
    payments_per_year: int,
    years_to_call: float,
    call_price: float,
    settings: Optional[SolverSettings] = None,
) -> YieldResult:
    """Yield to call in percent, redeeming at ``call_price`` on the call date."""
    schedule = CashFlowSchedule(
        face_value, coupon_rate, payments_per_year, years_to_call, redemption_value=call_price
    )
    return yield_from_price(schedule, current_price, settings=settings)


def _call_schedule(
    years_to_call: Optional[float],
    call_price: Optional[float],
    call_schedule: Optional[Iterable[CallOption]],
) -> List[CallOption]:
    calls: List[CallOption] = []
    if years_to_call is not None or call_price is not None:
        if years_to_call is None or call_price is None:
            raise InvalidBondInput("years_to_call and call_price must be given together")
        calls.append(CallOption(years_to_call, call_price))
    if call_schedule is not None:
        calls.extend(call_schedule)
    if not calls:
        raise InvalidBondInput("yield_to_worst needs at least one call option")
    return calls


def select_worst(
    ytm: YieldResult, calls: Sequence[CallOption], ytcs: Sequence[YieldResult]
) -> Tuple[str, float]:
    """Return (scenario label, yield percent) of the lowest yield.

    Ties resolve to maturity first, then to the earliest listed call.
    """
    if len(calls) != len(ytcs):
        raise InvalidBondInput("calls and ytcs must have the same length")
    scenarios = [(MATURITY, ytm.yield_percent)] + [
        (f"call@{call.years_to_call:g}", ytc.yield_percent) for call, ytc in zip(calls, ytcs)
    ]
    return min(scenarios, key=lambda item: item[1])


def yield_to_worst(
    current_price: float,
    face_value: float,
    coupon_rate: float,
    payments_per_year: int,
    years_to_maturity: float,
    years_to_call: Optional[float] = None,
    call_price: Optional[float] = None,
    *,
    call_schedule: Optional[Iterable[CallOption]] = None,
    settings: Optional[SolverSettings] = None,
) -> CallableYieldResult:
    """Solve YTM and every YTC independently and report the minimum.

    Calls may be given as a single ``years_to_call``/``call_price`` pair, as a
    ``call_schedule`` of :class:`CallOption`, or both (the pair comes first).
    """
    calls = _call_schedule(years_to_call, call_price, call_schedule)
    schedule = CashFlowSchedule(face_value, coupon_rate, payments_per_year, years_to_maturity)
    for call in calls:
        if call.years_to_call > schedule.years:
            raise InvalidBondInput(
                f"call date ({call.years_to_call} years) is after maturity ({schedule.years} years)"
            )

    ytm = yield_from_price(schedule, current_price, settings=settings)
    ytcs = tuple(
        yield_from_price(
            schedule.to_call(call.years_to_call, call.call_price),
            current_price,
            settings=settings,
        )
        for call in calls
    )

    worst_case, ytw = select_worst(ytm, calls, ytcs)
    return CallableYieldResult(ytm, ytcs, ytw, worst_case)
