"""Root-finding utilities (Newton-Raphson with domain guards)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Tuple

import logging
import math

logger = logging.getLogger(__name__)

FuncDeriv = Callable[[float], Tuple[float, float]]


@dataclass(frozen=True)
class RootResult:
    root: float
    iterations: int
    converged: bool
    residual: float
    method: str


def _clamp(x: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, x))


def safeguarded_newton(
    func_and_deriv: FuncDeriv,
    initial_guess: float,
    *,
    tol_value: float = 1e-4,
    max_iter: int = 100,
    bounds: Tuple[float, float] = (-0.5, 2.0),
    nudge: float = 0.01,
    derivative_floor: float = 1e-10,
) -> RootResult:
    """Newton-Raphson root finder for a decreasing function.

    Never raises for non-convergence: when the iteration budget runs out the
    last iterate is returned with ``converged=False``.

    Parameters
    ----------
    func_and_deriv:
        Callable returning (value, derivative) at a given point.
    initial_guess:
        Starting point; clamped into ``bounds``.
    tol_value:
        Absolute tolerance for the function value.
    max_iter:
        Iteration budget.
    bounds:
        Admissible domain (lower, upper). Newton steps landing outside the
        open interval are rejected in favour of a fixed nudge.
    nudge:
        Step applied when the derivative vanishes or a Newton step is rejected.
        After a rejected step the nudge moves x towards the root: up when the
        value is positive (price above target, so yield must rise) and down
        when it is negative. It never moves x away from the root.
    derivative_floor:
        Derivatives smaller than this in magnitude are treated as zero.
    """
    lower, upper = bounds
    if not lower < upper:
        raise ValueError("bounds must satisfy lower < upper")
    if max_iter <= 0:
        raise ValueError("max_iter must be positive")

    x = _clamp(float(initial_guess), lower, upper)
    value = math.inf

    for iteration in range(1, max_iter + 1):
        value, deriv = func_and_deriv(x)
        logger.debug("Newton iter %s: x=%s value=%s deriv=%s", iteration, x, value, deriv)
        if abs(value) < tol_value:
            return RootResult(x, iteration, True, abs(value), "newton")

        if not abs(deriv) >= derivative_floor:
            logger.debug("Derivative below floor at iter %s; nudging up", iteration)
            x = _clamp(x + nudge, lower, upper)
            continue

        x_new = x - value / deriv
        if lower < x_new < upper:
            x = x_new
            continue

        # Decreasing function: a positive value means x is still too small.
        step = nudge if value > 0 else -nudge
        logger.debug(
            "Rejected Newton step to %s at iter %s; nudging by %s", x_new, iteration, step
        )
        x = _clamp(x + step, lower, upper)

    value, _ = func_and_deriv(x)
    if abs(value) < tol_value:
        return RootResult(x, max_iter, True, abs(value), "newton")
    logger.warning(
        "Newton did not converge in %s iterations (x=%s, |value|=%s)", max_iter, x, abs(value)
    )
    return RootResult(x, max_iter, False, abs(value), "exhausted")
