"""Bond yield analytics.

This package solves bond yields from observed prices with a safeguarded
Newton-Raphson search over the cash-flow present value.

Key modules:
- bond.yields: yield to maturity, yield to call, yield to worst
- bond.pricing: present value, duration, convexity
- bond.schedule: cash flow schedules, payment dates, cash-flow tables
- config: solver settings
"""

from .bond import (
    CallableYieldResult,
    CallOption,
    CashFlowSchedule,
    InvalidBondInput,
    SolveStatus,
    YieldResult,
    price_from_yield,
    solve_yield,
    yield_from_price,
    yield_to_call,
    yield_to_maturity,
    yield_to_worst,
)
from .config import DEFAULT_SETTINGS, SolverSettings

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "SolverSettings",
    "DEFAULT_SETTINGS",
    "CashFlowSchedule",
    "CallOption",
    "InvalidBondInput",
    "SolveStatus",
    "YieldResult",
    "CallableYieldResult",
    "solve_yield",
    "yield_from_price",
    "yield_to_maturity",
    "yield_to_call",
    "yield_to_worst",
    "price_from_yield",
]
