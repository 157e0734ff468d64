"""Fixed-coupon bond pricing and yield solving.

- Present value and its analytic derivative
- Yield solver (Newton-Raphson with domain guards)
- Yield to maturity, yield to call and yield to worst
- Duration, convexity and current yield
"""

# Cash flows
from .schedule import (
    CallOption,
    CashFlowSchedule,
    InvalidBondInput,
    cashflow_table,
    payment_dates,
)

# Pricing
from .pricing import (
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

# Yield solving
from .yields import (
    CallableYieldResult,
    SolveStatus,
    YieldResult,
    select_worst,
    solve_yield,
    yield_from_price,
    yield_to_call,
    yield_to_maturity,
    yield_to_worst,
)

__all__ = [
    # Types
    "CashFlowSchedule",
    "CallOption",
    "PriceRegime",
    "SolveStatus",
    "YieldResult",
    "CallableYieldResult",
    # Exceptions
    "InvalidBondInput",
    # Pricing
    "present_value",
    "present_value_derivative",
    "price_and_derivative",
    "price_from_yield",
    "macaulay_duration",
    "modified_duration",
    "convexity",
    "current_yield",
    "premium_discount_percent",
    "classify_price",
    # Yields
    "solve_yield",
    "yield_from_price",
    "yield_to_maturity",
    "yield_to_call",
    "yield_to_worst",
    "select_worst",
    # Cash flows
    "payment_dates",
    "cashflow_table",
]
