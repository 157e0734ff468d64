"""Solver settings.

The yield solver relies on a handful of heuristic constants (price tolerance,
iteration budget, admissible yield domain, nudge step). They live here so a
caller can tighten or loosen them per call, or globally via environment
variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Optional

ENV_PREFIX = "BONDYIELD_"


@dataclass(frozen=True)
class SolverSettings:
    """Constants driving the safeguarded Newton-Raphson yield search.

    Attributes:
        tolerance: Absolute price tolerance for convergence (price units)
        max_iterations: Iteration budget per solve
        lower_bound: Lowest admissible annual yield (decimal)
        upper_bound: Highest admissible annual yield (decimal)
        nudge: Fixed yield step used instead of a rejected Newton step
        derivative_floor: Derivatives below this magnitude count as zero
    """

    tolerance: float = 1e-4
    max_iterations: int = 100
    lower_bound: float = -0.5
    upper_bound: float = 2.0
    nudge: float = 0.01
    derivative_floor: float = 1e-10

    def __post_init__(self) -> None:
        if self.tolerance <= 0:
            raise ValueError("tolerance must be positive")
        if self.max_iterations <= 0:
            raise ValueError("max_iterations must be positive")
        if self.lower_bound <= -1.0:
            raise ValueError("lower_bound must be greater than -100%")
        if self.lower_bound >= self.upper_bound:
            raise ValueError("lower_bound must be below upper_bound")
        if self.nudge <= 0:
            raise ValueError("nudge must be positive")
        if self.derivative_floor < 0:
            raise ValueError("derivative_floor must be non-negative")

    @property
    def bounds(self) -> tuple[float, float]:
        return self.lower_bound, self.upper_bound

    @classmethod
    def from_env(cls, prefix: Optional[str] = None) -> "SolverSettings":
        """Build settings from environment variables.

        Each field is read from ``<prefix><FIELD_NAME>`` (e.g.
        BONDYIELD_TOLERANCE, BONDYIELD_MAX_ITERATIONS); unset variables keep
        the defaults.
        """
        prefix = ENV_PREFIX if prefix is None else prefix
        overrides = {}
        for field in fields(cls):
            raw = os.getenv(f"{prefix}{field.name.upper()}")
            if raw is None or raw.strip() == "":
                continue
            caster = int if field.name == "max_iterations" else float
            try:
                overrides[field.name] = caster(raw)
            except ValueError as exc:
                raise ValueError(
                    f"Invalid value for {prefix}{field.name.upper()}: {raw!r}"
                ) from exc
        return cls(**overrides)


DEFAULT_SETTINGS = SolverSettings()
