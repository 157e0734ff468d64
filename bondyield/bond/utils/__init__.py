from .rootfinding import RootResult, safeguarded_newton

__all__ = ["RootResult", "safeguarded_newton"]
