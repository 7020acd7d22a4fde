from .optimization_result import OptimizationResult
from .optimize import optimize

__all__ = ["optimize", "OptimizationResult"]
