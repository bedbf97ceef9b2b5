"""Public value types: the solver request and the solve report."""

from trajopt.api.request import OptimizationRequest
from trajopt.api.solve_report import SolveReport, format_matrix

__all__ = ["OptimizationRequest", "SolveReport", "format_matrix"]
