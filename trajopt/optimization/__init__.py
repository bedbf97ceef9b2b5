"""
Waypoint trajectory optimization with CasADi and Ipopt.

Submodules:
- layout: decision-vector indexing
- collocation: collocation points and Lagrange differentiation
- dynamics: vehicle model
- constraints: NLP constraint blocks
- problem: problem data, bounds and initial guess
- ipopt_options / ipopt_factory: solver options and construction
- solver: the solve itself and the seven-argument entry point
"""

from trajopt.optimization.layout import VariableLayout
from trajopt.optimization.problem import WaypointProblem
from trajopt.optimization.solver import TrajectorySolver, run_trajectory_optimization

__all__ = [
    "TrajectorySolver",
    "VariableLayout",
    "WaypointProblem",
    "run_trajectory_optimization",
]
