"""
Waypoint trajectory solver.

:class:`TrajectorySolver` turns a :class:`WaypointProblem` into a CasADi NLP
and runs Ipopt once per request. :func:`run_trajectory_optimization` is the
seven-argument entry point the panel calls; it returns the textual report.
"""
from __future__ import annotations

import time

import casadi as ca
import numpy as np

from trajopt.api.request import OptimizationRequest
from trajopt.api.solve_report import SolveReport
from trajopt.constants import IPOPT_FAILURE_STATUSES
from trajopt.errors import SolverFailureError
from trajopt.logging import get_logger

from .ipopt_factory import create_ipopt_solver
from .ipopt_options import build_solver_options
from .problem import WaypointProblem

log = get_logger(__name__)


class TrajectorySolver:
    """Build and solve the waypoint collocation NLP with Ipopt."""

    def __init__(self, problem: WaypointProblem | None = None, linear_solver: str | None = None):
        self.problem = problem or WaypointProblem()
        self.linear_solver = linear_solver
        self.layout = self.problem.layout
        self.constraints = self.problem.build_constraints()
        self._nlp: dict[str, ca.SX] | None = None

    def _build_nlp(self) -> dict[str, ca.SX]:
        if self._nlp is None:
            x = ca.SX.sym("x", self.layout.n_vars)
            self._nlp = {
                "x": x,
                "f": self.problem.objective(x),
                "g": self.constraints(x),
            }
            log.info(
                "Waypoint NLP: %d variables, %d constraints, %d waypoints",
                self.layout.n_vars,
                self.constraints.n_constraints,
                self.layout.n_w,
            )
        return self._nlp

    def solve(self, request: OptimizationRequest | None = None) -> SolveReport:
        """Run one Ipopt solve with the options in *request*.

        Raises:
            SolverFailureError: CasADi raised, or Ipopt stopped with a status
                that means the call itself broke down (bad option, internal
                error). Non-convergence is reported, not raised.
        """
        request = request or OptimizationRequest()
        nlp = self._build_nlp()
        lbx, ubx = self.problem.variable_bounds()
        x0 = self.problem.initial_guess()

        try:
            solver = create_ipopt_solver(
                "waypoint_trajectory", nlp, build_solver_options(request), self.linear_solver,
            )
            log.info("Starting Ipopt solve: %s", request)
            start = time.perf_counter()
            solution = solver(
                x0=x0,
                lbx=lbx,
                ubx=ubx,
                lbg=self.constraints.lower_bound,
                ubg=self.constraints.upper_bound,
            )
            elapsed = time.perf_counter() - start
        except RuntimeError as exc:
            log.error("Ipopt call failed: %s", exc)
            raise SolverFailureError(f"Ipopt call failed: {exc}") from exc

        stats = solver.stats()
        status = str(stats.get("return_status", "unknown"))
        if status in IPOPT_FAILURE_STATUSES:
            log.error("Ipopt returned failure status %s", status)
            raise SolverFailureError(f"Ipopt returned {status}", status=status)

        x_opt = np.asarray(solution["x"].full()).reshape(-1)
        states, controls, times = self.layout.split(x_opt)
        report = SolveReport(
            status=status,
            success=bool(stats.get("success", False)),
            iterations=int(stats.get("iter_count", 0)),
            cost=float(solution["f"]),
            elapsed_s=elapsed,
            times=times,
            states=states,
            controls=controls,
            points=self.problem.points,
            request=request,
        )
        log.info(
            "Ipopt finished: %s after %d iterations, cost %.6g, %.3f s",
            report.status,
            report.iterations,
            report.cost,
            report.elapsed_s,
        )
        return report


def run_trajectory_optimization(
    iterations: int,
    tolerance: float,
    adaptive_mu_strategy: bool,
    hessian_approximation: bool,
    sparse_forward: bool,
    sparse_reverse: bool,
    print_level: int,
) -> str:
    """Solve the default waypoint problem and return the report text.

    Arguments are passed to Ipopt unchanged; nothing is range-checked here.
    """
    request = OptimizationRequest(
        iterations=iterations,
        tolerance=tolerance,
        adaptive_mu_strategy=adaptive_mu_strategy,
        hessian_approximation=hessian_approximation,
        sparse_forward=sparse_forward,
        sparse_reverse=sparse_reverse,
        print_level=print_level,
    )
    return TrajectorySolver().solve(request).to_text()
