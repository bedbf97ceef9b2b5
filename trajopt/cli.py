"""
Command-line solve of the default waypoint problem.

Exit codes: 0 when Ipopt ran (the report is printed, converged or not),
1 when the solver call failed, 2 when the parameters were rejected.
"""
from __future__ import annotations

import argparse
import sys
from typing import Sequence

from trajopt import is_ipopt_available
from trajopt.api.request import OptimizationRequest
from trajopt.diagnostics.run_metadata import log_run_metadata
from trajopt.errors import InvalidRequestError, SolverFailureError
from trajopt.logging import configure_logging, get_logger
from trajopt.optimization.solver import TrajectorySolver

log = get_logger(__name__)

EXIT_OK = 0
EXIT_SOLVER_FAILURE = 1
EXIT_INVALID = 2

_FLAGS = (
    ("adaptive_mu_strategy", "Use Ipopt's adaptive barrier update"),
    ("hessian_approximation", "Use a limited-memory Hessian approximation"),
    ("sparse_forward", "Allow forward mode for sparsity detection"),
    ("sparse_reverse", "Allow reverse mode for sparsity detection"),
)


def build_parser() -> argparse.ArgumentParser:
    defaults = OptimizationRequest()
    parser = argparse.ArgumentParser(
        prog="trajopt-solve", description="Solve the waypoint trajectory problem with Ipopt",
    )
    parser.add_argument(
        "--iterations", type=int, default=defaults.iterations, help="Maximum Ipopt iterations",
    )
    parser.add_argument(
        "--tolerance", type=float, default=defaults.tolerance, help="Ipopt convergence tolerance",
    )
    parser.add_argument(
        "--print-level", type=int, default=defaults.print_level, help="Ipopt print level (0-12)",
    )
    for name, help_text in _FLAGS:
        parser.add_argument(
            f"--{name.replace('_', '-')}",
            action=argparse.BooleanOptionalAction,
            default=getattr(defaults, name),
            help=help_text,
        )
    parser.add_argument("--plot", metavar="PATH", help="Save a trajectory figure to PATH")
    parser.add_argument(
        "--metadata-dir", metavar="DIR", help="Write run metadata JSON into DIR",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from env)")
    return parser


def request_from_args(args: argparse.Namespace) -> OptimizationRequest:
    return OptimizationRequest(
        iterations=args.iterations,
        tolerance=args.tolerance,
        adaptive_mu_strategy=args.adaptive_mu_strategy,
        hessian_approximation=args.hessian_approximation,
        sparse_forward=args.sparse_forward,
        sparse_reverse=args.sparse_reverse,
        print_level=args.print_level,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Parse *argv*, solve once and print the report."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        request = request_from_args(args).validate()
    except InvalidRequestError as exc:
        print(f"Invalid parameters: {exc}", file=sys.stderr)
        return EXIT_INVALID

    if not is_ipopt_available():
        print("Optimization failed: Ipopt is not available in CasADi", file=sys.stderr)
        return EXIT_SOLVER_FAILURE

    try:
        report = TrajectorySolver().solve(request)
    except SolverFailureError as exc:
        print(f"Optimization failed: {exc}", file=sys.stderr)
        return EXIT_SOLVER_FAILURE

    print(report.to_text(), end="")

    if args.plot:
        # Imported lazily; matplotlib is only needed here.
        from trajopt.utils.plotting import plot_trajectory

        plot_trajectory(report, save_path=args.plot)
    if args.metadata_dir:
        path = log_run_metadata(report.as_dict(), args.metadata_dir)
        log.info("Run metadata written to %s", path)

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
