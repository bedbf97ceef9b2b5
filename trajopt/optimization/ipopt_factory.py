"""
Centralized IPOPT solver factory.

All ``casadi.nlpsol(..., "ipopt", ...)`` instances are created here so that
the linear solver is chosen in exactly one place.
"""

from __future__ import annotations

import os
from typing import Any

import casadi as ca

from trajopt.constants import DEFAULT_LINEAR_SOLVER, ENV_LINEAR_SOLVER
from trajopt.logging import get_logger

log = get_logger(__name__)


def get_default_linear_solver() -> str:
    """Return the linear solver from ``TRAJOPT_LINEAR_SOLVER`` or the bundled default."""
    env_solver = os.getenv(ENV_LINEAR_SOLVER, "").strip().lower()
    return env_solver or DEFAULT_LINEAR_SOLVER


def build_ipopt_solver_options(
    options: dict[str, Any] | None = None,
    linear_solver: str | None = None,
) -> dict[str, Any]:
    """Return IPOPT options configured with the selected linear solver.

    Precedence: explicit *linear_solver* argument, then an
    ``ipopt.linear_solver`` entry already in *options*, then the default.
    """
    opts = options.copy() if options else {}

    requested = linear_solver or opts.pop("ipopt.linear_solver", None)
    solver_to_use = (requested or get_default_linear_solver()).lower()
    opts["ipopt.linear_solver"] = solver_to_use

    if requested and requested.lower() != get_default_linear_solver():
        log.debug(
            "Using requested linear solver '%s' (default would be '%s')",
            solver_to_use,
            get_default_linear_solver(),
        )
    return opts


def create_ipopt_solver(
    name: str,
    nlp: dict[str, Any],
    options: dict[str, Any] | None = None,
    linear_solver: str | None = None,
) -> Any:
    """
    Create an IPOPT solver with explicit linear solver configuration.

    Args:
        name: Name for the solver instance
        nlp: NLP problem definition (``{"x": ..., "f": ..., "g": ...}``)
        options: Additional IPOPT options
        linear_solver: Linear solver to use (default: mumps)

    Returns:
        CasADi IPOPT solver instance
    """
    opts = build_ipopt_solver_options(options, linear_solver)

    log.debug("Creating solver '%s' with linear solver: %s", name, opts["ipopt.linear_solver"])

    return ca.nlpsol(name, "ipopt", nlp, opts)
