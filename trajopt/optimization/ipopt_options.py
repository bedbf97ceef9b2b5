from __future__ import annotations

"""Translate an :class:`OptimizationRequest` into CasADi/Ipopt options.

Mapping
-------
* ``print_level``            -> ``ipopt.print_level``
* ``iterations``             -> ``ipopt.max_iter``
* ``tolerance``              -> ``ipopt.tol``
* ``adaptive_mu_strategy``   -> ``ipopt.mu_strategy = "adaptive"``
* ``hessian_approximation``  -> ``ipopt.hessian_approximation = "limited-memory"``
* ``sparse_forward`` / ``sparse_reverse`` -> the oracle's ``ad_weight_sp`` (the AD direction
  CasADi uses to detect Jacobian/Hessian sparsity)

Flags that are off leave the corresponding Ipopt default in place
(monotone barrier update, exact Hessian).
"""

from typing import Any, Dict, Final

from trajopt.api.request import OptimizationRequest
from trajopt.logging import get_logger

log = get_logger(__name__)

# -- Public API -------------------------------------------------------------

_AD_WEIGHT_FORWARD: Final[float] = 0.0
_AD_WEIGHT_REVERSE: Final[float] = 1.0


def sparsity_ad_weight(sparse_forward: bool, sparse_reverse: bool) -> float | None:
    """Return the ``ad_weight_sp`` value for the sparse flags, ``None`` for automatic."""
    if sparse_forward and not sparse_reverse:
        return _AD_WEIGHT_FORWARD
    if sparse_reverse and not sparse_forward:
        return _AD_WEIGHT_REVERSE
    if not sparse_forward and not sparse_reverse:
        log.warning(
            "Both sparsity modes disabled; CasADi always exploits sparsity, "
            "falling back to automatic sparsity detection",
        )
    return None


def build_solver_options(request: OptimizationRequest) -> Dict[str, Any]:
    """Return the ``nlpsol`` options dict for *request*.

    Values are passed through unchanged; range checking is the caller's
    business (see :meth:`OptimizationRequest.validate`).
    """
    opts: Dict[str, Any] = {
        "ipopt.print_level": request.print_level,
        "ipopt.max_iter": request.iterations,
        "ipopt.tol": request.tolerance,
        # Non-convergence comes back as a status, not an exception.
        "error_on_fail": False,
    }
    if request.adaptive_mu_strategy:
        opts["ipopt.mu_strategy"] = "adaptive"
    if request.hessian_approximation:
        opts["ipopt.hessian_approximation"] = "limited-memory"

    ad_weight_sp = sparsity_ad_weight(request.sparse_forward, request.sparse_reverse)
    if ad_weight_sp is not None:
        # Sparsity of the NLP oracle, not of the outer nlpsol Function.
        opts["oracle_options"] = {"ad_weight_sp": ad_weight_sp}

    if request.print_level == 0:
        opts["print_time"] = False
        opts["ipopt.sb"] = "yes"

    log.debug("Ipopt options for %s: %s", request, opts)
    return opts
