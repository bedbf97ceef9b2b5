"""trajopt: waypoint trajectory optimization using CasADi and Ipopt collocation."""
from __future__ import annotations

import os

from trajopt.constants import ENV_SKIP_VALIDATION
from trajopt.logging import get_logger

__version__ = "0.1.0"

log = get_logger(__name__)

# Global flag to track ipopt availability
_IPOPT_AVAILABLE: bool | None = None


def _check_ipopt_availability() -> bool:
    """Check if ipopt is available in CasADi."""
    global _IPOPT_AVAILABLE

    if _IPOPT_AVAILABLE is not None:
        return _IPOPT_AVAILABLE

    # Skip validation if explicitly disabled
    if os.getenv(ENV_SKIP_VALIDATION) == "1":
        _IPOPT_AVAILABLE = True
        return _IPOPT_AVAILABLE

    try:
        import casadi as ca

        _IPOPT_AVAILABLE = bool(ca.has_nlpsol("ipopt"))
    except ImportError as exc:
        log.warning("CasADi is not importable: %s", exc)
        _IPOPT_AVAILABLE = False

    if not _IPOPT_AVAILABLE:
        log.warning(
            "IPOPT solver is not available in CasADi. Install a casadi wheel that "
            "bundles the ipopt plugin.",
        )
    return _IPOPT_AVAILABLE


def is_ipopt_available() -> bool:
    """
    Check if ipopt solver is available.

    Returns:
        True if ipopt is available, False otherwise
    """
    return _check_ipopt_availability()
