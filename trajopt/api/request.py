from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from typing import Any

from trajopt.constants import (
    DEFAULT_ADAPTIVE_MU_STRATEGY,
    DEFAULT_HESSIAN_APPROXIMATION,
    DEFAULT_ITERATIONS,
    DEFAULT_PRINT_LEVEL,
    DEFAULT_SPARSE_FORWARD,
    DEFAULT_SPARSE_REVERSE,
    DEFAULT_TOLERANCE,
    IPOPT_MAX_PRINT_LEVEL,
)
from trajopt.errors import InvalidRequestError


@dataclass(frozen=True)
class OptimizationRequest:
    """Snapshot of the seven solver parameters for a single solve.

    Field order is the positional order of the solver routine's arguments.
    Construction never range-checks; call :meth:`validate` for that.
    """

    iterations: int = DEFAULT_ITERATIONS
    tolerance: float = DEFAULT_TOLERANCE
    adaptive_mu_strategy: bool = DEFAULT_ADAPTIVE_MU_STRATEGY
    hessian_approximation: bool = DEFAULT_HESSIAN_APPROXIMATION
    sparse_forward: bool = DEFAULT_SPARSE_FORWARD
    sparse_reverse: bool = DEFAULT_SPARSE_REVERSE
    print_level: int = DEFAULT_PRINT_LEVEL

    def as_args(self) -> tuple[int, float, bool, bool, bool, bool, int]:
        """Return the fields positionally, in solver-call order."""
        return tuple(getattr(self, f.name) for f in fields(self))  # type: ignore[return-value]

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)

    def problems(self) -> list[str]:
        """Return a description of every out-of-domain field (empty if valid)."""
        found: list[str] = []
        if self.iterations < 1:
            found.append(f"iterations must be at least 1, got {self.iterations}")
        if not math.isfinite(self.tolerance) or self.tolerance <= 0:
            found.append(f"tolerance must be positive and finite, got {self.tolerance}")
        if not 0 <= self.print_level <= IPOPT_MAX_PRINT_LEVEL:
            found.append(
                f"print_level must be between 0 and {IPOPT_MAX_PRINT_LEVEL}, "
                f"got {self.print_level}",
            )
        return found

    def validate(self) -> OptimizationRequest:
        """Return ``self`` or raise :class:`InvalidRequestError`."""
        found = self.problems()
        if found:
            raise InvalidRequestError(found)
        return self
