"""Exception types raised across the trajopt package."""

from __future__ import annotations

from typing import Sequence


class TrajoptError(Exception):
    """Base class for all trajopt errors."""


class InvalidRequestError(TrajoptError, ValueError):
    """Raised when an optimization request is rejected before solving."""

    def __init__(self, problems: Sequence[str]):
        self.problems = tuple(problems)
        super().__init__("; ".join(self.problems))


class SolverFailureError(TrajoptError, RuntimeError):
    """Raised when the Ipopt call itself fails (as opposed to not converging)."""

    def __init__(self, message: str, status: str | None = None):
        self.status = status
        super().__init__(message)
