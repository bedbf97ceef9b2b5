"""Solver invocation and result delivery."""

from trajopt.orchestration.invoker import (
    DisplaySurface,
    InvocationResult,
    InvocationStatus,
    LivenessToken,
    SolverInvoker,
    TriggerControl,
)

__all__ = [
    "DisplaySurface",
    "InvocationResult",
    "InvocationStatus",
    "LivenessToken",
    "SolverInvoker",
    "TriggerControl",
]
