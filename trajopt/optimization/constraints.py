"""
Constraint blocks for the waypoint collocation NLP.

Every block knows its size, its bounds and how to evaluate itself on a
decision vector. Equality blocks are bounded to zero on both sides;
inequality blocks are written in ``g(x) <= 0`` form. Blocks that need
time derivatives declare the highest degree in ``derivatives`` and receive
them precomputed from :class:`FusedConstraints`, so the Lagrange
differentiation is built once per evaluation.

All evaluation is expressed with CasADi operations; NumPy input is
converted to ``DM`` by :class:`FusedConstraints`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

import casadi as ca
import numpy as np

from trajopt.constants import INEQUALITY_LOWER_BOUND
from trajopt.logging import get_logger

from .collocation import LagrangeDerivatives
from .dynamics import quadrotor_dynamics
from .layout import VariableLayout

log = get_logger(__name__)

# derivatives[d - 1][i_w] is the d-th derivative of segment i_w.
Derivatives = Sequence[Sequence[Any]]


class Constraint(ABC):
    """Base class for a contiguous block of NLP constraints."""

    #: Highest time-derivative degree this block reads.
    derivatives: int = 0

    def __init__(self, layout: VariableLayout):
        self.layout = layout

    @property
    @abstractmethod
    def n_constraints(self) -> int:
        """Number of rows this block contributes."""

    @abstractmethod
    def lower_bound(self) -> np.ndarray:
        pass

    @abstractmethod
    def upper_bound(self) -> np.ndarray:
        pass

    @abstractmethod
    def __call__(self, x: Any, derivatives: Derivatives) -> Any:
        """Return the constraint values as a column of length ``n_constraints``."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} n={self.n_constraints}>"


class EqualityConstraint(Constraint):
    def lower_bound(self) -> np.ndarray:
        return np.zeros(self.n_constraints)

    def upper_bound(self) -> np.ndarray:
        return np.zeros(self.n_constraints)


class InequalityConstraint(Constraint):
    def lower_bound(self) -> np.ndarray:
        return np.full(self.n_constraints, INEQUALITY_LOWER_BOUND)

    def upper_bound(self) -> np.ndarray:
        return np.zeros(self.n_constraints)


class CollocationConstraints(EqualityConstraint):
    """Adjacent segments agree where they meet.

    Collocation points span [0, 1] including both ends, so the last point of
    segment i-1 and the first point of segment i estimate the same instant.
    """

    @property
    def n_constraints(self) -> int:
        return self.layout.n_xu * (self.layout.n_w - 1)

    def __call__(self, x: Any, derivatives: Derivatives) -> Any:
        first = self.layout.vars_at_collocation_point(x, 0)
        last = self.layout.vars_at_collocation_point(x, self.layout.n_c - 1)
        n_w = self.layout.n_w
        return ca.vec(first[:, 1:n_w] - last[:, 0 : n_w - 1])


class ControlRateConstraints(InequalityConstraint):
    """``lower <= u_dot <= upper`` at every collocation point."""

    derivatives = 1

    def __init__(self, layout: VariableLayout, lower: Sequence[float], upper: Sequence[float]):
        super().__init__(layout)
        self.lower = np.asarray(lower, dtype=float).reshape(-1)
        self.upper = np.asarray(upper, dtype=float).reshape(-1)
        if self.lower.size != layout.n_u or self.upper.size != layout.n_u:
            raise ValueError(f"Control rate bounds must have {layout.n_u} entries")

    @property
    def n_constraints(self) -> int:
        return 2 * self.layout.n_u * self.layout.n_c * self.layout.n_w

    def __call__(self, x: Any, derivatives: Derivatives) -> Any:
        n_x = self.layout.n_x
        upper = ca.repmat(ca.DM(self.upper), 1, self.layout.n_c)
        lower = ca.repmat(ca.DM(self.lower), 1, self.layout.n_c)
        blocks = []
        for i_w in range(self.layout.n_w):
            u_dot = derivatives[0][i_w][n_x:, :]
            blocks.append(ca.vec(u_dot - upper))
            blocks.append(ca.vec(lower - u_dot))
        return ca.vertcat(*blocks)


class DynamicsConstraints(EqualityConstraint):
    """Interpolated state derivatives match the vehicle dynamics everywhere."""

    derivatives = 1

    @property
    def n_constraints(self) -> int:
        return self.layout.n_c * self.layout.n_x * self.layout.n_w

    def __call__(self, x: Any, derivatives: Derivatives) -> Any:
        n_x = self.layout.n_x
        blocks = []
        for i_w in range(self.layout.n_w):
            states = self.layout.states_at_waypoint(x, i_w)
            controls = self.layout.controls_at_waypoint(x, i_w)
            x_dot = derivatives[0][i_w][:n_x, :]
            blocks.append(ca.vec(quadrotor_dynamics(states, controls) - x_dot))
        return ca.vertcat(*blocks)


class InitialStateConstraints(EqualityConstraint):
    """The first point of the first segment equals the given initial state."""

    def __init__(self, layout: VariableLayout, initial_state: Sequence[float]):
        super().__init__(layout)
        self.initial_state = np.asarray(initial_state, dtype=float).reshape(-1)
        if self.initial_state.size != layout.n_x:
            raise ValueError(f"Initial state must have {layout.n_x} entries")

    @property
    def n_constraints(self) -> int:
        return self.layout.n_x

    def __call__(self, x: Any, derivatives: Derivatives) -> Any:
        return self.layout.state(x, 0, 0) - ca.DM(self.initial_state)


class SmoothControlConstraints(EqualityConstraint):
    """Control rates estimated from either side of a segment joint agree."""

    derivatives = 1

    @property
    def n_constraints(self) -> int:
        return self.layout.n_u * (self.layout.n_w - 1)

    def __call__(self, x: Any, derivatives: Derivatives) -> Any:
        n_x = self.layout.n_x
        end = self.layout.n_c - 1
        rates = derivatives[0]
        blocks = [
            rates[i_w][n_x:, 0] - rates[i_w - 1][n_x:, end]
            for i_w in range(1, self.layout.n_w)
        ]
        if not blocks:
            return ca.DM(0, 1)
        return ca.vertcat(*blocks)


class WaypointConstraints(EqualityConstraint):
    """The last point of each segment hits that segment's waypoint."""

    def __init__(self, layout: VariableLayout, waypoints: np.ndarray):
        super().__init__(layout)
        self.waypoints = np.asarray(waypoints, dtype=float)
        if self.waypoints.shape != (layout.n_x, layout.n_w):
            raise ValueError(
                f"Waypoints must have shape {(layout.n_x, layout.n_w)}, "
                f"got {self.waypoints.shape}",
            )

    @property
    def n_constraints(self) -> int:
        return self.layout.n_x * self.layout.n_w

    def __call__(self, x: Any, derivatives: Derivatives) -> Any:
        last = self.layout.states_at_collocation_point(x, self.layout.n_c - 1)
        return ca.vec(last - ca.DM(self.waypoints))


class StateWaypointConstraint(EqualityConstraint):
    """A single state component hits one target value per segment."""

    def __init__(self, layout: VariableLayout, state_index: int, values: Sequence[float]):
        super().__init__(layout)
        if not 0 <= state_index < layout.n_x:
            raise ValueError(
                f"The state index must be in [0, {layout.n_x}), got {state_index}",
            )
        self.state_index = state_index
        self.values = np.asarray(values, dtype=float).reshape(-1)
        if self.values.size != layout.n_w:
            raise ValueError(f"Expected {layout.n_w} target values")

    @property
    def n_constraints(self) -> int:
        return self.layout.n_w

    def __call__(self, x: Any, derivatives: Derivatives) -> Any:
        last = self.layout.states_at_collocation_point(x, self.layout.n_c - 1)
        return ca.vec(last[self.state_index, :] - ca.DM(self.values).T)


class FusedConstraints:
    """Concatenation of constraint blocks evaluated as one NLP constraint vector."""

    def __init__(
        self,
        constraints: Sequence[Constraint],
        layout: VariableLayout,
        points: np.ndarray,
    ):
        if not constraints:
            raise ValueError("You must specify at least one constraint block")
        for block in constraints:
            if block.layout != layout:
                raise ValueError(f"{block!r} was built for a different layout")
        self.constraints = tuple(constraints)
        self.layout = layout
        self.lagrange_derivatives = LagrangeDerivatives(layout, points)

    @property
    def n_constraints(self) -> int:
        return sum(block.n_constraints for block in self.constraints)

    @property
    def max_derivative(self) -> int:
        return max(block.derivatives for block in self.constraints)

    @property
    def lower_bound(self) -> np.ndarray:
        return np.concatenate([block.lower_bound() for block in self.constraints])

    @property
    def upper_bound(self) -> np.ndarray:
        return np.concatenate([block.upper_bound() for block in self.constraints])

    def slices(self) -> dict[str, slice]:
        """Return the row range of each block, keyed by class name."""
        out: dict[str, slice] = {}
        start = 0
        for block in self.constraints:
            stop = start + block.n_constraints
            out[type(block).__name__] = slice(start, stop)
            start = stop
        return out

    def __call__(self, x: Any) -> Any:
        if isinstance(x, np.ndarray):
            x = ca.DM(x.reshape(-1))
        derivatives = self.lagrange_derivatives.generate(x, self.max_derivative)
        values = []
        for block in self.constraints:
            g = block(x, derivatives)
            if g.shape[0] != block.n_constraints:
                raise ValueError(
                    f"{block!r} produced {g.shape[0]} values, expected {block.n_constraints}",
                )
            values.append(g)
        return ca.vertcat(*values)

    def evaluate(self, x: np.ndarray) -> np.ndarray:
        """Numeric evaluation, returned as a flat NumPy array."""
        return ca.DM(self(np.asarray(x, dtype=float))).full().reshape(-1)
