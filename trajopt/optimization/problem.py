"""
Waypoint-following minimum-time problem definition.

The vehicle starts at ``initial_state`` and must pass through every waypoint
in order, one collocation segment per waypoint. The objective is the total
flight time, i.e. the sum of the segment durations.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import casadi as ca
import numpy as np

from trajopt.constants import (
    DEFAULT_WAYPOINTS,
    MAX_ANGULAR_RATE_DEG,
    MAX_THRUST,
    MAX_THRUST_RATE,
    MAX_TILT_DEG,
    MAX_YAW_DEG,
    N_COLLOCATION_POINTS,
    N_CONTROLS,
    N_STATES,
    SEGMENT_TIME_GUESS,
    SEGMENT_TIME_MAX,
    SEGMENT_TIME_MIN,
)
from trajopt.logging import get_logger

from .collocation import collocation_points
from .constraints import (
    CollocationConstraints,
    ControlRateConstraints,
    DynamicsConstraints,
    FusedConstraints,
    InitialStateConstraints,
    SmoothControlConstraints,
    WaypointConstraints,
)
from .layout import VariableLayout

log = get_logger(__name__)

_INF = float("inf")


def _default_waypoints() -> np.ndarray:
    return np.array(DEFAULT_WAYPOINTS, dtype=float).T


def _default_control_rate_upper() -> np.ndarray:
    rate = MAX_ANGULAR_RATE_DEG.radians
    return np.array([MAX_THRUST_RATE.value, rate, rate, rate])


def _default_control_lower() -> np.ndarray:
    tilt, _ = MAX_TILT_DEG.symmetric_bounds(radians=True)
    yaw, _ = MAX_YAW_DEG.symmetric_bounds(radians=True)
    return np.array([0.0, tilt, tilt, yaw])


def _default_control_upper() -> np.ndarray:
    tilt, yaw = MAX_TILT_DEG.radians, MAX_YAW_DEG.radians
    return np.array([MAX_THRUST.value, tilt, tilt, yaw])


def _default_state_lower() -> np.ndarray:
    return np.full(N_STATES, -_INF)


def _default_state_upper() -> np.ndarray:
    # pz <= 0: the vehicle stays at or above the ground plane (NED).
    upper = np.full(N_STATES, _INF)
    upper[2] = 0.0
    return upper


@dataclass(frozen=True, eq=False)
class WaypointProblem:
    """Problem data for the waypoint collocation NLP.

    ``waypoints`` has one column per waypoint (shape ``n_x x n_w``).
    """

    initial_state: np.ndarray = field(default_factory=lambda: np.zeros(N_STATES))
    waypoints: np.ndarray = field(default_factory=_default_waypoints)
    n_collocation: int = N_COLLOCATION_POINTS
    control_rate_upper: np.ndarray = field(default_factory=_default_control_rate_upper)
    control_lower: np.ndarray = field(default_factory=_default_control_lower)
    control_upper: np.ndarray = field(default_factory=_default_control_upper)
    state_lower: np.ndarray = field(default_factory=_default_state_lower)
    state_upper: np.ndarray = field(default_factory=_default_state_upper)
    time_min: float = SEGMENT_TIME_MIN
    time_max: float = SEGMENT_TIME_MAX
    time_guess: float = SEGMENT_TIME_GUESS

    def __post_init__(self):
        waypoints = np.asarray(self.waypoints, dtype=float)
        if waypoints.ndim != 2 or waypoints.shape[0] != N_STATES or waypoints.shape[1] < 1:
            raise ValueError(
                f"waypoints must have shape ({N_STATES}, n_w) with n_w >= 1, "
                f"got {waypoints.shape}",
            )
        if np.asarray(self.initial_state).size != N_STATES:
            raise ValueError(f"initial_state must have {N_STATES} entries")
        for name in ("control_rate_upper", "control_lower", "control_upper"):
            if np.asarray(getattr(self, name)).size != N_CONTROLS:
                raise ValueError(f"{name} must have {N_CONTROLS} entries")
        for name in ("state_lower", "state_upper"):
            if np.asarray(getattr(self, name)).size != N_STATES:
                raise ValueError(f"{name} must have {N_STATES} entries")
        if self.time_min > self.time_max:
            raise ValueError("time_min must not exceed time_max")

    @property
    def n_waypoints(self) -> int:
        return int(np.asarray(self.waypoints).shape[1])

    @property
    def layout(self) -> VariableLayout:
        return VariableLayout(N_STATES, N_CONTROLS, self.n_collocation, self.n_waypoints)

    @property
    def points(self) -> np.ndarray:
        return collocation_points(self.n_collocation)

    def build_constraints(self) -> FusedConstraints:
        layout = self.layout
        rate_upper = np.asarray(self.control_rate_upper, dtype=float)
        blocks = [
            CollocationConstraints(layout),
            ControlRateConstraints(layout, -rate_upper, rate_upper),
            DynamicsConstraints(layout),
            InitialStateConstraints(layout, self.initial_state),
            SmoothControlConstraints(layout),
            WaypointConstraints(layout, self.waypoints),
        ]
        fused = FusedConstraints(blocks, layout, self.points)
        log.debug(
            "Built %d constraints over %d variables", fused.n_constraints, layout.n_vars,
        )
        return fused

    def variable_bounds(self) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(lower, upper)`` bounds on the decision vector."""
        layout = self.layout
        n_w, n_c = layout.n_w, layout.n_c
        lower = layout.pack(
            np.broadcast_to(np.asarray(self.state_lower, dtype=float), (n_w, n_c, layout.n_x)),
            np.broadcast_to(np.asarray(self.control_lower, dtype=float), (n_w, n_c, layout.n_u)),
            np.full(n_w, self.time_min),
        )
        upper = layout.pack(
            np.broadcast_to(np.asarray(self.state_upper, dtype=float), (n_w, n_c, layout.n_x)),
            np.broadcast_to(np.asarray(self.control_upper, dtype=float), (n_w, n_c, layout.n_u)),
            np.full(n_w, self.time_max),
        )
        return lower, upper

    def initial_guess(self) -> np.ndarray:
        """Straight-line interpolation between consecutive waypoints, zero controls.

        Within segment ``w`` the state at ``tau`` is
        ``waypoint_w - (1 - tau) * (waypoint_w - waypoint_{w-1})``, with the
        initial state standing in for ``waypoint_{-1}``.
        """
        layout = self.layout
        waypoints = np.asarray(self.waypoints, dtype=float)
        previous = np.column_stack(
            [np.asarray(self.initial_state, dtype=float).reshape(-1), waypoints[:, :-1]],
        )
        differences = waypoints - previous
        remaining = 1.0 - self.points

        # states[w, c, :] = waypoint_w - remaining_c * difference_w
        states = waypoints.T[:, None, :] - remaining[None, :, None] * differences.T[:, None, :]
        controls = np.zeros((layout.n_w, layout.n_c, layout.n_u))
        times = np.full(layout.n_w, self.time_guess)
        return layout.pack(states, controls, times)

    def objective(self, x: Any) -> Any:
        """Total flight time."""
        times = self.layout.times(x)
        if isinstance(times, np.ndarray):
            return float(np.sum(times))
        return ca.sum1(times)
