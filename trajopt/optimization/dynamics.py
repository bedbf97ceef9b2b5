"""Point-mass multirotor dynamics in the NED frame."""
from __future__ import annotations

from typing import Any

import casadi as ca
import numpy as np

from trajopt.constants import GRAVITY, N_CONTROLS, N_STATES, VEHICLE_MASS


def quadrotor_dynamics(
    states: Any,
    controls: Any,
    mass: float = VEHICLE_MASS.value,
    gravity: float = GRAVITY.value,
) -> Any:
    """Return the state derivative for column-stacked states and controls.

    The state is ``[px, py, pz, vx, vy, vz]`` and the control is
    ``[thrust, phi, theta, psi]`` (specific thrust, roll, pitch, yaw).
    Both arguments hold one column per evaluation point; the result has
    the shape of *states*.
    """
    if states.shape[0] != N_STATES:
        raise ValueError(f"Expected {N_STATES} state rows, got {states.shape[0]}")
    if controls.shape[0] != N_CONTROLS:
        raise ValueError(f"Expected {N_CONTROLS} control rows, got {controls.shape[0]}")

    numeric = isinstance(states, np.ndarray) and isinstance(controls, np.ndarray)
    sin, cos = (np.sin, np.cos) if numeric else (ca.sin, ca.cos)

    thrust = controls[0, :]
    phi = controls[1, :]
    theta = controls[2, :]
    psi = controls[3, :]

    ax = -thrust * (sin(phi) * sin(psi) + cos(phi) * cos(psi) * sin(theta))
    ay = thrust * (cos(psi) * sin(phi) - cos(phi) * sin(psi) * sin(theta))
    az = -thrust * cos(phi) * cos(theta) + mass * gravity

    if numeric:
        return np.vstack([states[3:6, :], ax, ay, az])
    return ca.vertcat(states[3:6, :], ax, ay, az)
