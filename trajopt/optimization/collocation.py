"""
Collocation points and Lagrange-polynomial differentiation.

Each waypoint segment is parameterised on ``tau in [0, 1]`` and represented
by its values at ``n_c`` collocation points (endpoints included). Time
derivatives inside a segment of duration ``t_w`` follow from differentiating
the interpolating polynomial: ``dV/dt = V @ D.T / t_w``.
"""
from __future__ import annotations

from typing import Any

import casadi as ca
import numpy as np

from trajopt.logging import get_logger

from .layout import VariableLayout

log = get_logger(__name__)


def collocation_points(n_c: int) -> np.ndarray:
    """Return Chebyshev-Gauss-Lobatto points mapped onto [0, 1], ascending."""
    if n_c < 2:
        raise ValueError("At least two collocation points are required")
    k = np.arange(n_c, dtype=float)
    return 0.5 * (1.0 - np.cos(np.pi * k / (n_c - 1)))


def barycentric_weights(points: np.ndarray) -> np.ndarray:
    points = np.asarray(points, dtype=float).reshape(-1)
    diff = points[:, None] - points[None, :]
    np.fill_diagonal(diff, 1.0)
    return 1.0 / np.prod(diff, axis=1)


def lagrange_derivative_matrix(points: np.ndarray) -> np.ndarray:
    """Return ``D`` with ``D[i, j] = l_j'(tau_i)`` for the Lagrange basis on *points*."""
    points = np.asarray(points, dtype=float).reshape(-1)
    n = points.size
    if n < 2:
        raise ValueError("At least two collocation points are required")
    if np.unique(points).size != n:
        raise ValueError("Collocation points must be distinct")

    w = barycentric_weights(points)
    D = np.zeros((n, n), dtype=float)
    for i in range(n):
        for j in range(n):
            if i != j:
                D[i, j] = (w[j] / w[i]) / (points[i] - points[j])
        # Rows of D annihilate constants.
        D[i, i] = -np.sum(D[i, :])
    return D


class LagrangeDerivatives:
    """Time derivatives of every segment's states and controls.

    ``generate(x, up_to)`` returns ``[first, second, ...]`` where each entry
    is a list with one ``(n_x + n_u) x n_c`` matrix per waypoint segment.
    """

    def __init__(self, layout: VariableLayout, points: np.ndarray):
        points = np.asarray(points, dtype=float).reshape(-1)
        if points.size != layout.n_c:
            raise ValueError(
                f"Expected {layout.n_c} collocation points, got {points.size}",
            )
        self.layout = layout
        self.points = points
        self.coefficients = lagrange_derivative_matrix(points).T

    def generate(self, x: Any, up_to: int) -> list[list[Any]]:
        if up_to < 0:
            raise ValueError("The derivative degree must be non-negative")
        times = self.layout.times(x)
        values = [self.layout.vars_at_waypoint(x, i_w) for i_w in range(self.layout.n_w)]
        derivatives: list[list[Any]] = []
        for _ in range(up_to):
            values = [
                _mtimes(values[i_w], self.coefficients) / times[i_w]
                for i_w in range(self.layout.n_w)
            ]
            derivatives.append(values)
        return derivatives

    def derivative(self, x: Any, degree: int = 1) -> list[Any]:
        """Return the *degree*-th time derivative for every segment."""
        if degree < 1:
            raise ValueError("The derivative degree must be a positive number")
        return self.generate(x, degree)[degree - 1]


def _mtimes(a: Any, b: np.ndarray) -> Any:
    if isinstance(a, np.ndarray):
        return a @ b
    return ca.mtimes(a, ca.DM(b))
