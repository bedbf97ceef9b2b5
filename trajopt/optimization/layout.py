"""
Decision-vector layout for the waypoint collocation problem.

The decision vector holds, in column-major order, the matrix

                     waypoint 1,   waypoint 2, ...,   waypoint n_w
    collocation 1:   [    x     ,      x     , ...,       x      ]
                     [    u     ,      u     , ...,       u      ]
    ...
    collocation n_c: [    x     ,      x     , ...,       x      ]
                     [    u     ,      u     , ...,       u      ]

followed by the segment durations ``[t_1, ..., t_{n_w}]``.

Accessors accept either a NumPy vector or a CasADi column (SX/MX/DM) and
return the same kind of object, so the constraint code that builds the NLP
symbolically and the post-processing code share one indexing scheme.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import casadi as ca
import numpy as np


def _reshape(block: Any, rows: int, cols: int) -> Any:
    # Both NumPy (order="F") and CasADi reshape column-major.
    if isinstance(block, np.ndarray):
        return block.reshape((rows, cols), order="F")
    return ca.reshape(block, rows, cols)


@dataclass(frozen=True)
class VariableLayout:
    """Index arithmetic for the ``((n_x + n_u) * n_c + 1) * n_w`` variables."""

    n_x: int
    n_u: int
    n_c: int
    n_w: int

    def __post_init__(self):
        if min(self.n_x, self.n_u) < 1:
            raise ValueError("State and control sizes must be positive")
        if self.n_c < 2:
            raise ValueError("At least two collocation points are required")
        if self.n_w < 1:
            raise ValueError("At least one waypoint is required")

    @property
    def n_xu(self) -> int:
        return self.n_x + self.n_u

    @property
    def block_size(self) -> int:
        """Number of state/control entries per waypoint column."""
        return self.n_xu * self.n_c

    @property
    def n_vars(self) -> int:
        return (self.block_size + 1) * self.n_w

    # -- flat indices -------------------------------------------------------

    def var_index(self, row: int, i_c: int, i_w: int) -> int:
        """Flat index of entry ``row`` (state rows first) at (i_c, i_w)."""
        if not 0 <= row < self.n_xu:
            raise IndexError(f"row {row} out of range")
        if not 0 <= i_c < self.n_c:
            raise IndexError(f"collocation index {i_c} out of range")
        if not 0 <= i_w < self.n_w:
            raise IndexError(f"waypoint index {i_w} out of range")
        return i_w * self.block_size + i_c * self.n_xu + row

    def state_index(self, k: int, i_c: int, i_w: int) -> int:
        if not 0 <= k < self.n_x:
            raise IndexError(f"state component {k} out of range")
        return self.var_index(k, i_c, i_w)

    def control_index(self, k: int, i_c: int, i_w: int) -> int:
        if not 0 <= k < self.n_u:
            raise IndexError(f"control component {k} out of range")
        return self.var_index(self.n_x + k, i_c, i_w)

    def time_index(self, i_w: int) -> int:
        if not 0 <= i_w < self.n_w:
            raise IndexError(f"waypoint index {i_w} out of range")
        return self.block_size * self.n_w + i_w

    # -- per-waypoint views ((rows) x n_c) -------------------------------------

    def vars_at_waypoint(self, x: Any, i_w: int) -> Any:
        start = i_w * self.block_size
        return _reshape(x[start : start + self.block_size], self.n_xu, self.n_c)

    def states_at_waypoint(self, x: Any, i_w: int) -> Any:
        return self.vars_at_waypoint(x, i_w)[: self.n_x, :]

    def controls_at_waypoint(self, x: Any, i_w: int) -> Any:
        return self.vars_at_waypoint(x, i_w)[self.n_x :, :]

    # -- per-collocation-point views ((rows) x n_w) ----------------------------

    def vars_at_collocation_point(self, x: Any, i_c: int) -> Any:
        grid = _reshape(x[: self.block_size * self.n_w], self.block_size, self.n_w)
        return grid[i_c * self.n_xu : (i_c + 1) * self.n_xu, :]

    def states_at_collocation_point(self, x: Any, i_c: int) -> Any:
        return self.vars_at_collocation_point(x, i_c)[: self.n_x, :]

    def controls_at_collocation_point(self, x: Any, i_c: int) -> Any:
        return self.vars_at_collocation_point(x, i_c)[self.n_x :, :]

    # -- single entries -----------------------------------------------------

    def state(self, x: Any, i_c: int, i_w: int) -> Any:
        start = self.var_index(0, i_c, i_w)
        return x[start : start + self.n_x]

    def control(self, x: Any, i_c: int, i_w: int) -> Any:
        start = self.var_index(self.n_x, i_c, i_w)
        return x[start : start + self.n_u]

    def times(self, x: Any) -> Any:
        start = self.block_size * self.n_w
        return x[start : start + self.n_w]

    # -- NumPy helpers ------------------------------------------------------

    def split(self, x: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return ``(states, controls, times)`` shaped (n_w, n_c, n_x), (n_w, n_c, n_u), (n_w,)."""
        x = np.asarray(x, dtype=float).reshape(-1)
        if x.size != self.n_vars:
            raise ValueError(f"Bad decision vector size {x.size}, expected {self.n_vars}")
        grid = x[: self.block_size * self.n_w].reshape((self.n_w, self.n_c, self.n_xu))
        states = grid[:, :, : self.n_x].copy()
        controls = grid[:, :, self.n_x :].copy()
        return states, controls, self.times(x).copy()

    def pack(self, states: np.ndarray, controls: np.ndarray, times: np.ndarray) -> np.ndarray:
        """Inverse of :meth:`split`."""
        states = np.asarray(states, dtype=float).reshape(self.n_w, self.n_c, self.n_x)
        controls = np.asarray(controls, dtype=float).reshape(self.n_w, self.n_c, self.n_u)
        grid = np.concatenate([states, controls], axis=2)
        times = np.asarray(times, dtype=float).reshape(self.n_w)
        return np.concatenate([grid.reshape(-1), times])
