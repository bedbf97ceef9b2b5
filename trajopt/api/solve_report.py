from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from trajopt.api.request import OptimizationRequest

_RULE = "----------------------------"


def format_matrix(matrix: np.ndarray, precision: int = 4) -> str:
    """Render *matrix* with right-aligned columns and *precision* significant digits."""
    matrix = np.atleast_2d(np.asarray(matrix, dtype=float))
    cells = [[f"{value:.{precision}g}" for value in row] for row in matrix]
    if not cells or not cells[0]:
        return ""
    width = max(len(cell) for row in cells for cell in row)
    return "\n".join(" ".join(cell.rjust(width) for cell in row) for row in cells)


@dataclass
class SolveReport:
    """Structured result of one waypoint trajectory solve.

    ``states`` is shaped (n_w, n_c, n_x), ``controls`` (n_w, n_c, n_u) and
    ``times`` holds the duration of each waypoint segment.
    """

    status: str
    success: bool
    iterations: int
    cost: float
    elapsed_s: float
    times: np.ndarray
    states: np.ndarray
    controls: np.ndarray
    points: np.ndarray
    request: OptimizationRequest | None = None
    timing_iterations: int = 1
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def total_time(self) -> float:
        return float(np.sum(self.times))

    def time_grid(self) -> np.ndarray:
        """Absolute time of every collocation point, shaped (n_w, n_c)."""
        times = np.asarray(self.times, dtype=float)
        starts = np.concatenate([[0.0], np.cumsum(times)[:-1]])
        return starts[:, None] + np.asarray(self.points)[None, :] * times[:, None]

    def to_text(self, waypoints: bool = True) -> str:
        """Human-readable report: timing, cost, then times, controls and states.

        With ``waypoints=True`` matrices are grouped per waypoint segment
        (rows are components, columns collocation points); otherwise per
        collocation point (columns are waypoints).
        """
        lines = [
            f"Elapsed seconds for {self.timing_iterations} calls: {self.elapsed_s:.6g}",
            "",
            f"Cost = {self.cost:.6g}",
            f"Status = {self.status}",
            "",
            "",
            f"Times: {format_matrix(np.asarray(self.times)[None, :])}",
            _RULE,
            "",
            "Controls: ",
            "",
        ]
        lines.extend(self._section(self.controls, waypoints))
        lines.extend([_RULE, "", "States: ", ""])
        lines.extend(self._section(self.states, waypoints))
        lines.append(_RULE)
        return "\n".join(lines) + "\n"

    @staticmethod
    def _section(values: np.ndarray, waypoints: bool) -> list[str]:
        values = np.asarray(values, dtype=float)
        out: list[str] = []
        if waypoints:
            for i_w in range(values.shape[0]):
                out.extend([f"Waypoint {i_w}", format_matrix(values[i_w].T), ""])
        else:
            for i_c in range(values.shape[1]):
                out.extend([f"Collocation point {i_c}", format_matrix(values[:, i_c, :].T), ""])
        return out

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable summary."""
        return {
            "status": self.status,
            "success": self.success,
            "iterations": self.iterations,
            "cost": self.cost,
            "elapsed_s": self.elapsed_s,
            "times": [float(t) for t in np.asarray(self.times)],
            "total_time": self.total_time,
            "request": self.request.as_dict() if self.request is not None else None,
            **self.metadata,
        }
