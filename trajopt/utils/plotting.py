"""
Plotting utilities for solved waypoint trajectories.

Figures are built on :class:`matplotlib.figure.Figure` directly so nothing
here touches pyplot's global state; callers embed or save the figure.
"""
from __future__ import annotations

from pathlib import Path

import numpy as np
from matplotlib.figure import Figure

from trajopt.api.solve_report import SolveReport
from trajopt.constants import CONTROL_NAMES
from trajopt.logging import get_logger

log = get_logger(__name__)


def plot_trajectory(
    report: SolveReport,
    save_path: str | Path | None = None,
    title: str = "Waypoint Trajectory",
) -> Figure:
    """
    Plot the ground track, altitude and controls of a solve.

    Args:
        report: Solve report holding states, controls and segment times
        save_path: Optional path to save the plot
        title: Figure title

    Returns:
        matplotlib Figure object
    """
    states = np.asarray(report.states, dtype=float)
    controls = np.asarray(report.controls, dtype=float)
    t = report.time_grid()

    fig = Figure(figsize=(12, 8), dpi=100)
    axes = fig.subplots(2, 2)
    fig.suptitle(title, fontsize=14, fontweight="bold")

    track, altitude = axes[0, 0], axes[0, 1]
    for i_w in range(states.shape[0]):
        track.plot(states[i_w, :, 1], states[i_w, :, 0], "b-", linewidth=2)
        altitude.plot(t[i_w], -states[i_w, :, 2], "b-", linewidth=2)
    # Segment end points are the waypoints.
    track.plot(states[:, -1, 1], states[:, -1, 0], "ro", label="Waypoints")
    track.set_xlabel("East (m)")
    track.set_ylabel("North (m)")
    track.set_title("Ground Track")
    track.set_aspect("equal", adjustable="datalim")
    track.legend(loc="best")
    altitude.set_xlabel("Time (s)")
    altitude.set_ylabel("Altitude (m)")
    altitude.set_title("Altitude vs Time")

    thrust, angles = axes[1, 0], axes[1, 1]
    flat_t = t.reshape(-1)
    flat_u = controls.reshape(-1, controls.shape[-1])
    thrust.plot(flat_t, flat_u[:, 0], "g-", linewidth=2)
    thrust.set_xlabel("Time (s)")
    thrust.set_ylabel("Thrust (m/s²)")
    thrust.set_title("Thrust vs Time")
    for j, name in enumerate(CONTROL_NAMES[1:], start=1):
        angles.plot(flat_t, np.degrees(flat_u[:, j]), linewidth=2, label=name)
    angles.set_xlabel("Time (s)")
    angles.set_ylabel("Angle (deg)")
    angles.set_title("Attitude vs Time")
    angles.legend(loc="best")

    for ax in axes.flat:
        ax.grid(True, alpha=0.3)

    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
        log.info("Plot saved to %s", save_path)

    return fig
