from __future__ import annotations

import json

import numpy as np
from matplotlib.figure import Figure

from trajopt.api.solve_report import SolveReport
from trajopt.diagnostics.run_metadata import RUN_ID, log_run_metadata
from trajopt.optimization.problem import WaypointProblem
from trajopt.utils.plotting import plot_trajectory


def test_log_run_metadata_writes_json(tmp_path) -> None:
    path = log_run_metadata(
        {"cost": np.float64(1.5), "times": np.array([1.0, 2.0])}, tmp_path / "runs",
    )
    assert path.endswith(f"{RUN_ID}.json")
    data = json.loads(open(path, encoding="utf-8").read())
    assert data == {"run_id": RUN_ID, "cost": 1.5, "times": [1.0, 2.0]}


def test_plot_trajectory_from_guess(tmp_path) -> None:
    problem = WaypointProblem()
    states, controls, times = problem.layout.split(problem.initial_guess())
    report = SolveReport(
        status="guess",
        success=False,
        iterations=0,
        cost=float(times.sum()),
        elapsed_s=0.0,
        times=times,
        states=states,
        controls=controls,
        points=problem.points,
    )
    out = tmp_path / "guess.png"

    fig = plot_trajectory(report, save_path=out)

    assert isinstance(fig, Figure)
    assert len(fig.axes) == 4
    assert out.exists()
