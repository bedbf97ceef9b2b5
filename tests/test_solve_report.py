from __future__ import annotations

import json

import numpy as np
import pytest

from trajopt.api.request import OptimizationRequest
from trajopt.api.solve_report import SolveReport, format_matrix


def _report(**overrides) -> SolveReport:
    n_w, n_c = 2, 3
    values = dict(
        status="Solve_Succeeded",
        success=True,
        iterations=12,
        cost=3.5,
        elapsed_s=0.25,
        times=np.array([1.5, 2.0]),
        states=np.arange(n_w * n_c * 6, dtype=float).reshape(n_w, n_c, 6),
        controls=np.ones((n_w, n_c, 4)),
        points=np.array([0.0, 0.5, 1.0]),
        request=OptimizationRequest(iterations=12),
    )
    values.update(overrides)
    return SolveReport(**values)


def test_format_matrix_uses_four_significant_digits() -> None:
    text = format_matrix(np.array([[1.23456, 10.0], [-0.5, 123456.0]]))
    lines = text.splitlines()
    assert len(lines) == 2
    assert lines[0].split() == ["1.235", "10"]
    assert lines[1].split() == ["-0.5", "1.235e+05"]
    # Right-aligned to a common width.
    assert len(set(len(line) for line in lines)) == 1


def test_format_matrix_empty() -> None:
    assert format_matrix(np.zeros((0, 0))) == ""


def test_text_header() -> None:
    lines = _report().to_text().splitlines()
    assert lines[0] == "Elapsed seconds for 1 calls: 0.25"
    assert "Cost = 3.5" in lines
    assert "Status = Solve_Succeeded" in lines
    assert "Times: 1.5   2" in lines


def test_text_sections_per_waypoint() -> None:
    text = _report().to_text()
    assert text.index("Controls: ") < text.index("States: ")
    assert text.count("Waypoint 0") == 2
    assert text.count("Waypoint 1") == 2
    assert text.endswith("----------------------------\n")
    # States block for waypoint 0 has one row per state component.
    states_part = text.split("States: ")[1]
    block = states_part.split("Waypoint 0\n")[1].split("\n\n")[0]
    assert len(block.splitlines()) == 6


def test_text_sections_per_collocation_point() -> None:
    text = _report().to_text(waypoints=False)
    assert "Collocation point 2" in text
    assert "Waypoint 0" not in text


def test_time_grid_is_absolute() -> None:
    grid = _report().time_grid()
    np.testing.assert_allclose(grid, [[0.0, 0.75, 1.5], [1.5, 2.5, 3.5]])


def test_total_time() -> None:
    assert _report().total_time == pytest.approx(3.5)


def test_as_dict_is_json_safe() -> None:
    summary = _report(metadata={"solver": "ipopt"}).as_dict()
    decoded = json.loads(json.dumps(summary))
    assert decoded["times"] == [1.5, 2.0]
    assert decoded["request"]["iterations"] == 12
    assert decoded["solver"] == "ipopt"


def test_as_dict_without_request() -> None:
    assert _report(request=None).as_dict()["request"] is None
