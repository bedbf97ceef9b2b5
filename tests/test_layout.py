from __future__ import annotations

import casadi as ca
import numpy as np
import pytest

from trajopt.optimization.layout import VariableLayout


@pytest.fixture
def layout():
    return VariableLayout(n_x=6, n_u=4, n_c=3, n_w=2)


@pytest.fixture
def x(layout):
    return np.arange(layout.n_vars, dtype=float)


def test_sizes(layout) -> None:
    assert layout.n_xu == 10
    assert layout.block_size == 30
    assert layout.n_vars == (10 * 3 + 1) * 2


def test_default_problem_size() -> None:
    assert VariableLayout(6, 4, 11, 6).n_vars == 666


@pytest.mark.parametrize("kwargs", [
    {"n_x": 0, "n_u": 4, "n_c": 3, "n_w": 2},
    {"n_x": 6, "n_u": 4, "n_c": 1, "n_w": 2},
    {"n_x": 6, "n_u": 4, "n_c": 3, "n_w": 0},
])
def test_invalid_sizes_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        VariableLayout(**kwargs)


def test_indices_are_column_major(layout) -> None:
    """Per waypoint column: each collocation point's state then control."""
    assert layout.state_index(0, 0, 0) == 0
    assert layout.control_index(0, 0, 0) == 6
    assert layout.state_index(0, 1, 0) == 10
    assert layout.state_index(2, 0, 1) == 32
    assert layout.time_index(0) == 60
    assert layout.time_index(1) == 61


def test_index_out_of_range(layout) -> None:
    with pytest.raises(IndexError):
        layout.state_index(6, 0, 0)
    with pytest.raises(IndexError):
        layout.control_index(0, 3, 0)
    with pytest.raises(IndexError):
        layout.time_index(2)


def test_waypoint_views(layout, x) -> None:
    block = layout.vars_at_waypoint(x, 1)
    assert block.shape == (10, 3)
    assert block[0, 0] == layout.state_index(0, 0, 1)
    assert block[9, 2] == layout.control_index(3, 2, 1)
    np.testing.assert_array_equal(layout.states_at_waypoint(x, 1), block[:6])
    np.testing.assert_array_equal(layout.controls_at_waypoint(x, 1), block[6:])


def test_collocation_point_views(layout, x) -> None:
    block = layout.vars_at_collocation_point(x, 2)
    assert block.shape == (10, 2)
    assert block[0, 1] == layout.state_index(0, 2, 1)
    assert layout.states_at_collocation_point(x, 2).shape == (6, 2)
    assert layout.controls_at_collocation_point(x, 2)[3, 0] == layout.control_index(3, 2, 0)


def test_single_entries(layout, x) -> None:
    np.testing.assert_array_equal(layout.state(x, 1, 1), np.arange(40, 46))
    np.testing.assert_array_equal(layout.control(x, 1, 1), np.arange(46, 50))
    np.testing.assert_array_equal(layout.times(x), [60.0, 61.0])


def test_casadi_views_match_numpy(layout, x) -> None:
    dm = ca.DM(x)
    np.testing.assert_array_equal(
        layout.vars_at_waypoint(dm, 1).full(), layout.vars_at_waypoint(x, 1),
    )
    np.testing.assert_array_equal(
        layout.controls_at_collocation_point(dm, 1).full(),
        layout.controls_at_collocation_point(x, 1),
    )


def test_split_shapes_and_pack_inverse(layout, x) -> None:
    states, controls, times = layout.split(x)
    assert states.shape == (2, 3, 6)
    assert controls.shape == (2, 3, 4)
    assert states[1, 2, 0] == layout.state_index(0, 2, 1)
    assert controls[0, 1, 3] == layout.control_index(3, 1, 0)
    np.testing.assert_array_equal(layout.pack(states, controls, times), x)


def test_split_rejects_wrong_size(layout) -> None:
    with pytest.raises(ValueError):
        layout.split(np.zeros(layout.n_vars - 1))
