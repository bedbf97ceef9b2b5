from __future__ import annotations

import casadi as ca
import numpy as np
import pytest

from trajopt.constants import GRAVITY, INEQUALITY_LOWER_BOUND
from trajopt.optimization.constraints import (
    CollocationConstraints,
    FusedConstraints,
    InitialStateConstraints,
    StateWaypointConstraint,
    WaypointConstraints,
)
from trajopt.optimization.dynamics import quadrotor_dynamics
from trajopt.optimization.layout import VariableLayout
from trajopt.optimization.problem import WaypointProblem


@pytest.fixture(scope="module")
def problem():
    return WaypointProblem()


@pytest.fixture(scope="module")
def fused(problem):
    return problem.build_constraints()


@pytest.fixture(scope="module")
def g0(problem, fused):
    return fused.evaluate(problem.initial_guess())


def test_block_sizes(fused) -> None:
    sizes = {type(block).__name__: block.n_constraints for block in fused.constraints}
    assert sizes == {
        "CollocationConstraints": 10 * 5,
        "ControlRateConstraints": 2 * 4 * 11 * 6,
        "DynamicsConstraints": 11 * 6 * 6,
        "InitialStateConstraints": 6,
        "SmoothControlConstraints": 4 * 5,
        "WaypointConstraints": 6 * 6,
    }
    assert fused.n_constraints == sum(sizes.values())
    assert list(sizes) == [type(block).__name__ for block in fused.constraints]


def test_bounds(fused) -> None:
    lower, upper = fused.lower_bound, fused.upper_bound
    rates = fused.slices()["ControlRateConstraints"]
    assert lower.shape == upper.shape == (fused.n_constraints,)
    assert np.all(lower[rates] == INEQUALITY_LOWER_BOUND)
    assert np.all(upper == 0.0)
    mask = np.ones(fused.n_constraints, dtype=bool)
    mask[rates] = False
    assert np.all(lower[mask] == 0.0)


def test_symbolic_evaluation_size(problem, fused) -> None:
    x = ca.SX.sym("x", problem.layout.n_vars)
    g = fused(x)
    assert g.shape == (fused.n_constraints, 1)


def test_initial_guess_satisfies_continuity_blocks(fused, g0) -> None:
    """The straight-line guess joins segments and hits every waypoint."""
    slices = fused.slices()
    for name in (
        "CollocationConstraints",
        "InitialStateConstraints",
        "SmoothControlConstraints",
        "WaypointConstraints",
    ):
        np.testing.assert_allclose(g0[slices[name]], 0.0, atol=1e-9, err_msg=name)


def test_initial_guess_satisfies_rate_limits(fused, g0) -> None:
    assert np.all(g0[fused.slices()["ControlRateConstraints"]] <= 0.0)


def test_dynamics_residual_on_initial_guess(problem, fused, g0) -> None:
    """Zero thrust leaves gravity as the vz residual; positions lag the straight line."""
    residual = g0[fused.slices()["DynamicsConstraints"]].reshape(6, 11, 6)
    np.testing.assert_allclose(residual[:, :, 5], GRAVITY.value)
    waypoints = problem.waypoints
    # Segment 1 flies from waypoint 0 to waypoint 1 in one second.
    step = waypoints[:, 1] - waypoints[:, 0]
    np.testing.assert_allclose(residual[1, :, 0], -step[0], atol=1e-8)


def test_state_waypoint_constraint() -> None:
    layout = VariableLayout(n_x=6, n_u=4, n_c=3, n_w=2)
    block = StateWaypointConstraint(layout, 2, [-1.0, -2.0])
    states = np.zeros((2, 3, 6))
    states[0, 2, 2] = -1.0
    states[1, 2, 2] = -1.5
    x = layout.pack(states, np.zeros((2, 3, 4)), np.ones(2))
    g = FusedConstraints([block], layout, np.array([0.0, 0.5, 1.0])).evaluate(x)
    np.testing.assert_allclose(g, [0.0, 0.5])


def test_state_waypoint_constraint_rejects_bad_index() -> None:
    layout = VariableLayout(n_x=6, n_u=4, n_c=3, n_w=2)
    with pytest.raises(ValueError):
        StateWaypointConstraint(layout, 6, [0.0, 0.0])


def test_block_argument_checks() -> None:
    layout = VariableLayout(n_x=6, n_u=4, n_c=3, n_w=2)
    with pytest.raises(ValueError):
        InitialStateConstraints(layout, [0.0] * 5)
    with pytest.raises(ValueError):
        WaypointConstraints(layout, np.zeros((6, 3)))


def test_fused_rejects_mixed_layouts() -> None:
    a = VariableLayout(n_x=6, n_u=4, n_c=3, n_w=2)
    b = VariableLayout(n_x=6, n_u=4, n_c=3, n_w=3)
    with pytest.raises(ValueError):
        FusedConstraints([CollocationConstraints(b)], a, np.array([0.0, 0.5, 1.0]))
    with pytest.raises(ValueError):
        FusedConstraints([], a, np.array([0.0, 0.5, 1.0]))


def test_single_waypoint_problem_has_no_joint_constraints() -> None:
    problem = WaypointProblem(waypoints=np.array([[1.0, 0.0, -1.0, 0.0, 0.0, 0.0]]).T)
    fused = problem.build_constraints()
    slices = fused.slices()
    assert slices["CollocationConstraints"] == slice(0, 0)
    assert slices["SmoothControlConstraints"].start == slices["SmoothControlConstraints"].stop
    assert fused.evaluate(problem.initial_guess()).shape == (fused.n_constraints,)


def test_hover_dynamics_are_static() -> None:
    states = np.zeros((6, 3))
    controls = np.zeros((4, 3))
    controls[0, :] = GRAVITY.value
    np.testing.assert_allclose(quadrotor_dynamics(states, controls), 0.0, atol=1e-12)


def test_roll_accelerates_east() -> None:
    phi = 0.3
    states = np.zeros((6, 1))
    controls = np.array([[10.0], [phi], [0.0], [0.0]])
    f = quadrotor_dynamics(states, controls)
    np.testing.assert_allclose(f[3:, 0], [0.0, 10.0 * np.sin(phi), GRAVITY.value - 10.0 * np.cos(phi)])


def test_dynamics_casadi_matches_numpy() -> None:
    rng = np.random.default_rng(3)
    states = rng.normal(size=(6, 4))
    controls = rng.normal(size=(4, 4))
    symbolic = quadrotor_dynamics(ca.DM(states), ca.DM(controls))
    np.testing.assert_allclose(ca.DM(symbolic).full(), quadrotor_dynamics(states, controls))


def test_dynamics_checks_row_counts() -> None:
    with pytest.raises(ValueError):
        quadrotor_dynamics(np.zeros((5, 1)), np.zeros((4, 1)))
