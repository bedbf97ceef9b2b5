"""Constants used across the trajopt project.

Vehicle and bound constants use the PhysicalConstant dataclass for
traceability. Pure configuration constants (solver defaults, problem
sizes, environment variable names) are raw values.
"""

from __future__ import annotations

from trajopt.units import PhysicalConstant

# =============================================================================
# Vehicle Model
# =============================================================================

GRAVITY = PhysicalConstant(
    value=9.81,
    unit="m/s^2",
    source="Standard gravity, rounded",
    notes="Acts along +z in the NED frame used by the dynamics",
)

VEHICLE_MASS = PhysicalConstant(
    value=1.0,
    unit="kg",
    source="Normalised point-mass model",
    notes="Thrust control is therefore a specific force (m/s^2)",
)

MAX_THRUST = PhysicalConstant(
    value=2.0 * 9.91,
    unit="m/s^2",
    source="Twice hover thrust with margin",
)

MAX_TILT_DEG = PhysicalConstant(
    value=30.0,
    unit="deg",
    source="Small-angle flight envelope for roll and pitch",
)

MAX_YAW_DEG = PhysicalConstant(
    value=2.0 * 360.0,
    unit="deg",
    source="Two full turns either way",
)

MAX_THRUST_RATE = PhysicalConstant(
    value=20.0,
    unit="m/s^3",
    source="Motor spin-up limit",
)

MAX_ANGULAR_RATE_DEG = PhysicalConstant(
    value=30.0,
    unit="deg/s",
    source="Attitude controller bandwidth",
)


# =============================================================================
# Problem Dimensions (raw values)
# =============================================================================

N_STATES: int = 6
N_CONTROLS: int = 4
N_COLLOCATION_POINTS: int = 11

STATE_NAMES: tuple[str, ...] = ("px", "py", "pz", "vx", "vy", "vz")
CONTROL_NAMES: tuple[str, ...] = ("thrust", "phi", "theta", "psi")

# Columns are waypoints: (px, py, pz, vx, vy, vz), NED with z down.
DEFAULT_WAYPOINTS: tuple[tuple[float, ...], ...] = (
    (2.0, 2.0, -1.0, 0.0, 0.0, 0.0),
    (4.0, 2.0, -1.0, 0.0, 0.0, 0.0),
    (8.0, 0.0, -1.0, 0.0, 0.0, 0.0),
    (4.0, -2.0, -1.0, 0.0, 0.0, 0.0),
    (2.0, -2.0, -1.0, 0.0, 0.0, 0.0),
    (0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
)

SEGMENT_TIME_MIN: float = 0.0
SEGMENT_TIME_MAX: float = 10.0
SEGMENT_TIME_GUESS: float = 1.0

# Lower bound written for one-sided inequality constraints.
INEQUALITY_LOWER_BOUND: float = -1e10


# =============================================================================
# Solver Configuration (raw values)
# =============================================================================

DEFAULT_ITERATIONS: int = 100
DEFAULT_TOLERANCE: float = 1e-3
DEFAULT_PRINT_LEVEL: int = 0
DEFAULT_ADAPTIVE_MU_STRATEGY: bool = True
DEFAULT_HESSIAN_APPROXIMATION: bool = True
DEFAULT_SPARSE_FORWARD: bool = True
DEFAULT_SPARSE_REVERSE: bool = True

IPOPT_MAX_PRINT_LEVEL: int = 12
DEFAULT_LINEAR_SOLVER: str = "mumps"

# Ipopt exit statuses that indicate the call itself broke down.
IPOPT_FAILURE_STATUSES: frozenset[str] = frozenset(
    {
        "Invalid_Option",
        "Invalid_Problem_Definition",
        "Insufficient_Memory",
        "Internal_Error",
        "Unrecoverable_Exception",
        "NonIpopt_Exception_Thrown",
    },
)


# =============================================================================
# Environment Variables
# =============================================================================

ENV_LINEAR_SOLVER: str = "TRAJOPT_LINEAR_SOLVER"
ENV_SKIP_VALIDATION: str = "TRAJOPT_SKIP_VALIDATION"
