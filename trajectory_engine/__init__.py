"""
Trajectory Simulation & Inverse-Solver Engine
=============================================
A pure computation library for projectile trajectories under several
physical models:
  - Flat-ground closed-form motion (with launch height offset)
  - Quadratic drag through an exponential-density atmosphere
  - Coriolis/centrifugal motion over a rotating spherical body
  - Ground bounces with a coefficient of restitution

and for the inverse problems: the launch angles that reach a target, the
minimum speed that reaches it and the angle of greatest range.

Every call takes an immutable parameter record and returns an immutable
result; nothing is shared between calls.
"""

from .config import EngineConfig, DEFAULT_CONFIG
from .errors import ConfigurationError
from .atmosphere import ExponentialAtmosphere, ConstantAtmosphere, exponential_density
from .projectile import SimulationParameters, Target, validate_parameters
from .forces import (
    ModelKind, Scheme, GravityOnly, QuadraticDrag, RotatingBody, Bouncing,
    select_force_model,
)
from .summary import TrajectorySummary, summarize, bounce_apexes, sample_table
from .integrator import (
    TerminationReason, TrajectoryPoint, TrajectoryResult,
    integrate, simulate, simulate_constant_density,
)
from .closed_form import (
    flight_time, horizontal_range, apogee_height, apogee_time,
    bounding_parabola, max_range, height_at_range, range_over_time,
    range_extrema, arc_length, closed_form_trajectory,
)
from .inverse import (
    AngleSolution, UNREACHABLE, InverseSolution,
    launch_angles, is_reachable, minimum_speed, minimum_speed_angle,
    minimum_speed_bisection, optimum_angle, optimum_angle_atan,
    optimum_angle_numeric, solve_target,
)
from .validation import validate_against_closed_form, run_all_validations

__version__ = "1.0.0"
__all__ = [
    'EngineConfig', 'DEFAULT_CONFIG', 'ConfigurationError',
    'ExponentialAtmosphere', 'ConstantAtmosphere', 'exponential_density',
    'SimulationParameters', 'Target', 'validate_parameters',
    'ModelKind', 'Scheme', 'GravityOnly', 'QuadraticDrag', 'RotatingBody',
    'Bouncing', 'select_force_model',
    'TrajectorySummary', 'summarize', 'bounce_apexes', 'sample_table',
    'TerminationReason', 'TrajectoryPoint', 'TrajectoryResult',
    'integrate', 'simulate', 'simulate_constant_density',
    'flight_time', 'horizontal_range', 'apogee_height', 'apogee_time',
    'bounding_parabola', 'max_range', 'height_at_range', 'range_over_time',
    'range_extrema', 'arc_length', 'closed_form_trajectory',
    'AngleSolution', 'UNREACHABLE', 'InverseSolution',
    'launch_angles', 'is_reachable', 'minimum_speed', 'minimum_speed_angle',
    'minimum_speed_bisection', 'optimum_angle', 'optimum_angle_atan',
    'optimum_angle_numeric', 'solve_target',
    'validate_against_closed_form', 'run_all_validations',
]
