"""
Closed-Form Solver
==================
Exact projectile motion over a flat ground plane with no air resistance,
launched from height h0 ≥ 0 at speed v0 and elevation θ:

    T    = (v0 sinθ + √((v0 sinθ)² + 2 g h0)) / g      time of flight
    R    = v0 cosθ · T                                  range
    H    = h0 + (v0 sinθ)² / (2g)                       apogee height
    t_a  = v0 sinθ / g                                  apogee time

Nothing here iterates, so these results are the reference the stepping
integrator is validated against.

Also provides the envelope of all trajectories at one speed (bounding
parabola), the maximum range, the trajectory equation y(x) and the
distance-from-launch curve r(t) with its turning points.
"""

import math
from typing import Optional, Tuple

import numpy as np

from .config import DEFAULT_CONFIG
from .errors import ConfigurationError
from .forces import ModelKind
from .integrator import TerminationReason, TrajectoryPoint, TrajectoryResult
from .kinematics import decompose_speed, deg_to_rad, solve_quadratic
from .projectile import SimulationParameters, validate_parameters
from .summary import summarize


def _check_gravity(g: float):
    if not (math.isfinite(g) and g > 0):
        raise ConfigurationError('g', g, "gravity must be > 0")


def flight_time(v0: float, angle_deg: float, g: float, h0: float = 0.0) -> float:
    """Time until the projectile returns to y = 0 (s)."""
    _check_gravity(g)
    _, vy = decompose_speed(v0, angle_deg)
    disc = vy * vy + 2.0 * g * h0
    if disc < 0:
        raise ConfigurationError('h0', h0, "launch point never reaches the ground")
    return (vy + math.sqrt(disc)) / g


def horizontal_range(v0: float, angle_deg: float, g: float,
                     h0: float = 0.0) -> float:
    """Horizontal distance at landing (m); 0 for a vertical launch."""
    vx, _ = decompose_speed(v0, angle_deg)
    return vx * flight_time(v0, angle_deg, g, h0)


def apogee_time(v0: float, angle_deg: float, g: float) -> float:
    """Time of maximum height (s). Negative for a downward launch."""
    _check_gravity(g)
    _, vy = decompose_speed(v0, angle_deg)
    return vy / g


def apogee_height(v0: float, angle_deg: float, g: float,
                  h0: float = 0.0) -> float:
    """Maximum height (m) reached on an upward launch."""
    _check_gravity(g)
    _, vy = decompose_speed(v0, angle_deg)
    return h0 + vy * vy / (2.0 * g)


def apogee_range(v0: float, angle_deg: float, g: float) -> float:
    """Horizontal position of the apogee (m)."""
    vx, _ = decompose_speed(v0, angle_deg)
    return vx * apogee_time(v0, angle_deg, g)


def position_at(t, v0: float, angle_deg: float, g: float, h0: float = 0.0):
    """(x, y) at time t; t may be an array."""
    vx, vy = decompose_speed(v0, angle_deg)
    t = np.asarray(t, dtype=float)
    return vx * t, h0 + vy * t - 0.5 * g * t * t


def height_at_range(x, v0: float, angle_deg: float, g: float,
                    h0: float = 0.0):
    """
    Trajectory equation y(x) = h0 + x tanθ − g/(2v0²)(1 + tan²θ) x².

    Undefined for a vertical launch.
    """
    _check_gravity(g)
    vx, _ = decompose_speed(v0, angle_deg)
    if vx == 0:
        raise ConfigurationError('angle_deg', angle_deg,
                                 "y(x) is undefined for a vertical launch")
    tan_t = math.tan(deg_to_rad(angle_deg))
    x = np.asarray(x, dtype=float)
    return h0 + x * tan_t - g / (2.0 * v0 * v0) * (1.0 + tan_t ** 2) * x * x


def bounding_parabola(x, v0: float, g: float, h0: float = 0.0):
    """
    Envelope of every trajectory at speed v0: points above it cannot be
    reached at that speed.

        y = h0 + v0²/(2g) − g x²/(2 v0²)
    """
    _check_gravity(g)
    if v0 <= 0:
        raise ConfigurationError('v0', v0, "launch speed must be > 0")
    x = np.asarray(x, dtype=float)
    return h0 + v0 * v0 / (2.0 * g) - g * x * x / (2.0 * v0 * v0)


def max_range(v0: float, g: float, h0: float = 0.0) -> float:
    """
    Greatest range at speed v0 from height h0 (at the optimum angle).

        R_max = (v0²/g) · √(1 + 2 g h0 / v0²)
    """
    _check_gravity(g)
    if v0 <= 0:
        raise ConfigurationError('v0', v0, "launch speed must be > 0")
    return v0 * v0 / g * math.sqrt(1.0 + 2.0 * g * h0 / (v0 * v0))


def range_over_time(t, v0: float, angle_deg: float, g: float):
    """
    Straight-line distance from the launch point at time t (h0 = 0):

        r(t) = √(v0² t² − g t³ v0 sinθ + ¼ g² t⁴)
    """
    _check_gravity(g)
    s = math.sin(deg_to_rad(angle_deg))
    t = np.asarray(t, dtype=float)
    r2 = v0 ** 2 * t ** 2 - g * t ** 3 * v0 * s + 0.25 * g ** 2 * t ** 4
    return np.sqrt(np.clip(r2, 0.0, None))


def range_extrema(v0: float, angle_deg: float,
                  g: float) -> Optional[Tuple[float, float]]:
    """
    Times (t₋, t₊) of the local maximum and minimum of r(t).

    r(t) only turns back towards the launcher for steep launches,
    sin²θ > 8/9 (θ > 70.53°); otherwise returns None.
    """
    _check_gravity(g)
    s = math.sin(deg_to_rad(angle_deg))
    # dr²/dt = 0  <=>  g² t² − 3 g v0 sinθ t + 2 v0² = 0
    roots = solve_quadratic(g * g, -3.0 * g * v0 * s, 2.0 * v0 * v0)
    if len(roots) < 2:
        return None
    t_plus, t_minus = roots
    return t_minus, t_plus


def arc_length(v0: float, angle_deg: float, g: float, h0: float = 0.0) -> float:
    """
    Exact path length from launch to landing.

    With u = vy − g t, the speed is √(vx² + u²), whose integral has the
    closed form F(u) = ½ (u √(vx²+u²) + vx² asinh(u / vx)).
    """
    vx, vy = decompose_speed(v0, angle_deg)
    T = flight_time(v0, angle_deg, g, h0)
    vx = abs(vx)
    if vx == 0:
        # Straight up and down.
        top = max(vy, 0.0) ** 2 / (2.0 * g)
        return top + top + h0

    def F(u):
        return 0.5 * (u * math.sqrt(vx * vx + u * u) + vx * vx * math.asinh(u / vx))

    return (F(vy) - F(vy - g * T)) / g


def closed_form_trajectory(params: SimulationParameters,
                           n_points: int = DEFAULT_CONFIG.CLOSED_FORM_POINTS
                           ) -> TrajectoryResult:
    """
    Sample the exact trajectory at ``n_points`` equally spaced times in
    [0, T]. The first sample is the launch state and the last lies on
    the ground.
    """
    validate_parameters(params)
    if n_points < 2:
        raise ConfigurationError('n_points', n_points, "need at least 2 samples")

    v0, theta, g, h0 = params.v0, params.angle_deg, params.g, params.h0
    T = flight_time(v0, theta, g, h0)
    if not T > 0:
        raise ConfigurationError('angle_deg', theta,
                                 "launch from the ground needs θ in (0°, 180°)")

    vx, vy0 = decompose_speed(v0, theta)
    times = np.linspace(0.0, T, n_points)
    xs, ys = position_at(times, v0, theta, g, h0)
    ys[-1] = 0.0
    vys = vy0 - g * times

    points = tuple(
        TrajectoryPoint(t=float(t), x=float(x), y=float(y), vx=vx,
                        vy=float(vy), v=float(math.hypot(vx, vy)))
        for t, x, y, vy in zip(times, xs, ys, vys)
    )

    apogee = None
    t_a = vy0 / g
    if 0 <= t_a <= T:
        apogee = (t_a, vx * t_a, apogee_height(v0, theta, g, h0))

    return TrajectoryResult(
        points=points,
        termination=TerminationReason.GROUND_IMPACT,
        model=ModelKind.GRAVITY_ONLY,
        method='closed-form',
        dt=float(T / (n_points - 1)),
        metrics=summarize(points, apogee=apogee),
    )
