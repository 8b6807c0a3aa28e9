"""
Inverse Solver
==============
Launch conditions that reach a given target.

Dual-angle solution
    With the target at (x, y) relative to the launch point,

        Δ = v0⁴ − g (g x² + 2 y v0²)
        θ₁,₂ = atan((v0² ± √Δ) / (g x))

    Δ < 0 means the target lies outside the bounding parabola for this
    speed: no real launch angle reaches it.

Minimum speed
    The smallest v0 with Δ ≥ 0. Reachability only improves with speed,
    so bisection on the predicate converges; the exact value is
    v0_min = √(g (y + √(x² + y²))).

Optimum angle
    For a launch from height h0 onto the ground plane,
    θ_opt = asin(1 / √(2 + 2 g h0 / v0²)), equivalently
    atan(1 / √(1 + 2 g h0 / v0²)).
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from scipy.optimize import minimize_scalar

from .closed_form import horizontal_range
from .config import DEFAULT_CONFIG, EngineConfig
from .errors import ConfigurationError
from .integrator import simulate
from .kinematics import rad_to_deg
from .projectile import SimulationParameters, Target, validate_parameters


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AngleSolution:
    """
    Launch angles (degrees) that reach a target, highest elevation first.

    Holds two angles in general, one when the target sits exactly on the
    bounding parabola, none for ``UNREACHABLE``.
    """
    angles: Tuple[float, ...] = ()

    @property
    def reachable(self) -> bool:
        return len(self.angles) > 0

    @property
    def high(self) -> Optional[float]:
        return self.angles[0] if self.angles else None

    @property
    def low(self) -> Optional[float]:
        return self.angles[-1] if self.angles else None

    def __iter__(self):
        return iter(self.angles)

    def __len__(self):
        return len(self.angles)


UNREACHABLE = AngleSolution()


@dataclass(frozen=True)
class InverseSolution:
    """Everything the inverse solver can say about one target."""
    target: Target
    v0: float
    g: float
    h0: float
    angles: AngleSolution
    min_speed: float
    min_speed_bisection: Optional[float]
    min_speed_angle: float
    optimum_angle: Optional[float]


def _check_inputs(target: Target, g: float, v0: Optional[float] = None):
    if not (math.isfinite(target.x) and math.isfinite(target.y)):
        raise ConfigurationError('target', target, "coordinates must be finite")
    if target.x == 0:
        raise ConfigurationError('target.x', target.x,
                                 "a purely vertical target has no closed-form angle")
    if not (math.isfinite(g) and g > 0):
        raise ConfigurationError('g', g, "gravity must be > 0")
    if v0 is not None and not (math.isfinite(v0) and v0 >= 0):
        raise ConfigurationError('v0', v0, "launch speed must be >= 0")


def discriminant(target: Target, v0: float, g: float, h0: float = 0.0) -> float:
    """Δ = v0⁴ − g (g x² + 2 y v0²) with y measured from the launch height."""
    x = target.x
    y = target.y - h0
    return v0 ** 4 - g * (g * x * x + 2.0 * y * v0 * v0)


def is_reachable(target: Target, v0: float, g: float, h0: float = 0.0) -> bool:
    """True if some launch angle at speed v0 reaches the target."""
    _check_inputs(target, g, v0)
    return discriminant(target, v0, g, h0) >= 0


def launch_angles(target: Target, v0: float, g: float,
                  h0: float = 0.0) -> AngleSolution:
    """
    Launch angle(s) that put the projectile through ``target``.

    A target behind the launcher (x < 0) is solved as its mirror image and
    the angles reported measured from +x, i.e. in (90°, 180°).

    Returns
    -------
    AngleSolution
        ``UNREACHABLE`` when Δ < 0.
    """
    _check_inputs(target, g, v0)
    delta = discriminant(target, v0, g, h0)
    if delta < 0:
        return UNREACHABLE

    gx = g * abs(target.x)
    root = math.sqrt(delta)
    if root == 0:
        elevations = (rad_to_deg(math.atan(v0 * v0 / gx)),)
    else:
        elevations = (rad_to_deg(math.atan((v0 * v0 + root) / gx)),
                      rad_to_deg(math.atan((v0 * v0 - root) / gx)))

    if target.x < 0:
        return AngleSolution(tuple(180.0 - a for a in elevations))
    return AngleSolution(elevations)


def minimum_speed(target: Target, g: float, h0: float = 0.0) -> float:
    """Exact minimum launch speed: √(g (y + √(x² + y²)))."""
    _check_inputs(target, g)
    x = target.x
    y = target.y - h0
    return math.sqrt(g * (y + math.hypot(x, y)))


def minimum_speed_angle(target: Target, g: float, h0: float = 0.0) -> float:
    """The single launch angle (degrees) used at the minimum speed."""
    v_min = minimum_speed(target, g, h0)
    elevation = rad_to_deg(math.atan(v_min * v_min / (g * abs(target.x))))
    return elevation if target.x > 0 else 180.0 - elevation


def minimum_speed_bisection(target: Target, g: float, h0: float = 0.0,
                            low: Optional[float] = None,
                            high: Optional[float] = None,
                            tol: Optional[float] = None,
                            config: EngineConfig = DEFAULT_CONFIG
                            ) -> Optional[float]:
    """
    Smallest speed in [low, high] that reaches the target, to within tol.

    Returns the upper end of the final bracket (always a reachable speed),
    or None if the target is out of reach even at ``high``.
    """
    low = config.BISECTION_LOW if low is None else low
    high = config.BISECTION_HIGH if high is None else high
    tol = config.BISECTION_TOL if tol is None else tol
    _check_inputs(target, g)
    if not tol > 0:
        raise ConfigurationError('tol', tol, "tolerance must be > 0")
    if not 0 <= low < high:
        raise ConfigurationError('high', high, "bracket must satisfy 0 <= low < high")

    if not is_reachable(target, high, g, h0):
        logger.debug("Target %s unreachable below %.3f", target, high)
        return None

    while high - low > tol:
        mid = 0.5 * (low + high)
        if is_reachable(target, mid, g, h0):
            high = mid
        else:
            low = mid
    return high


def _check_launch(v0: float, g: float, h0: float):
    if not (math.isfinite(g) and g > 0):
        raise ConfigurationError('g', g, "gravity must be > 0")
    if not v0 > 0:
        raise ConfigurationError('v0', v0, "launch speed must be > 0")
    if h0 < 0:
        raise ConfigurationError('h0', h0, "launch height must be >= 0")


def optimum_angle(v0: float, g: float, h0: float = 0.0) -> float:
    """
    Launch angle (degrees) of greatest range from height h0 onto y = 0.

        θ_opt = asin(1 / √(2 + 2 g h0 / v0²))
    """
    _check_launch(v0, g, h0)
    return rad_to_deg(math.asin(1.0 / math.sqrt(2.0 + 2.0 * g * h0 / (v0 * v0))))


def optimum_angle_atan(v0: float, g: float, h0: float = 0.0) -> float:
    """Same angle as ``optimum_angle``, from tan θ = 1 / √(1 + 2 g h0 / v0²)."""
    _check_launch(v0, g, h0)
    return rad_to_deg(math.atan(1.0 / math.sqrt(1.0 + 2.0 * g * h0 / (v0 * v0))))


def optimum_angle_numeric(params: SimulationParameters, dt: Optional[float] = None,
                          xatol: float = 1e-3,
                          config: EngineConfig = DEFAULT_CONFIG) -> float:
    """
    Angle in (0°, 90°) that maximises the range for the full force model.

    Uses the closed form for plain gravity and the stepping integrator
    otherwise (drag has no closed-form optimum). ``params.angle_deg`` is
    ignored.
    """
    validate_parameters(params)
    plain = not (params.has_drag or params.has_bounce or params.is_rotating)

    def negative_range(angle):
        if plain:
            return -horizontal_range(params.v0, angle, params.g, params.h0)
        run = simulate(replace(params, angle_deg=float(angle)), dt=dt, config=config)
        return -run.range_total

    res = minimize_scalar(negative_range, bounds=(xatol, 90.0 - xatol),
                          method='bounded', options={'xatol': xatol})
    logger.debug("Numeric optimum %.4f° (range %.4f m)", res.x, -res.fun)
    return float(res.x)


def solve_target(target: Target, v0: float, g: float, h0: float = 0.0,
                 config: EngineConfig = DEFAULT_CONFIG) -> InverseSolution:
    """Angles, minimum speed (both ways) and optimum angle for one target."""
    return InverseSolution(
        target=target,
        v0=v0,
        g=g,
        h0=h0,
        angles=launch_angles(target, v0, g, h0),
        min_speed=minimum_speed(target, g, h0),
        min_speed_bisection=minimum_speed_bisection(target, g, h0, config=config),
        min_speed_angle=minimum_speed_angle(target, g, h0),
        optimum_angle=optimum_angle(v0, g, h0) if v0 > 0 else None,
    )
