"""
Simulation Parameters
=====================
Defines the immutable parameter record every solver consumes, the target
record used by the inverse solver, and the validation applied before a
run starts.

Coordinate system (flat models):
  x = horizontal distance from the launch point
  y = height above the ground plane (up positive)

The spherical model uses a body-centred frame instead; see ``forces``.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import STANDARD_GRAVITY
from .errors import ConfigurationError
from .kinematics import decompose_speed


DRAG_FIELDS = ('cd', 'area', 'mass', 'rho0', 'scale_height')
BOUNCE_FIELDS = ('restitution', 'max_bounces')
ROTATING_FIELDS = ('planet_radius', 'rotation_period')


@dataclass(frozen=True)
class SimulationParameters:
    """
    Complete description of a run.

    The optional groups switch on the corresponding physical model when
    every field in the group is set.
    """
    v0: float = 10.0                  # m/s  launch speed
    angle_deg: float = 45.0           # degrees above horizontal
    h0: float = 0.0                   # m    launch height
    g: float = STANDARD_GRAVITY       # m/s²

    # Quadratic drag
    cd: Optional[float] = None        # drag coefficient
    area: Optional[float] = None      # m²   cross-sectional area
    mass: Optional[float] = None      # kg
    rho0: Optional[float] = None      # kg/m³ sea-level density
    scale_height: Optional[float] = None  # m

    # Ground bounce
    restitution: Optional[float] = None   # 0..1
    max_bounces: Optional[int] = None

    # Rotating spherical body
    planet_radius: Optional[float] = None     # m
    rotation_period: Optional[float] = None   # s

    @property
    def has_drag(self) -> bool:
        return _all_set(self, DRAG_FIELDS)

    @property
    def has_bounce(self) -> bool:
        return _all_set(self, BOUNCE_FIELDS)

    @property
    def is_rotating(self) -> bool:
        return _all_set(self, ROTATING_FIELDS)

    def initial_velocity_vector(self) -> np.ndarray:
        """[vx, vy] at launch."""
        return np.array(decompose_speed(self.v0, self.angle_deg))

    def initial_position(self) -> np.ndarray:
        """[x, y] at launch."""
        return np.array([0.0, self.h0])


@dataclass(frozen=True)
class Target:
    """Point to reach, relative to the launch point's ground position."""
    x: float
    y: float = 0.0


def _all_set(params, names) -> bool:
    return all(getattr(params, n) is not None for n in names)


def _require_finite(name, value):
    if value is None or not math.isfinite(value):
        raise ConfigurationError(name, value, "must be a finite number")


def validate_parameters(params: SimulationParameters,
                        require_positive_gravity: bool = True) -> None:
    """
    Reject parameter sets that cannot describe a well-posed run.

    ``require_positive_gravity=False`` is used by the stepping integrator,
    which bounds every run by its step cap and so can accept a net upward
    acceleration.

    Raises
    ------
    ConfigurationError
    """
    for name in ('v0', 'angle_deg', 'h0', 'g'):
        _require_finite(name, getattr(params, name))

    if require_positive_gravity and params.g <= 0:
        raise ConfigurationError('g', params.g, "gravity must be > 0")
    if params.v0 < 0:
        raise ConfigurationError('v0', params.v0, "launch speed must be >= 0")

    groups = [(DRAG_FIELDS, 'drag'), (BOUNCE_FIELDS, 'bounce'),
              (ROTATING_FIELDS, 'rotating')]
    for names, label in groups:
        present = [n for n in names if getattr(params, n) is not None]
        if present and len(present) != len(names):
            missing = [n for n in names if n not in present]
            raise ConfigurationError(
                missing[0], None,
                f"the {label} model needs all of {list(names)}"
            )
        for n in present:
            if n == 'rotation_period':
                # An infinite period is a non-rotating body.
                if math.isnan(params.rotation_period):
                    raise ConfigurationError(n, params.rotation_period,
                                             "must be a number")
                continue
            _require_finite(n, getattr(params, n))

    if params.has_drag:
        if params.mass <= 0:
            raise ConfigurationError('mass', params.mass, "mass must be > 0")
        if params.scale_height <= 0:
            raise ConfigurationError('scale_height', params.scale_height,
                                     "scale height must be > 0")
        if params.cd < 0 or params.area < 0 or params.rho0 < 0:
            bad = next(n for n in ('cd', 'area', 'rho0')
                       if getattr(params, n) < 0)
            raise ConfigurationError(bad, getattr(params, bad),
                                     "must be >= 0")

    if params.has_bounce:
        if not 0.0 <= params.restitution <= 1.0:
            raise ConfigurationError('restitution', params.restitution,
                                     "coefficient of restitution must be in [0, 1]")
        if int(params.max_bounces) != params.max_bounces or params.max_bounces < 1:
            raise ConfigurationError('max_bounces', params.max_bounces,
                                     "bounce limit must be a positive integer")

    if params.is_rotating:
        if params.planet_radius <= 0:
            raise ConfigurationError('planet_radius', params.planet_radius,
                                     "planet radius must be > 0")
        if params.rotation_period == 0:
            raise ConfigurationError('rotation_period', params.rotation_period,
                                     "rotation period must be non-zero")
        if params.has_drag or params.has_bounce:
            raise ConfigurationError(
                'planet_radius', params.planet_radius,
                "the rotating model cannot be combined with drag or bounce"
            )

    if params.h0 < 0:
        raise ConfigurationError('h0', params.h0,
                                 "launch height must be >= 0")
