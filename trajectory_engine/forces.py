"""
Force Models
============
Each physical scenario is one variant of a small tagged union consumed by
the single stepping routine in ``integrator``:

  GravityOnly    a = (0, −g)
  QuadraticDrag  a = −k(y) |v| v − (0, g),  k = ½ Cd ρ(y) A / m
  RotatingBody   inverse-square gravity + Coriolis + centrifugal, 3-D
  Bouncing       wraps GravityOnly/QuadraticDrag, reflects at the ground

Every variant knows its launch state, its acceleration, the integration
scheme it is stepped with and the timestep it defaults to.

Rotating frame:
  origin at the body centre, rotation axis along +z, launch from the
  +z pole at (0, 0, R + h0) with velocity (v0 cos θ, 0, v0 sin θ).
"""

import enum
import logging
import math
from dataclasses import dataclass
from typing import Union

import numpy as np

from .atmosphere import ExponentialAtmosphere, ConstantAtmosphere
from .config import EngineConfig
from .drag_model import drag_acceleration, drag_factor
from .errors import ConfigurationError
from .projectile import SimulationParameters, validate_parameters


logger = logging.getLogger(__name__)


class ModelKind(enum.Enum):
    GRAVITY_ONLY = 'gravity-only'
    DRAG = 'drag'
    ROTATING = 'rotating'
    BOUNCING = 'bouncing'


class Scheme(enum.Enum):
    """Fixed-step update rules."""
    # p += v dt + ½ a dt²,  v += a dt
    TAYLOR = 'taylor'
    # v += a dt,  p += v dt
    SEMI_IMPLICIT = 'semi_implicit'


@dataclass(frozen=True)
class GravityOnly:
    g: float
    kind = ModelKind.GRAVITY_ONLY
    scheme = Scheme.TAYLOR

    def acceleration(self, position: np.ndarray,
                     velocity: np.ndarray) -> np.ndarray:
        return np.array([0.0, -self.g])

    def initial_state(self, params: SimulationParameters):
        return params.initial_position(), params.initial_velocity_vector()

    def default_dt(self, config: EngineConfig) -> float:
        return config.STEP_DT


@dataclass(frozen=True)
class QuadraticDrag:
    g: float
    cd: float
    area: float
    mass: float
    atmosphere: Union[ExponentialAtmosphere, ConstantAtmosphere]
    kind = ModelKind.DRAG
    scheme = Scheme.TAYLOR

    def __post_init__(self):
        if not self.mass > 0:
            raise ConfigurationError('mass', self.mass, "mass must be > 0")

    def drag_factor_at(self, altitude: float) -> float:
        # Below ground (between the last step and the crossing) use ρ0.
        rho = self.atmosphere.density(max(altitude, 0.0))
        return drag_factor(self.cd, rho, self.area, self.mass)

    def acceleration(self, position: np.ndarray,
                     velocity: np.ndarray) -> np.ndarray:
        k = self.drag_factor_at(position[1])
        return drag_acceleration(velocity, k) + np.array([0.0, -self.g])

    def with_constant_density(self) -> "QuadraticDrag":
        """Same body in air held at sea-level density."""
        return QuadraticDrag(self.g, self.cd, self.area, self.mass,
                             ConstantAtmosphere(self.atmosphere.rho0))

    def initial_state(self, params: SimulationParameters):
        return params.initial_position(), params.initial_velocity_vector()

    def default_dt(self, config: EngineConfig) -> float:
        return config.STEP_DT


@dataclass(frozen=True)
class RotatingBody:
    g: float
    radius: float
    rotation_period: float
    kind = ModelKind.ROTATING
    scheme = Scheme.SEMI_IMPLICIT

    def __post_init__(self):
        if not self.radius > 0:
            raise ConfigurationError('planet_radius', self.radius,
                                     "planet radius must be > 0")
        if self.rotation_period == 0:
            raise ConfigurationError('rotation_period', self.rotation_period,
                                     "rotation period must be non-zero")

    @property
    def omega(self) -> float:
        """Angular velocity of the body (rad/s); 0 for an infinite period."""
        return 2.0 * math.pi / self.rotation_period

    def acceleration(self, position: np.ndarray,
                     velocity: np.ndarray) -> np.ndarray:
        x, y, z = position
        vx, vy, _ = velocity
        r = np.linalg.norm(position)
        w = self.omega

        a_gravity = -self.g * (self.radius / r) ** 2 * position / r
        a_coriolis = np.array([2.0 * w * vy, -2.0 * w * vx, 0.0])
        a_centrifugal = w * w * np.array([x, y, 0.0])
        return a_gravity + a_coriolis + a_centrifugal

    def altitude(self, position: np.ndarray) -> float:
        return float(np.linalg.norm(position) - self.radius)

    def initial_state(self, params: SimulationParameters):
        vx, vz = params.initial_velocity_vector()
        position = np.array([0.0, 0.0, self.radius + params.h0])
        velocity = np.array([vx, 0.0, vz])
        return position, velocity

    def default_dt(self, config: EngineConfig) -> float:
        return config.ROTATING_DT


@dataclass(frozen=True)
class Bouncing:
    base: Union[GravityOnly, QuadraticDrag]
    restitution: float
    max_bounces: int
    kind = ModelKind.BOUNCING

    def __post_init__(self):
        if not 0.0 <= self.restitution <= 1.0:
            raise ConfigurationError('restitution', self.restitution,
                                     "coefficient of restitution must be in [0, 1]")
        if self.max_bounces < 1:
            raise ConfigurationError('max_bounces', self.max_bounces,
                                     "bounce limit must be >= 1")

    @property
    def g(self) -> float:
        return self.base.g

    @property
    def scheme(self) -> Scheme:
        return self.base.scheme

    def acceleration(self, position: np.ndarray,
                     velocity: np.ndarray) -> np.ndarray:
        return self.base.acceleration(position, velocity)

    def initial_state(self, params: SimulationParameters):
        return self.base.initial_state(params)

    def default_dt(self, config: EngineConfig) -> float:
        return config.STEP_DT


ForceModel = Union[GravityOnly, QuadraticDrag, RotatingBody, Bouncing]


def select_force_model(params: SimulationParameters) -> ForceModel:
    """
    Build the force model implied by the fields present in ``params``.

    Rotating takes precedence, then bounce (on top of drag when the drag
    fields are set), then drag, then gravity only. Gravity sign is not
    checked here; the step cap bounds runs with upward net acceleration.
    """
    validate_parameters(params, require_positive_gravity=False)

    if params.is_rotating:
        model = RotatingBody(params.g, params.planet_radius,
                             params.rotation_period)
    else:
        if params.has_drag:
            atmosphere = ExponentialAtmosphere(params.rho0, params.scale_height)
            model = QuadraticDrag(params.g, params.cd, params.area,
                                  params.mass, atmosphere)
        else:
            model = GravityOnly(params.g)
        if params.has_bounce:
            model = Bouncing(model, params.restitution, int(params.max_bounces))

    logger.debug("Selected %s model for %s", model.kind.value, params)
    return model
