"""
Stepping Integrator
===================
One fixed-timestep loop for every force model in ``forces``:

    a = model.acceleration(p, v)
    taylor:         p += v·dt + ½·a·dt²,  v += a·dt
    semi_implicit:  v += a·dt,            p += v·dt

After each step the run ends on the first of:

1. a non-finite state                     → ``diverged``
2. a ground/surface crossing              → ``ground-impact``
   (the last point is interpolated onto the ground)
3. the bounce counter reaching its limit  → ``bounce-limit-reached``
4. the step cap                           → ``max-steps-safeguard``

A bouncing body that would cross the ground during a step is moved to the
contact instant (solved from the step polynomial), gets ``vy → −e·vy``
there, and is stepped through the rest of ``dt``. The contact itself is
recorded as a point with ``y = 0``.

Output: TrajectoryResult with the immutable point sequence and the
summary metrics from ``summary``.
"""

import enum
import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from .config import DEFAULT_CONFIG, EngineConfig
from .errors import ConfigurationError
from .forces import (
    Bouncing, ForceModel, ModelKind, QuadraticDrag, RotatingBody, Scheme,
    select_force_model,
)
from .kinematics import magnitude, solve_quadratic
from .projectile import SimulationParameters
from .summary import TrajectorySummary, interpolate_ground_crossing, summarize


logger = logging.getLogger(__name__)


class TerminationReason(enum.Enum):
    GROUND_IMPACT = 'ground-impact'
    BOUNCE_LIMIT = 'bounce-limit-reached'
    MAX_STEPS = 'max-steps-safeguard'
    DIVERGED = 'diverged'


@dataclass(frozen=True)
class TrajectoryPoint:
    """Snapshot of the projectile at one instant."""
    t: float
    x: float
    y: float
    vx: float
    vy: float
    v: float
    z: Optional[float] = None
    vz: Optional[float] = None


@dataclass(frozen=True)
class TrajectoryResult:
    """Complete trajectory output."""
    points: Tuple[TrajectoryPoint, ...]
    termination: TerminationReason
    model: ModelKind
    method: str               # 'closed-form', 'taylor' or 'semi_implicit'
    dt: float
    metrics: TrajectorySummary
    bounce_indices: Tuple[int, ...] = ()
    radius: Optional[float] = field(default=None, repr=False)

    def _column(self, name) -> np.ndarray:
        return np.array([getattr(p, name) for p in self.points], dtype=float)

    @property
    def time(self) -> np.ndarray:
        return self._column('t')

    @property
    def x(self) -> np.ndarray:
        return self._column('x')

    @property
    def y(self) -> np.ndarray:
        return self._column('y')

    @property
    def z(self) -> np.ndarray:
        if self.points[0].z is None:
            return np.zeros(len(self.points))
        return self._column('z')

    @property
    def vx(self) -> np.ndarray:
        return self._column('vx')

    @property
    def vy(self) -> np.ndarray:
        return self._column('vy')

    @property
    def vz(self) -> np.ndarray:
        if self.points[0].vz is None:
            return np.zeros(len(self.points))
        return self._column('vz')

    @property
    def speed(self) -> np.ndarray:
        return self._column('v')

    @property
    def is_complete(self) -> bool:
        """False when the run was cut short by the safeguard or divergence."""
        return self.termination in (TerminationReason.GROUND_IMPACT,
                                    TerminationReason.BOUNCE_LIMIT)

    @property
    def range_total(self) -> float:
        return self.metrics.range

    @property
    def max_altitude(self) -> float:
        return self.metrics.apogee_height

    @property
    def flight_time(self) -> float:
        return self.metrics.time_of_flight

    @property
    def bounce_count(self) -> int:
        return len(self.bounce_indices)

    def summary(self) -> str:
        """Human-readable summary string."""
        m = self.metrics
        lines = [
            "╔══════════════════════════════════════════════════════╗",
            f"║  TRAJECTORY SUMMARY — {self.model.value:<30s} ║",
            "╠══════════════════════════════════════════════════════╣",
            f"║  Method       : {self.method:<36s} ║",
            f"║  Timestep     : {self.dt:<36.4f} ║",
            f"║  Termination  : {self.termination.value:<36s} ║",
            f"║  Points       : {len(self.points):<36d} ║",
            "╠══════════════════════════════════════════════════════╣",
            f"║  Range        : {m.range:>12.3f} m{'':<22s} ║",
            f"║  Apogee       : {m.apogee_height:>12.3f} m{'':<22s} ║",
            f"║  Flight time  : {m.time_of_flight:>12.3f} s{'':<22s} ║",
            f"║  Distance     : {m.distance_traveled:>12.3f} m{'':<22s} ║",
        ]
        if self.bounce_indices:
            lines.append(f"║  Bounces      : {self.bounce_count:>12d}{'':<24s} ║")
        if m.landing_lat_deg is not None:
            lines.append(f"║  Landing lat  : {m.landing_lat_deg:>12.4f} °{'':<22s} ║")
            lines.append(f"║  Landing lon  : {m.landing_lon_deg:>12.4f} °{'':<22s} ║")
        lines.append("╚══════════════════════════════════════════════════════╝")
        return '\n'.join(lines)


def _make_point(t, pos, vel) -> TrajectoryPoint:
    speed = magnitude(vel)
    if pos.size == 3:
        return TrajectoryPoint(t=t, x=float(pos[0]), y=float(pos[1]),
                               vx=float(vel[0]), vy=float(vel[1]), v=speed,
                               z=float(pos[2]), vz=float(vel[2]))
    return TrajectoryPoint(t=t, x=float(pos[0]), y=float(pos[1]),
                           vx=float(vel[0]), vy=float(vel[1]), v=speed)


def _advance(pos, vel, acc, dt, scheme):
    if scheme is Scheme.SEMI_IMPLICIT:
        new_vel = vel + acc * dt
        new_pos = pos + new_vel * dt
    else:
        new_pos = pos + vel * dt + 0.5 * acc * dt * dt
        new_vel = vel + acc * dt
    return new_pos, new_vel


def _contact_time(y, vy, ay, dt) -> float:
    """Earliest s in [0, dt] with y + vy·s + ½·ay·s² = 0 (dt if none)."""
    roots = [s for s in solve_quadratic(0.5 * ay, vy, y) if 0.0 <= s <= dt]
    return min(roots) if roots else dt


def integrate(model: ForceModel, params: SimulationParameters,
              dt: float, max_steps: int = DEFAULT_CONFIG.MAX_STEPS,
              scheme: Optional[Scheme] = None,
              config: EngineConfig = DEFAULT_CONFIG) -> TrajectoryResult:
    """
    Step ``model`` from the launch state in ``params`` until it terminates.

    Parameters
    ----------
    model : ForceModel
        Variant from ``forces`` (usually from ``select_force_model``).
    params : SimulationParameters
        Source of the launch state.
    dt : float
        Fixed timestep (s).
    max_steps : int
        Step cap; reaching it ends the run with ``max-steps-safeguard``.
    scheme : Scheme, optional
        Overrides the model's own update rule.
    """
    if not (math.isfinite(dt) and dt > 0):
        raise ConfigurationError('dt', dt, "timestep must be > 0")
    if max_steps < 1:
        raise ConfigurationError('max_steps', max_steps,
                                 "step cap must be >= 1")

    scheme = scheme or model.scheme
    radius = model.radius if isinstance(model, RotatingBody) else None
    bouncing = isinstance(model, Bouncing)
    rest_speed = config.REST_SPEED_FACTOR * model.g * dt

    pos, vel = model.initial_state(params)
    points = [_make_point(0.0, pos, vel)]
    bounce_indices = []
    reason = TerminationReason.MAX_STEPS

    with np.errstate(over='ignore', invalid='ignore', divide='ignore'):
        for step in range(1, max_steps + 1):
            acc = model.acceleration(pos, vel)
            new_pos, new_vel = _advance(pos, vel, acc, dt, scheme)
            t = step * dt

            if not (np.all(np.isfinite(new_pos)) and np.all(np.isfinite(new_vel))):
                reason = TerminationReason.DIVERGED
                logger.warning("Run diverged at step %d (t=%.3f s); "
                               "returning %d points", step, t, len(points))
                break

            if bouncing:
                if new_pos[1] < 0:
                    # Reflect at the contact instant, then finish the step.
                    s = _contact_time(pos[1], vel[1], acc[1], dt)
                    c_pos = pos + vel * s + 0.5 * acc * s * s
                    c_vel = vel + acc * s
                    c_pos[1] = 0.0
                    c_vel[1] = -model.restitution * c_vel[1]
                    at_rest = c_vel[1] < rest_speed
                    if at_rest:
                        c_vel[1] = 0.0

                    t_contact = points[-1].t + s
                    contact = _make_point(t_contact, c_pos, c_vel)
                    if s > 0:
                        points.append(contact)
                    else:
                        points[-1] = contact
                    bounce_indices.append(len(points) - 1)

                    if len(bounce_indices) >= model.max_bounces:
                        reason = TerminationReason.BOUNCE_LIMIT
                        break
                    if at_rest:
                        reason = TerminationReason.GROUND_IMPACT
                        break
                    if t_contact >= t:
                        pos, vel = c_pos, c_vel
                        continue
                    new_pos, new_vel = _advance(
                        c_pos, c_vel, model.acceleration(c_pos, c_vel),
                        t - t_contact, scheme)
            else:
                if radius is None:
                    height = new_pos[1]
                    descending = new_vel[1] <= 0
                else:
                    height = model.altitude(new_pos)
                    descending = np.dot(new_pos, new_vel) <= 0
                if height < 0 or (height == 0 and descending):
                    landing = interpolate_ground_crossing(
                        points[-1], _make_point(t, new_pos, new_vel), radius)
                    if landing.t > points[-1].t:
                        points.append(landing)
                    reason = TerminationReason.GROUND_IMPACT
                    break

            points.append(_make_point(t, new_pos, new_vel))
            pos, vel = new_pos, new_vel

    if reason is TerminationReason.MAX_STEPS:
        logger.warning("Step cap of %d reached without termination "
                       "(t=%.3f s); result is incomplete",
                       max_steps, points[-1].t)

    metrics = summarize(points, radius=radius)
    logger.debug("%s run ended with %s after %d points",
                 model.kind.value, reason.value, len(points))
    return TrajectoryResult(
        points=tuple(points),
        termination=reason,
        model=model.kind,
        method=scheme.value,
        dt=dt,
        metrics=metrics,
        bounce_indices=tuple(bounce_indices),
        radius=radius,
    )


def simulate(params: SimulationParameters, dt: Optional[float] = None,
             max_steps: Optional[int] = None, scheme: Optional[Scheme] = None,
             config: EngineConfig = DEFAULT_CONFIG) -> TrajectoryResult:
    """
    Run the stepping integrator with the force model implied by ``params``.

    ``dt`` defaults to the model's timestep from ``config`` (0.01 s, or
    0.1 s for the rotating model).
    """
    model = select_force_model(params)
    if dt is None:
        dt = model.default_dt(config)
    if max_steps is None:
        max_steps = config.MAX_STEPS
    return integrate(model, params, dt, max_steps, scheme, config)


def simulate_constant_density(params: SimulationParameters,
                              dt: Optional[float] = None,
                              max_steps: Optional[int] = None,
                              config: EngineConfig = DEFAULT_CONFIG
                              ) -> TrajectoryResult:
    """
    Companion drag run with the air density held at ρ0 at every altitude.
    """
    model = select_force_model(params)
    if isinstance(model, QuadraticDrag):
        model = model.with_constant_density()
    elif isinstance(model, Bouncing) and isinstance(model.base, QuadraticDrag):
        model = Bouncing(model.base.with_constant_density(),
                         model.restitution, model.max_bounces)
    else:
        raise ConfigurationError(
            'cd', params.cd,
            "the constant-density reference needs the drag model"
        )
    if dt is None:
        dt = model.default_dt(config)
    if max_steps is None:
        max_steps = config.MAX_STEPS
    return integrate(model, params, dt, max_steps, None, config)
