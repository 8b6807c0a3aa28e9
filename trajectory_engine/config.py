"""
Engine Defaults
===============
Physical constants and numerical defaults shared by the solvers.

The numerical settings live in a frozen ``EngineConfig`` so that a run
never observes another caller's changes. Pass a modified copy to the
functions that accept ``config=``:

>>> from trajectory_engine.config import DEFAULT_CONFIG
>>> fine = DEFAULT_CONFIG.with_overrides(STEP_DT=0.001)
>>> fine.STEP_DT
0.001
"""

from dataclasses import dataclass, fields, replace


# ── Physical defaults ─────────────────────────────────────────────────────
STANDARD_GRAVITY      = 9.81        # m/s²
SEA_LEVEL_DENSITY     = 1.225       # kg/m³
SCALE_HEIGHT          = 8500.0      # m
EARTH_RADIUS          = 6371000.0   # m
EARTH_ROTATION_PERIOD = 86400.0     # s


@dataclass(frozen=True)
class EngineConfig:
    """
    Numerical defaults for the engine.

    Attributes
    ----------
    STEP_DT : float
        Timestep for the gravity, drag and bounce models (s).
    ROTATING_DT : float
        Timestep for the rotating spherical model (s).
    MAX_STEPS : int
        Step cap for every stepped run. Reaching it ends the run with
        ``max-steps-safeguard``.
    CLOSED_FORM_POINTS : int
        Number of samples produced by the closed-form trajectory.
    BISECTION_LOW, BISECTION_HIGH : float
        Speed bracket searched by the minimum-speed bisection.
    BISECTION_TOL : float
        Bracket width at which the bisection stops.
    SNAP_TO_ZERO : float
        Relative size below which a velocity component is set to 0.
    REST_SPEED_FACTOR : float
        A rebound slower than ``REST_SPEED_FACTOR * g * dt`` is treated as
        the body coming to rest.
    """

    STEP_DT: float = 0.01
    ROTATING_DT: float = 0.1
    MAX_STEPS: int = 10000
    CLOSED_FORM_POINTS: int = 100
    BISECTION_LOW: float = 0.0
    BISECTION_HIGH: float = 100.0
    BISECTION_TOL: float = 0.01
    SNAP_TO_ZERO: float = 1e-12
    REST_SPEED_FACTOR: float = 1.0

    def with_overrides(self, **kwargs) -> "EngineConfig":
        """Return a copy with the given settings replaced."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise AttributeError(
                f"Unknown config setting(s) {unknown}. "
                f"Available: {sorted(known)}"
            )
        return replace(self, **kwargs)

    def __repr__(self):
        lines = ["EngineConfig:"]
        for f in fields(self):
            lines.append(f"  {f.name} = {getattr(self, f.name)}")
        return "\n".join(lines)


DEFAULT_CONFIG = EngineConfig()
