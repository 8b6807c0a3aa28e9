"""
Quadratic Drag Model
====================
Aerodynamic drag proportional to the square of the speed:

    F_drag = −½ ρ |v|² Cd A v̂

Dividing by the mass gives the acceleration −k |v| v with

    k = ½ Cd ρ A / m

The drag coefficient is a constant for the body; only ρ varies along the
flight, through the atmosphere model.
"""

import numpy as np

from .errors import ConfigurationError


def drag_factor(cd: float, rho: float, area: float, mass: float) -> float:
    """
    Drag factor k = ½ Cd ρ A / m (1/m).
    """
    if not mass > 0:
        raise ConfigurationError('mass', mass, "mass must be > 0")
    return 0.5 * cd * rho * area / mass


def drag_acceleration(velocity: np.ndarray, k: float) -> np.ndarray:
    """
    Drag acceleration vector −k |v| v (m/s²).

    Parameters
    ----------
    velocity : np.ndarray
        Velocity relative to the air [vx, vy] or [vx, vy, vz] (m/s)
    k : float
        Drag factor from ``drag_factor``

    Returns
    -------
    np.ndarray
        Acceleration with the same shape as ``velocity``
    """
    v_mag = np.linalg.norm(velocity)
    if v_mag < 1e-10:
        return np.zeros_like(velocity)
    return -k * v_mag * velocity


def terminal_velocity(cd: float, rho: float, area: float, mass: float,
                      g: float) -> float:
    """Speed at which drag balances gravity in a vertical fall (m/s)."""
    k = drag_factor(cd, rho, area, mass)
    if k <= 0:
        return float('inf')
    return float(np.sqrt(g / k))
