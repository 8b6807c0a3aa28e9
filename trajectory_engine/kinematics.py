"""
Vector Kinematics Utilities
===========================
Small scalar/vector helpers shared by the solvers: angle conversion,
decomposing a launch speed into components, real quadratic roots and
polyline length.
"""

import math

import numpy as np

from .config import DEFAULT_CONFIG


def deg_to_rad(angle_deg: float) -> float:
    return float(np.radians(angle_deg))


def rad_to_deg(angle_rad: float) -> float:
    return float(np.degrees(angle_rad))


def decompose_speed(speed: float, angle_deg: float,
                    snap: float = DEFAULT_CONFIG.SNAP_TO_ZERO):
    """
    Split a launch speed into (vx, vy).

    Components smaller than ``snap * speed`` are set to exactly zero, so a
    90° launch has ``vx == 0`` rather than ~6e-16.
    """
    theta = deg_to_rad(angle_deg)
    vx = speed * math.cos(theta)
    vy = speed * math.sin(theta)
    limit = snap * abs(speed)
    if abs(vx) < limit:
        vx = 0.0
    if abs(vy) < limit:
        vy = 0.0
    return vx, vy


def magnitude(vector) -> float:
    """Euclidean norm of a vector."""
    return float(np.linalg.norm(vector))


def solve_quadratic(a: float, b: float, c: float) -> tuple:
    """
    Real roots of ``a x² + b x + c = 0``, largest first.

    Returns an empty tuple when there is no real root and a single root
    for a double root. ``a == 0`` is solved as the linear equation.
    """
    if a == 0:
        if b == 0:
            return ()
        return (-c / b,)

    disc = b * b - 4.0 * a * c
    if disc < 0:
        return ()
    if disc == 0:
        return (-b / (2.0 * a),)

    # Numerically stable form (avoids cancellation between -b and sqrt).
    sq = math.sqrt(disc)
    q = -0.5 * (b + math.copysign(sq, b))
    r1 = q / a
    r2 = c / q if q != 0 else -b / a - r1
    return tuple(sorted((r1, r2), reverse=True))


def distance_along(xs, ys, zs=None) -> float:
    """Length of the polyline through the given coordinates."""
    xs = np.asarray(xs, dtype=float)
    ys = np.asarray(ys, dtype=float)
    if xs.size < 2:
        return 0.0
    segments = [np.diff(xs), np.diff(ys)]
    if zs is not None:
        segments.append(np.diff(np.asarray(zs, dtype=float)))
    return float(np.sum(np.sqrt(sum(s ** 2 for s in segments))))
