"""
Trajectory Summarizer
=====================
Pure reductions over a point sequence: range, time of flight, apogee,
distance traveled and landing coordinates, plus the ground-crossing
interpolation the integrator uses to end a run exactly on the ground.

Points are any objects with ``t, x, y, vx, vy, v`` attributes (and
``z, vz`` for the spherical model), i.e. ``integrator.TrajectoryPoint``.
"""

from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

import numpy as np

from .kinematics import distance_along


@dataclass(frozen=True)
class TrajectorySummary:
    """Scalar metrics derived from a trajectory."""
    range: float              # m  horizontal (surface) distance at the end
    time_of_flight: float     # s
    apogee_height: float      # m  above the ground/surface
    apogee_x: float           # m
    apogee_time: float        # s
    distance_traveled: float  # m  along the path
    landing_x: float
    landing_y: float
    landing_z: Optional[float] = None
    landing_lat_deg: Optional[float] = None
    landing_lon_deg: Optional[float] = None


def _point_height(point, radius: Optional[float]) -> float:
    if radius is None:
        return point.y
    return float(np.sqrt(point.x ** 2 + point.y ** 2 + point.z ** 2) - radius)


def interpolate_ground_crossing(prev, cur, radius: Optional[float] = None):
    """
    Landing point between the last point above ground and the first one
    below it.

    Flat models interpolate linearly in y and pin y to exactly 0. The
    spherical model interpolates in the altitude r − R.
    """
    h_prev = _point_height(prev, radius)
    h_cur = _point_height(cur, radius)
    if h_prev == h_cur:
        ratio = 1.0
    else:
        ratio = h_prev / (h_prev - h_cur)

    def lerp(a, b):
        return a + ratio * (b - a)

    t = lerp(prev.t, cur.t)
    x = lerp(prev.x, cur.x)
    vx = lerp(prev.vx, cur.vx)
    vy = lerp(prev.vy, cur.vy)

    if radius is None:
        v = float(np.hypot(vx, vy))
        return replace(cur, t=t, x=x, y=0.0, vx=vx, vy=vy, v=v)

    y = lerp(prev.y, cur.y)
    z = lerp(prev.z, cur.z)
    vz = lerp(prev.vz, cur.vz)
    v = float(np.sqrt(vx ** 2 + vy ** 2 + vz ** 2))
    return replace(cur, t=t, x=x, y=y, z=z, vx=vx, vy=vy, vz=vz, v=v)


def landing_lat_lon(point, radius: float) -> Tuple[float, float]:
    """
    Latitude/longitude (degrees) of a point on a sphere of the given
    radius, from its position normalised by the radius.
    """
    nx, ny, nz = point.x / radius, point.y / radius, point.z / radius
    lat = np.degrees(np.arcsin(np.clip(nz, -1.0, 1.0)))
    lon = np.degrees(np.arctan2(ny, nx))
    return float(lat), float(lon)


def surface_distance(start, end, radius: float) -> float:
    """Great-circle distance on the sphere between two points' directions."""
    a = np.array([start.x, start.y, start.z])
    b = np.array([end.x, end.y, end.z])
    cos_angle = np.dot(a, b) / (np.linalg.norm(a) * np.linalg.norm(b))
    return float(radius * np.arccos(np.clip(cos_angle, -1.0, 1.0)))


def summarize(points: Sequence, radius: Optional[float] = None,
              apogee: Optional[Tuple[float, float, float]] = None
              ) -> TrajectorySummary:
    """
    Reduce a point sequence to its summary metrics.

    Parameters
    ----------
    points : sequence of TrajectoryPoint
        Time-ordered samples, first point at launch.
    radius : float, optional
        Body radius for the spherical model. Heights become r − R and the
        range becomes the surface distance.
    apogee : (t, x, height), optional
        Exact apogee (closed-form runs) to use instead of the sampled max.

    A sequence whose last point lies below ground right after a point on
    or above it is closed off at the interpolated crossing first.
    """
    if not points:
        raise ValueError("cannot summarize an empty trajectory")

    points = list(points)
    if len(points) >= 2:
        prev, last = points[-2], points[-1]
        if _point_height(last, radius) < 0 <= _point_height(prev, radius):
            points[-1] = interpolate_ground_crossing(prev, last, radius)

    first, last = points[0], points[-1]
    heights = np.array([_point_height(p, radius) for p in points])
    xs = np.array([p.x for p in points])
    ys = np.array([p.y for p in points])

    if apogee is None:
        i_max = int(np.argmax(heights))
        apogee = (points[i_max].t, points[i_max].x, float(heights[i_max]))
    apogee_time, apogee_x, apogee_height = apogee

    if radius is None:
        distance = distance_along(xs, ys)
        return TrajectorySummary(
            range=float(last.x - first.x),
            time_of_flight=float(last.t - first.t),
            apogee_height=float(apogee_height),
            apogee_x=float(apogee_x),
            apogee_time=float(apogee_time),
            distance_traveled=distance,
            landing_x=float(last.x),
            landing_y=float(last.y),
        )

    zs = np.array([p.z for p in points])
    lat, lon = landing_lat_lon(last, radius)
    return TrajectorySummary(
        range=surface_distance(first, last, radius),
        time_of_flight=float(last.t - first.t),
        apogee_height=float(apogee_height),
        apogee_x=float(apogee_x),
        apogee_time=float(apogee_time),
        distance_traveled=distance_along(xs, ys, zs),
        landing_x=float(last.x),
        landing_y=float(last.y),
        landing_z=float(last.z),
        landing_lat_deg=lat,
        landing_lon_deg=lon,
    )


def bounce_apexes(points: Sequence, bounce_indices: Sequence[int]) -> list:
    """
    Highest y reached on each arc of a bouncing trajectory.

    Arc 0 runs from launch to the first bounce, arc k from bounce k to
    bounce k + 1. The stretch after the last bounce is included only if
    the run went on past it.
    """
    ys = np.array([p.y for p in points])
    edges = [0] + list(bounce_indices)
    if not bounce_indices or bounce_indices[-1] < len(points) - 1:
        edges.append(len(points))
    apexes = []
    for start, stop in zip(edges[:-1], edges[1:]):
        if stop > start:
            apexes.append(float(ys[start:stop + 1].max()))
    return apexes


def sample_table(points: Sequence, rows: int = 10) -> list:
    """Every k-th point (and always the last) for a summary table."""
    points = list(points)
    if not points:
        return []
    interval = max(1, len(points) // rows)
    table = points[::interval]
    if table[-1] is not points[-1]:
        table.append(points[-1])
    return table
