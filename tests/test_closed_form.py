"""
Unit Tests for the Closed-Form Solver
=====================================
Exact flat-ground motion, sampled trajectories and the envelope/range
helpers.
"""

import sys
import os
import math
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from trajectory_engine.closed_form import (
    apogee_height, apogee_range, apogee_time, arc_length, bounding_parabola,
    closed_form_trajectory, flight_time, height_at_range, horizontal_range,
    max_range, position_at, range_extrema, range_over_time,
)
from trajectory_engine.errors import ConfigurationError
from trajectory_engine.integrator import TerminationReason
from trajectory_engine.projectile import SimulationParameters


G = 9.81


class TestScalarFormulas:
    """Time of flight, range and apogee."""

    def test_ground_launch_range(self):
        assert horizontal_range(10.0, 45.0, G) == pytest.approx(100.0 / G)

    def test_ground_launch_flight_time(self):
        vy = 10.0 * math.sin(math.radians(30.0))
        assert flight_time(10.0, 30.0, G) == pytest.approx(2.0 * vy / G)

    def test_elevated_launch_lands_at_ground(self):
        T = flight_time(20.0, 30.0, G, h0=10.0)
        _, y = position_at(T, 20.0, 30.0, G, h0=10.0)
        assert float(y) == pytest.approx(0.0, abs=1e-9)
        assert T > flight_time(20.0, 30.0, G)

    def test_apogee(self):
        assert apogee_time(20.0, 30.0, G) == pytest.approx(10.0 / G)
        assert apogee_height(20.0, 30.0, G, h0=10.0) == pytest.approx(10.0 + 100.0 / (2 * G))
        assert apogee_range(10.0, 45.0, G) == pytest.approx(horizontal_range(10.0, 45.0, G) / 2)

    def test_vertical_launch_has_zero_range(self):
        assert horizontal_range(10.0, 90.0, G) == 0.0

    def test_complementary_angles_share_range(self):
        assert horizontal_range(15.0, 20.0, G) == pytest.approx(horizontal_range(15.0, 70.0, G))

    @pytest.mark.parametrize("g", [0.0, -9.81])
    def test_non_positive_gravity_rejected(self, g):
        with pytest.raises(ConfigurationError):
            flight_time(10.0, 45.0, g)
        with pytest.raises(ConfigurationError):
            closed_form_trajectory(SimulationParameters(g=g))


class TestSampledTrajectory:
    """closed_form_trajectory point sequences."""

    def test_point_count_and_endpoints(self):
        params = SimulationParameters(v0=20.0, angle_deg=30.0, h0=10.0)
        result = closed_form_trajectory(params, n_points=50)
        assert len(result.points) == 50
        first, last = result.points[0], result.points[-1]
        assert (first.t, first.x, first.y) == (0.0, 0.0, 10.0)
        assert first.vx == pytest.approx(20.0 * math.cos(math.radians(30.0)))
        assert first.vy == pytest.approx(10.0)
        assert last.y == 0.0
        assert last.t == pytest.approx(flight_time(20.0, 30.0, G, 10.0))

    def test_default_sample_count(self):
        result = closed_form_trajectory(SimulationParameters())
        assert len(result.points) == 100

    def test_time_strictly_increasing(self):
        result = closed_form_trajectory(SimulationParameters(v0=15.0, angle_deg=60.0))
        assert np.all(np.diff(result.time) > 0)

    def test_metrics_match_formulas(self):
        params = SimulationParameters(v0=20.0, angle_deg=30.0, h0=10.0)
        result = closed_form_trajectory(params)
        assert result.range_total == pytest.approx(horizontal_range(20.0, 30.0, G, 10.0))
        assert result.max_altitude == pytest.approx(apogee_height(20.0, 30.0, G, 10.0))
        assert result.metrics.apogee_time == pytest.approx(apogee_time(20.0, 30.0, G))
        assert result.termination is TerminationReason.GROUND_IMPACT
        assert result.method == 'closed-form'

    def test_horizontal_launch_from_height(self):
        result = closed_form_trajectory(SimulationParameters(v0=5.0, angle_deg=0.0, h0=20.0))
        assert result.range_total == pytest.approx(5.0 * math.sqrt(2 * 20.0 / G))
        assert result.max_altitude == pytest.approx(20.0)

    @pytest.mark.parametrize("angle", [0.0, 180.0, -10.0])
    def test_ground_launch_needs_upward_angle(self, angle):
        with pytest.raises(ConfigurationError):
            closed_form_trajectory(SimulationParameters(angle_deg=angle))

    def test_no_non_finite_values(self):
        result = closed_form_trajectory(SimulationParameters(v0=30.0, angle_deg=89.0))
        for col in (result.time, result.x, result.y, result.vx, result.vy, result.speed):
            assert np.all(np.isfinite(col))


class TestEnvelopeAndRange:
    """Bounding parabola, max range, y(x), r(t) and arc length."""

    def test_height_at_range_matches_parametric(self):
        vx = 20.0 * math.cos(math.radians(40.0))
        for x in [0.0, 5.0, 20.0, 35.0]:
            _, y = position_at(x / vx, 20.0, 40.0, G, h0=3.0)
            assert height_at_range(x, 20.0, 40.0, G, h0=3.0) == pytest.approx(float(y))

    def test_height_at_range_rejects_vertical(self):
        with pytest.raises(ConfigurationError):
            height_at_range(1.0, 10.0, 90.0, G)

    def test_bounding_parabola_encloses_all_trajectories(self):
        xs = np.linspace(0.0, 40.0, 81)
        envelope = bounding_parabola(xs, 20.0, G, h0=2.0)
        for angle in np.arange(5.0, 90.0, 5.0):
            heights = height_at_range(xs, 20.0, angle, G, h0=2.0)
            assert np.all(heights <= envelope + 1e-9)

    def test_bounding_parabola_peak(self):
        assert float(bounding_parabola(0.0, 10.0, G)) == pytest.approx(100.0 / (2 * G))

    def test_max_range_ground_launch(self):
        assert max_range(10.0, G) == pytest.approx(100.0 / G)

    def test_max_range_beats_every_angle(self):
        best = max_range(15.0, G, h0=10.0)
        for angle in np.arange(1.0, 90.0, 1.0):
            assert horizontal_range(15.0, angle, G, 10.0) <= best + 1e-9

    def test_range_over_time_is_distance_from_launch(self):
        t = np.linspace(0.0, 2.0, 11)
        x, y = position_at(t, 10.0, 60.0, G)
        assert np.allclose(range_over_time(t, 10.0, 60.0, G), np.hypot(x, y))

    def test_no_range_extrema_for_shallow_launch(self):
        assert range_extrema(10.0, 45.0, G) is None
        assert range_extrema(10.0, 70.0, G) is None

    def test_range_extrema_for_steep_launch(self):
        t_max, t_min = range_extrema(10.0, 85.0, G)
        assert 0 < t_max < t_min
        eps = 1e-3
        r = lambda t: float(range_over_time(t, 10.0, 85.0, G))
        assert r(t_max) > r(t_max - eps) and r(t_max) > r(t_max + eps)
        assert r(t_min) < r(t_min - eps) and r(t_min) < r(t_min + eps)

    def test_arc_length_matches_fine_sampling(self):
        params = SimulationParameters(v0=20.0, angle_deg=35.0, h0=5.0)
        fine = closed_form_trajectory(params, n_points=20000)
        assert arc_length(20.0, 35.0, G, 5.0) == pytest.approx(
            fine.metrics.distance_traveled, rel=1e-6)

    def test_arc_length_vertical(self):
        assert arc_length(10.0, 90.0, G) == pytest.approx(100.0 / G)


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
