"""
Unit Tests for the Inverse Solver
=================================
Dual-angle solutions, minimum speed (exact and bisection) and the
optimum launch angle.
"""

import sys
import os
import math
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from trajectory_engine.closed_form import (
    height_at_range, horizontal_range, max_range,
)
from trajectory_engine.config import DEFAULT_CONFIG
from trajectory_engine.errors import ConfigurationError
from trajectory_engine.inverse import (
    UNREACHABLE, discriminant, is_reachable, launch_angles, minimum_speed,
    minimum_speed_angle, minimum_speed_bisection, optimum_angle,
    optimum_angle_atan, optimum_angle_numeric, solve_target,
)
from trajectory_engine.projectile import SimulationParameters, Target


G = 9.81
TARGETS = [Target(30.0, 5.0), Target(12.0, -3.0), Target(50.0, 0.0), Target(8.0, 20.0)]


class TestLaunchAngles:
    """θ₁,₂ = atan((v0² ± √Δ) / (g x))."""

    @pytest.mark.parametrize("target", TARGETS)
    def test_angles_hit_target(self, target):
        v0 = minimum_speed(target, G) + 5.0
        solution = launch_angles(target, v0, G)
        assert len(solution) == 2
        for angle in solution:
            y = height_at_range(target.x, v0, angle, G)
            assert float(y) == pytest.approx(target.y, abs=1e-2)

    def test_high_angle_first(self):
        solution = launch_angles(Target(30.0, 5.0), 20.0, G)
        assert solution.high > solution.low
        assert solution.high == pytest.approx(63.3, abs=0.1)
        assert solution.low == pytest.approx(36.2, abs=0.1)

    def test_launch_height_offset(self):
        target = Target(25.0, 5.0)
        solution = launch_angles(target, 18.0, G, h0=10.0)
        assert solution.reachable
        for angle in solution:
            y = height_at_range(target.x, 18.0, angle, G, h0=10.0)
            assert float(y) == pytest.approx(target.y, abs=1e-2)

    def test_target_behind_launcher(self):
        solution = launch_angles(Target(-30.0, 5.0), 20.0, G)
        assert all(90.0 < a < 180.0 for a in solution)
        for angle in solution:
            y = height_at_range(-30.0, 20.0, angle, G)
            assert float(y) == pytest.approx(5.0, abs=1e-2)

    def test_single_angle_on_envelope(self):
        # Δ = 10⁴ − 10 (10·100 + 0) = 0
        solution = launch_angles(Target(10.0, 0.0), 10.0, 10.0)
        assert len(solution) == 1
        assert solution.high == pytest.approx(45.0)
        assert solution.high == solution.low

    def test_unreachable_sentinel(self):
        solution = launch_angles(Target(100.0, 0.0), 10.0, G)
        assert solution is UNREACHABLE
        assert not solution.reachable
        assert solution.high is None
        assert list(solution) == []

    def test_discriminant_sign(self):
        assert discriminant(Target(30.0, 5.0), 20.0, G) > 0
        assert discriminant(Target(100.0, 0.0), 10.0, G) < 0

    def test_vertical_target_rejected(self):
        with pytest.raises(ConfigurationError) as exc:
            launch_angles(Target(0.0, 5.0), 20.0, G)
        assert exc.value.field == 'target.x'

    @pytest.mark.parametrize("g", [0.0, -9.81, float('nan')])
    def test_bad_gravity_rejected(self, g):
        with pytest.raises(ConfigurationError):
            launch_angles(Target(30.0, 5.0), 20.0, g)

    def test_negative_speed_rejected(self):
        with pytest.raises(ConfigurationError):
            is_reachable(Target(30.0, 5.0), -1.0, G)


class TestMinimumSpeed:
    """Exact v0_min and the bisection on reachability."""

    def test_ground_target(self):
        # Level ground: v_min² = g x, reached at 45°.
        assert minimum_speed(Target(40.0, 0.0), G) == pytest.approx(math.sqrt(G * 40.0))
        assert minimum_speed_angle(Target(40.0, 0.0), G) == pytest.approx(45.0)

    @pytest.mark.parametrize("target", TARGETS)
    def test_angle_bisects_target_elevation(self, target):
        elevation = math.degrees(math.atan2(target.y, target.x))
        assert minimum_speed_angle(target, G) == pytest.approx(45.0 + elevation / 2)

    @pytest.mark.parametrize("target", TARGETS)
    def test_bisection_agrees_with_exact(self, target):
        exact = minimum_speed(target, G)
        bisected = minimum_speed_bisection(target, G)
        assert bisected is not None
        assert abs(bisected - exact) <= DEFAULT_CONFIG.BISECTION_TOL
        assert is_reachable(target, bisected, G)

    @pytest.mark.parametrize("target", TARGETS)
    def test_reachability_is_monotonic(self, target):
        v_min = minimum_speed(target, G)
        tol = DEFAULT_CONFIG.BISECTION_TOL
        for k in range(1, 11):
            assert is_reachable(target, v_min + k * tol, G)
            assert not is_reachable(target, v_min - k * tol, G)

    def test_bisection_with_launch_height(self):
        target = Target(30.0, 2.0)
        exact = minimum_speed(target, G, h0=15.0)
        assert minimum_speed_bisection(target, G, h0=15.0) == pytest.approx(
            exact, abs=DEFAULT_CONFIG.BISECTION_TOL)

    def test_out_of_bracket_returns_none(self):
        assert minimum_speed_bisection(Target(2000.0, 0.0), G) is None

    def test_custom_bracket(self):
        target = Target(30.0, 5.0)
        result = minimum_speed_bisection(target, G, low=10.0, high=30.0, tol=1e-6)
        assert result == pytest.approx(minimum_speed(target, G), abs=1e-6)

    def test_bad_bracket_rejected(self):
        with pytest.raises(ConfigurationError):
            minimum_speed_bisection(Target(30.0, 5.0), G, low=50.0, high=10.0)
        with pytest.raises(ConfigurationError):
            minimum_speed_bisection(Target(30.0, 5.0), G, tol=0.0)


class TestOptimumAngle:
    """Angle of greatest range from a launch height."""

    def test_ground_launch_is_45(self):
        assert optimum_angle(20.0, G) == pytest.approx(45.0)

    @pytest.mark.parametrize("h0", [0.0, 1.0, 10.0, 100.0])
    def test_both_forms_agree(self, h0):
        assert optimum_angle(20.0, G, h0) == pytest.approx(optimum_angle_atan(20.0, G, h0))

    @pytest.mark.parametrize("h0", [1.0, 10.0, 100.0])
    def test_maximises_range(self, h0):
        best = optimum_angle(20.0, G, h0)
        r_best = horizontal_range(20.0, best, G, h0)
        assert best < 45.0
        assert r_best == pytest.approx(max_range(20.0, G, h0))
        assert horizontal_range(20.0, best - 1.0, G, h0) < r_best
        assert horizontal_range(20.0, best + 1.0, G, h0) < r_best

    def test_numeric_matches_closed_form(self):
        assert optimum_angle_numeric(SimulationParameters(v0=20.0)) == pytest.approx(45.0, abs=0.01)
        params = SimulationParameters(v0=20.0, h0=10.0)
        assert optimum_angle_numeric(params) == pytest.approx(
            optimum_angle(20.0, G, 10.0), abs=0.01)

    def test_drag_lowers_optimum(self):
        params = SimulationParameters(v0=100.0, cd=0.3, area=0.01, mass=1.0,
                                      rho0=1.225, scale_height=8500.0)
        assert 30.0 < optimum_angle_numeric(params) < 45.0

    def test_zero_speed_rejected(self):
        with pytest.raises(ConfigurationError):
            optimum_angle(0.0, G)
        with pytest.raises(ConfigurationError):
            optimum_angle_atan(10.0, -G)


class TestSolveTarget:
    """Combined inverse report."""

    def test_reachable_target(self):
        sol = solve_target(Target(30.0, 5.0), 20.0, G)
        assert sol.angles.reachable
        assert sol.min_speed == pytest.approx(minimum_speed(Target(30.0, 5.0), G))
        assert sol.min_speed_bisection == pytest.approx(sol.min_speed, abs=0.01)
        assert sol.optimum_angle == pytest.approx(45.0)

    def test_zero_speed(self):
        sol = solve_target(Target(30.0, 5.0), 0.0, G)
        assert sol.angles is UNREACHABLE
        assert sol.optimum_angle is None

    def test_vertical_target_rejected(self):
        with pytest.raises(ConfigurationError):
            solve_target(Target(0.0, 10.0), 20.0, G)


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
