#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  TRAJECTORY ENGINE — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Runs every model once and prints the results:
    1. Atmosphere density profile
    2. Closed-form reference trajectory
    3. Stepping integrator vs closed form validation
    4. Quadratic drag (variable vs constant density)
    5. Bouncing projectile
    6. Rotating planet (Coriolis + centrifugal)
    7. Inverse problem: angles, minimum speed, optimum angle
    8. Step-cap safeguard

  Usage:
    python main.py                    # Run everything
    python main.py --quick            # Skip the numeric drag optimum
    python main.py --target-x 30 --target-y 5 --v0 20
═══════════════════════════════════════════════════════════════════════════════
"""

import argparse
import logging
import sys
import time
from dataclasses import replace

from trajectory_engine.atmosphere import ExponentialAtmosphere
from trajectory_engine.closed_form import (
    closed_form_trajectory, max_range, range_extrema,
)
from trajectory_engine.config import (
    EARTH_RADIUS, EARTH_ROTATION_PERIOD, SCALE_HEIGHT, SEA_LEVEL_DENSITY,
    STANDARD_GRAVITY,
)
from trajectory_engine.errors import ConfigurationError
from trajectory_engine.integrator import simulate, simulate_constant_density
from trajectory_engine.inverse import optimum_angle_numeric, solve_target
from trajectory_engine.projectile import SimulationParameters, Target
from trajectory_engine.summary import bounce_apexes, sample_table
from trajectory_engine.validation import run_all_validations


# Suborbital shot over the rotating Earth; lands well inside the step cap.
PLANET_DEMO_SPEED = 300.0   # m/s


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def print_table(result, rows=10):
    print(f"  {'t (s)':>8} {'x (m)':>10} {'y (m)':>10} {'vx':>8} {'vy':>8} {'v':>8}")
    for p in sample_table(result.points, rows):
        print(f"  {p.t:>8.2f} {p.x:>10.2f} {p.y:>10.2f} "
              f"{p.vx:>8.2f} {p.vy:>8.2f} {p.v:>8.2f}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Projectile trajectories and inverse solutions.")
    parser.add_argument("--v0", type=float, default=20.0, help="launch speed (m/s)")
    parser.add_argument("--angle", type=float, default=45.0, help="elevation (deg)")
    parser.add_argument("--h0", type=float, default=10.0, help="launch height (m)")
    parser.add_argument("--g", type=float, default=STANDARD_GRAVITY,
                        help="gravitational acceleration (m/s²)")
    parser.add_argument("--target-x", type=float, default=40.0)
    parser.add_argument("--target-y", type=float, default=5.0)
    parser.add_argument("--quick", action="store_true",
                        help="skip the numeric optimum-angle search")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    start_time = time.time()

    base = SimulationParameters(v0=args.v0, angle_deg=args.angle,
                                h0=args.h0, g=args.g)

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Atmosphere
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Exponential Atmosphere")
    atm = ExponentialAtmosphere(SEA_LEVEL_DENSITY, SCALE_HEIGHT)
    print(f"  {'Alt (m)':>8} {'ρ (kg/m³)':>11}")
    for h in [0, 1000, 5000, 8500, 10000, 20000]:
        print(f"  {h:>8} {atm.density(h):>11.5f}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Closed form
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Closed-Form Trajectory")
    try:
        exact = closed_form_trajectory(base)
    except ConfigurationError as exc:
        print(f"  ✗ {exc}")
        return 1
    print(exact.summary())
    print_table(exact)
    print(f"\n  Max range at this speed/height: "
          f"{max_range(args.v0, args.g, args.h0):.3f} m")
    extrema = range_extrema(args.v0, args.angle, args.g)
    if extrema:
        print(f"  Distance from launcher turns at t = {extrema[0]:.3f} s "
              f"and {extrema[1]:.3f} s")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Validation
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 3: Stepping Integrator vs Closed Form")
    run_all_validations(verbose=True)

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Drag
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Quadratic Drag")
    drag = replace(base, cd=0.1, area=0.007854, mass=0.1,
                   rho0=SEA_LEVEL_DENSITY, scale_height=SCALE_HEIGHT)
    varying = simulate(drag)
    constant = simulate_constant_density(drag)
    print(f"  Variable density — Range: {varying.range_total:.3f} m  "
          f"Apogee: {varying.max_altitude:.3f} m  ToF: {varying.flight_time:.3f} s")
    print(f"  Constant density — Range: {constant.range_total:.3f} m  "
          f"Apogee: {constant.max_altitude:.3f} m  ToF: {constant.flight_time:.3f} s")
    if not args.quick:
        best = optimum_angle_numeric(drag)
        print(f"  Range-maximising angle with drag: {best:.2f}°")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Bounce
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 5: Bouncing Projectile")
    bounce = replace(base, restitution=0.7, max_bounces=6)
    bounced = simulate(bounce)
    print(bounced.summary())
    apexes = bounce_apexes(bounced.points, bounced.bounce_indices)
    print("  Apex heights: " + ", ".join(f"{a:.3f}" for a in apexes))

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6: Rotating planet
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 6: Rotating Planet")
    planet = SimulationParameters(v0=PLANET_DEMO_SPEED, angle_deg=45.0,
                                  g=STANDARD_GRAVITY,
                                  planet_radius=EARTH_RADIUS,
                                  rotation_period=EARTH_ROTATION_PERIOD)
    flight = simulate(planet)
    print(flight.summary())
    if not flight.is_complete:
        print(f"  ! Run ended with {flight.termination.value}; "
              f"the flight shown is incomplete")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 7: Inverse problem
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 7: Inverse Solver")
    target = Target(args.target_x, args.target_y)
    try:
        sol = solve_target(target, args.v0, args.g, args.h0)
    except ConfigurationError as exc:
        print(f"  ✗ {exc}")
        return 1
    print(f"  Target ({target.x}, {target.y}) from h0 = {args.h0} m "
          f"at v0 = {args.v0} m/s")
    if sol.angles.reachable:
        print("  Launch angles: " + ", ".join(f"{a:.3f}°" for a in sol.angles))
    else:
        print("  Unreachable at this speed")
    print(f"  Minimum speed (exact)     : {sol.min_speed:.3f} m/s "
          f"at {sol.min_speed_angle:.3f}°")
    if sol.min_speed_bisection is not None:
        print(f"  Minimum speed (bisection) : {sol.min_speed_bisection:.3f} m/s")
    if sol.optimum_angle is not None:
        print(f"  Optimum angle (max range) : {sol.optimum_angle:.3f}°")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 8: Safeguard
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 8: Step-Cap Safeguard")
    upward = replace(base, g=-abs(args.g))
    runaway = simulate(upward)
    print(f"  g = {upward.g} → {runaway.termination.value} after "
          f"{len(runaway.points) - 1} steps (t = {runaway.flight_time:.1f} s)")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"\n  Total runtime: {elapsed:.1f} seconds\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
