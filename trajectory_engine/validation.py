"""
Validation Against the Closed Form
==================================
Runs the stepping integrator with gravity only and compares range, apogee
and time of flight with the exact closed-form values over a sweep of
launch angles.

The drag-free stepped run must agree with the closed form; a sweep that
does not is a sign that the timestep or the integration scheme is wrong.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence

import numpy as np

from . import closed_form
from .config import DEFAULT_CONFIG, EngineConfig
from .forces import GravityOnly, Scheme
from .integrator import integrate
from .projectile import SimulationParameters, validate_parameters


logger = logging.getLogger(__name__)


# (name, v0, g, h0) reference launch setups
REFERENCE_CASES = [
    ('Earth, ground launch', 10.0, 9.81, 0.0),
    ('Earth, 10 m tower', 20.0, 9.81, 10.0),
    ('Moon, ground launch', 10.0, 1.62, 0.0),
]

DEFAULT_ANGLES = (15.0, 30.0, 45.0, 60.0, 75.0)


@dataclass
class ValidationResult:
    """Result of one validation comparison."""
    elevation_deg: float
    ref_range: float        # closed-form range (m)
    sim_range: float        # stepped range (m)
    range_error_pct: float  # % error
    ref_max_alt: float
    sim_max_alt: float
    alt_error_pct: float
    ref_tof: float
    sim_tof: float
    tof_error_pct: float


def _pct(sim, ref):
    return 100.0 * (sim - ref) / ref if ref != 0 else 0.0


def validate_against_closed_form(v0: float, g: float, h0: float = 0.0,
                                 angles: Sequence[float] = DEFAULT_ANGLES,
                                 dt: Optional[float] = None,
                                 scheme: Optional[Scheme] = None,
                                 name: str = 'Custom',
                                 verbose: bool = True,
                                 config: EngineConfig = DEFAULT_CONFIG
                                 ) -> List[ValidationResult]:
    """
    Step the gravity-only model at each angle and compare it with the
    closed form.

    Returns list of ValidationResult for each elevation.
    """
    dt = config.STEP_DT if dt is None else dt
    base = SimulationParameters(v0=v0, g=g, h0=h0)
    validate_parameters(base)
    model = GravityOnly(g)

    results = []

    if verbose:
        print(f"\n{'='*75}")
        print(f"  VALIDATION: {name}")
        print(f"  v0 = {v0} m/s | g = {g} m/s² | h0 = {h0} m | dt = {dt} s")
        print(f"{'='*75}")
        print(f"{'Elev°':>6} {'Ref R (m)':>10} {'Sim R (m)':>10} {'Err %':>7} "
              f"{'Ref Alt':>9} {'Sim Alt':>9} {'Err %':>7} "
              f"{'Ref ToF':>8} {'Sim ToF':>8} {'Err %':>7}")
        print("-" * 75)

    for elev in angles:
        params = replace(base, angle_deg=elev)
        ref_range = closed_form.horizontal_range(v0, elev, g, h0)
        ref_alt = closed_form.apogee_height(v0, elev, g, h0)
        ref_tof = closed_form.flight_time(v0, elev, g, h0)

        traj = integrate(model, params, dt, config.MAX_STEPS, scheme, config)

        vr = ValidationResult(
            elevation_deg=elev,
            ref_range=ref_range,
            sim_range=traj.range_total,
            range_error_pct=_pct(traj.range_total, ref_range),
            ref_max_alt=ref_alt,
            sim_max_alt=traj.max_altitude,
            alt_error_pct=_pct(traj.max_altitude, ref_alt),
            ref_tof=ref_tof,
            sim_tof=traj.flight_time,
            tof_error_pct=_pct(traj.flight_time, ref_tof),
        )
        results.append(vr)

        if verbose:
            print(f"{elev:>6.0f} {ref_range:>10.3f} {vr.sim_range:>10.3f} "
                  f"{vr.range_error_pct:>+7.2f} "
                  f"{ref_alt:>9.3f} {vr.sim_max_alt:>9.3f} {vr.alt_error_pct:>+7.2f} "
                  f"{ref_tof:>8.3f} {vr.sim_tof:>8.3f} {vr.tof_error_pct:>+7.2f}")

    avg_range_err = float(np.mean([abs(r.range_error_pct) for r in results]))
    logger.debug("%s: mean range error %.3f%%", name, avg_range_err)

    if verbose:
        avg_alt_err = np.mean([abs(r.alt_error_pct) for r in results])
        avg_tof_err = np.mean([abs(r.tof_error_pct) for r in results])
        print("-" * 75)
        print(f"  Mean absolute errors — Range: {avg_range_err:.3f}% | "
              f"Altitude: {avg_alt_err:.3f}% | Time: {avg_tof_err:.3f}%")
        status = "✓ PASS" if avg_range_err < 1.0 else "✗ NEEDS SMALLER dt"
        print(f"  Status: {status}")
        print(f"{'='*75}\n")

    return results


def run_all_validations(verbose: bool = True,
                        config: EngineConfig = DEFAULT_CONFIG
                        ) -> Dict[str, List[ValidationResult]]:
    """Run validation for every reference setup."""
    all_results = {}
    for name, v0, g, h0 in REFERENCE_CASES:
        all_results[name] = validate_against_closed_form(
            v0, g, h0, name=name, verbose=verbose, config=config)
    return all_results


if __name__ == "__main__":
    run_all_validations(verbose=True)
