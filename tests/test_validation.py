"""
Unit Tests for the Closed-Form Validation Sweep
===============================================
"""

import sys
import os
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from trajectory_engine.forces import Scheme
from trajectory_engine.validation import (
    DEFAULT_ANGLES, REFERENCE_CASES, run_all_validations,
    validate_against_closed_form,
)


class TestValidation:

    def test_one_result_per_angle(self):
        results = validate_against_closed_form(10.0, 9.81, verbose=False)
        assert [r.elevation_deg for r in results] == list(DEFAULT_ANGLES)

    def test_stepped_range_within_one_percent(self):
        for r in validate_against_closed_form(20.0, 9.81, h0=10.0, verbose=False):
            assert abs(r.range_error_pct) < 1.0
            assert abs(r.alt_error_pct) < 1.0
            assert abs(r.tof_error_pct) < 1.0

    def test_semi_implicit_scheme(self):
        results = validate_against_closed_form(
            10.0, 9.81, angles=[45.0], scheme=Scheme.SEMI_IMPLICIT, verbose=False)
        assert abs(results[0].range_error_pct) < 2.0

    def test_all_reference_cases(self):
        all_results = run_all_validations(verbose=False)
        assert set(all_results) == {name for name, *_ in REFERENCE_CASES}

    def test_verbose_report(self, capsys):
        validate_against_closed_form(10.0, 9.81, angles=[45.0], name='Check')
        out = capsys.readouterr().out
        assert "VALIDATION: Check" in out
        assert "PASS" in out


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
