"""
Tests for NumericalFailureCriterion.
"""

import numpy as np
import pytest

from itersolve import CalculationStatus, NumericalFailureCriterion


class TestDetermineStatus:
    def test_finite_residual_is_running(self) -> None:
        criterion = NumericalFailureCriterion()
        status = criterion.determine_status(0, np.zeros(3), np.ones(3), np.array([1.0, -2.0, 0.0]))
        assert status == CalculationStatus.RUNNING

    @pytest.mark.parametrize("bad", [np.nan, np.inf, -np.inf])
    def test_non_finite_residual_fails(self, bad: float) -> None:
        """Any NaN or infinite residual entry should fail the calculation."""
        criterion = NumericalFailureCriterion()
        status = criterion.determine_status(2, np.zeros(3), np.ones(3), np.array([0.0, bad, 0.0]))
        assert status == CalculationStatus.FAILED

    def test_complex_nan_fails(self) -> None:
        criterion = NumericalFailureCriterion()
        residual = np.array([1.0 + 0.0j, complex(0.0, np.nan)], dtype=np.complex64)
        assert criterion.determine_status(0, np.zeros(2), np.ones(2), residual) == (
            CalculationStatus.FAILED
        )

    def test_solution_ignored_by_default(self) -> None:
        criterion = NumericalFailureCriterion()
        solution = np.array([np.nan, 0.0])
        assert criterion.determine_status(0, solution, np.ones(2), np.ones(2)) == (
            CalculationStatus.RUNNING
        )

    def test_solution_checked_when_enabled(self) -> None:
        criterion = NumericalFailureCriterion(check_solution=True)
        solution = np.array([np.inf, 0.0])
        assert criterion.determine_status(0, solution, np.ones(2), np.ones(2)) == (
            CalculationStatus.FAILED
        )

    def test_failed_is_latched(self) -> None:
        criterion = NumericalFailureCriterion()
        criterion.determine_status(0, np.zeros(1), np.ones(1), np.array([np.nan]))
        assert criterion.determine_status(1, np.zeros(1), np.ones(1), np.ones(1)) == (
            CalculationStatus.FAILED
        )


class TestLifecycle:
    def test_reset_and_clone(self) -> None:
        criterion = NumericalFailureCriterion(check_solution=True)
        criterion.determine_status(0, np.zeros(1), np.ones(1), np.array([np.nan]))

        clone = criterion.clone()
        criterion.reset_to_precalculation_state()

        assert criterion.status == CalculationStatus.INDETERMINATE
        assert clone.status == CalculationStatus.INDETERMINATE
        assert clone.check_solution is True
