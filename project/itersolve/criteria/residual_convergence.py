"""
Stop criterion based on the relative residual norm.

The calculation has converged once

    ||r|| / ||b|| <= tolerance

where r is the residual and b the source vector. When ||b|| is at or below
``minimum_source_norm`` the tolerance applies to ||r|| itself.
"""

from typing import Optional
import numpy as np

from ..errors import InvalidConfiguration
from ..status import CalculationStatus
from .base import StopCriterion

DEFAULT_TOLERANCE = 1e-8
DEFAULT_MINIMUM_SOURCE_NORM = float(np.finfo(np.float64).eps)


class ResidualConvergenceCriterion(StopCriterion):
    """
    Declares convergence when the relative residual drops within tolerance.

    Non-finite norms never count as convergence; reporting them is left to
    ``NumericalFailureCriterion``.
    """

    name = "residual convergence"

    def __init__(self,
                 tolerance: float = DEFAULT_TOLERANCE,
                 minimum_source_norm: float = DEFAULT_MINIMUM_SOURCE_NORM):
        super().__init__()
        self.tolerance = tolerance
        self.minimum_source_norm = minimum_source_norm
        self._last_relative_residual: Optional[float] = None

    @property
    def tolerance(self) -> float:
        """Relative residual below which the calculation has converged."""
        return self._tolerance

    @tolerance.setter
    def tolerance(self, value: float):
        if not value > 0:
            raise InvalidConfiguration("tolerance", value, "must be > 0")
        self._tolerance = float(value)

    @property
    def minimum_source_norm(self) -> float:
        """Source norm at or below which the residual is judged in absolute terms."""
        return self._minimum_source_norm

    @minimum_source_norm.setter
    def minimum_source_norm(self, value: float):
        if not value > 0:
            raise InvalidConfiguration("minimum_source_norm", value, "must be > 0")
        self._minimum_source_norm = float(value)

    @property
    def last_relative_residual(self) -> Optional[float]:
        """Most recent finite relative residual, None before the first one."""
        return self._last_relative_residual

    def _evaluate(self,
                  iteration_number: int,
                  solution: np.ndarray,
                  source: np.ndarray,
                  residual: np.ndarray) -> CalculationStatus:
        residual_norm = np.linalg.norm(residual)
        source_norm = np.linalg.norm(source)

        if source_norm > self._minimum_source_norm:
            relative_residual = residual_norm / source_norm
        else:
            relative_residual = residual_norm

        if not np.isfinite(relative_residual):
            return CalculationStatus.RUNNING

        self._last_relative_residual = float(relative_residual)
        if relative_residual <= self._tolerance:
            return CalculationStatus.CONVERGED
        return CalculationStatus.RUNNING

    def _reset_history(self):
        self._last_relative_residual = None

    def _configuration(self) -> dict:
        return {
            'tolerance': self._tolerance,
            'minimum_source_norm': self._minimum_source_norm,
        }
