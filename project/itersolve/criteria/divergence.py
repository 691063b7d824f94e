"""
Stop criterion that detects a persistently growing residual.
"""

from typing import Optional
import numbers
import numpy as np

from ..errors import InvalidConfiguration
from ..status import CalculationStatus
from .base import StopCriterion

DEFAULT_GROWTH_FACTOR = 2.0
DEFAULT_MAX_CONSECUTIVE_INCREASES = 3


class DivergenceCriterion(StopCriterion):
    """
    Declares divergence when the residual norm stays far above its best value.

    The criterion tracks the smallest residual norm seen during the solve. An
    iteration whose norm exceeds ``growth_factor`` times that minimum extends
    the streak of increases; any other iteration ends the streak. The status
    becomes DIVERGED once the streak reaches ``max_consecutive_increases``.

    Examples
    --------
    With growth_factor=2 and max_consecutive_increases=3 the norms
    1.0, 2.5, 2.6, 2.7 give RUNNING three times, then DIVERGED.
    """

    name = "divergence"

    def __init__(self,
                 growth_factor: float = DEFAULT_GROWTH_FACTOR,
                 max_consecutive_increases: int = DEFAULT_MAX_CONSECUTIVE_INCREASES):
        super().__init__()
        self.growth_factor = growth_factor
        self.max_consecutive_increases = max_consecutive_increases
        self._minimum_residual_norm: Optional[float] = None
        self._consecutive_increases = 0

    @property
    def growth_factor(self) -> float:
        """Factor over the best residual norm that counts as an increase."""
        return self._growth_factor

    @growth_factor.setter
    def growth_factor(self, value: float):
        if not value > 1:
            raise InvalidConfiguration("growth_factor", value, "must be > 1")
        self._growth_factor = float(value)

    @property
    def max_consecutive_increases(self) -> int:
        """Length of the increase streak at which the calculation has diverged."""
        return self._max_consecutive_increases

    @max_consecutive_increases.setter
    def max_consecutive_increases(self, value: int):
        if not (isinstance(value, numbers.Integral) and not isinstance(value, bool) and value >= 1):
            raise InvalidConfiguration("max_consecutive_increases", value, "must be an integer >= 1")
        self._max_consecutive_increases = value

    @property
    def minimum_residual_norm(self) -> Optional[float]:
        return self._minimum_residual_norm

    @property
    def consecutive_increases(self) -> int:
        return self._consecutive_increases

    def _evaluate(self,
                  iteration_number: int,
                  solution: np.ndarray,
                  source: np.ndarray,
                  residual: np.ndarray) -> CalculationStatus:
        residual_norm = float(np.linalg.norm(residual))

        # Non-finite norms are reported by NumericalFailureCriterion
        if not np.isfinite(residual_norm):
            return CalculationStatus.RUNNING

        if self._minimum_residual_norm is None or residual_norm < self._minimum_residual_norm:
            self._minimum_residual_norm = residual_norm
            self._consecutive_increases = 0
        elif residual_norm > self._growth_factor * self._minimum_residual_norm:
            self._consecutive_increases += 1
        else:
            self._consecutive_increases = 0

        if self._consecutive_increases >= self._max_consecutive_increases:
            return CalculationStatus.DIVERGED
        return CalculationStatus.RUNNING

    def _reset_history(self):
        self._minimum_residual_norm = None
        self._consecutive_increases = 0

    def _configuration(self) -> dict:
        return {
            'growth_factor': self._growth_factor,
            'max_consecutive_increases': self._max_consecutive_increases,
        }
