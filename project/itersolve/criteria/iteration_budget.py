"""
Stop criterion that limits the number of iterations.
"""

import numbers
import numpy as np

from ..errors import InvalidConfiguration
from ..status import CalculationStatus
from .base import StopCriterion

# Number of iterations allowed when no budget is given
DEFAULT_MAXIMUM_ITERATIONS = 1000


class IterationBudgetCriterion(StopCriterion):
    """
    Stops the calculation once ``maximum_iterations`` iterations have passed.

    The reported status is ITERATION_LIMIT_REACHED, i.e. the calculation was
    stopped without convergence.
    """

    name = "iteration budget"

    def __init__(self, maximum_iterations: int = DEFAULT_MAXIMUM_ITERATIONS):
        super().__init__()
        self.maximum_iterations = maximum_iterations

    @property
    def maximum_iterations(self) -> int:
        """Maximum number of iterations the calculation may perform."""
        return self._maximum_iterations

    @maximum_iterations.setter
    def maximum_iterations(self, value: int):
        if not (isinstance(value, numbers.Integral) and not isinstance(value, bool) and value >= 1):
            raise InvalidConfiguration("maximum_iterations", value, "must be an integer >= 1")
        self._maximum_iterations = value

    def reset_maximum_iterations_to_default(self):
        """Restore the default iteration budget."""
        self._maximum_iterations = DEFAULT_MAXIMUM_ITERATIONS

    def _evaluate(self,
                  iteration_number: int,
                  solution: np.ndarray,
                  source: np.ndarray,
                  residual: np.ndarray) -> CalculationStatus:
        if iteration_number >= self._maximum_iterations:
            return CalculationStatus.ITERATION_LIMIT_REACHED
        return CalculationStatus.RUNNING

    def _configuration(self) -> dict:
        return {'maximum_iterations': self._maximum_iterations}
