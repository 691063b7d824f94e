"""
Stop criterion that reports non-finite values.
"""

import numpy as np

from ..status import CalculationStatus
from .base import StopCriterion


class NumericalFailureCriterion(StopCriterion):
    """
    Fails the calculation when the residual holds a NaN or infinite entry.

    With ``check_solution=True`` the solution vector is inspected as well.
    """

    name = "numerical failure"

    def __init__(self, check_solution: bool = False):
        super().__init__()
        self.check_solution = check_solution

    def _evaluate(self,
                  iteration_number: int,
                  solution: np.ndarray,
                  source: np.ndarray,
                  residual: np.ndarray) -> CalculationStatus:
        if not np.all(np.isfinite(residual)):
            return CalculationStatus.FAILED
        if self.check_solution and not np.all(np.isfinite(solution)):
            return CalculationStatus.FAILED
        return CalculationStatus.RUNNING

    def _configuration(self) -> dict:
        return {'check_solution': self.check_solution}
