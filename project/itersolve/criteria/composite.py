"""
Composite evaluator combining several stop criteria into one decision.

Every member is evaluated on every iteration, so that criteria which keep
history (e.g. divergence tracking) stay consistent even when their verdict is
overridden. The member statuses are then reduced with a fixed precedence:

    FAILED > CANCELLED > DIVERGED > CONVERGED > ITERATION_LIMIT_REACHED
           > RUNNING > INDETERMINATE

Numerical failure invalidates any apparent convergence, and a cancellation
wins over a calculation that would otherwise keep running.
"""

import logging
from typing import Iterable, Optional, Tuple
import numpy as np

from ..errors import InvalidConfiguration
from ..status import CalculationStatus
from .base import StopCriterion

logger = logging.getLogger(__name__)

# Higher rank wins when reducing member statuses
STATUS_PRECEDENCE = {
    CalculationStatus.FAILED: 6,
    CalculationStatus.CANCELLED: 5,
    CalculationStatus.DIVERGED: 4,
    CalculationStatus.CONVERGED: 3,
    CalculationStatus.ITERATION_LIMIT_REACHED: 2,
    CalculationStatus.RUNNING: 1,
    CalculationStatus.INDETERMINATE: 0,
}


class CompositeEvaluator(StopCriterion):
    """
    Owns an ordered set of stop criteria and reduces them to one status.

    Member order is evaluation order only; the outcome is decided by
    ``STATUS_PRECEDENCE``. The evaluator owns its members: ``clone`` clones
    each of them, and a criterion instance may appear only once.

    Parameters
    ----------
    criteria : iterable of StopCriterion
        At least one criterion, in the order they are to be evaluated
    """

    name = "composite"

    def __init__(self, criteria: Iterable[StopCriterion]):
        super().__init__()
        criteria = tuple(criteria)
        if not criteria:
            raise InvalidConfiguration("criteria", criteria, "must hold at least one stop criterion")
        if len({id(c) for c in criteria}) != len(criteria):
            raise InvalidConfiguration("criteria", criteria, "must not repeat a criterion instance")
        self._criteria = criteria
        self._triggered_by: Optional[StopCriterion] = None

    @property
    def criteria(self) -> Tuple[StopCriterion, ...]:
        return self._criteria

    @property
    def triggered_by(self) -> Optional[StopCriterion]:
        """The member that produced the terminal status, None while running."""
        return self._triggered_by

    def evaluate(self, iteration: int, solution, source, residual) -> CalculationStatus:
        """
        Evaluate all members for one iteration and return the overall status.

        Errors raised by a member propagate and abort the call. Once a
        terminal status has been reached it is returned without consulting
        the members again.
        """
        return self.determine_status(iteration, solution, source, residual)

    def _evaluate(self,
                  iteration_number: int,
                  solution: np.ndarray,
                  source: np.ndarray,
                  residual: np.ndarray) -> CalculationStatus:
        statuses = [
            criterion.determine_status(iteration_number, solution, source, residual)
            for criterion in self._criteria
        ]

        best = max(range(len(statuses)), key=lambda i: (STATUS_PRECEDENCE[statuses[i]], -i))
        status = statuses[best]

        if status.is_terminal:
            self._triggered_by = self._criteria[best]
            logger.debug(
                f"Iteration {iteration_number}: {status.value} "
                f"(triggered by {self._triggered_by.name})"
            )
        return status

    def _reset_history(self):
        self._triggered_by = None
        for criterion in self._criteria:
            criterion.reset_to_precalculation_state()

    def _configuration(self) -> dict:
        return {'criteria': list(self._criteria)}

    def clone(self) -> "CompositeEvaluator":
        return CompositeEvaluator(criterion.clone() for criterion in self._criteria)
