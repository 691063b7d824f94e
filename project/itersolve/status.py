"""
Calculation status of an iterative solve.
"""

from enum import Enum


class CalculationStatus(str, Enum):
    """
    State of an iterative calculation as judged by a stop criterion.

    INDETERMINATE and RUNNING keep the solve going, every other member
    ends it.
    """

    INDETERMINATE = "indeterminate"
    RUNNING = "running"
    CONVERGED = "converged"
    DIVERGED = "diverged"
    ITERATION_LIMIT_REACHED = "iteration_limit_reached"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Whether the solve loop must stop on this status."""
        return self not in (CalculationStatus.INDETERMINATE, CalculationStatus.RUNNING)
