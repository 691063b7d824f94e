"""
Base class for stop criteria.
"""

from abc import ABC, abstractmethod
from typing import Any
import numpy as np

from ..errors import InvalidArgument
from ..status import CalculationStatus


class StopCriterion(ABC):
    """
    Abstract base class for rules that decide when an iterative solve halts.

    A criterion holds two kinds of state:

    - configuration, validated when set and kept across solves
    - per-solve history, cleared by ``reset_to_precalculation_state``

    All criteria share the same call signature so that a solver loop (or a
    ``CompositeEvaluator``) can treat them uniformly.
    """

    name = "StopCriterion"

    def __init__(self):
        self._status = CalculationStatus.INDETERMINATE

    @abstractmethod
    def _evaluate(self,
                  iteration_number: int,
                  solution: np.ndarray,
                  source: np.ndarray,
                  residual: np.ndarray) -> CalculationStatus:
        """
        Judge the current iteration.

        Only called while the criterion is not in a terminal status.

        Returns
        -------
        CalculationStatus
            New status of the calculation according to this criterion
        """
        pass

    def _reset_history(self):
        """Clear per-solve history. Criteria without history need not override."""

    @abstractmethod
    def _configuration(self) -> dict:
        """Keyword arguments that rebuild this criterion's configuration."""
        pass

    def determine_status(self,
                         iteration_number: int,
                         solution: Any,
                         source: Any,
                         residual: Any) -> CalculationStatus:
        """
        Determine the status of the calculation and store it in ``status``.

        Parameters
        ----------
        iteration_number : int
            Number of iterations that have passed so far (0 is the initial guess)
        solution : array_like
            Current solution vector
        source : array_like
            Right-hand side vector
        residual : array_like
            Current residual vector

        Returns
        -------
        CalculationStatus
            The updated status. Once terminal it is returned unchanged until
            the criterion is reset.

        Raises
        ------
        InvalidArgument
            If ``iteration_number`` is negative
        """
        if iteration_number < 0:
            raise InvalidArgument("iteration_number", iteration_number, "must be >= 0")

        if self._status.is_terminal:
            return self._status

        self._status = self._evaluate(
            iteration_number,
            np.asarray(solution),
            np.asarray(source),
            np.asarray(residual),
        )
        return self._status

    @property
    def status(self) -> CalculationStatus:
        """Status computed by the last call to ``determine_status``."""
        return self._status

    def reset_to_precalculation_state(self):
        """Return to the INDETERMINATE status, keeping the configuration."""
        self._status = CalculationStatus.INDETERMINATE
        self._reset_history()

    def clone(self) -> "StopCriterion":
        """Create a new criterion with the same configuration and no history."""
        return type(self)(**self._configuration())

    def __repr__(self) -> str:
        settings = ", ".join(f"{k}={v!r}" for k, v in self._configuration().items())
        return f"{type(self).__name__}({settings})"
