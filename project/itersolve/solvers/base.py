"""
Base class for iterative solvers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging
import numpy as np
import time

from ..config import StopCriteriaConfig, build_evaluator
from ..criteria import CompositeEvaluator
from ..status import CalculationStatus

logger = logging.getLogger(__name__)


@dataclass
class SolverResult:
    """Container for solver results and diagnostics."""
    solution: np.ndarray
    status: CalculationStatus
    iterations: int
    final_residual_norm: float
    residual_history: List[float]
    elapsed_time: float
    solver_name: str

    # Name of the stop criterion that ended the solve
    stopped_by: Optional[str] = None

    # Additional diagnostics
    initial_residual_norm: float = 0.0
    relative_residual: float = 0.0

    def __post_init__(self):
        if self.initial_residual_norm > 0:
            self.relative_residual = self.final_residual_norm / self.initial_residual_norm

    @property
    def converged(self) -> bool:
        return self.status == CalculationStatus.CONVERGED


class IterativeSolver(ABC):
    """
    Abstract base class for iterative linear system solvers.

    Solves: A @ x = b

    Every solver reports each iterate to a CompositeEvaluator and stops as
    soon as the evaluator returns a terminal status.
    """

    def __init__(self,
                 tolerance: float = 1e-8,
                 max_iterations: int = 1000,
                 verbose: bool = False,
                 stop_criteria: Optional[CompositeEvaluator] = None):
        """
        Initialize solver with convergence parameters.

        Parameters
        ----------
        tolerance : float
            Relative residual tolerance ||b - Ax|| / ||b||
        max_iterations : int
            Maximum number of iterations before termination
        verbose : bool
            Log iteration progress
        stop_criteria : CompositeEvaluator, optional
            Evaluator deciding when to stop. If None, one is built from
            ``tolerance`` and ``max_iterations``.
        """
        if stop_criteria is None:
            stop_criteria = build_evaluator(
                StopCriteriaConfig(maximum_iterations=max_iterations, tolerance=tolerance)
            )
        self.stop_criteria = stop_criteria
        self.verbose = verbose
        self.name = "IterativeSolver"

    @abstractmethod
    def _solve_impl(self,
                    A: np.ndarray,
                    b: np.ndarray,
                    x0: np.ndarray) -> Tuple[np.ndarray, List[float], int, CalculationStatus]:
        """
        Internal solve implementation.

        Parameters
        ----------
        A : np.ndarray
            System matrix (n x n)
        b : np.ndarray
            Right-hand side vector (n,)
        x0 : np.ndarray
            Initial guess (n,)

        Returns
        -------
        tuple
            (solution, residual_history, iterations, status)
        """
        pass

    def _dtype(self, A: np.ndarray, b: np.ndarray) -> np.dtype:
        """Working precision. Real SPD solvers run in float64."""
        return np.float64

    def solve(self,
              A: np.ndarray,
              b: np.ndarray,
              x0: Optional[np.ndarray] = None) -> SolverResult:
        """
        Solve the linear system A @ x = b.

        Parameters
        ----------
        A : np.ndarray
            System matrix (n x n)
        b : np.ndarray
            Right-hand side vector (n,)
        x0 : np.ndarray, optional
            Initial guess. If None, uses zero vector.

        Returns
        -------
        SolverResult
            Solution, final status and convergence diagnostics
        """
        n = len(b)
        dtype = self._dtype(np.asarray(A), np.asarray(b))

        A = np.asarray(A, dtype=dtype)
        b = np.asarray(b, dtype=dtype).flatten()

        if x0 is None:
            x0 = np.zeros(n, dtype=dtype)
        else:
            x0 = np.asarray(x0, dtype=dtype).flatten()

        r0 = b - A @ x0
        initial_residual_norm = float(np.linalg.norm(r0))

        self.stop_criteria.reset_to_precalculation_state()

        start_time = time.perf_counter()
        x, residual_history, iterations, status = self._solve_impl(A, b, x0)
        elapsed_time = time.perf_counter() - start_time

        final_residual = b - A @ x
        final_residual_norm = float(np.linalg.norm(final_residual))

        trigger = self.stop_criteria.triggered_by
        if trigger is not None:
            stopped_by = trigger.name
        else:
            stopped_by = "breakdown" if status.is_terminal else None
        logger.debug(f"{self.name} finished after {iterations} iterations: {status.value}")

        return SolverResult(
            solution=x,
            status=status,
            iterations=iterations,
            final_residual_norm=final_residual_norm,
            residual_history=residual_history,
            elapsed_time=elapsed_time,
            solver_name=self.name,
            stopped_by=stopped_by,
            initial_residual_norm=initial_residual_norm,
        )

    def _check_status(self,
                      iteration: int,
                      x: np.ndarray,
                      b: np.ndarray,
                      r: np.ndarray) -> CalculationStatus:
        """Ask the stop criteria whether to continue."""
        return self.stop_criteria.evaluate(iteration, x, b, r)

    @staticmethod
    def _vanishes(value, u: np.ndarray, v: np.ndarray) -> bool:
        """
        Whether the inner product ``value`` of u and v is lost in rounding.

        The threshold scales with ||u|| ||v||, so badly scaled but well-posed
        systems are not mistaken for a breakdown.
        """
        eps = np.finfo(np.result_type(u.dtype, v.dtype)).eps
        return abs(value) <= eps * np.linalg.norm(u) * np.linalg.norm(v)

    def _breakdown(self, iteration: int) -> CalculationStatus:
        """
        Status for a vanishing denominator in the recurrence.

        The FAILED status is reported on the SolverResult only (with
        ``stopped_by="breakdown"``); the stop criteria did not fire, so the
        evaluator keeps its last status and ``triggered_by`` stays None.
        """
        logger.warning(f"{self.name} broke down at iteration {iteration}")
        return CalculationStatus.FAILED

    def _log(self, iteration: int, residual_norm: float):
        """Log iteration progress."""
        if self.verbose:
            logger.info(f"{self.name} iter {iteration:4d}: ||r|| = {residual_norm:.6e}")
