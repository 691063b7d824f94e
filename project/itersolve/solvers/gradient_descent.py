"""
Gradient Descent Solver for Linear Systems
==========================================

Solves A @ x = b using steepest descent with optimal step size.

For symmetric positive definite A, the optimal step size is:
    α = (r^T r) / (r^T A r)

where r = b - A @ x is the residual.

Reference: Shewchuk, "An Introduction to the Conjugate Gradient Method
Without the Agonizing Pain", 1994.
"""

from typing import List, Tuple
import numpy as np

from ..status import CalculationStatus
from .base import IterativeSolver


class GradientDescentSolver(IterativeSolver):
    """
    Gradient Descent (Steepest Descent) solver for SPD linear systems.

    Convergence rate depends on condition number κ(A), so it is mostly a
    baseline and a slow-converging driver for the stop criteria.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.name = "Gradient Descent"

    def _solve_impl(self,
                    A: np.ndarray,
                    b: np.ndarray,
                    x0: np.ndarray) -> Tuple[np.ndarray, List[float], int, CalculationStatus]:
        """
        Algorithm:
        1. r = b - A @ x
        2. α = (r^T r) / (r^T A r)
        3. x = x + α * r
        4. Repeat until a stop criterion fires
        """
        x = x0.copy()
        r = b - A @ x
        residual_history = [float(np.linalg.norm(r))]

        iteration = 0
        status = self._check_status(iteration, x, b, r)

        while not status.is_terminal:
            Ar = A @ r

            rTr = np.dot(r, r)
            rTAr = np.dot(r, Ar)

            if self._vanishes(rTAr, r, Ar):
                status = self._breakdown(iteration)
                break

            alpha = rTr / rTAr

            x = x + alpha * r
            # r_new = r - α * A @ r
            r = r - alpha * Ar

            residual_norm = float(np.linalg.norm(r))
            residual_history.append(residual_norm)

            iteration += 1
            self._log(iteration, residual_norm)
            status = self._check_status(iteration, x, b, r)

        return x, residual_history, iteration, status
