"""
Conjugate Gradient Solver for Linear Systems
============================================

Solves A @ x = b using the Conjugate Gradient method.

For symmetric positive definite A, CG converges in at most n iterations
(in exact arithmetic) and typically much faster for well-conditioned systems.

The method generates A-conjugate search directions that span the Krylov subspace:
    K_k(A, r_0) = span{r_0, A r_0, A^2 r_0, ..., A^{k-1} r_0}

Reference: Shewchuk, "An Introduction to the Conjugate Gradient Method
Without the Agonizing Pain", 1994.
"""

from typing import List, Tuple
import numpy as np

from ..status import CalculationStatus
from .base import IterativeSolver


class ConjugateGradientSolver(IterativeSolver):
    """
    Conjugate Gradient solver for SPD linear systems.

    - Generates A-conjugate search directions
    - Optimal in Krylov subspace at each iteration
    - Convergence rate: O(sqrt(κ(A))) vs O(κ(A)) for gradient descent
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.name = "Conjugate Gradient"

    def _solve_impl(self,
                    A: np.ndarray,
                    b: np.ndarray,
                    x0: np.ndarray) -> Tuple[np.ndarray, List[float], int, CalculationStatus]:
        """
        Algorithm:
        1. r = b - A @ x
        2. d = r (initial search direction)
        3. For each iteration:
           a. α = (r^T r) / (d^T A d)
           b. x = x + α * d
           c. r_new = r - α * A @ d
           d. β = (r_new^T r_new) / (r^T r)
           e. d = r_new + β * d
        """
        x = x0.copy()
        r = b - A @ x
        d = r.copy()

        rTr = np.dot(r, r)
        residual_history = [float(np.sqrt(rTr))]

        iteration = 0
        status = self._check_status(iteration, x, b, r)

        while not status.is_terminal:
            Ad = A @ d
            dTAd = np.dot(d, Ad)

            if self._vanishes(dTAd, d, Ad):
                status = self._breakdown(iteration)
                break

            alpha = rTr / dTAd

            x = x + alpha * d
            r = r - alpha * Ad

            rTr_new = np.dot(r, r)
            residual_norm = float(np.sqrt(rTr_new))
            residual_history.append(residual_norm)

            iteration += 1
            self._log(iteration, residual_norm)

            status = self._check_status(iteration, x, b, r)
            if status.is_terminal:
                break

            beta = rTr_new / rTr
            d = r + beta * d
            rTr = rTr_new

        return x, residual_history, iteration, status
