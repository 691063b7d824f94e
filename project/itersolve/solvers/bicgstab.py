"""
Biconjugate Gradient Stabilized Solver for Linear Systems
=========================================================

Solves A @ x = b for general (non-symmetric, possibly complex) square A using
BiCGStab. Unlike CG the residual norm is not monotone, which makes it the
natural driver for divergence detection.

Reference: van der Vorst, "Bi-CGSTAB: A Fast and Smoothly Converging Variant
of Bi-CG for the Solution of Nonsymmetric Linear Systems", 1992.
"""

from typing import List, Tuple
import numpy as np

from ..status import CalculationStatus
from .base import IterativeSolver


class BiCGStabSolver(IterativeSolver):
    """
    BiCGStab solver for general square linear systems.

    Works in the precision of its inputs: complex64 stays complex64, integer
    input is promoted to float64.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.name = "BiCGStab"

    def _dtype(self, A: np.ndarray, b: np.ndarray) -> np.dtype:
        dtype = np.result_type(A.dtype, b.dtype)
        if not np.issubdtype(dtype, np.inexact):
            return np.dtype(np.float64)
        return dtype

    def _solve_impl(self,
                    A: np.ndarray,
                    b: np.ndarray,
                    x0: np.ndarray) -> Tuple[np.ndarray, List[float], int, CalculationStatus]:
        """
        Algorithm (r̂ fixed shadow residual, <u, v> = u^H v):
        1. ρ_new = <r̂, r>, β = (ρ_new / ρ) (α / ω)
        2. p = r + β (p - ω v), v = A p
        3. α = ρ_new / <r̂, v>, s = r - α v
        4. t = A s, ω = <t, s> / <t, t>
        5. x = x + α p + ω s, r = s - ω t
        """
        x = x0.copy()
        r = b - A @ x
        r_hat = r.copy()

        p = np.zeros_like(r)
        v = np.zeros_like(r)
        rho = alpha = omega = 1.0

        residual_history = [float(np.linalg.norm(r))]

        iteration = 0
        status = self._check_status(iteration, x, b, r)

        while not status.is_terminal:
            rho_new = np.vdot(r_hat, r)
            if self._vanishes(rho_new, r_hat, r):
                status = self._breakdown(iteration)
                break

            beta = (rho_new / rho) * (alpha / omega)
            p = r + beta * (p - omega * v)
            v = A @ p

            r_hat_v = np.vdot(r_hat, v)
            if self._vanishes(r_hat_v, r_hat, v):
                status = self._breakdown(iteration)
                break

            alpha = rho_new / r_hat_v
            s = r - alpha * v

            t = A @ s
            tTt = np.vdot(t, t).real
            tTs = np.vdot(t, s)
            omega = tTs / tTt if tTt > 0 else 0.0

            x = x + alpha * p + omega * s
            r = s - omega * t

            residual_norm = float(np.linalg.norm(r))
            residual_history.append(residual_norm)

            iteration += 1
            self._log(iteration, residual_norm)

            status = self._check_status(iteration, x, b, r)
            if not status.is_terminal and self._vanishes(tTs, t, s):
                status = self._breakdown(iteration)
                break

            rho = rho_new

        return x, residual_history, iteration, status
