"""
Iterative Solvers Driven by Stop Criteria
=========================================

Each solver reports its iterates to a CompositeEvaluator, which decides when
to stop:

    A x = b

Solvers:
- Gradient Descent (GD)
- Conjugate Gradient (CG)
- Preconditioned Conjugate Gradient (PCG)
- Biconjugate Gradient Stabilized (BiCGStab), for non-symmetric or complex A
"""

from .base import IterativeSolver, SolverResult
from .gradient_descent import GradientDescentSolver
from .conjugate_gradient import ConjugateGradientSolver
from .preconditioned_cg import PreconditionedCGSolver
from .bicgstab import BiCGStabSolver

__all__ = [
    'IterativeSolver',
    'SolverResult',
    'GradientDescentSolver',
    'ConjugateGradientSolver',
    'PreconditionedCGSolver',
    'BiCGStabSolver',
]
