"""
Stop criteria for iterative linear solvers.

Each criterion judges one aspect of the iteration:

- IterationBudgetCriterion: iteration count against a budget
- ResidualConvergenceCriterion: relative residual against a tolerance
- DivergenceCriterion: persistent growth of the residual
- CancellationCriterion: external abort flag
- NumericalFailureCriterion: NaN/inf entries

CompositeEvaluator combines them into a single status per iteration.
"""

from .base import StopCriterion
from .iteration_budget import IterationBudgetCriterion
from .residual_convergence import ResidualConvergenceCriterion
from .divergence import DivergenceCriterion
from .cancellation import CancellationCriterion
from .numerical_failure import NumericalFailureCriterion
from .composite import CompositeEvaluator, STATUS_PRECEDENCE

__all__ = [
    'StopCriterion',
    'IterationBudgetCriterion',
    'ResidualConvergenceCriterion',
    'DivergenceCriterion',
    'CancellationCriterion',
    'NumericalFailureCriterion',
    'CompositeEvaluator',
    'STATUS_PRECEDENCE',
]
