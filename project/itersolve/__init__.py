"""
Convergence monitoring for iterative linear solvers.

After every iteration a solver hands its iterate to a CompositeEvaluator,
which combines a set of stop criteria into one CalculationStatus: keep
iterating, converged, diverged, out of budget, cancelled or failed.
"""

from .status import CalculationStatus
from .errors import InvalidArgument, InvalidConfiguration
from .criteria import (
    CancellationCriterion,
    CompositeEvaluator,
    DivergenceCriterion,
    IterationBudgetCriterion,
    NumericalFailureCriterion,
    ResidualConvergenceCriterion,
    StopCriterion,
    STATUS_PRECEDENCE,
)
from .config import StopCriteriaConfig, build_evaluator

__all__ = [
    'CalculationStatus',
    'InvalidArgument',
    'InvalidConfiguration',
    'StopCriterion',
    'IterationBudgetCriterion',
    'ResidualConvergenceCriterion',
    'DivergenceCriterion',
    'CancellationCriterion',
    'NumericalFailureCriterion',
    'CompositeEvaluator',
    'STATUS_PRECEDENCE',
    'StopCriteriaConfig',
    'build_evaluator',
]
