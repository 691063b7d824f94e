"""
Default stop criteria configuration.

StopCriteriaConfig collects the settings of the standard criteria set so
solvers and callers can share one place for them. Values are validated by
the criteria themselves when ``build_evaluator`` creates them.
"""

from dataclasses import dataclass
from typing import List, Optional

from .criteria import (
    CancellationCriterion,
    CompositeEvaluator,
    DivergenceCriterion,
    IterationBudgetCriterion,
    NumericalFailureCriterion,
    ResidualConvergenceCriterion,
    StopCriterion,
)
from .criteria.divergence import DEFAULT_GROWTH_FACTOR, DEFAULT_MAX_CONSECUTIVE_INCREASES
from .criteria.iteration_budget import DEFAULT_MAXIMUM_ITERATIONS
from .criteria.residual_convergence import DEFAULT_TOLERANCE


@dataclass(frozen=True)
class StopCriteriaConfig:
    """
    Settings for the standard set of stop criteria.

    Attributes:
        maximum_iterations: Iteration budget.
        tolerance: Relative residual tolerance ||r|| / ||b||.
        growth_factor: Residual growth over the best norm that counts as an
            increase for divergence detection.
        max_consecutive_increases: Streak of increases that means divergence.
        check_solution_finite: Also fail on NaN/inf in the solution vector.
        detect_divergence: Include a DivergenceCriterion. Off by default since
            residuals of CG-type methods are not monotone.
    """

    maximum_iterations: int = DEFAULT_MAXIMUM_ITERATIONS
    tolerance: float = DEFAULT_TOLERANCE
    growth_factor: float = DEFAULT_GROWTH_FACTOR
    max_consecutive_increases: int = DEFAULT_MAX_CONSECUTIVE_INCREASES
    check_solution_finite: bool = False
    detect_divergence: bool = False


def build_evaluator(config: Optional[StopCriteriaConfig] = None,
                    cancellation: Optional[CancellationCriterion] = None) -> CompositeEvaluator:
    """
    Create the standard composite evaluator.

    Members are evaluated in the order: numerical failure, cancellation,
    divergence, residual convergence, iteration budget.

    Parameters
    ----------
    config : StopCriteriaConfig, optional
        Settings; defaults are used when None
    cancellation : CancellationCriterion, optional
        Included when given, so the caller keeps a handle to cancel the solve
    """
    config = config or StopCriteriaConfig()

    criteria: List[StopCriterion] = [NumericalFailureCriterion(config.check_solution_finite)]
    if cancellation is not None:
        criteria.append(cancellation)
    if config.detect_divergence:
        criteria.append(DivergenceCriterion(config.growth_factor, config.max_consecutive_increases))
    criteria.append(ResidualConvergenceCriterion(config.tolerance))
    criteria.append(IterationBudgetCriterion(config.maximum_iterations))

    return CompositeEvaluator(criteria)
