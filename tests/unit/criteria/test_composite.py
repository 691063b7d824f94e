"""
Tests for CompositeEvaluator.
"""

import logging

import numpy as np
import pytest

from itersolve import (
    CalculationStatus,
    CancellationCriterion,
    CompositeEvaluator,
    DivergenceCriterion,
    InvalidArgument,
    InvalidConfiguration,
    IterationBudgetCriterion,
    NumericalFailureCriterion,
    ResidualConvergenceCriterion,
    StopCriterion,
    STATUS_PRECEDENCE,
)


class FixedStatusCriterion(StopCriterion):
    """Returns a preset status and counts how often it was asked."""

    name = "fixed"

    def __init__(self, result: CalculationStatus = CalculationStatus.RUNNING):
        super().__init__()
        self.result = result
        self.calls = 0

    def _evaluate(self, iteration_number, solution, source, residual):
        self.calls += 1
        return self.result

    def _reset_history(self):
        self.calls = 0

    def _configuration(self):
        return {'result': self.result}


class ExplodingCriterion(FixedStatusCriterion):
    def _evaluate(self, iteration_number, solution, source, residual):
        raise InvalidArgument("residual", None, "must be present")


ORDERED = [
    CalculationStatus.FAILED,
    CalculationStatus.CANCELLED,
    CalculationStatus.DIVERGED,
    CalculationStatus.CONVERGED,
    CalculationStatus.ITERATION_LIMIT_REACHED,
    CalculationStatus.RUNNING,
]


def _evaluate(evaluator, iteration=1, residual=(1.0, 0.0)):
    return evaluator.evaluate(iteration, np.zeros(2), np.ones(2), np.asarray(residual))


class TestConstruction:
    def test_rejects_empty(self) -> None:
        with pytest.raises(InvalidConfiguration, match="at least one"):
            CompositeEvaluator([])

    def test_rejects_repeated_instance(self) -> None:
        criterion = IterationBudgetCriterion(3)
        with pytest.raises(InvalidConfiguration, match="must not repeat"):
            CompositeEvaluator([criterion, criterion])

    def test_keeps_order(self) -> None:
        members = [IterationBudgetCriterion(3), NumericalFailureCriterion()]
        evaluator = CompositeEvaluator(members)
        assert evaluator.criteria == tuple(members)
        assert evaluator.status == CalculationStatus.INDETERMINATE
        assert evaluator.triggered_by is None


class TestPrecedence:
    def test_table_order(self) -> None:
        """Precedence table ranks statuses from failed down to indeterminate."""
        ranked = sorted(STATUS_PRECEDENCE, key=STATUS_PRECEDENCE.get, reverse=True)
        assert ranked == ORDERED + [CalculationStatus.INDETERMINATE]

    @pytest.mark.parametrize("index", range(len(ORDERED) - 1))
    def test_higher_status_wins(self, index: int) -> None:
        """Each status should win over every status below it, in any member order."""
        higher = ORDERED[index]
        for lower in ORDERED[index + 1:]:
            for members in ([lower, higher], [higher, lower]):
                evaluator = CompositeEvaluator(FixedStatusCriterion(s) for s in members)
                assert _evaluate(evaluator) == higher

    def test_nan_residual_fails_rather_than_converges(self) -> None:
        """A NaN residual must fail the solve even alongside a convergence check."""
        convergence = ResidualConvergenceCriterion(tolerance=1e300)
        evaluator = CompositeEvaluator([convergence, NumericalFailureCriterion()])

        status = _evaluate(evaluator, residual=[np.nan, 0.0])

        assert status == CalculationStatus.FAILED
        assert isinstance(evaluator.triggered_by, NumericalFailureCriterion)

    def test_failure_beats_reported_convergence(self) -> None:
        evaluator = CompositeEvaluator([
            FixedStatusCriterion(CalculationStatus.CONVERGED),
            NumericalFailureCriterion(),
        ])
        assert _evaluate(evaluator, residual=[np.inf, 0.0]) == CalculationStatus.FAILED

    def test_convergence_beats_budget(self) -> None:
        evaluator = CompositeEvaluator([
            IterationBudgetCriterion(1),
            ResidualConvergenceCriterion(1e-3),
        ])
        assert _evaluate(evaluator, iteration=1, residual=[0.0, 0.0]) == CalculationStatus.CONVERGED
        assert isinstance(evaluator.triggered_by, ResidualConvergenceCriterion)

    def test_triggered_by_is_first_member_with_winning_status(self) -> None:
        first = FixedStatusCriterion(CalculationStatus.CONVERGED)
        second = FixedStatusCriterion(CalculationStatus.CONVERGED)
        evaluator = CompositeEvaluator([FixedStatusCriterion(), first, second])

        _evaluate(evaluator)
        assert evaluator.triggered_by is first

    def test_running_has_no_trigger(self) -> None:
        evaluator = CompositeEvaluator([FixedStatusCriterion(), IterationBudgetCriterion(5)])
        assert _evaluate(evaluator) == CalculationStatus.RUNNING
        assert evaluator.triggered_by is None


class TestEvaluate:
    def test_all_members_evaluated(self) -> None:
        """Overridden members still see every iteration."""
        members = [FixedStatusCriterion(CalculationStatus.FAILED), FixedStatusCriterion()]
        evaluator = CompositeEvaluator(members)

        _evaluate(evaluator)
        assert [m.calls for m in members] == [1, 1]

    def test_history_updates_when_overridden(self) -> None:
        divergence = DivergenceCriterion(growth_factor=2, max_consecutive_increases=3)
        evaluator = CompositeEvaluator([
            divergence,
            FixedStatusCriterion(CalculationStatus.CANCELLED),
        ])

        _evaluate(evaluator, residual=[4.0, 0.0])
        assert divergence.minimum_residual_norm == 4.0

    def test_terminal_status_is_latched(self) -> None:
        """After a terminal status the members are not consulted again."""
        budget = IterationBudgetCriterion(2)
        counter = FixedStatusCriterion()
        evaluator = CompositeEvaluator([budget, counter])

        for iteration in range(3):
            _evaluate(evaluator, iteration=iteration)
        assert evaluator.status == CalculationStatus.ITERATION_LIMIT_REACHED
        assert counter.calls == 3

        assert _evaluate(evaluator, iteration=3) == CalculationStatus.ITERATION_LIMIT_REACHED
        assert counter.calls == 3

    def test_negative_iteration_rejected(self) -> None:
        evaluator = CompositeEvaluator([NumericalFailureCriterion()])
        with pytest.raises(InvalidArgument):
            _evaluate(evaluator, iteration=-1)

    def test_member_error_propagates(self) -> None:
        """A failing member aborts the evaluation."""
        after = FixedStatusCriterion()
        evaluator = CompositeEvaluator([ExplodingCriterion(), after])

        with pytest.raises(InvalidArgument, match="residual must be present"):
            _evaluate(evaluator)
        assert after.calls == 0

    def test_cancellation_observed_on_next_evaluation(self) -> None:
        cancellation = CancellationCriterion()
        evaluator = CompositeEvaluator([cancellation, IterationBudgetCriterion(100)])

        assert _evaluate(evaluator, iteration=0) == CalculationStatus.RUNNING
        cancellation.cancel()
        assert _evaluate(evaluator, iteration=1) == CalculationStatus.CANCELLED
        assert evaluator.triggered_by is cancellation

    def test_logs_terminal_status(self, caplog: pytest.LogCaptureFixture) -> None:
        evaluator = CompositeEvaluator([IterationBudgetCriterion(1)])
        with caplog.at_level(logging.DEBUG, logger="itersolve.criteria.composite"):
            _evaluate(evaluator, iteration=1)
        assert "iteration_limit_reached" in caplog.text
        assert "iteration budget" in caplog.text


class TestLifecycle:
    def test_reset_delegates_to_members(self) -> None:
        members = [IterationBudgetCriterion(1), DivergenceCriterion()]
        evaluator = CompositeEvaluator(members)
        _evaluate(evaluator, iteration=1)
        evaluator.reset_to_precalculation_state()

        assert evaluator.status == CalculationStatus.INDETERMINATE
        assert evaluator.triggered_by is None
        assert all(m.status == CalculationStatus.INDETERMINATE for m in members)
        assert members[1].minimum_residual_norm is None

    def test_reset_allows_reuse(self) -> None:
        evaluator = CompositeEvaluator([IterationBudgetCriterion(1)])
        _evaluate(evaluator, iteration=1)
        evaluator.reset_to_precalculation_state()
        assert _evaluate(evaluator, iteration=0) == CalculationStatus.RUNNING

    def test_clone_clones_every_member(self) -> None:
        members = [IterationBudgetCriterion(4), ResidualConvergenceCriterion(1e-5)]
        evaluator = CompositeEvaluator(members)
        _evaluate(evaluator, iteration=4)

        clone = evaluator.clone()

        assert clone.status == CalculationStatus.INDETERMINATE
        assert clone.triggered_by is None
        assert len(clone.criteria) == 2
        for original, copied in zip(evaluator.criteria, clone.criteria):
            assert copied is not original
            assert type(copied) is type(original)
            assert copied.status == CalculationStatus.INDETERMINATE
        assert clone.criteria[0].maximum_iterations == 4
        assert clone.criteria[1].tolerance == 1e-5

    def test_clone_runs_independently(self) -> None:
        evaluator = CompositeEvaluator([IterationBudgetCriterion(2)])
        clone = evaluator.clone()

        _evaluate(clone, iteration=2)
        assert clone.status == CalculationStatus.ITERATION_LIMIT_REACHED
        assert evaluator.status == CalculationStatus.INDETERMINATE

    def test_nested_composite(self) -> None:
        inner = CompositeEvaluator([NumericalFailureCriterion()])
        outer = CompositeEvaluator([inner, IterationBudgetCriterion(10)])

        assert _evaluate(outer, residual=[np.nan, 0.0]) == CalculationStatus.FAILED
        assert outer.triggered_by is inner
        assert isinstance(outer.clone().criteria[0], CompositeEvaluator)
