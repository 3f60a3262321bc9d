import pytest

from spendwise.models import BudgetStatus
from spendwise.services.budget_utils import (
    budget_status,
    percentage_used,
    remaining_budget,
    summarize_budget,
)


@pytest.mark.parametrize(
    "spent, expected",
    [
        (0, BudgetStatus.SAFE),
        (799.999, BudgetStatus.SAFE),
        (800, BudgetStatus.WARNING),
        (999.999, BudgetStatus.WARNING),
        (1000, BudgetStatus.EXCEEDED),
        (1500, BudgetStatus.EXCEEDED),
    ],
)
def test_status_thresholds(spent, expected):
    assert budget_status(spent, 1000) is expected


def test_zero_budget_is_always_safe():
    assert budget_status(10_000, 0) is BudgetStatus.SAFE
    assert percentage_used(10_000, 0) == 0.0
    assert summarize_budget(10_000, 0).enabled is False


def test_custom_warning_threshold():
    assert budget_status(600, 1000, warning_pct=60) is BudgetStatus.WARNING
    assert budget_status(599, 1000, warning_pct=60) is BudgetStatus.SAFE


@pytest.mark.parametrize(
    "spent, budget, expected",
    [(0, 1000, 0.0), (250, 1000, 25.0), (1000, 1000, 100.0), (5000, 1000, 100.0)],
)
def test_percentage_used_is_clamped(spent, budget, expected):
    assert percentage_used(spent, budget) == pytest.approx(expected)


def test_status_uses_unclamped_ratio():
    summary = summarize_budget(1200, 1000)
    assert summary.percentage_used == 100.0
    assert summary.status is BudgetStatus.EXCEEDED
    assert summary.remaining == 0.0


def test_remaining_budget():
    assert remaining_budget(300, 1000) == 700
    assert remaining_budget(1300, 1000) == 0
