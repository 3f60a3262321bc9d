"""Budget evaluation helpers.

Pure functions of (total spent, monthly budget), both in NGN. A budget of 0
means tracking is disabled: usage reads 0% and the status is always safe.

`percentage_used` is clamped to [0, 100] for progress bars; `budget_status`
works on the unclamped ratio so 100% and above is 'exceeded' while anything
from the warning threshold up to (but excluding) 100% is 'warning'.
"""

from __future__ import annotations
from dataclasses import dataclass

from spendwise.models import BudgetStatus
from spendwise.services.money import safe_div

DEFAULT_WARNING_PCT = 80.0


def usage_ratio(total_spent: float, monthly_budget: float) -> float:
    return safe_div(total_spent, monthly_budget)


def percentage_used(total_spent: float, monthly_budget: float) -> float:
    if monthly_budget == 0:
        return 0.0
    return max(0.0, min(100.0, usage_ratio(total_spent, monthly_budget) * 100))


def budget_status(
    total_spent: float,
    monthly_budget: float,
    warning_pct: float = DEFAULT_WARNING_PCT,
) -> BudgetStatus:
    if monthly_budget == 0:
        return BudgetStatus.SAFE
    ratio = usage_ratio(total_spent, monthly_budget)
    if ratio >= 1.0:
        return BudgetStatus.EXCEEDED
    if ratio >= warning_pct / 100:
        return BudgetStatus.WARNING
    return BudgetStatus.SAFE


def remaining_budget(total_spent: float, monthly_budget: float) -> float:
    return max(monthly_budget - total_spent, 0.0)


@dataclass(frozen=True)
class BudgetSummary:
    monthly_budget: float
    spent: float
    remaining: float
    percentage_used: float
    status: BudgetStatus

    @property
    def enabled(self) -> bool:
        return self.monthly_budget > 0


def summarize_budget(
    total_spent: float,
    monthly_budget: float,
    warning_pct: float = DEFAULT_WARNING_PCT,
) -> BudgetSummary:
    return BudgetSummary(
        monthly_budget=monthly_budget,
        spent=total_spent,
        remaining=remaining_budget(total_spent, monthly_budget),
        percentage_used=percentage_used(total_spent, monthly_budget),
        status=budget_status(total_spent, monthly_budget, warning_pct),
    )
