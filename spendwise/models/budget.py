from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .constants import BudgetStatus, Currency


class BudgetUpdateIn(BaseModel):
    monthly_budget: float = Field(
        ..., ge=0, allow_inf_nan=False, description="Monthly limit; 0 disables budget tracking"
    )
    entry_currency: Optional[Currency] = Field(
        None, description="Currency of monthly_budget (defaults to NGN)"
    )


class BudgetProgress(BaseModel):
    """Budget progress for a period; money fields are NGN."""

    enabled: bool
    monthly_budget: float
    spent: float
    remaining: float
    percentage_used: float
    status: BudgetStatus
    formatted_budget: str
    formatted_spent: str
