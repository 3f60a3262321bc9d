from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from spendwise.models import BudgetProgress, BudgetUpdateIn, UserPreferences
from spendwise.routers.dashboard import build_budget_progress
from spendwise.services.analytics_utils import total_spent
from spendwise.services.app_context import (
    AppServices,
    check_budget,
    get_converter,
    get_preferences,
    get_services,
    month_expenses,
)
from spendwise.services.app_settings import load_preferences, set_monthly_budget
from spendwise.services.rates.conversion import CurrencyConverter

router = APIRouter(prefix="/budget", tags=["budget"])


class BudgetWriteResponse(BaseModel):
    budget: BudgetProgress
    budget_alert: Optional[str] = None


@router.get("", response_model=BudgetProgress, summary="Current month budget progress")
async def get_budget(
    services: AppServices = Depends(get_services),
    prefs: UserPreferences = Depends(get_preferences),
    converter: CurrencyConverter = Depends(get_converter),
):
    spent = total_spent(month_expenses(services.db))
    return build_budget_progress(spent, prefs, converter, services.settings)


@router.put("", response_model=BudgetWriteResponse, summary="Set the monthly budget")
async def put_budget(
    payload: BudgetUpdateIn,
    services: AppServices = Depends(get_services),
    converter: CurrencyConverter = Depends(get_converter),
):
    """Store the monthly limit in NGN; `entry_currency` defaults to NGN. 0 disables."""
    amount = payload.monthly_budget
    if payload.entry_currency is not None:
        amount = converter.with_currency(payload.entry_currency).to_base(amount)
    try:
        set_monthly_budget(services.store, amount)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    notification = check_budget(services)
    prefs = load_preferences(services.store)
    spent = total_spent(month_expenses(services.db))
    return BudgetWriteResponse(
        budget=build_budget_progress(spent, prefs, converter, services.settings),
        budget_alert=notification.title if notification else None,
    )
