import math
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from spendwise.db.dal import Database
from spendwise.models import (
    Currency,
    ExpenseCategory,
    ExpenseIn,
    ExpenseOut,
    ExpenseUpdateIn,
    ExpenseView,
)
from spendwise.services.app_context import (
    AppServices,
    check_budget,
    get_converter,
    get_db,
    get_services,
)
from spendwise.services.rates.conversion import CurrencyConverter

router = APIRouter(prefix="/expenses", tags=["expenses"])

ALL_CATEGORIES = "all"


class ExpenseWriteResponse(BaseModel):
    expense: ExpenseView
    budget_alert: Optional[str] = None


# Helpers ----------------------------------------------------------


def _to_view(row: dict, converter: CurrencyConverter) -> ExpenseView:
    expense = ExpenseOut.model_validate(row)
    return ExpenseView(
        **expense.model_dump(),
        display_currency=converter.currency,
        display_amount=converter.to_display(expense.amount),
        formatted_amount=converter.format(expense.amount),
    )


def _amount_to_base(
    amount: float, entry_currency: Optional[Currency], converter: CurrencyConverter
) -> float:
    """Re-express an entered amount in NGN (entry currency defaults to display)."""
    entry = converter if entry_currency is None else converter.with_currency(entry_currency)
    amount_base = entry.to_base(amount)
    if not math.isfinite(amount_base):
        raise HTTPException(status_code=400, detail="amount is too large")
    return amount_base


def _load_or_404(db: Database, expense_id: str) -> dict:
    row = db.get_expense(expense_id)
    if not row:
        raise HTTPException(status_code=404, detail="expense not found")
    return row


# Routes -----------------------------------------------------------
@router.post(
    "/", response_model=ExpenseWriteResponse, status_code=201, summary="Create an expense"
)
async def create_expense(
    payload: ExpenseIn,
    services: AppServices = Depends(get_services),
    converter: CurrencyConverter = Depends(get_converter),
):
    db = services.db
    # 1. Amounts are always persisted in NGN
    amount_base = _amount_to_base(payload.amount, payload.entry_currency, converter)

    # 2. Persist
    expense_id = db.insert_expense(
        amount=amount_base,
        category=payload.category,
        description=payload.description,
        expense_date=payload.expense_date,
    )
    row = db.get_expense(expense_id)
    if not row:
        raise HTTPException(status_code=500, detail="expense not found after insert")

    # 3. Expense set changed -> budget check
    notification = check_budget(services)
    return ExpenseWriteResponse(
        expense=_to_view(row, converter),
        budget_alert=notification.title if notification else None,
    )


@router.get(
    "/", response_model=List[ExpenseView], summary="List expenses with optional filters"
)
async def list_expenses_endpoint(
    category: str = Query(
        ALL_CATEGORIES, description="Category filter or 'all'"
    ),
    start_date: Optional[date] = Query(None, description="Filter: start date inclusive"),
    end_date: Optional[date] = Query(None, description="Filter: end date inclusive"),
    db: Database = Depends(get_db),
    converter: CurrencyConverter = Depends(get_converter),
):
    # 1. Date ordering validation
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=400, detail="start_date cannot be after end_date"
        )
    # 2. Category validation
    category_filter: Optional[ExpenseCategory] = None
    if category != ALL_CATEGORIES:
        try:
            category_filter = ExpenseCategory(category)
        except ValueError:
            raise HTTPException(status_code=400, detail="unsupported category")
    # 3. Fetch, newest first
    rows = db.list_expenses(
        start_date=start_date, end_date=end_date, category=category_filter
    )
    return [_to_view(r, converter) for r in rows]


@router.get("/{expense_id}", response_model=ExpenseView, summary="Get one expense")
async def get_expense_endpoint(
    expense_id: str,
    db: Database = Depends(get_db),
    converter: CurrencyConverter = Depends(get_converter),
):
    return _to_view(_load_or_404(db, expense_id), converter)


@router.patch(
    "/{expense_id}",
    response_model=ExpenseWriteResponse,
    summary="Edit an expense (partial)",
)
async def patch_expense(
    expense_id: str,
    payload: ExpenseUpdateIn,
    services: AppServices = Depends(get_services),
    converter: CurrencyConverter = Depends(get_converter),
):
    db = services.db
    # 1. Fetch existing expense
    existing = ExpenseOut.model_validate(_load_or_404(db, expense_id))

    # 2. Merge; a new amount is re-expressed in NGN, an untouched one is kept as stored
    amount_base = (
        _amount_to_base(payload.amount, payload.entry_currency, converter)
        if payload.amount is not None
        else existing.amount
    )
    try:
        db.update_expense(
            expense_id=expense_id,
            amount=amount_base,
            category=payload.category or existing.category,
            description=(
                payload.description
                if payload.description is not None
                else existing.description
            ),
            expense_date=payload.expense_date or existing.expense_date,
        )
    except ValueError:
        raise HTTPException(status_code=404, detail="expense not found")

    notification = check_budget(services)
    return ExpenseWriteResponse(
        expense=_to_view(_load_or_404(db, expense_id), converter),
        budget_alert=notification.title if notification else None,
    )


@router.delete("/{expense_id}", status_code=204, summary="Delete an expense")
async def delete_expense(
    expense_id: str,
    services: AppServices = Depends(get_services),
):
    try:
        services.db.delete_expense(expense_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="expense not found")
    check_budget(services)
    return None
