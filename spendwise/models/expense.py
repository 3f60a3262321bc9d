from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constants import Currency, ExpenseCategory


class ExpenseIn(BaseModel):
    """Expense as entered by the user.

    `amount` is expressed in `entry_currency`; when that is omitted the user's
    display currency applies. Routers convert to NGN before persisting.
    """

    amount: float = Field(..., gt=0, allow_inf_nan=False)
    category: ExpenseCategory
    description: Optional[str] = None
    expense_date: date
    entry_currency: Optional[Currency] = None

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v.strip() if v is not None else None


class ExpenseOut(BaseModel):
    """Persisted expense; `amount` is always in the base currency (NGN)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    amount: float
    category: ExpenseCategory
    description: Optional[str] = None
    expense_date: date
    created_at: datetime
    updated_at: datetime


class ExpenseView(ExpenseOut):
    display_currency: Currency
    display_amount: float
    formatted_amount: str


class ExpenseUpdateIn(BaseModel):
    """Partial update model; at least one field must be provided.

    A new `amount` is interpreted in `entry_currency` (or the display currency)
    and re-expressed in NGN at write time.
    """

    amount: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    category: Optional[ExpenseCategory] = None
    description: Optional[str] = None
    expense_date: Optional[date] = None
    entry_currency: Optional[Currency] = None

    @model_validator(mode="after")
    def at_least_one(self) -> "ExpenseUpdateIn":
        if all(
            getattr(self, f) is None
            for f in ("amount", "category", "description", "expense_date")
        ):
            raise ValueError("at least one field must be provided for update")
        return self


class ExpenseRecord(BaseModel):
    """Shape of one entry in an exported/imported JSON backup.

    Backups written by older clients carry a `user_id`; it is ignored.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    category: ExpenseCategory
    description: Optional[str] = None
    expense_date: date
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
