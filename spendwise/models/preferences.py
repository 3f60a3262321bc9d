from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .constants import BASE_CURRENCY, Currency, Theme


class UserPreferences(BaseModel):
    """User-facing configuration injected into converters and evaluators.

    `monthly_budget` is stored in NGN; 0 disables budget tracking.
    """

    currency: Currency = BASE_CURRENCY
    theme: Theme = Theme.SYSTEM
    monthly_budget: float = Field(0.0, ge=0)
    show_trend_chart: bool = True


class PreferencesUpdateIn(BaseModel):
    currency: Optional[Currency] = None
    theme: Optional[Theme] = None
    monthly_budget: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    show_trend_chart: Optional[bool] = None

    @model_validator(mode="after")
    def at_least_one(self) -> "PreferencesUpdateIn":
        if all(
            getattr(self, f) is None
            for f in ("currency", "theme", "monthly_budget", "show_trend_chart")
        ):
            raise ValueError("at least one setting must be provided")
        return self
