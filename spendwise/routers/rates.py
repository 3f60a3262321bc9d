from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from spendwise.models import BASE_CURRENCY, CURRENCY_NAMES, Currency, ExchangeRateTable
from spendwise.services.app_context import AppServices, get_converter, get_services
from spendwise.services.rates.cache_service import RateProvider
from spendwise.services.rates.conversion import CurrencyConverter, format_amount

"""Rates router.

Endpoints:
    - GET /rates          -> current table (NGN per unit) with cache metadata
    - POST /rates/refresh -> live fetch now, ignoring freshness
    - GET /rates/convert  -> convert an amount between two supported currencies

Fetch problems never surface as errors here: the provider falls back to the
stale cache or the built-in defaults and `source` says which one was used.
"""

router = APIRouter(prefix="/rates", tags=["rates"])


class RatesOut(BaseModel):
    base: Currency
    rates: Dict[str, float]
    names: Dict[str, str]
    source: Optional[str] = None
    cached_at: Optional[float] = None
    is_fresh: bool
    ttl_seconds: float


class ConversionOut(BaseModel):
    amount: float
    source: Currency
    target: Currency
    result: float
    formatted: str


def _rates_out(provider: RateProvider, table: ExchangeRateTable) -> RatesOut:
    info = provider.cache_info()
    return RatesOut(
        base=BASE_CURRENCY,
        rates=table.as_dict(),
        names={c.value: CURRENCY_NAMES[c] for c in Currency},
        source=info.last_source,
        cached_at=info.cached_at,
        is_fresh=info.is_fresh,
        ttl_seconds=info.ttl_seconds,
    )


@router.get("", response_model=RatesOut, summary="Current exchange rates")
async def get_rates_endpoint(services: AppServices = Depends(get_services)):
    provider = services.rate_provider
    table = await run_in_threadpool(provider.get_rates)
    return _rates_out(provider, table)


@router.post("/refresh", response_model=RatesOut, summary="Refresh rates now")
async def refresh_rates_endpoint(services: AppServices = Depends(get_services)):
    provider = services.rate_provider
    table = await run_in_threadpool(provider.refresh)
    return _rates_out(provider, table)


@router.get("/convert", response_model=ConversionOut, summary="Convert an amount")
async def convert_endpoint(
    amount: float = Query(..., ge=0, description="Amount in the source currency"),
    source: Currency = Query(BASE_CURRENCY, alias="from"),
    target: Currency = Query(..., alias="to"),
    services: AppServices = Depends(get_services),
    converter: CurrencyConverter = Depends(get_converter),
):
    result = converter.convert(amount, source, target)
    return ConversionOut(
        amount=amount,
        source=source,
        target=target,
        result=round(result, 6),
        formatted=format_amount(result, target, services.settings.default_locale),
    )
