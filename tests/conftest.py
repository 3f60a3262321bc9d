from datetime import date
from typing import Callable, Dict, Optional

import pytest
from fastapi.testclient import TestClient

from spendwise.core.config import Settings
from spendwise.main import create_app
from spendwise.models import ExchangeRateTable
from spendwise.services.rates.base import RateFetchError, RateSource


@pytest.fixture
def settings(tmp_path) -> Settings:
    s = Settings(
        data_dir=tmp_path,
        db_filename="test.sqlite3",
        exchange_rate_provider="static",
        storage_backend="local",
    )
    s.init_post_load()
    return s


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def services(app):
    return app.state.services


class FakeRateSource(RateSource):
    """Counts fetches; raises RateFetchError while `fail` is set."""

    def __init__(self, table: Optional[ExchangeRateTable] = None, fail: bool = False):
        self.table = table
        self.fail = fail
        self.calls = 0

    def fetch_table(self) -> ExchangeRateTable:
        self.calls += 1
        if self.fail or self.table is None:
            raise RateFetchError("network down")
        return self.table


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def make_table(usd: float = 1500.0, eur: float = 1650.0, gbp: float = 1900.0) -> ExchangeRateTable:
    return ExchangeRateTable({"NGN": 1.0, "USD": usd, "EUR": eur, "GBP": gbp})


def this_month(day: int = 1) -> str:
    return date.today().replace(day=day).isoformat()


@pytest.fixture
def add_expense(client) -> Callable[..., Dict]:
    def _add(amount: float, category: str = "food", **extra) -> Dict:
        body = {"amount": amount, "category": category, "expense_date": this_month()}
        body.update(extra)
        resp = client.post("/expenses/", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _add
