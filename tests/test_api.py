from datetime import date

import pytest

from conftest import this_month
from spendwise.services.backup import backup_filename


def test_root_and_health(client):
    assert client.get("/").json()["message"] == "SpendWise API"
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["expenses"] == 0


def test_request_id_is_echoed(client):
    resp = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"


# Expenses -----------------------------------------------------------


def test_create_in_base_currency(client, add_expense):
    body = add_expense(1500, "food", description="  lunch  ")
    exp = body["expense"]
    assert exp["amount"] == 1500
    assert exp["description"] == "lunch"
    assert exp["formatted_amount"] == "₦1,500.00"
    assert exp["display_currency"] == "NGN"
    assert body["budget_alert"] is None


def test_entered_amount_defaults_to_display_currency(client, add_expense):
    client.put("/settings", json={"currency": "USD"})
    exp = add_expense(2)["expense"]
    assert exp["amount"] == pytest.approx(3000.0)
    assert exp["display_amount"] == pytest.approx(2.0)
    assert exp["formatted_amount"] == "$2.00"


def test_explicit_entry_currency(client, add_expense):
    exp = add_expense(10, entry_currency="GBP")["expense"]
    assert exp["amount"] == pytest.approx(19000.0)
    assert exp["display_currency"] == "NGN"


def test_switching_display_currency_does_not_touch_stored_amount(client, add_expense):
    exp_id = add_expense(3000)["expense"]["id"]
    client.put("/settings", json={"currency": "USD"})
    exp = client.get(f"/expenses/{exp_id}").json()
    assert exp["amount"] == 3000
    assert exp["formatted_amount"] == "$2.00"


def test_list_filters_and_order(client, add_expense):
    add_expense(100, "food", expense_date=this_month(1))
    add_expense(200, "transportation", expense_date=this_month(2))
    add_expense(300, "food", expense_date=this_month(3))

    all_rows = client.get("/expenses/").json()
    assert [r["amount"] for r in all_rows] == [300, 200, 100]

    food = client.get("/expenses/", params={"category": "food"}).json()
    assert {r["category"] for r in food} == {"food"}
    assert len(food) == 2

    ranged = client.get(
        "/expenses/", params={"start_date": this_month(2), "end_date": this_month(2)}
    ).json()
    assert [r["amount"] for r in ranged] == [200]


def test_list_rejects_bad_filters(client):
    resp = client.get("/expenses/", params={"category": "gadgets"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "bad_request"

    resp = client.get(
        "/expenses/", params={"start_date": "2024-03-05", "end_date": "2024-03-01"}
    )
    assert resp.status_code == 400


def test_create_validation_errors(client):
    resp = client.post(
        "/expenses/",
        json={"amount": 0, "category": "food", "expense_date": this_month()},
    )
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"

    resp = client.post(
        "/expenses/",
        json={"amount": 10, "category": "gadgets", "expense_date": this_month()},
    )
    assert resp.status_code == 422


def test_patch_and_delete(client, add_expense):
    exp_id = add_expense(500, "food")["expense"]["id"]

    resp = client.patch(f"/expenses/{exp_id}", json={"category": "shopping"})
    assert resp.status_code == 200
    exp = resp.json()["expense"]
    assert exp["category"] == "shopping"
    assert exp["amount"] == 500

    resp = client.patch(f"/expenses/{exp_id}", json={"amount": 1, "entry_currency": "USD"})
    assert resp.json()["expense"]["amount"] == pytest.approx(1500.0)

    assert client.patch(f"/expenses/{exp_id}", json={}).status_code == 422

    assert client.delete(f"/expenses/{exp_id}").status_code == 204
    resp = client.get(f"/expenses/{exp_id}")
    assert resp.status_code == 404
    assert resp.json() == {"error": "not_found", "detail": "expense not found"}
    assert client.delete(f"/expenses/{exp_id}").status_code == 404


def test_unknown_route_envelope(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "No route for GET /nope"


# Dashboard ----------------------------------------------------------


def test_dashboard_summary(client, add_expense):
    add_expense(100, "food", expense_date=this_month(1))
    add_expense(50, "food", expense_date=this_month(1))
    add_expense(30, "transportation", expense_date=this_month(1))
    add_expense(999, "food", expense_date="2001-01-01")  # outside the month

    body = client.get("/dashboard").json()
    assert body["total"] == 180
    assert body["count"] == 3
    assert body["average"] == 60
    assert body["categories_used"] == 2
    assert body["formatted_total"] == "₦180.00"
    assert [(c["category"], c["total"]) for c in body["category_breakdown"]] == [
        ("food", 150),
        ("transportation", 30),
    ]
    assert body["category_breakdown"][0]["label"] == "Food & Dining"
    assert len(body["trend"]) == date.today().day
    assert body["trend"][-1]["cumulative_total"] == 180
    assert body["budget"] is None


def test_dashboard_hides_trend_when_disabled(client, add_expense):
    add_expense(100)
    client.put("/settings", json={"show_trend_chart": False})
    assert client.get("/dashboard").json()["trend"] is None


def test_dashboard_for_past_month(client, add_expense):
    add_expense(250, expense_date="2024-02-10")
    body = client.get("/dashboard", params={"as_of": "2024-02-29"}).json()
    assert body["period_start"] == "2024-02-01"
    assert body["period_end"] == "2024-02-29"
    assert body["total"] == 250
    assert len(body["trend"]) == 29


# Budget -------------------------------------------------------------


def test_budget_alerts_through_api(client, add_expense):
    resp = client.put("/budget", json={"monthly_budget": 1000})
    assert resp.status_code == 200
    assert resp.json()["budget"]["status"] == "safe"
    assert resp.json()["budget_alert"] is None

    assert add_expense(500)["budget_alert"] is None
    assert add_expense(350)["budget_alert"] == "Budget Warning"
    assert add_expense(10)["budget_alert"] is None  # still warning
    assert add_expense(200)["budget_alert"] == "Budget Exceeded!"

    progress = client.get("/budget").json()
    assert progress["status"] == "exceeded"
    assert progress["percentage_used"] == 100.0
    assert progress["remaining"] == 0
    assert progress["spent"] == 1060

    alerts = client.get("/alerts").json()
    assert [a["title"] for a in alerts] == ["Budget Exceeded!", "Budget Warning"]
    assert alerts[0]["severity"] == "error"


def test_budget_entry_currency(client):
    resp = client.put("/budget", json={"monthly_budget": 100, "entry_currency": "USD"})
    assert resp.json()["budget"]["monthly_budget"] == pytest.approx(150000.0)
    assert client.get("/settings").json()["monthly_budget"] == pytest.approx(150000.0)


def test_budget_rejects_negative(client):
    assert client.put("/budget", json={"monthly_budget": -5}).status_code == 422


def test_raising_budget_clears_then_refires(client, add_expense):
    client.put("/budget", json={"monthly_budget": 1000})
    add_expense(900)
    resp = client.put("/budget", json={"monthly_budget": 5000})
    assert resp.json()["budget"]["status"] == "safe"
    resp = client.put("/budget", json={"monthly_budget": 1000})
    assert resp.json()["budget_alert"] == "Budget Warning"


def test_zero_budget_disables_tracking(client, add_expense):
    add_expense(5000)
    resp = client.put("/budget", json={"monthly_budget": 0})
    body = resp.json()
    assert body["budget_alert"] is None
    assert body["budget"]["enabled"] is False
    assert body["budget"]["percentage_used"] == 0
    assert client.get("/alerts").json() == []


# Rates --------------------------------------------------------------


def test_rates_endpoint(client):
    body = client.get("/rates").json()
    assert body["base"] == "NGN"
    assert body["rates"] == {"NGN": 1.0, "USD": 1500.0, "EUR": 1650.0, "GBP": 1900.0}
    assert body["names"]["USD"] == "US Dollar"
    assert body["is_fresh"] is True

    refreshed = client.post("/rates/refresh").json()
    assert refreshed["source"] == "network"


def test_convert_endpoint(client):
    body = client.get("/rates/convert", params={"amount": 3000, "from": "NGN", "to": "USD"}).json()
    assert body["result"] == pytest.approx(2.0)
    assert body["formatted"] == "$2.00"

    assert client.get("/rates/convert", params={"amount": 1, "to": "JPY"}).status_code == 422


# Settings, export and import ---------------------------------------


def test_settings_roundtrip(client):
    resp = client.put("/settings", json={"theme": "dark", "currency": "EUR"})
    assert resp.status_code == 200
    prefs = client.get("/settings").json()
    assert prefs["theme"] == "dark"
    assert prefs["currency"] == "EUR"
    assert client.put("/settings", json={}).status_code == 422
    assert client.put("/settings", json={"theme": "sepia"}).status_code == 422


def test_export_then_import_replaces_expenses(client, add_expense):
    add_expense(100, "food")
    add_expense(200, "housing")

    resp = client.get("/settings/export")
    assert resp.status_code == 200
    assert backup_filename(date.today()) in resp.headers["content-disposition"]
    backup = resp.json()
    assert len(backup) == 2
    assert set(backup[0]) == {
        "id",
        "amount",
        "category",
        "description",
        "expense_date",
        "created_at",
        "updated_at",
    }

    add_expense(300, "other")
    resp = client.post("/settings/import", json=backup)
    assert resp.status_code == 200
    assert resp.json()["imported"] == 2
    amounts = sorted(r["amount"] for r in client.get("/expenses/").json())
    assert amounts == [100, 200]


def test_import_accepts_legacy_fields(client):
    payload = [
        {
            "id": "legacy-1",
            "user_id": "u-1",
            "amount": 700,
            "category": "education",
            "description": None,
            "expense_date": "2024-01-15",
        }
    ]
    resp = client.post("/settings/import", json=payload)
    assert resp.json()["imported"] == 1
    assert client.get("/expenses/legacy-1").json()["category"] == "education"


@pytest.mark.parametrize(
    "payload",
    [
        {"expenses": []},
        [{"id": "a", "amount": -1, "category": "food", "expense_date": "2024-01-01"}],
        [
            {"id": "a", "amount": 1, "category": "food", "expense_date": "2024-01-01"},
            {"id": "a", "amount": 2, "category": "food", "expense_date": "2024-01-02"},
        ],
    ],
)
def test_import_rejects_bad_backup_and_keeps_data(client, add_expense, payload):
    add_expense(123)
    resp = client.post("/settings/import", json=payload)
    assert resp.status_code == 400
    assert resp.json()["error"] == "bad_request"
    assert [r["amount"] for r in client.get("/expenses/").json()] == [123]


# Non-finite amounts ------------------------------------------------


def test_amount_overflowing_on_conversion_is_rejected(client):
    resp = client.post(
        "/expenses/",
        json={
            "amount": 1e306,
            "category": "food",
            "expense_date": this_month(),
            "entry_currency": "GBP",
        },
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "amount is too large"
    assert client.get("/expenses/").json() == []
    assert client.get("/dashboard").status_code == 200


def test_patch_overflow_keeps_stored_amount(client, add_expense):
    exp_id = add_expense(100)["expense"]["id"]
    resp = client.patch(f"/expenses/{exp_id}", json={"amount": 1e306, "entry_currency": "GBP"})
    assert resp.status_code == 400
    assert client.get(f"/expenses/{exp_id}").json()["amount"] == 100


@pytest.mark.parametrize("literal", ["Infinity", "NaN"])
def test_non_finite_json_amount_is_rejected(client, literal):
    body = (
        '{"amount": %s, "category": "food", "expense_date": "%s"}'
        % (literal, this_month())
    )
    resp = client.post(
        "/expenses/", content=body, headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 422
    assert client.get("/dashboard").json()["count"] == 0


def test_import_rejects_non_finite_amount(client):
    body = '[{"id": "x", "amount": Infinity, "category": "food", "expense_date": "2024-01-01"}]'
    resp = client.post(
        "/settings/import", content=body, headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400


def test_budget_overflow_is_rejected(client):
    resp = client.put("/budget", json={"monthly_budget": 1e306, "entry_currency": "GBP"})
    assert resp.status_code == 400
    assert client.get("/settings").json()["monthly_budget"] == 0


# Recent expenses on the dashboard ------------------------------------


def test_dashboard_lists_five_most_recent(client, add_expense):
    for day in range(1, 8):
        add_expense(day * 10, expense_date=this_month(day))
    add_expense(5000, expense_date="2001-01-01")  # other month

    recent = client.get("/dashboard").json()["recent"]
    assert [r["amount"] for r in recent] == [70, 60, 50, 40, 30]
    assert recent[0]["formatted_amount"] == "₦70.00"


def test_dashboard_recent_empty_month(client):
    assert client.get("/dashboard").json()["recent"] == []
