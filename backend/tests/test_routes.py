"""End-to-end tests through the FastAPI app with an in-memory database."""

from datetime import date

import pytest

from services.narrative_service import (
    FALLBACK_ADVICE,
    FALLBACK_BUDGET_RECOMMENDATIONS,
    FALLBACK_SPENDING_ANALYSIS,
)


def _create_account(client, headers, name="Main Checking", account_type="CHECKING", balance="2500.00"):
    resp = client.post("/api/v1/accounts", headers=headers, json={
        "account_name": name, "account_type": account_type, "initial_balance": balance,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def _create_transaction(client, headers, account_id, amount="20.00", tx_type="EXPENSE",
                        category="DINING", on=None):
    resp = client.post("/api/v1/transactions", headers=headers, json={
        "account_id": account_id,
        "description": "Lunch",
        "amount": amount,
        "transaction_type": tx_type,
        "category": category,
        "transaction_date": (on or date.today()).isoformat(),
    })
    return resp


class TestAuth:
    def test_health_check_is_public(self, client):
        assert client.get("/api/v1/health-check").json()["status"] == "ok"

    def test_requires_token(self, client):
        assert client.get("/api/v1/accounts").status_code == 401
        bad = {"Authorization": "Bearer not-a-jwt"}
        assert client.get("/api/v1/accounts", headers=bad).status_code == 401

    def test_register_login_me(self, client, auth_headers):
        me = client.get("/api/v1/auth/me", headers=auth_headers).json()
        assert me["email"] == "ada@example.com"
        assert me["full_name"] == "Ada Lovelace"

        ok = client.post("/api/v1/auth/login", json={"email": "ada@example.com", "password": "correct-horse"})
        assert ok.status_code == 200
        assert ok.json()["data"]["token"]

        wrong = client.post("/api/v1/auth/login", json={"email": "ada@example.com", "password": "nope-nope"})
        assert wrong.status_code == 401

    def test_duplicate_registration_conflicts(self, client, auth_headers):
        resp = client.post("/api/v1/auth/register", json={
            "first_name": "Ada", "last_name": "Again",
            "email": "ADA@example.com", "password": "another-pass",
        })
        assert resp.status_code == 409

    def test_email_update_collision(self, client, auth_headers):
        client.post("/api/v1/auth/register", json={
            "first_name": "Bob", "last_name": "B", "email": "bob@example.com", "password": "bobs-password",
        })
        resp = client.patch("/api/v1/auth/me", headers=auth_headers, json={"email": "bob@example.com"})
        assert resp.status_code == 409

        resp = client.patch("/api/v1/auth/me", headers=auth_headers, json={"first_name": "Augusta"})
        assert resp.json()["data"]["first_name"] == "Augusta"


class TestAccounts:
    def test_create_list_and_net_worth(self, client, auth_headers):
        created = _create_account(client, auth_headers)
        assert created["current_balance"] == 2500.0
        assert created["account_type_display"] == "Checking"
        _create_account(client, auth_headers, "Emergency Fund", "SAVINGS", "10000.00")
        _create_account(client, auth_headers, "Visa", "Credit Card", "500.00")

        names = [a["account_name"] for a in client.get("/api/v1/accounts", headers=auth_headers).json()]
        assert names == ["Emergency Fund", "Main Checking", "Visa"]

        totals = client.get("/api/v1/accounts/net-worth", headers=auth_headers).json()
        assert totals["net_worth"] == 12000.0
        assert totals["total_balance"] == 13000.0

    def test_unknown_account_type(self, client, auth_headers):
        resp = client.post("/api/v1/accounts", headers=auth_headers, json={
            "account_name": "Bitcoin", "account_type": "CRYPTO", "initial_balance": "1",
        })
        assert resp.status_code == 400

    def test_negative_initial_balance_rejected(self, client, auth_headers):
        resp = client.post("/api/v1/accounts", headers=auth_headers, json={
            "account_name": "Overdrawn", "account_type": "CHECKING", "initial_balance": "-10",
        })
        assert resp.status_code == 422

    def test_sub_cent_balances_rejected(self, client, auth_headers):
        resp = client.post("/api/v1/accounts", headers=auth_headers, json={
            "account_name": "Pennies", "account_type": "SAVINGS", "initial_balance": "0.001",
        })
        assert resp.status_code == 422
        account = _create_account(client, auth_headers, balance="100.00")
        resp = client.put(f"/api/v1/accounts/{account['id']}/balance", headers=auth_headers,
                          json={"current_balance": "80.255"})
        assert resp.status_code == 422

    def test_balance_update_and_rename(self, client, auth_headers):
        account = _create_account(client, auth_headers, balance="100.00")
        resp = client.put(f"/api/v1/accounts/{account['id']}/balance", headers=auth_headers,
                          json={"current_balance": "80.25"})
        assert resp.json()["data"]["current_balance"] == 80.25
        assert resp.json()["data"]["initial_balance"] == 100.0

        resp = client.patch(f"/api/v1/accounts/{account['id']}", headers=auth_headers,
                            json={"account_name": "Bills"})
        assert resp.json()["data"]["account_name"] == "Bills"

    def test_delete_blocked_by_transactions(self, client, auth_headers):
        account = _create_account(client, auth_headers)
        assert _create_transaction(client, auth_headers, account["id"]).status_code == 201

        resp = client.delete(f"/api/v1/accounts/{account['id']}", headers=auth_headers)
        assert resp.status_code == 409

        empty = _create_account(client, auth_headers, "Empty")
        assert client.delete(f"/api/v1/accounts/{empty['id']}", headers=auth_headers).status_code == 200
        assert client.get(f"/api/v1/accounts/{empty['id']}", headers=auth_headers).status_code == 404

    def test_other_users_account_is_404(self, client, auth_headers):
        account = _create_account(client, auth_headers)
        resp = client.post("/api/v1/auth/register", json={
            "first_name": "Eve", "last_name": "E", "email": "eve@example.com", "password": "eves-password",
        })
        eve = {"Authorization": f"Bearer {resp.json()['data']['token']}"}
        assert client.get(f"/api/v1/accounts/{account['id']}", headers=eve).status_code == 404
        assert client.delete(f"/api/v1/accounts/{account['id']}", headers=eve).status_code == 404
        assert client.get("/api/v1/accounts", headers=eve).json() == []

    def test_missing_account_is_404(self, client, auth_headers):
        assert client.delete("/api/v1/accounts/999", headers=auth_headers).status_code == 404
        resp = client.put("/api/v1/accounts/999/balance", headers=auth_headers, json={"current_balance": "1"})
        assert resp.status_code == 404


class TestTransactions:
    def test_crud(self, client, auth_headers):
        account = _create_account(client, auth_headers)
        created = _create_transaction(client, auth_headers, account["id"]).json()["data"]
        assert created["category_display"] == "Dining Out"

        rows = client.get("/api/v1/transactions", headers=auth_headers).json()
        assert [r["id"] for r in rows] == [created["id"]]

        resp = client.patch(f"/api/v1/transactions/{created['id']}", headers=auth_headers,
                            json={"amount": "25.00"})
        assert resp.json()["data"]["amount"] == 25.0

        assert client.delete(f"/api/v1/transactions/{created['id']}", headers=auth_headers).status_code == 200
        assert client.get(f"/api/v1/transactions/{created['id']}", headers=auth_headers).status_code == 404

    def test_validation(self, client, auth_headers):
        account = _create_account(client, auth_headers)
        assert _create_transaction(client, auth_headers, account["id"], amount="0").status_code == 422
        mismatched = _create_transaction(client, auth_headers, account["id"], tx_type="INCOME", category="DINING")
        assert mismatched.status_code == 400
        assert _create_transaction(client, auth_headers, 999).status_code == 404

    def test_patch_cannot_clear_date(self, client, auth_headers):
        account = _create_account(client, auth_headers)
        created = _create_transaction(client, auth_headers, account["id"], on=date(2026, 1, 5)).json()["data"]
        resp = client.patch(f"/api/v1/transactions/{created['id']}", headers=auth_headers,
                            json={"transaction_date": None})
        assert resp.status_code == 400
        fetched = client.get(f"/api/v1/transactions/{created['id']}", headers=auth_headers).json()
        assert fetched["transaction_date"] == "2026-01-05"

    def test_sub_cent_amount_rejected(self, client, auth_headers):
        account = _create_account(client, auth_headers)
        assert _create_transaction(client, auth_headers, account["id"], amount="0.001").status_code == 422
        assert client.get("/api/v1/transactions", headers=auth_headers).json() == []

    @pytest.mark.parametrize("query", ["year=10000&month=1", "year=2026&month=0", "year=0&month=5", "month=13"])
    def test_summary_rejects_out_of_range_period(self, client, auth_headers, query):
        resp = client.get(f"/api/v1/transactions/summary?{query}", headers=auth_headers)
        assert resp.status_code == 422

    def test_summary_and_categories(self, client, auth_headers):
        account = _create_account(client, auth_headers)
        today = date.today()
        _create_transaction(client, auth_headers, account["id"], "1000", "INCOME", "SALARY", on=today)
        _create_transaction(client, auth_headers, account["id"], "120", "EXPENSE", "GROCERIES", on=today)

        summary = client.get("/api/v1/transactions/summary", headers=auth_headers).json()
        assert summary["total_income"] == 1000.0
        assert summary["net_savings"] == 880.0
        assert summary["category_breakdown"] == [{"category": "Groceries", "amount": 120.0}]

        categories = client.get("/api/v1/transactions/categories").json()
        assert {"name": "SALARY", "display_name": "Salary", "transaction_type": "INCOME"} in categories


class TestBudgets:
    def test_create_duplicate_and_status(self, client, auth_headers):
        today = date.today()
        body = {"category": "GROCERIES", "budget_year": today.year, "budget_month": today.month, "amount": "300"}
        assert client.post("/api/v1/budgets", headers=auth_headers, json=body).status_code == 201
        assert client.post("/api/v1/budgets", headers=auth_headers, json=body).status_code == 409

        account = _create_account(client, auth_headers)
        _create_transaction(client, auth_headers, account["id"], "120", "EXPENSE", "GROCERIES", on=today)

        status = client.get("/api/v1/budgets/status", headers=auth_headers).json()
        assert status[0]["category"] == "Groceries"
        assert status[0]["remaining"] == 180.0


    def test_sub_cent_budget_rejected(self, client, auth_headers):
        body = {"category": "GROCERIES", "budget_year": 2026, "budget_month": 10, "amount": "300.001"}
        assert client.post("/api/v1/budgets", headers=auth_headers, json=body).status_code == 422

    @pytest.mark.parametrize("path", ["/api/v1/budgets/status?month=0", "/api/v1/budgets?year=10000&month=1"])
    def test_out_of_range_period(self, client, auth_headers, path):
        assert client.get(path, headers=auth_headers).status_code == 422


class TestInsights:
    def test_dashboard_falls_back_when_provider_fails(self, client, auth_headers):
        _create_account(client, auth_headers, "Main Checking", "CHECKING", "2500.00")
        _create_account(client, auth_headers, "Emergency Fund", "SAVINGS", "10000.00")

        dashboard = client.get("/api/v1/insights", headers=auth_headers).json()
        assert dashboard["general_insights"] == FALLBACK_ADVICE
        assert dashboard["spending_analysis"] == FALLBACK_SPENDING_ANALYSIS
        assert dashboard["budget_recommendations"] == FALLBACK_BUDGET_RECOMMENDATIONS
        # no income: 50 + 5 + 10 + 10
        assert dashboard["health_score"] == 75

    def test_individual_endpoints(self, client, auth_headers, fake_provider):
        fake_provider.error = None
        fake_provider.text = "Keep it up."
        assert client.get("/api/v1/insights/advice", headers=auth_headers).json() == {"text": "Keep it up."}
        assert client.get("/api/v1/insights/spending", headers=auth_headers).json() == {"text": "Keep it up."}
        assert client.get("/api/v1/insights/recommendations", headers=auth_headers).json() == {"text": "Keep it up."}
        assert client.get("/api/v1/insights/health-score", headers=auth_headers).json() == {"health_score": 50}
        assert len(fake_provider.prompts) == 3
