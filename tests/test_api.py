import pytest
from fastapi.testclient import TestClient

from app.core.security import create_access_token
from app.db import dynamo
from app.main import app

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


class FakeTable:
    def __init__(self, id_field):
        self.id_field = id_field
        self.items = {}

    def put(self, item):
        self.items[(item["user_id"], item[self.id_field])] = dict(item)
        return True

    def get(self, user_id, item_id):
        item = self.items.get((user_id, item_id))
        return dict(item) if item else None

    def query(self, user_id):
        return [dict(item) for (owner, _), item in self.items.items() if owner == user_id]

    def update(self, user_id, item_id, updates):
        item = self.items.get((user_id, item_id))
        if item is None:
            return None
        item.update(updates)
        return dict(item)

    def delete(self, user_id, item_id):
        return self.items.pop((user_id, item_id), None) is not None


@pytest.fixture
def store(monkeypatch):
    users = {}
    accounts = FakeTable("account_id")
    transactions = FakeTable("transaction_id")
    recurring = FakeTable("recurring_id")
    budgets = FakeTable("budget_id")
    goals = FakeTable("goal_id")

    def put_user(item):
        users[item["user_id"]] = dict(item)
        return True

    def get_user_by_email(email):
        return next((dict(u) for u in users.values() if u["email"] == email), None)

    def get_transactions_by_date_range(user_id, start, end):
        return [t for t in transactions.query(user_id) if start <= t["transaction_date"] <= end]

    def get_user_transactions(user_id, limit=50, offset=0):
        items = sorted(transactions.query(user_id), key=lambda t: t["transaction_date"], reverse=True)
        return items[offset:offset + limit]

    patches = {
        "put_user": put_user,
        "get_user_by_email": get_user_by_email,
        "get_user_by_id": lambda user_id: users.get(user_id),
        "get_user_accounts": accounts.query,
        "get_account": accounts.get,
        "put_account": accounts.put,
        "update_account": accounts.update,
        "delete_account": accounts.delete,
        "get_user_transactions": get_user_transactions,
        "get_transactions_by_date_range": get_transactions_by_date_range,
        "put_transaction": transactions.put,
        "update_transaction": transactions.update,
        "delete_transaction": transactions.delete,
        "get_user_recurring_transactions": recurring.query,
        "put_recurring_transaction": recurring.put,
        "update_recurring_transaction": recurring.update,
        "delete_recurring_transaction": recurring.delete,
        "get_user_budgets": lambda user_id, month: [b for b in budgets.query(user_id) if b["month"] == month],
        "put_budget": budgets.put,
        "update_budget": budgets.update,
        "delete_budget": budgets.delete,
        "get_user_savings_goals": goals.query,
        "put_savings_goal": goals.put,
        "update_savings_goal": goals.update,
        "delete_savings_goal": goals.delete,
    }
    for name, fake in patches.items():
        monkeypatch.setattr(dynamo, name, fake)

    return {"users": users, "accounts": accounts, "transactions": transactions}


@pytest.fixture
def client():
    return TestClient(app)


def auth_headers(user_id=USER_ID):
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


def create_account(client, user_id=USER_ID, balance=100000):
    response = client.post(
        "/api/accounts/",
        json={"name": "Checking", "type": "bank_account", "balance": balance},
        headers=auth_headers(user_id),
    )
    assert response.status_code == 201
    return response.json()["account_id"]


def add_transaction(client, account_id, **fields):
    payload = {"account_id": account_id, "transaction_date": "2024-05-10T12:00:00", **fields}
    return client.post("/api/transactions/", json=payload, headers=auth_headers())


def test_root_and_health(client):
    assert client.get("/").status_code == 200
    body = client.get("/api/health").json()
    assert body["status"] == "healthy"


def test_token_required(client, store):
    assert client.get("/api/accounts/").status_code == 401
    bad = client.get("/api/accounts/", headers={"Authorization": "Bearer nonsense"})
    assert bad.status_code == 401


def test_register_and_login(client, store):
    payload = {"email": "ana@finance.io", "password": "s3cret-pass", "name": "Ana"}
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201
    assert "password_hash" not in response.json()

    assert client.post("/api/auth/register", json=payload).status_code == 400

    login = client.post("/api/auth/login", json={"email": "ana@finance.io", "password": "s3cret-pass"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["name"] == "Ana"

    wrong = client.post("/api/auth/login", json={"email": "ana@finance.io", "password": "nope"})
    assert wrong.status_code == 401


def test_register_validates_password_length(client, store):
    response = client.post("/api/auth/register", json={"email": "al@finance.io", "password": "short", "name": "Al"})
    assert response.status_code == 422


def test_account_crud(client, store):
    account_id = create_account(client)

    assert len(client.get("/api/accounts/", headers=auth_headers()).json()) == 1
    assert client.get("/api/accounts/", headers=auth_headers(OTHER_USER_ID)).json() == []

    updated = client.put(f"/api/accounts/{account_id}", json={"balance": 5}, headers=auth_headers())
    assert updated.json()["balance"] == 5

    assert client.get(f"/api/accounts/{account_id}", headers=auth_headers(OTHER_USER_ID)).status_code == 404
    assert client.delete(f"/api/accounts/{account_id}", headers=auth_headers()).status_code == 204
    assert client.delete(f"/api/accounts/{account_id}", headers=auth_headers()).status_code == 404


def test_transaction_on_foreign_account_is_forbidden(client, store):
    foreign_account = create_account(client, user_id=OTHER_USER_ID)
    response = add_transaction(client, foreign_account, amount=1000, type="expense", description="Uber")
    assert response.status_code == 403
    assert store["transactions"].items == {}


def test_transaction_is_auto_categorized(client, store):
    account_id = create_account(client)
    response = add_transaction(client, account_id, amount=2500, type="expense", description="Uber ride home")

    assert response.status_code == 201
    body = response.json()
    assert body["category"] == "transportation"
    assert body["categorized_automatically"] is True


def test_explicit_category_is_kept(client, store):
    account_id = create_account(client)
    response = add_transaction(client, account_id, amount=2500, type="expense", description="Uber", category="health")
    assert response.json()["category"] == "health"
    assert response.json()["categorized_automatically"] is False


def test_manual_recategorization(client, store):
    account_id = create_account(client)
    transaction_id = add_transaction(client, account_id, amount=990, type="expense", description="Netflix").json()[
        "transaction_id"
    ]

    response = client.patch(
        f"/api/transactions/{transaction_id}/category",
        json={"category": "subscriptions"},
        headers=auth_headers(),
    )
    assert response.json()["category"] == "subscriptions"
    assert response.json()["categorized_automatically"] is False

    missing = client.patch("/api/transactions/nope/category", json={"category": "food"}, headers=auth_headers())
    assert missing.status_code == 404


def test_transaction_amount_must_be_positive(client, store):
    account_id = create_account(client)
    assert add_transaction(client, account_id, amount=0, type="expense").status_code == 422


def test_categorize_preview(client, store):
    response = client.post(
        "/api/transactions/categorize",
        json={"description": "Pizza Hut delivery", "amount": 500, "type": "expense"},
        headers=auth_headers(),
    )
    assert response.json()["category"] == "food"
    assert store["transactions"].items == {}


def test_transactions_by_range(client, store):
    account_id = create_account(client)
    add_transaction(client, account_id, amount=100, type="expense", transaction_date="2024-05-31T23:00:00")
    add_transaction(client, account_id, amount=100, type="expense", transaction_date="2024-06-01T00:00:00")

    response = client.get(
        "/api/transactions/range",
        params={"start_date": "2024-05-01T00:00:00", "end_date": "2024-05-31T23:59:59"},
        headers=auth_headers(),
    )
    assert len(response.json()) == 1


def test_dashboard_and_insights(client, store):
    account_id = create_account(client, balance=250000)
    add_transaction(client, account_id, amount=500000, type="income", description="Salary")
    add_transaction(client, account_id, amount=120000, type="expense", description="Supermercado")
    add_transaction(client, account_id, amount=30000, type="expense", description="Uber")
    add_transaction(
        client, account_id, amount=50000, type="expense", description="Mercado", transaction_date="2024-04-10T12:00:00"
    )

    budget = client.post(
        "/api/budgets/", json={"category": "food", "limit": 100000, "month": "2024-05"}, headers=auth_headers()
    ).json()
    assert budget["spent"] == 0
    client.put(f"/api/budgets/{budget['budget_id']}", json={"spent": 85000}, headers=auth_headers())

    goal = client.post(
        "/api/goals/",
        json={"name": "Trip", "target_amount": 500000, "target_date": "2025-01-01T00:00:00"},
        headers=auth_headers(),
    ).json()
    client.patch(f"/api/goals/{goal['goal_id']}/progress", json={"current_amount": 1000}, headers=auth_headers())

    dashboard = client.get("/api/analytics/dashboard", params={"month": "2024-05"}, headers=auth_headers()).json()
    assert dashboard["total_balance"] == 250000
    assert dashboard["income"] == 500000
    assert dashboard["expenses"] == 150000
    assert dashboard["balance"] == 350000
    assert dashboard["account_count"] == 1
    assert dashboard["goals_count"] == 1
    assert [c["category"] for c in dashboard["category_spending"]] == ["food", "transportation"]
    assert dashboard["budget_alerts"][0]["is_alert"] is True

    insights = client.get("/api/analytics/insights", params={"month": "2024-05"}, headers=auth_headers()).json()
    assert [i["type"] for i in insights] == ["warning", "info", "warning", "success", "success"]

    monthly = client.get("/api/analytics/monthly/2024-04", headers=auth_headers()).json()
    assert monthly == {"month": "2024-04", "income": 0, "expenses": 50000, "balance": -50000}


def test_budget_month_format(client, store):
    response = client.post(
        "/api/budgets/", json={"category": "food", "limit": 1000, "month": "2024-5"}, headers=auth_headers()
    )
    assert response.status_code == 422
    assert client.get("/api/budgets/", params={"month": "May"}, headers=auth_headers()).status_code == 422


def test_recurring_requires_owned_account(client, store):
    foreign_account = create_account(client, user_id=OTHER_USER_ID)
    payload = {
        "account_id": foreign_account,
        "amount": 150000,
        "type": "expense",
        "category": "utilities",
        "frequency": "monthly",
        "next_occurrence_date": "2024-06-01T00:00:00",
    }
    assert client.post("/api/recurring/", json=payload, headers=auth_headers()).status_code == 403

    payload["account_id"] = create_account(client)
    response = client.post("/api/recurring/", json=payload, headers=auth_headers())
    assert response.status_code == 201
    assert response.json()["status"] == "active"


def test_transactions_by_range_mixing_utc_and_naive_bounds(client, store):
    account_id = create_account(client)
    add_transaction(client, account_id, amount=100, type="expense", transaction_date="2024-05-15T10:00:00")

    response = client.get(
        "/api/transactions/range",
        params={"start_date": "2024-05-01T00:00:00Z", "end_date": "2024-05-31T23:59:59"},
        headers=auth_headers(),
    )
    assert response.status_code == 200
    assert len(response.json()) == 1

    reversed_range = client.get(
        "/api/transactions/range",
        params={"start_date": "2024-06-01T00:00:00+02:00", "end_date": "2024-05-31T21:00:00"},
        headers=auth_headers(),
    )
    assert reversed_range.status_code == 400


def test_month_out_of_range_is_rejected(client, store):
    for month in ["2024-13", "2024-00"]:
        assert client.get(f"/api/analytics/monthly/{month}", headers=auth_headers()).status_code == 422
        assert client.get("/api/budgets/", params={"month": month}, headers=auth_headers()).status_code == 422
    assert client.get("/api/analytics/monthly/2024-12", headers=auth_headers()).status_code == 200


def test_monthly_stats_storage_error_returns_500(client, store, monkeypatch):
    def broken(user_id, start, end):
        raise RuntimeError("table unavailable")

    monkeypatch.setattr(dynamo, "get_transactions_by_date_range", broken)
    response = client.get("/api/analytics/monthly/2024-05", headers=auth_headers())
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to compute monthly stats"
