from smartbudget.models.expense import Expense, signed_total


def _payload(user, budget, **overrides):
    data = {
        "user": user["id"], "budget": budget["id"], "categoryId": "abc",
        "amount": 25, "description": "Lunch", "date": "2026-10-03", "type": "expense",
    }
    data.update(overrides)
    return data


def test_expense_crud(client, user, budget):
    res = client.post("/api/expenses", json=_payload(user, budget))
    assert res.status_code == 201
    expense = res.get_json()
    assert expense["categoryId"] == "abc"
    assert expense["date"] == "2026-10-03"

    res = client.put(f"/api/expenses/{expense['id']}", json={"amount": 30, "type": "income"})
    assert res.get_json()["amount"] == 30
    assert res.get_json()["type"] == "income"
    assert client.get(f"/api/expenses/{expense['id']}").get_json()["description"] == "Lunch"

    assert client.delete(f"/api/expenses/{expense['id']}").get_json() == {"success": True}
    assert client.get(f"/api/expenses/{expense['id']}").status_code == 404


def test_expense_validation(client, user, budget):
    res = client.post("/api/expenses", json=_payload(user, budget, description=""))
    assert res.status_code == 400
    assert client.post("/api/expenses", json=_payload(user, budget, type="refund")).status_code == 400
    assert client.post("/api/expenses", json=_payload(user, budget, date="yesterday")).status_code == 400
    unknown_budget = _payload(user, budget)
    unknown_budget["budget"] = 999
    assert client.post("/api/expenses", json=unknown_budget).status_code == 404
    # Zero is a present amount and full timestamps are accepted
    res = client.post("/api/expenses", json=_payload(user, budget, amount=0, date="2026-10-03T10:00:00Z"))
    assert res.status_code == 201


def test_expenses_listed_newest_first(client, user, budget):
    for day in ("2026-10-01", "2026-10-09", "2026-10-04"):
        client.post("/api/expenses", json=_payload(user, budget, date=day))
    dates = [e["date"] for e in client.get(f"/api/expenses?user={user['id']}").get_json()]
    assert dates == ["2026-10-09", "2026-10-04", "2026-10-01"]


def test_signed_total():
    expenses = [
        Expense(amount=50, type="expense"),
        Expense(amount=20, type="income"),
        Expense(amount=5.5, type="expense"),
    ]
    assert signed_total(expenses) == 35.5
    assert signed_total([]) == 0
