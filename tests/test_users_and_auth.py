from conftest import add_category, get_budget


def test_users_api(client):
    res = client.post("/api/users", json={"email": "Bo@Example.com", "name": "Bo"})
    assert res.status_code == 201
    bo = res.get_json()
    assert bo["email"] == "bo@example.com"

    again = client.post("/api/users", json={"email": "bo@example.com"})
    assert again.status_code == 200
    assert again.get_json()["id"] == bo["id"]

    assert client.get("/api/users?email=bo@example.com").get_json() == [bo]
    assert client.get("/api/users?email=nobody@example.com").get_json() == []
    assert client.post("/api/users", json={}).status_code == 400

    assert client.delete("/api/users?email=bo@example.com").status_code == 200
    assert client.delete("/api/users?email=bo@example.com").status_code == 404
    assert client.delete("/api/users").status_code == 400


def test_delete_user_removes_budget_data(client, make_budget):
    bo = client.post("/api/auth/register", json={"email": "bo@example.com", "password": "pw"}).get_json()
    old_budget = make_budget(bo["id"])
    add_category(client, old_budget["id"], "Rent", 600)
    snapshot = {"name": "October", "month": "October", "year": 2026, "categories": [],
                "totalBudgeted": 600, "totalSpent": 0}
    assert client.post("/api/monthly-budgets", json=snapshot).status_code == 201
    client.post("/api/auth/logout")

    assert client.delete("/api/users?email=bo@example.com").status_code == 200
    assert client.get("/api/categories").get_json() == []
    assert client.get("/api/monthly-budgets").get_json() == []

    # A fresh budget may be handed the freed id
    cy = client.post("/api/users", json={"email": "cy@example.com"}).get_json()
    new_budget = make_budget(cy["id"])
    add_category(client, new_budget["id"], "Food", 100)
    cats = client.get(f"/api/categories?budget={new_budget['id']}").get_json()
    assert [c["name"] for c in cats] == ["Food"]
    b = get_budget(client, new_budget["id"])
    assert (b["totalBudgeted"], b["totalAvailable"]) == (100, 900)


def test_register_login_logout(client):
    res = client.post("/api/auth/register", json={"email": "ana@example.com", "password": "pw"})
    assert res.status_code == 201
    assert client.get("/api/auth/me").get_json()["email"] == "ana@example.com"
    assert client.post("/api/auth/register", json={"email": "ana@example.com", "password": "x"}).status_code == 409

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401

    assert client.post("/api/auth/login", json={"email": "ana@example.com", "password": "bad"}).status_code == 401
    assert client.post("/api/auth/login", json={"email": "ana@example.com", "password": "pw"}).status_code == 200
    assert client.get("/api/auth/me").status_code == 200


def test_api_created_user_can_set_password(client):
    created = client.post("/api/users", json={"email": "cy@example.com"}).get_json()
    assert client.post("/api/auth/login", json={"email": "cy@example.com", "password": ""}).status_code == 401
    res = client.post("/api/auth/register", json={"email": "cy@example.com", "password": "pw"})
    assert res.status_code == 201
    assert res.get_json()["id"] == created["id"]


def test_unknown_route_is_json(client):
    res = client.get("/api/nothing-here")
    assert res.status_code == 404
    assert "error" in res.get_json()


def test_currency_preference(client, user):
    res = client.get("/api/users/currency")
    assert res.get_json() == {"currency": "USD"}

    assert client.put("/api/users/currency", json={}).status_code == 400
    res = client.put("/api/users/currency", json={"currency": " eur "})
    assert res.status_code == 200
    assert res.get_json() == {"currency": "EUR"}
    assert client.get("/api/users/currency").get_json() == {"currency": "EUR"}
    assert client.get("/api/users?email=ana@example.com").get_json()[0]["currency"] == "EUR"


def test_currency_requires_session(client):
    assert client.get("/api/users/currency").status_code == 401
    assert client.put("/api/users/currency", json={"currency": "EUR"}).status_code == 401
