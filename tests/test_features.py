from types import SimpleNamespace

import pytest

from smartbudget.services import evaluate_features, rollout_hash


def _feature(key="dark-mode", rollout=100, target=(), exclude=()):
    return SimpleNamespace(
        key=key, rollout_percentage=rollout, target_users=list(target), exclude_users=list(exclude),
    )


@pytest.mark.parametrize("value, expected", [
    ("", 0),
    ("ab", 3105),
    ("hello", 99162322),
    ("Hello World", 862545276),  # wraps to a negative 32-bit value
])
def test_rollout_hash(value, expected):
    assert rollout_hash(value) == expected


def test_rollout_buckets_are_stable():
    feature = _feature(rollout=50)
    # hash("1dark-mode") % 100 == 53, hash("2dark-mode") % 100 == 48
    assert evaluate_features([feature], 1) == {"dark-mode": False}
    assert evaluate_features([feature], 2) == {"dark-mode": True}


def test_targeting_rules_take_precedence():
    assert evaluate_features([_feature(exclude=["1"], target=["1"])], 1) == {"dark-mode": False}
    assert evaluate_features([_feature(target=["2"])], 1) == {"dark-mode": False}
    assert evaluate_features([_feature(target=["1"], rollout=0)], 1) == {"dark-mode": True}
    assert evaluate_features([_feature(rollout=0)], 1) == {"dark-mode": False}
    assert evaluate_features([_feature()], 1) == {"dark-mode": True}


def _login(client, email):
    client.post("/api/auth/register", json={"email": email, "password": "pw"})


NEW_FEATURE = {
    "key": "Budget Export",
    "name": "Budget export",
    "description": "CSV export of history",
    "enabled": True,
    "platforms": ["web"],
    "userTypes": ["free", "pro"],
}


def test_admin_feature_lifecycle(client):
    _login(client, "admin@example.com")
    res = client.post("/api/admin/features", json=NEW_FEATURE)
    assert res.status_code == 201
    created = res.get_json()
    assert created["key"] == "budget_export"
    assert created["rolloutPercentage"] == 100
    assert created["createdBy"] == "admin@example.com"

    assert client.post("/api/admin/features", json=NEW_FEATURE).status_code == 409
    assert len(client.get("/api/admin/features").get_json()) == 1

    res = client.put("/api/admin/features/budget_export", json={"rolloutPercentage": 0})
    assert res.get_json()["rolloutPercentage"] == 0
    assert client.put("/api/admin/features/budget_export", json={"rolloutPercentage": 101}).status_code == 400

    assert client.delete("/api/admin/features/budget_export").status_code == 200
    assert client.delete("/api/admin/features/budget_export").status_code == 404


def test_admin_feature_validation(client):
    _login(client, "admin@example.com")
    assert client.post("/api/admin/features", json={"key": "x"}).status_code == 400
    bad = dict(NEW_FEATURE, platforms=["desktop"])
    res = client.post("/api/admin/features", json=bad)
    assert res.status_code == 400
    assert "Invalid platforms" in res.get_json()["error"]


def test_admin_endpoints_are_restricted(client):
    assert client.get("/api/admin/features").status_code == 401
    _login(client, "someone@example.com")
    assert client.get("/api/admin/features").status_code == 403


def test_user_features_filter_platform_and_type(client):
    _login(client, "admin@example.com")
    client.post("/api/admin/features", json=NEW_FEATURE)
    client.post("/api/admin/features", json=dict(NEW_FEATURE, key="mobile-only", platforms=["mobile"]))
    client.post("/api/admin/features", json=dict(NEW_FEATURE, key="pro-only", userTypes=["pro"]))
    client.post("/api/admin/features", json=dict(NEW_FEATURE, key="off", enabled=False))

    body = client.get("/api/features").get_json()
    assert body["features"] == {"budget_export": True}
    assert body["userType"] == "free"
    assert body["platform"] == "web"

    body = client.get("/api/features?platform=mobile").get_json()
    assert body["features"] == {"mobile-only": True}
