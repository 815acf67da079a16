import httpx
import pytest

from smartbudget import create_app
from smartbudget.config import Config
from smartbudget.extensions import db


@pytest.fixture
def app(tmp_path):
    class TestConfig(Config):
        TESTING = True
        SECRET_KEY = "test-secret"
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'smartbudget-test.db'}"
        USERS_API_URL = "http://smartbudget.test"
        ADMIN_EMAILS = ["admin@example.com"]

    app = create_app(TestConfig)
    # The Users API self-call is served by the app under test
    app.config["USERS_API_TRANSPORT"] = httpx.WSGITransport(app=app)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(client):
    """Registered and logged-in user; the client carries the session."""
    res = client.post("/api/auth/register", json={
        "email": "ana@example.com", "password": "s3cret", "name": "Ana",
    })
    assert res.status_code == 201
    return res.get_json()


@pytest.fixture
def make_budget(client):
    def _make(user_id, total_budgeted=0, total_available=1000, sections=("monthly",)):
        res = client.post("/api/budgets", json={
            "user": user_id,
            "month": 10,
            "year": 2026,
            "totalBudgeted": total_budgeted,
            "totalAvailable": total_available,
            "sections": list(sections),
        })
        assert res.status_code == 201, res.get_json()
        return res.get_json()

    return _make


@pytest.fixture
def budget(user, make_budget):
    return make_budget(user["id"])


def add_category(client, budget_id, name, budgeted, section="monthly"):
    return client.post("/api/categories", json={
        "name": name, "budgeted": budgeted, "sectionId": section, "budgetId": budget_id,
    })


def get_budget(client, budget_id):
    return client.get(f"/api/budgets/{budget_id}").get_json()
