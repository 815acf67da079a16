import pytest
from sqlalchemy import update
from sqlalchemy.orm.exc import StaleDataError

from smartbudget.extensions import db
from smartbudget.models import Budget, BudgetSection, Category, User
from smartbudget.services import budgeted_sum, find_budget_for_section, reconcile_budget


@pytest.fixture
def seeded(app):
    with app.app_context():
        user = User(email="ana@example.com")
        budget = Budget(month=10, year=2026, envelope=1000, total_budgeted=0, total_available=1000)
        budget.sections = [BudgetSection(name="monthly", display_name="Monthly", position=0)]
        user.budgets.append(budget)
        db.session.add(user)
        db.session.commit()
        yield budget


def test_reconcile_conserves_envelope(seeded):
    db.session.add_all([
        Category(name="Rent", budgeted=600, section_id="monthly", budget_id=seeded.id),
        Category(name="Food", budgeted=250, section_id="monthly", budget_id=seeded.id),
    ])
    reconcile_budget(seeded)
    assert budgeted_sum(seeded.id) == 850
    assert seeded.total_budgeted == 850
    assert seeded.total_available == 150
    assert seeded.total_budgeted + seeded.total_available == seeded.envelope


def test_reconcile_clamps_only_when_asked(seeded):
    db.session.add(Category(name="Car", budgeted=1200, section_id="monthly", budget_id=seeded.id))
    reconcile_budget(seeded)
    assert seeded.total_available == -200
    reconcile_budget(seeded, clamp=True)
    assert seeded.total_available == 0
    assert seeded.envelope == 1000


def test_find_budget_for_section(seeded):
    section_id = seeded.sections[0].id
    assert find_budget_for_section("monthly").id == seeded.id
    assert find_budget_for_section(str(section_id)).id == seeded.id
    assert find_budget_for_section("unknown") is None


def test_concurrent_budget_write_is_rejected(seeded):
    budget_id = seeded.id
    # Another request updates the budget behind this session's back
    with db.engine.begin() as conn:
        table = Budget.__table__
        conn.execute(
            update(table)
            .where(table.c.id == budget_id)
            .values(total_budgeted=1, version=table.c.version + 1)
        )

    db.session.add(Category(name="Rent", budgeted=300, section_id="monthly", budget_id=budget_id))
    reconcile_budget(seeded)
    with pytest.raises(StaleDataError):
        db.session.commit()
    db.session.rollback()


def test_stale_budget_maps_to_conflict(app):
    @app.route("/boom")
    def boom():
        raise StaleDataError("version mismatch")

    res = app.test_client().get("/boom")
    assert res.status_code == 409
    assert "retry" in res.get_json()["error"]


def test_unexpected_error_is_logged_500(app):
    @app.route("/explode")
    def explode():
        raise RuntimeError("disk on fire")

    res = app.test_client().get("/explode")
    assert res.status_code == 500
    assert res.get_json() == {"error": "Internal server error"}
