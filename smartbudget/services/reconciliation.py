"""Keeps a budget's totals in line with its categories.

A budget carries an envelope, the overall amount the user can hand out.
``total_budgeted`` is the sum of its categories' allocations and
``total_available`` is what is left of the envelope. Every category mutation
ends with :func:`reconcile_budget` inside the same transaction; the budget's
version column turns a concurrent writer into a ``StaleDataError``.
"""
from flask import current_app
from sqlalchemy import func, or_
from ..extensions import db
from ..models import Budget, BudgetSection, Category


def budgeted_sum(budget_id) -> float:
    total = (
        db.session.query(func.coalesce(func.sum(Category.budgeted), 0.0))
        .filter(Category.budget_id == budget_id)
        .scalar()
    )
    return float(total or 0.0)


def reconcile_budget(budget: Budget, clamp: bool = False) -> Budget:
    """Recompute ``total_budgeted``/``total_available`` from the categories.

    Pending category changes are flushed by the query. With ``clamp`` the
    available amount never goes below zero. The caller commits.
    """
    total_budgeted = budgeted_sum(budget.id)
    total_available = budget.envelope - total_budgeted
    if clamp:
        total_available = max(0.0, total_available)

    budget.total_budgeted = total_budgeted
    budget.total_available = total_available
    current_app.logger.info(
        "Reconciled budget %s: budgeted=%.2f available=%.2f envelope=%.2f",
        budget.id, total_budgeted, total_available, budget.envelope,
    )
    return budget


def find_budget_for_section(section_ref):
    """Budget owning a section, matched by section name or section id."""
    section_ref = str(section_ref)
    conditions = [BudgetSection.name == section_ref]
    if section_ref.isdigit():
        conditions.append(BudgetSection.id == int(section_ref))
    return (
        Budget.query.join(BudgetSection, BudgetSection.budget_id == Budget.id)
        .filter(or_(*conditions))
        .order_by(Budget.id)
        .first()
    )
