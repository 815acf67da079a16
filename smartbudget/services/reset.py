from flask import current_app
from ..errors import NotFound
from ..extensions import db
from ..models import Budget, Category, Expense
from ..models.expense import signed_total
from .reconciliation import reconcile_budget


def reset_budget(user_id):
    """Close the current period: zero spending, keep allocations.

    Category ``spent`` values are cleared and the user's expenses deleted in
    one transaction, then the totals are recomputed. Returns the snapshot the
    client keeps for its history.
    """
    budget = Budget.query.filter_by(user_id=user_id).first()
    if budget is None:
        raise NotFound("Budget not found")

    categories = Category.query.filter_by(budget_id=budget.id).all()
    expenses = Expense.query.filter_by(user_id=user_id).all()
    total_spent = signed_total(expenses)
    category_summaries = [
        {"name": c.name, "budgeted": c.budgeted, "spent": c.spent} for c in categories
    ]

    for category in categories:
        category.spent = 0.0
    Expense.query.filter_by(user_id=user_id).delete(synchronize_session=False)

    reconcile_budget(budget)
    db.session.commit()

    current_app.logger.info(
        "Reset budget %s for user %s: %d categories, %d expenses removed",
        budget.id, user_id, len(categories), len(expenses),
    )
    return {
        "month": budget.month,
        "year": budget.year,
        "categories": category_summaries,
        "totalBudgeted": budget.total_budgeted,
        "totalAvailable": budget.total_available,
        "totalSpent": total_spent,
        "expensesCount": len(expenses),
    }
