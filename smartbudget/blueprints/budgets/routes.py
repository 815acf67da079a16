from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required, current_user
from sqlalchemy import and_, or_
from ...errors import ApiError, NotFound, failure_message
from ...extensions import db
from ...models import Budget, BudgetSection, Category, Expense, User
from ...services import reconcile_budget, rename_section, reset_budget, resolve_user_id
from ...validation import json_body, parse_amount, parse_int

budgets_bp = Blueprint("budgets", __name__, url_prefix="/api/budgets")


def _get_budget_or_404(budget_id):
    budget = db.session.get(Budget, budget_id)
    if budget is None:
        raise NotFound("Budget not found")
    return budget


def _section_fields(raw):
    # Sections may be sent as plain names or as {name, displayName}
    if isinstance(raw, str):
        raw = {"name": raw}
    name = (raw.get("name") or "").strip() if isinstance(raw, dict) else ""
    if not name:
        raise ApiError("Every section needs a name")
    return name, (raw.get("displayName") or name).strip()


def _parse_month(value):
    month = parse_int(value, "month")
    if not 1 <= month <= 12:
        raise ApiError("month must be between 1 and 12")
    return month


def _apply_sections(budget, raw_sections):
    """Replace the budget's sections, keeping rows whose id is sent back."""
    existing = {s.id: s for s in budget.sections}
    sections, seen = [], set()
    for position, raw in enumerate(raw_sections):
        name, display_name = _section_fields(raw)
        if name in seen:
            raise ApiError(f'Duplicate section name "{name}"')
        seen.add(name)
        section = existing.get(raw.get("id")) if isinstance(raw, dict) else None
        if section is None:
            section = BudgetSection(name=name)
        section.name = name
        section.display_name = display_name
        section.position = position
        sections.append(section)
    budget.sections = sections


@budgets_bp.route("", methods=["GET"])
def list_budgets():
    user_id = request.args.get("user")
    query = Budget.query
    if user_id:
        query = query.filter_by(user_id=parse_int(user_id, "user"))
    return jsonify([b.to_dict() for b in query.order_by(Budget.id).all()])


@budgets_bp.route("", methods=["POST"])
@failure_message("Failed to create budget")
def create_budget():
    data = json_body()
    if not data.get("user") or data.get("month") is None or data.get("year") is None:
        raise ApiError("Missing required fields: user, month, year")

    user = db.session.get(User, parse_int(data["user"], "user"))
    if user is None:
        raise NotFound("User not found")
    month = _parse_month(data["month"])

    total_budgeted = parse_amount(data.get("totalBudgeted", 0), "totalBudgeted")
    total_available = parse_amount(data.get("totalAvailable", 0), "totalAvailable")
    budget = Budget(
        user_id=user.id,
        month=month,
        year=parse_int(data["year"], "year"),
        envelope=total_budgeted + total_available,
        total_budgeted=total_budgeted,
        total_available=total_available,
    )
    _apply_sections(budget, data.get("sections") or [])
    db.session.add(budget)
    db.session.commit()
    current_app.logger.info("Created budget %s for user %s", budget.id, user.id)
    return jsonify(budget.to_dict()), 201


@budgets_bp.route("/<int:budget_id>", methods=["GET"])
def get_budget(budget_id):
    return jsonify(_get_budget_or_404(budget_id).to_dict())


@budgets_bp.route("/<int:budget_id>", methods=["PUT"])
@failure_message("Failed to update budget")
def update_budget(budget_id):
    budget = _get_budget_or_404(budget_id)
    data = json_body()

    if "month" in data:
        budget.month = _parse_month(data["month"])
    if "year" in data:
        budget.year = parse_int(data["year"], "year")
    if "sections" in data:
        _apply_sections(budget, data["sections"] or [])
    # Rewriting the totals is how a user redefines the envelope
    if "totalBudgeted" in data or "totalAvailable" in data:
        budget.total_budgeted = parse_amount(data.get("totalBudgeted", budget.total_budgeted), "totalBudgeted")
        budget.total_available = parse_amount(data.get("totalAvailable", budget.total_available), "totalAvailable")
        budget.envelope = budget.total_budgeted + budget.total_available

    db.session.commit()
    return jsonify(budget.to_dict())


@budgets_bp.route("/<int:budget_id>", methods=["DELETE"])
@failure_message("Failed to delete budget")
def delete_budget(budget_id):
    budget = _get_budget_or_404(budget_id)
    section_refs = budget.section_names() + [str(s.id) for s in budget.sections]

    # Dependents and the budget go in one transaction
    categories = Category.query.filter(
        or_(
            Category.budget_id == budget.id,
            and_(Category.budget_id.is_(None), Category.section_id.in_(section_refs)),
        )
    ).delete(synchronize_session=False)
    expenses = Expense.query.filter_by(budget_id=budget.id).delete(synchronize_session=False)
    db.session.delete(budget)
    db.session.commit()

    current_app.logger.info(
        "Deleted budget %s with %d categories and %d expenses", budget_id, categories, expenses
    )
    return jsonify({"success": True})


@budgets_bp.route("/<int:budget_id>/update-section", methods=["PUT"])
@failure_message("Failed to update section")
def update_section(budget_id):
    data = json_body()
    old_name = data.get("oldSectionName")
    new_name = data.get("newSectionName")
    if not old_name or not new_name:
        raise ApiError("Missing required fields: oldSectionName, newSectionName")

    budget = _get_budget_or_404(budget_id)
    budget, updated = rename_section(budget, old_name, new_name)
    db.session.commit()
    return jsonify({"budget": budget.to_dict(), "updatedCategories": updated})


@budgets_bp.route("/sync", methods=["POST"])
@login_required
@failure_message("Failed to sync budget totals")
def sync_budget():
    user_id = resolve_user_id(current_user.email)
    budget = Budget.query.filter_by(user_id=user_id).first()
    if budget is None:
        raise NotFound("Budget not found")

    reconcile_budget(budget)
    db.session.commit()
    categories = Category.query.filter_by(budget_id=budget.id).all()
    return jsonify({
        "message": "Budget totals synced successfully",
        "budget": budget.to_dict(),
        "categories": [c.to_dict() for c in categories],
        "totalBudgeted": budget.total_budgeted,
    })


@budgets_bp.route("/reset", methods=["POST"])
@login_required
@failure_message("Failed to reset budget")
def reset():
    user_id = resolve_user_id(current_user.email)
    saved = reset_budget(user_id)
    return jsonify({"message": "Budget reset successfully", "savedData": saved})
