from flask import Blueprint, jsonify, request
from ...errors import ApiError, NotFound, failure_message
from ...extensions import db
from ...models import Budget, Expense, User
from ...models.expense import EXPENSE_TYPES
from ...validation import json_body, parse_amount, parse_date, parse_int

expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")

REQUIRED_FIELDS = ("user", "budget", "categoryId", "amount", "description", "date", "type")


def _get_expense_or_404(expense_id):
    expense = db.session.get(Expense, expense_id)
    if expense is None:
        raise NotFound("Expense not found")
    return expense


def _check_type(value):
    if value not in EXPENSE_TYPES:
        raise ApiError("type must be one of: expense, income")
    return value


@expenses_bp.route("", methods=["GET"])
@failure_message("Failed to fetch expenses")
def list_expenses():
    query = Expense.query
    user_id = request.args.get("user")
    if user_id:
        query = query.filter_by(user_id=parse_int(user_id, "user"))
    expenses = query.order_by(Expense.date.desc(), Expense.id.desc()).all()
    return jsonify([e.to_dict() for e in expenses])


@expenses_bp.route("", methods=["POST"])
@failure_message("Failed to create expense")
def create_expense():
    data = json_body()
    missing = [f for f in REQUIRED_FIELDS if data.get(f) in (None, "")]
    if missing:
        raise ApiError("Missing required fields: " + ", ".join(REQUIRED_FIELDS))

    user_id = parse_int(data["user"], "user")
    budget_id = parse_int(data["budget"], "budget")
    if db.session.get(User, user_id) is None:
        raise NotFound("User not found")
    if db.session.get(Budget, budget_id) is None:
        raise NotFound("Budget not found")

    expense = Expense(
        user_id=user_id,
        budget_id=budget_id,
        category_id=str(data["categoryId"]),
        amount=parse_amount(data["amount"], "amount"),
        description=data["description"],
        date=parse_date(data["date"]),
        type=_check_type(data["type"]),
    )
    db.session.add(expense)
    db.session.commit()
    return jsonify(expense.to_dict()), 201


@expenses_bp.route("/<int:expense_id>", methods=["GET"])
@failure_message("Failed to fetch expense")
def get_expense(expense_id):
    return jsonify(_get_expense_or_404(expense_id).to_dict())


@expenses_bp.route("/<int:expense_id>", methods=["PUT"])
@failure_message("Failed to update expense")
def update_expense(expense_id):
    expense = _get_expense_or_404(expense_id)
    data = json_body()
    if "categoryId" in data:
        expense.category_id = str(data["categoryId"])
    if "amount" in data:
        expense.amount = parse_amount(data["amount"], "amount")
    if "description" in data:
        expense.description = data["description"]
    if "date" in data:
        expense.date = parse_date(data["date"])
    if "type" in data:
        expense.type = _check_type(data["type"])
    db.session.commit()
    return jsonify(expense.to_dict())


@expenses_bp.route("/<int:expense_id>", methods=["DELETE"])
@failure_message("Failed to delete expense")
def delete_expense(expense_id):
    expense = _get_expense_or_404(expense_id)
    db.session.delete(expense)
    db.session.commit()
    return jsonify({"success": True})
