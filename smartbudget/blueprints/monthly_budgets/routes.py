import csv
from io import StringIO
from flask import Blueprint, jsonify, make_response, request
from flask_login import login_required, current_user
from ...errors import ApiError, NotFound, failure_message
from ...extensions import db
from ...models import MonthlyBudget
from ...services import resolve_user_id
from ...validation import json_body, parse_amount, parse_int

monthly_budgets_bp = Blueprint("monthly_budgets", __name__, url_prefix="/api/monthly-budgets")


def _get_snapshot_or_404(snapshot_id):
    snapshot = db.session.get(MonthlyBudget, snapshot_id)
    if snapshot is None:
        raise NotFound("Not found")
    return snapshot


@monthly_budgets_bp.route("", methods=["GET"])
@failure_message("Failed to fetch monthly budgets")
def list_monthly_budgets():
    query = MonthlyBudget.query
    user_id = request.args.get("user")
    if user_id:
        query = query.filter_by(user_id=parse_int(user_id, "user"))
    snapshots = query.order_by(MonthlyBudget.created_at.desc(), MonthlyBudget.id.desc()).all()
    return jsonify([s.to_dict() for s in snapshots])


@monthly_budgets_bp.route("", methods=["POST"])
@login_required
@failure_message("Failed to create monthly budget")
def create_monthly_budget():
    data = json_body()
    if not data.get("name") or data.get("month") in (None, "") or data.get("year") is None:
        raise ApiError("Missing required fields: name, month, year")
    user_id = resolve_user_id(current_user.email)

    # Allocations in history never go negative
    categories = []
    for cat in data.get("categories") or []:
        categories.append({
            "name": cat.get("name"),
            "budgeted": max(0.0, parse_amount(cat.get("budgeted", 0), "budgeted")),
            "spent": parse_amount(cat.get("spent", 0), "spent"),
        })

    snapshot = MonthlyBudget(
        user_id=user_id,
        name=data["name"],
        month=str(data["month"]),
        year=parse_int(data["year"], "year"),
        categories=categories,
        total_budgeted=max(0.0, parse_amount(data.get("totalBudgeted", 0), "totalBudgeted")),
        total_spent=parse_amount(data.get("totalSpent", 0), "totalSpent"),
        expenses_count=parse_int(data.get("expensesCount", 0), "expensesCount"),
    )
    db.session.add(snapshot)
    db.session.commit()
    return jsonify(snapshot.to_dict()), 201


@monthly_budgets_bp.route("/<int:snapshot_id>", methods=["DELETE"])
def delete_monthly_budget(snapshot_id):
    snapshot = _get_snapshot_or_404(snapshot_id)
    db.session.delete(snapshot)
    db.session.commit()
    return jsonify({"success": True})


@monthly_budgets_bp.route("/<int:snapshot_id>/export.csv")
def export_csv(snapshot_id):
    snapshot = _get_snapshot_or_404(snapshot_id)
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(["Category", "Budgeted", "Spent"])
    for cat in snapshot.categories:
        writer.writerow([cat.get("name") or "", f"{cat.get('budgeted', 0):.2f}", f"{cat.get('spent', 0):.2f}"])
    writer.writerow(["Total", f"{snapshot.total_budgeted:.2f}", f"{snapshot.total_spent:.2f}"])
    response = make_response(output.getvalue())
    filename = f"budget-{snapshot.year}-{snapshot.month}.csv"
    response.headers["Content-Disposition"] = f"attachment; filename={filename}"
    response.headers["Content-Type"] = "text/csv"
    return response
