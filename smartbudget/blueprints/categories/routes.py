from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError
from ...errors import ApiError, NotFound, failure_message
from ...extensions import db
from ...models import Budget, Category, Expense
from ...services import find_budget_for_section, reconcile_budget
from ...validation import json_body, parse_amount, parse_int

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


def _duplicate_error(name):
    return ApiError(f'Category "{name}" already exists in this section')


@categories_bp.route("", methods=["GET"])
@failure_message("Failed to fetch categories")
def list_categories():
    user_id = request.args.get("user")
    budget_id = request.args.get("budget")

    if user_id:
        budget = Budget.query.filter_by(user_id=int(user_id)).first() if user_id.isdigit() else None
    elif budget_id:
        budget = db.session.get(Budget, int(budget_id)) if budget_id.isdigit() else None
    else:
        categories = Category.query.order_by(Category.created_at.desc(), Category.id.desc()).all()
        return jsonify([c.to_dict() for c in categories])

    if budget is None:
        return jsonify([])
    categories = (
        Category.query.filter_by(budget_id=budget.id)
        .order_by(Category.created_at.desc(), Category.id.desc())
        .all()
    )
    return jsonify([c.to_dict() for c in categories])


@categories_bp.route("", methods=["POST"])
@failure_message("Failed to create category")
def create_category():
    data = json_body()
    name = (data.get("name") or "").strip()
    section_id = data.get("sectionId")
    budgeted = data.get("budgeted")
    budget_id = data.get("budgetId")

    # budgeted=0 is a valid allocation
    if not name or budgeted is None or not section_id:
        raise ApiError("Missing required fields: name, budgeted, sectionId")
    budgeted = parse_amount(budgeted, "budgeted")
    if budgeted < 0:
        raise ApiError("Budgeted amount cannot be negative")

    section_id = str(section_id)
    if budget_id:
        budget = db.session.get(Budget, parse_int(budget_id, "budgetId"))
        if budget is None:
            raise NotFound("Budget not found")
    else:
        budget = find_budget_for_section(section_id)

    owner_id = budget.id if budget else None
    exists = Category.query.filter_by(budget_id=owner_id, section_id=section_id, name=name).first()
    if exists:
        raise _duplicate_error(name)

    category = Category(name=name, budgeted=budgeted, spent=0.0, section_id=section_id, budget_id=owner_id)
    db.session.add(category)
    try:
        db.session.flush()
        if budget is not None:
            reconcile_budget(budget, clamp=True)
        db.session.commit()
    except IntegrityError:
        # Lost the race against a concurrent create of the same name
        db.session.rollback()
        raise _duplicate_error(name)

    current_app.logger.info("Created category %s (%s) in section %r", category.id, name, section_id)
    return jsonify(category.to_dict()), 201


@categories_bp.route("/<int:category_id>", methods=["PUT"])
@failure_message("Failed to update category")
def update_category(category_id):
    data = json_body()
    name = (data.get("name") or "").strip()
    budgeted = data.get("budgeted")
    if not name or budgeted is None:
        raise ApiError("Missing required fields: name, budgeted")
    budgeted = parse_amount(budgeted, "budgeted")
    if budgeted < 0:
        raise ApiError("Budgeted amount cannot be negative")

    category = db.session.get(Category, category_id)
    if category is None:
        raise NotFound("Category not found")

    if name != category.name:
        clash = Category.query.filter(
            Category.budget_id == category.budget_id,
            Category.section_id == category.section_id,
            Category.name == name,
            Category.id != category.id,
        ).first()
        if clash:
            raise _duplicate_error(name)

    category.name = name
    category.budgeted = budgeted
    try:
        if category.budget_id is not None:
            reconcile_budget(db.session.get(Budget, category.budget_id))
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise _duplicate_error(name)

    return jsonify(category.to_dict())


@categories_bp.route("/<int:category_id>", methods=["DELETE"])
@failure_message("Failed to delete category")
def delete_category(category_id):
    category = db.session.get(Category, category_id)
    if category is None:
        raise NotFound("Category not found")

    budget_id = category.budget_id
    removed = Expense.query.filter_by(category_id=str(category.id)).delete(synchronize_session=False)
    db.session.delete(category)
    if budget_id is not None:
        reconcile_budget(db.session.get(Budget, budget_id))
    db.session.commit()

    current_app.logger.info("Deleted category %s and %d expenses", category_id, removed)
    return jsonify({"message": "Category deleted successfully"})
