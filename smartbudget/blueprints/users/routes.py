from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required, current_user
from ...errors import ApiError, NotFound, failure_message
from ...extensions import db
from ...models import User
from ...validation import json_body

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.route("", methods=["GET"])
@failure_message("Failed to fetch users")
def list_users():
    email = request.args.get("email")
    if email:
        user = User.query.filter_by(email=email.strip().lower()).first()
        return jsonify([user.to_dict()] if user else [])
    return jsonify([u.to_dict() for u in User.query.order_by(User.id).all()])


@users_bp.route("", methods=["POST"])
@failure_message("Failed to create user")
def create_user():
    data = json_body()
    email = (data.get("email") or "").strip().lower()
    if not email:
        raise ApiError("Email is required")

    existing = User.query.filter_by(email=email).first()
    if existing:
        return jsonify(existing.to_dict())

    user = User(email=email, name=data.get("name") or email.split("@")[0])
    db.session.add(user)
    db.session.commit()
    return jsonify(user.to_dict()), 201


@users_bp.route("", methods=["DELETE"])
@failure_message("Failed to delete user")
def delete_user():
    email = (request.args.get("email") or "").strip().lower()
    if not email:
        raise ApiError("Email is required")
    user = User.query.filter_by(email=email).first()
    if user is None:
        raise NotFound("User not found")
    payload = user.to_dict()
    db.session.delete(user)
    db.session.commit()
    return jsonify({"message": "User deleted successfully", "user": payload})


@users_bp.route("/currency", methods=["GET"])
@login_required
def get_currency():
    return jsonify({"currency": current_user.currency or "USD"})


@users_bp.route("/currency", methods=["PUT"])
@login_required
@failure_message("Failed to update user currency")
def update_currency():
    currency = json_body().get("currency")
    if not isinstance(currency, str) or not currency.strip():
        raise ApiError("Currency is required")
    current_user.currency = currency.strip().upper()
    db.session.commit()
    current_app.logger.info("User %s switched currency to %s", current_user.email, current_user.currency)
    return jsonify({"currency": current_user.currency})
