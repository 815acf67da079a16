from flask import Blueprint, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from ...errors import ApiError
from ...extensions import db
from ...models import User
from ...validation import json_body

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/register", methods=["POST"])
def register():
    data = json_body()
    email = (data.get("email") or "").strip().lower()
    password = data.get("password")
    if not all([email, password]):
        raise ApiError("Email and password are required")

    user = User.query.filter_by(email=email).first()
    if user and user.password_hash:
        raise ApiError("Email already registered", 409)
    if user is None:
        # Accounts created through the Users API can claim a password here
        user = User(email=email)
        db.session.add(user)
    user.name = data.get("name") or user.name or email.split("@")[0]
    user.set_password(password)
    db.session.commit()
    login_user(user)
    return jsonify(user.to_dict()), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    email = (data.get("email") or "").strip().lower()
    user = User.query.filter_by(email=email).first()
    if user and user.check_password(data.get("password") or ""):
        login_user(user, remember=bool(data.get("remember")))
        return jsonify(user.to_dict())
    raise ApiError("Invalid credentials", 401)


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"message": "Logged out"})


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify(current_user.to_dict())
