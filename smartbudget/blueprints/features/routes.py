from functools import wraps
from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required, current_user
from ...errors import ApiError, NotFound, failure_message
from ...extensions import db
from ...models import Feature
from ...models.feature import PLATFORMS, USER_TYPES, normalize_feature_key
from ...services import evaluate_features
from ...validation import json_body, parse_int

features_bp = Blueprint("features", __name__, url_prefix="/api/features")
admin_features_bp = Blueprint("admin_features", __name__, url_prefix="/api/admin/features")

REQUIRED_FIELDS = ("key", "name", "description", "platforms", "userTypes")


def admin_required(view):
    @wraps(view)
    @login_required
    def wrapper(*args, **kwargs):
        if current_user.email.lower() not in current_app.config.get("ADMIN_EMAILS", []):
            raise ApiError("Forbidden", 403)
        return view(*args, **kwargs)

    return wrapper


def _validate_choices(values, allowed, label):
    if not isinstance(values, list) or not all(v in allowed for v in values):
        raise ApiError(f"Invalid {label}. Must be {' and/or '.join(allowed)}")
    return values


def _apply_fields(feature, data):
    if "name" in data:
        feature.name = data["name"]
    if "description" in data:
        feature.description = data["description"]
    if "enabled" in data:
        feature.enabled = bool(data["enabled"])
    if "platforms" in data:
        feature.platforms = _validate_choices(data["platforms"], PLATFORMS, "platforms")
    if "userTypes" in data:
        feature.user_types = _validate_choices(data["userTypes"], USER_TYPES, "user types")
    if "rolloutPercentage" in data:
        rollout = parse_int(data["rolloutPercentage"], "rolloutPercentage")
        if not 0 <= rollout <= 100:
            raise ApiError("rolloutPercentage must be between 0 and 100")
        feature.rollout_percentage = rollout
    if "targetUsers" in data:
        feature.target_users = [str(u) for u in data["targetUsers"] or []]
    if "excludeUsers" in data:
        feature.exclude_users = [str(u) for u in data["excludeUsers"] or []]
    if "metadata" in data:
        feature.settings = data["metadata"] or {}
    feature.last_modified_by = current_user.email


def _get_feature_or_404(key):
    feature = Feature.query.filter_by(key=normalize_feature_key(key)).first()
    if feature is None:
        raise NotFound("Feature not found")
    return feature


@features_bp.route("", methods=["GET"])
@login_required
@failure_message("Failed to get features")
def user_features():
    platform = request.args.get("platform") or "web"
    user_type = current_user.user_type
    candidates = [
        f for f in Feature.query.filter_by(enabled=True).all()
        if platform in (f.platforms or []) and user_type in (f.user_types or [])
    ]
    return jsonify({
        "features": evaluate_features(candidates, current_user.id),
        "userType": user_type,
        "platform": platform,
        "userId": str(current_user.id),
    })


@admin_features_bp.route("", methods=["GET"])
@admin_required
def list_features():
    features = Feature.query.order_by(Feature.created_at.desc(), Feature.id.desc()).all()
    return jsonify([f.to_dict() for f in features])


@admin_features_bp.route("", methods=["POST"])
@admin_required
@failure_message("Failed to create feature")
def create_feature():
    data = json_body()
    if any(not data.get(f) for f in REQUIRED_FIELDS):
        raise ApiError("Missing required fields: " + ", ".join(REQUIRED_FIELDS))
    if Feature.query.filter_by(key=normalize_feature_key(data["key"])).first():
        raise ApiError("Feature with this key already exists", 409)

    feature = Feature(key=data["key"], created_by=current_user.email)
    _apply_fields(feature, data)
    db.session.add(feature)
    db.session.commit()
    current_app.logger.info("Feature %s created by %s", feature.key, current_user.email)
    return jsonify(feature.to_dict()), 201


@admin_features_bp.route("/<key>", methods=["PUT"])
@admin_required
@failure_message("Failed to update feature")
def update_feature(key):
    feature = _get_feature_or_404(key)
    _apply_fields(feature, json_body())
    db.session.commit()
    return jsonify(feature.to_dict())


@admin_features_bp.route("/<key>", methods=["DELETE"])
@admin_required
def delete_feature(key):
    feature = _get_feature_or_404(key)
    db.session.delete(feature)
    db.session.commit()
    return jsonify({"message": "Feature deleted successfully"})
