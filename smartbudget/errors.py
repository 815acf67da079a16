from functools import wraps

from flask import current_app, jsonify
from sqlalchemy.orm.exc import StaleDataError
from werkzeug.exceptions import HTTPException

from .extensions import db


class ApiError(Exception):
    """Error surfaced to the caller as ``{"error": message}``."""

    def __init__(self, message, status_code=400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFound(ApiError):
    def __init__(self, message):
        super().__init__(message, 404)


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err):
        db.session.rollback()
        return jsonify({"error": err.message}), err.status_code

    @app.errorhandler(StaleDataError)
    def handle_stale_budget(err):
        db.session.rollback()
        app.logger.warning("Concurrent budget update rejected: %s", err)
        return jsonify({"error": "Budget was modified concurrently, retry the request"}), 409

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify({"error": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        db.session.rollback()
        app.logger.exception("Unhandled error: %s", err)
        return jsonify({"error": "Internal server error"}), 500


def failure_message(message):
    """Turn unexpected errors raised by a view into a logged 500 carrying ``message``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except (ApiError, HTTPException, StaleDataError):
                raise
            except Exception:
                db.session.rollback()
                current_app.logger.exception(message)
                return jsonify({"error": message}), 500

        return wrapper

    return decorator
