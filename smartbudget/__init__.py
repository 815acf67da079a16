from flask import Flask, jsonify
from .extensions import db, migrate, login_manager
from .config import Config
from .errors import register_error_handlers

from .blueprints.auth.routes import auth_bp
from .blueprints.users.routes import users_bp
from .blueprints.budgets.routes import budgets_bp
from .blueprints.categories.routes import categories_bp
from .blueprints.expenses.routes import expenses_bp
from .blueprints.monthly_budgets.routes import monthly_budgets_bp
from .blueprints.features.routes import features_bp, admin_features_bp
from .blueprints.mobile.routes import mobile_bp
from .services import CodeStore


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "Unauthorized"}), 401

    register_error_handlers(app)
    app.extensions["mobile_codes"] = CodeStore(app.config["MOBILE_CODE_TTL"])

    # Ensure tables exist for a smooth first run
    with app.app_context():
        from . import models  # noqa: F401
        db.create_all()

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(budgets_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(monthly_budgets_bp)
    app.register_blueprint(features_bp)
    app.register_blueprint(admin_features_bp)
    app.register_blueprint(mobile_bp)

    @app.route("/")
    def root():
        return jsonify({"message": "SmartBudget API is running"})

    return app
