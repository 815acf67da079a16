from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from ..extensions import db, login_manager


class User(UserMixin, db.Model):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    name = db.Column(db.String(120))
    # Accounts created through the Users API have no password
    password_hash = db.Column(db.String(255))
    subscription_status = db.Column(db.String(50), default="none")
    currency = db.Column(db.String(10), nullable=False, default="USD")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    budgets = db.relationship("Budget", backref="user", lazy=True, cascade="all, delete-orphan")
    expenses = db.relationship("Expense", backref="user", lazy=True, cascade="all, delete-orphan")
    monthly_budgets = db.relationship("MonthlyBudget", backref="user", lazy=True, cascade="all, delete-orphan")

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def user_type(self) -> str:
        return "pro" if self.subscription_status == "active" else "free"

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "subscriptionStatus": self.subscription_status,
            "currency": self.currency,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))
