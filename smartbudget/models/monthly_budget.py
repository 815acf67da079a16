from datetime import datetime
from ..extensions import db


class MonthlyBudget(db.Model):
    """Snapshot of a budget period, saved by the client after a reset."""

    __tablename__ = "monthly_budgets"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    month = db.Column(db.String(20), nullable=False)
    year = db.Column(db.Integer, nullable=False)
    categories = db.Column(db.JSON, nullable=False, default=list)  # [{name, budgeted, spent}]
    total_budgeted = db.Column(db.Float, nullable=False)
    total_spent = db.Column(db.Float, nullable=False)
    expenses_count = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "user": self.user_id,
            "name": self.name,
            "month": self.month,
            "year": self.year,
            "categories": self.categories,
            "totalBudgeted": self.total_budgeted,
            "totalSpent": self.total_spent,
            "expensesCount": self.expenses_count,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
