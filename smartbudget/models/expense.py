from datetime import date, datetime
from ..extensions import db

EXPENSE_TYPES = ("expense", "income")


class Expense(db.Model):
    __tablename__ = "expenses"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    budget_id = db.Column(db.Integer, db.ForeignKey("budgets.id"), nullable=False)
    # Category reference as sent by the client, not always a categories.id
    category_id = db.Column(db.String(100), nullable=False)
    amount = db.Column(db.Float, nullable=False)
    description = db.Column(db.String(200), nullable=False)
    date = db.Column(db.Date, default=date.today, nullable=False)
    type = db.Column(db.String(10), nullable=False, default="expense")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def signed_amount(self) -> float:
        return self.amount if self.type == "expense" else -self.amount

    def to_dict(self):
        return {
            "id": self.id,
            "user": self.user_id,
            "budget": self.budget_id,
            "categoryId": self.category_id,
            "amount": self.amount,
            "description": self.description,
            "date": self.date.isoformat(),
            "type": self.type,
        }


def signed_total(expenses) -> float:
    """Net spending: expenses add, income subtracts."""
    return sum(e.signed_amount() for e in expenses)
