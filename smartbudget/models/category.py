from datetime import datetime
from ..extensions import db


class Category(db.Model):
    __tablename__ = "categories"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    budgeted = db.Column(db.Float, nullable=False, default=0.0)
    spent = db.Column(db.Float, nullable=False, default=0.0)
    # Name of the owning BudgetSection, renamed together with it
    section_id = db.Column(db.String(100), nullable=False)
    budget_id = db.Column(db.Integer, db.ForeignKey("budgets.id"))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("budget_id", "section_id", "name", name="uq_budget_section_category_name"),
        db.CheckConstraint("budgeted >= 0", name="ck_category_budgeted_non_negative"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "budgeted": self.budgeted,
            "spent": self.spent,
            "sectionId": self.section_id,
            "budgetId": self.budget_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
