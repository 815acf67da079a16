from datetime import datetime
from ..extensions import db


class Budget(db.Model):
    __tablename__ = "budgets"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    month = db.Column(db.Integer, nullable=False)  # 1-12
    year = db.Column(db.Integer, nullable=False)
    # Overall amount the user can allocate; totalBudgeted + totalAvailable == envelope
    envelope = db.Column(db.Float, nullable=False, default=0.0)
    total_budgeted = db.Column(db.Float, nullable=False, default=0.0)
    total_available = db.Column(db.Float, nullable=False, default=0.0)
    version = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    sections = db.relationship(
        "BudgetSection",
        backref="budget",
        lazy=True,
        order_by="BudgetSection.position",
        cascade="all, delete-orphan",
    )
    categories = db.relationship("Category", backref="budget", lazy=True, cascade="all, delete-orphan")

    __mapper_args__ = {"version_id_col": version}

    def section_names(self):
        return [s.name for s in self.sections]

    def find_section(self, name):
        return next((s for s in self.sections if s.name == name), None)

    def to_dict(self):
        return {
            "id": self.id,
            "user": self.user_id,
            "month": self.month,
            "year": self.year,
            "sections": [s.to_dict() for s in self.sections],
            "totalBudgeted": self.total_budgeted,
            "totalAvailable": self.total_available,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class BudgetSection(db.Model):
    __tablename__ = "budget_sections"
    id = db.Column(db.Integer, primary_key=True)
    budget_id = db.Column(db.Integer, db.ForeignKey("budgets.id"), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    display_name = db.Column(db.String(100), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "displayName": self.display_name}
