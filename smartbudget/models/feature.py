import re
from datetime import datetime
from sqlalchemy.orm import validates
from ..extensions import db

PLATFORMS = ("web", "mobile")
USER_TYPES = ("free", "pro", "admin")


class Feature(db.Model):
    __tablename__ = "features"
    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(100), unique=True, nullable=False)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=False)
    enabled = db.Column(db.Boolean, default=False, nullable=False)
    platforms = db.Column(db.JSON, nullable=False, default=list)
    user_types = db.Column(db.JSON, nullable=False, default=list)
    rollout_percentage = db.Column(db.Integer, nullable=False, default=100)
    target_users = db.Column(db.JSON, nullable=False, default=list)
    exclude_users = db.Column(db.JSON, nullable=False, default=list)
    settings = db.Column("metadata", db.JSON, nullable=False, default=dict)
    created_by = db.Column(db.String(255), nullable=False)
    last_modified_by = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint("rollout_percentage BETWEEN 0 AND 100", name="ck_feature_rollout_range"),
    )

    @validates("key")
    def normalize_key(self, _field, value):
        return normalize_feature_key(value)

    def to_dict(self):
        return {
            "id": self.id,
            "key": self.key,
            "name": self.name,
            "description": self.description,
            "enabled": self.enabled,
            "platforms": self.platforms,
            "userTypes": self.user_types,
            "rolloutPercentage": self.rollout_percentage,
            "targetUsers": self.target_users,
            "excludeUsers": self.exclude_users,
            "metadata": self.settings,
            "createdBy": self.created_by,
            "lastModifiedBy": self.last_modified_by,
        }


def normalize_feature_key(value):
    return re.sub(r"[^a-z0-9_-]", "_", value.strip().lower())
