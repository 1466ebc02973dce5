from datetime import datetime
from src.extensions import db


class Draft(db.Model):
    """Owner-scoped key/value snapshot of unsaved UI state."""
    __tablename__ = "drafts"

    owner_id = db.Column(db.String(128), primary_key=True)
    key = db.Column(db.String(64), primary_key=True)
    value = db.Column(db.JSON, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
