from datetime import datetime
from src.extensions import db
import uuid


class TaskCategory(db.Model):
    __tablename__ = "task_categories"
    __table_args__ = (
        db.UniqueConstraint("owner_id", "name", name="uq_task_categories_owner_name"),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = db.Column(db.String(128), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class Task(db.Model):
    __tablename__ = "tasks"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = db.Column(db.String(128), nullable=False, index=True)
    text = db.Column(db.Text, nullable=False)

    # Category name (no foreign key)
    category = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
