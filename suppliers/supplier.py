from datetime import datetime
from src.extensions import db
import uuid


class Supplier(db.Model):
    __tablename__ = "suppliers"

    # Record ID (Primary key)
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    owner_id = db.Column(db.String(128), nullable=False, index=True)

    # Supplier code entered by the user
    supplier_code = db.Column(db.String(100), nullable=True)

    # Supplier Name / Business Name, referenced by products
    name = db.Column(db.String(255), nullable=False)

    # Phone, email or contact person
    contact = db.Column(db.String(255), nullable=True)

    # Created Date (automate)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Last Updated Date (automate only when updated)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)
