from datetime import datetime
from src.extensions import db
import uuid

TRANSACTION_TYPES = ("purchase", "restock", "sale")


class Transaction(db.Model):
    """Ledger record of a committed purchase, restock or sale. Never updated."""
    __tablename__ = "transactions"
    __table_args__ = (
        db.CheckConstraint(
            "type IN ('purchase', 'restock', 'sale')", name="ck_transactions_type"
        ),
        db.Index("ix_transactions_owner_type", "owner_id", "type"),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = db.Column(db.String(128), nullable=False)
    type = db.Column(db.String(20), nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Ordered line items as stored documents
    items = db.Column(db.JSON, nullable=False, default=list)

    total = db.Column(db.Numeric(14, 2), nullable=False, default=0)
