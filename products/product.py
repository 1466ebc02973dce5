from datetime import datetime
from src.extensions import db
import uuid


class Product(db.Model):
    __tablename__ = "products"
    __table_args__ = (
        db.CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
    )

    # Record ID (Primary key)
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Owning user (auth subject)
    owner_id = db.Column(db.String(128), nullable=False, index=True)

    # Product code entered by the user
    product_code = db.Column(db.String(100), nullable=False)

    # Product Name
    product_name = db.Column(db.String(255), nullable=False)

    # Purchase Price (Cost Price)
    buying_price = db.Column(db.Numeric(14, 2), nullable=False, default=0)

    # Selling Price
    selling_price = db.Column(db.Numeric(14, 2), nullable=False, default=0)

    # Quantity in Stock
    stock_quantity = db.Column(db.Integer, nullable=False, default=0)

    # Supplier name (no foreign key)
    supplier = db.Column(db.String(255), nullable=False, default="")

    last_restock_date = db.Column(db.DateTime, nullable=True)
    last_sale_date = db.Column(db.DateTime, nullable=True)

    # Date Added (automate)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Last Updated Date (automate only when updated)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)

    @property
    def stock_value(self):
        return self.stock_quantity * self.buying_price
