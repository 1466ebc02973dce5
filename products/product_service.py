from sqlalchemy.exc import SQLAlchemyError
from src.extensions import db
from src.logger import get_logger
from src.numeric import non_negative_decimal, non_negative_int, money
from products.product import Product
from pricing.pricing_service import calculate_profit
from user.exceptions import ResourceNotFoundException, ValidationException

logger = get_logger("StockDash.Products")

PRODUCT_SORTS = ("name", "stock", "date")
EDITABLE_FIELDS = ("product_code", "product_name", "buying_price", "selling_price", "stock_quantity", "supplier")


def product_to_dict(p):
    return {
        "id": p.id,
        "product_code": p.product_code,
        "product_name": p.product_name,
        "buying_price": str(p.buying_price),
        "selling_price": str(p.selling_price),
        "stock_quantity": p.stock_quantity,
        "supplier": p.supplier,
        "profit": str(money(calculate_profit(p.selling_price, p.buying_price))),
        "last_restock_date": p.last_restock_date.isoformat() if p.last_restock_date else None,
        "last_sale_date": p.last_sale_date.isoformat() if p.last_sale_date else None,
        "created_at": p.created_at.isoformat() if p.created_at else None,
        "updated_at": p.updated_at.isoformat() if p.updated_at else None,
    }


def clean_product_data(data, partial=False):
    """
    Coerce form input the way the dashboard does: numbers are clamped at 0 and
    anything unparseable becomes 0. Text fields are stripped.
    """
    cleaned = {}
    for field in EDITABLE_FIELDS:
        if field not in data:
            continue
        value = data[field]
        if field in ("buying_price", "selling_price"):
            cleaned[field] = non_negative_decimal(value)
        elif field == "stock_quantity":
            cleaned[field] = non_negative_int(value)
        else:
            cleaned[field] = str(value or "").strip()

    if not partial:
        for required in ("product_code", "product_name"):
            if not cleaned.get(required):
                raise ValidationException(f"{required} is required")
    else:
        for required in ("product_code", "product_name"):
            if required in cleaned and not cleaned[required]:
                raise ValidationException(f"{required} cannot be empty")
    return cleaned


def matches_search(product, search):
    term = search.lower()
    return (
        term in (product.product_code or "").lower()
        or term in (product.product_name or "").lower()
        or term in (product.supplier or "").lower()
    )


def sort_products(products, sort_by="name", order="asc"):
    if sort_by not in PRODUCT_SORTS:
        raise ValidationException(f"sort must be one of {', '.join(PRODUCT_SORTS)}")
    if order not in ("asc", "desc"):
        raise ValidationException("order must be asc or desc")
    keys = {
        "name": lambda p: (p.product_name or "").lower(),
        "stock": lambda p: p.stock_quantity,
        "date": lambda p: p.created_at or p.updated_at,
    }
    return sorted(products, key=keys[sort_by], reverse=(order == "desc"))


class ProductService:
    @staticmethod
    def create_product(owner_id, data):
        cleaned = clean_product_data(data)
        product = Product(owner_id=owner_id, **cleaned)
        try:
            db.session.add(product)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to create product for owner %s", owner_id)
            raise
        logger.info("Product %s created for owner %s", product.id, owner_id)
        return product

    @staticmethod
    def get_product(owner_id, product_id):
        product = Product.query.filter_by(id=product_id, owner_id=owner_id).first()
        if not product:
            raise ResourceNotFoundException(f"Product {product_id} not found")
        return product

    @staticmethod
    def list_products(owner_id, search="", sort_by="name", order="asc", in_stock_only=False):
        products = Product.query.filter_by(owner_id=owner_id).all()
        if search:
            products = [p for p in products if matches_search(p, search)]
        if in_stock_only:
            products = [p for p in products if p.stock_quantity > 0]
        return sort_products(products, sort_by, order)

    @staticmethod
    def update_product(owner_id, product_id, data):
        product = ProductService.get_product(owner_id, product_id)
        for field, value in clean_product_data(data, partial=True).items():
            setattr(product, field, value)
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to update product %s", product_id)
            raise
        return product

    @staticmethod
    def delete_product(owner_id, product_id):
        product = ProductService.get_product(owner_id, product_id)
        try:
            db.session.delete(product)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to delete product %s", product_id)
            raise
        logger.info("Product %s deleted", product_id)
