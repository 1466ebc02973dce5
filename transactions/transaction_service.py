from datetime import datetime
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from src.extensions import db
from src.logger import get_logger
from src.numeric import money
from products.product import Product
from transactions.transaction import Transaction, TRANSACTION_TYPES
from transactions.schemas import (
    LineItem,
    RequestedItem,
    load_record,
    parse_requested_items,
    transaction_total,
)
from drafts.draft_service import DRAFT_KEYS, DraftStore
from reports.date_ranges import filter_by_date_range
from user.exceptions import (
    InsufficientStockException,
    MalformedRecordException,
    ResourceNotFoundException,
    ValidationException,
)

logger = get_logger("StockDash.Transactions")

STOCK_IN_TYPES = ("purchase", "restock")


def _as_requested(items):
    if items and all(isinstance(item, (RequestedItem, LineItem)) for item in items):
        return items
    return parse_requested_items(items)


def _owned_product(owner_id, product_id):
    product = Product.query.filter_by(id=product_id, owner_id=owner_id).first()
    if not product:
        raise ResourceNotFoundException(f"Product {product_id} not found")
    return product


class TransactionService:
    @staticmethod
    def commit_sale(owner_id, items):
        """
        Record a sale and take its quantities out of stock, all or nothing.
        items = [{"product_id": "...", "quantity": 2}, ...]
        Raises InsufficientStockException when any product lacks stock; nothing
        is written in that case.
        """
        requested = _as_requested(items)
        now = datetime.utcnow()
        line_items = []
        try:
            for item in requested:
                product = _owned_product(owner_id, item.product_id)

                # Check and decrement in one statement so concurrent sales cannot oversell
                result = db.session.execute(
                    update(Product)
                    .where(
                        Product.id == product.id,
                        Product.owner_id == owner_id,
                        Product.stock_quantity >= item.quantity,
                    )
                    .values(
                        stock_quantity=Product.stock_quantity - item.quantity,
                        last_sale_date=now,
                    )
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount != 1:
                    available = db.session.scalar(
                        select(Product.stock_quantity).where(
                            Product.id == product.id, Product.owner_id == owner_id
                        )
                    )
                    if available is None:
                        raise ResourceNotFoundException(f"Product {product.id} not found")
                    raise InsufficientStockException(product.product_name, available, item.quantity)

                line_items.append(LineItem(
                    product_id=product.id,
                    product_name=product.product_name,
                    quantity=item.quantity,
                    unit_price=product.selling_price,
                    buying_price=product.buying_price,
                    supplier_name=product.supplier or None,
                ))

            transaction = Transaction(
                owner_id=owner_id,
                type="sale",
                date=now,
                items=[line.to_document() for line in line_items],
                total=money(transaction_total(line_items)),
            )
            db.session.add(transaction)
            db.session.commit()
        except (InsufficientStockException, ResourceNotFoundException) as e:
            db.session.rollback()
            logger.warning("Sale rejected for owner %s: %s", owner_id, e)
            raise
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Sale commit failed for owner %s", owner_id)
            raise

        logger.info("Sale %s committed: %d items, total %s", transaction.id, len(line_items), transaction.total)
        return load_record(transaction)

    @staticmethod
    def commit_stock_in(owner_id, kind, items):
        """
        Record a purchase or restock and add its quantities to stock.
        unit_price defaults to the product's current buying price. The owner's
        draft for this kind is cleared in the same commit.
        """
        if kind not in STOCK_IN_TYPES:
            raise ValidationException(f"{kind} does not add stock")
        requested = _as_requested(items)
        now = datetime.utcnow()
        line_items = []
        try:
            for item in requested:
                product = _owned_product(owner_id, item.product_id)

                values = {"stock_quantity": Product.stock_quantity + item.quantity}
                if kind == "restock":
                    values["last_restock_date"] = now
                db.session.execute(
                    update(Product)
                    .where(Product.id == product.id, Product.owner_id == owner_id)
                    .values(**values)
                    .execution_options(synchronize_session=False)
                )

                unit_price = item.unit_price if item.unit_price is not None else product.buying_price
                line_items.append(LineItem(
                    product_id=product.id,
                    product_name=product.product_name,
                    quantity=item.quantity,
                    unit_price=unit_price,
                    supplier_name=product.supplier or None,
                ))

            transaction = Transaction(
                owner_id=owner_id,
                type=kind,
                date=now,
                items=[line.to_document() for line in line_items],
                total=money(transaction_total(line_items)),
            )
            db.session.add(transaction)
            DraftStore(owner_id).clear(DRAFT_KEYS[kind], commit=False)
            db.session.commit()
        except ResourceNotFoundException as e:
            db.session.rollback()
            logger.warning("%s rejected for owner %s: %s", kind.capitalize(), owner_id, e)
            raise
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("%s commit failed for owner %s", kind.capitalize(), owner_id)
            raise

        logger.info("%s %s committed: %d items, total %s", kind.capitalize(), transaction.id, len(line_items), transaction.total)
        return load_record(transaction)

    @staticmethod
    def commit_purchase(owner_id, items):
        return TransactionService.commit_stock_in(owner_id, "purchase", items)

    @staticmethod
    def commit_restock(owner_id, items):
        return TransactionService.commit_stock_in(owner_id, "restock", items)

    @staticmethod
    def list_transactions(owner_id, transaction_type=None, range_key="all", start=None, end=None, now=None):
        """Owner's transactions, newest first. Malformed stored records are skipped."""
        if transaction_type and transaction_type not in TRANSACTION_TYPES:
            raise ValidationException(f"Unknown transaction type: {transaction_type}")

        query = Transaction.query.filter_by(owner_id=owner_id)
        if transaction_type:
            query = query.filter_by(type=transaction_type)

        records = []
        for row in query.all():
            try:
                records.append(load_record(row))
            except MalformedRecordException as e:
                logger.warning("Skipping stored transaction: %s", e)

        records.sort(key=lambda r: r.date, reverse=True)
        return filter_by_date_range(records, range_key, start, end, now)

    @staticmethod
    def get_transaction(owner_id, transaction_id):
        row = Transaction.query.filter_by(id=transaction_id, owner_id=owner_id).first()
        if not row:
            raise ResourceNotFoundException(f"Transaction {transaction_id} not found")
        return load_record(row)
