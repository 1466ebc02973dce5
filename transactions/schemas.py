from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.numeric import to_decimal
from transactions.transaction import TRANSACTION_TYPES
from user.exceptions import (
    InsufficientStockException,
    MalformedRecordException,
    ResourceNotFoundException,
    ValidationException,
)


class LineItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    product_id: str = Field(min_length=1)
    product_name: str = ""
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(ge=0)
    supplier_name: Optional[str] = None

    # Cost captured at sale time for profit reporting
    buying_price: Optional[Decimal] = Field(default=None, ge=0)

    @property
    def line_total(self):
        return self.unit_price * self.quantity

    def to_document(self):
        return self.model_dump(mode="json", exclude_none=True)


class RequestedItem(BaseModel):
    """What a client sends when committing: the server fills in prices."""
    model_config = ConfigDict(extra="ignore")

    product_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    unit_price: Optional[Decimal] = Field(default=None, ge=0)


class TransactionRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    type: str
    date: datetime
    items: List[LineItem]
    total: Decimal

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.type,
            "date": self.date.isoformat(),
            "items": [item.to_document() for item in self.items],
            "total": str(self.total),
        }


def _error_summary(error):
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


def parse_requested_items(raw_items):
    if not isinstance(raw_items, list) or not raw_items:
        raise ValidationException("Please select products")
    try:
        return [RequestedItem.model_validate(item) for item in raw_items]
    except ValidationError as e:
        raise ValidationException(f"Invalid item: {_error_summary(e)}")


def parse_line_item(raw):
    if isinstance(raw, LineItem):
        return raw
    try:
        return LineItem.model_validate(raw)
    except ValidationError as e:
        raise ValidationException(f"Invalid item: {_error_summary(e)}")


def load_record(row):
    """Validate a stored transaction row, rejecting documents of the wrong shape."""
    try:
        record = TransactionRecord.model_validate(row)
    except ValidationError as e:
        raise MalformedRecordException(f"Transaction {getattr(row, 'id', '?')} is malformed: {_error_summary(e)}")
    if record.type not in TRANSACTION_TYPES:
        raise MalformedRecordException(f"Transaction {record.id} has unknown type {record.type!r}")
    return record


def transaction_total(items):
    """Sum of unit_price * quantity over LineItems or plain dicts."""
    total = Decimal('0')
    for item in items:
        if isinstance(item, LineItem):
            total += item.line_total
        else:
            total += to_decimal(item["unit_price"]) * int(item["quantity"])
    return total


class TransactionDraft:
    """Line items of a transaction being assembled before it is committed."""

    def __init__(self, kind, items=None):
        if kind not in TRANSACTION_TYPES:
            raise ValidationException(f"Unknown transaction type: {kind}")
        self.kind = kind
        self.items = [parse_line_item(item) for item in items or []]

    def _find(self, product_id):
        for index, item in enumerate(self.items):
            if item.product_id == product_id:
                return index
        return None

    def add_item(self, item, available_stock=None):
        """Append item, or add its quantity to the line already holding that product."""
        item = parse_line_item(item)
        index = self._find(item.product_id)
        quantity = item.quantity
        if index is not None:
            quantity += self.items[index].quantity
        if available_stock is not None and quantity > available_stock:
            raise InsufficientStockException(item.product_name, available_stock, quantity)
        if index is None:
            self.items.append(item)
        else:
            self.items[index] = self.items[index].model_copy(update={"quantity": quantity})
        return self.items[index if index is not None else -1]

    def remove_item(self, product_id):
        index = self._find(product_id)
        if index is None:
            raise ResourceNotFoundException(f"Product {product_id} is not in the draft")
        return self.items.pop(index)

    def update_quantity(self, product_id, quantity, available_stock=None):
        index = self._find(product_id)
        if index is None:
            raise ResourceNotFoundException(f"Product {product_id} is not in the draft")
        quantity = int(quantity)
        if quantity < 1:
            # Sales drop the line, purchase/restock drafts keep the old quantity
            if self.kind == "sale":
                return self.items.pop(index)
            return self.items[index]
        if available_stock is not None and quantity > available_stock:
            raise InsufficientStockException(self.items[index].product_name, available_stock, quantity)
        self.items[index] = self.items[index].model_copy(update={"quantity": quantity})
        return self.items[index]

    @property
    def total(self):
        return transaction_total(self.items)

    def is_empty(self):
        return not self.items

    def to_snapshot(self):
        return [item.to_document() for item in self.items]

    @classmethod
    def from_snapshot(cls, kind, snapshot):
        if snapshot is None:
            return cls(kind)
        if not isinstance(snapshot, list):
            raise MalformedRecordException(f"{kind} draft snapshot is not a list")
        try:
            return cls(kind, snapshot)
        except ValidationException as e:
            raise MalformedRecordException(f"{kind} draft snapshot is malformed: {e}")
