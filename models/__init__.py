from src.extensions import db

# Import all models so migrations can detect them
from products.product import Product
from suppliers.supplier import Supplier
from transactions.transaction import Transaction
from drafts.draft import Draft
from tasks.task import Task, TaskCategory


__all__ = [
    "db",
    "Product",
    "Supplier",
    "Transaction",
    "Draft",
    "Task",
    "TaskCategory",
]
