# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from models.enums import AccountType, TransactionType, Category
from models.user import User
from models.account import Account
from models.transaction import Transaction
from models.budget import Budget

__all__ = [
    "AccountType",
    "TransactionType",
    "Category",
    "User",
    "Account",
    "Transaction",
    "Budget",
]
