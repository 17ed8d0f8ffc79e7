"""
enums.py — Closed value sets for accounts and transactions.
Every Category is classified as income- or expense-bearing in a static table.
"""

import enum


class AccountType(enum.Enum):
    CHECKING = "Checking"
    SAVINGS = "Savings"
    CREDIT_CARD = "Credit Card"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def is_liability(self) -> bool:
        return self is AccountType.CREDIT_CARD


class TransactionType(enum.Enum):
    INCOME = "Income"
    EXPENSE = "Expense"

    @property
    def display_name(self) -> str:
        return self.value


class Category(enum.Enum):
    # income
    SALARY = "Salary"
    FREELANCE = "Freelance"
    INVESTMENT = "Investment"
    GIFT = "Gift"
    OTHER_INCOME = "Other Income"
    # expense
    HOUSING = "Housing"
    UTILITIES = "Utilities"
    GROCERIES = "Groceries"
    DINING = "Dining Out"
    TRANSPORTATION = "Transportation"
    HEALTHCARE = "Healthcare"
    INSURANCE = "Insurance"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    EDUCATION = "Education"
    TRAVEL = "Travel"
    DEBT_PAYMENT = "Debt Payment"
    OTHER_EXPENSE = "Other Expense"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def transaction_type(self) -> TransactionType:
        return CATEGORY_TYPES[self]

    @classmethod
    def expense_categories(cls) -> list["Category"]:
        return [c for c in cls if CATEGORY_TYPES[c] is TransactionType.EXPENSE]


CATEGORY_TYPES = {
    Category.SALARY: TransactionType.INCOME,
    Category.FREELANCE: TransactionType.INCOME,
    Category.INVESTMENT: TransactionType.INCOME,
    Category.GIFT: TransactionType.INCOME,
    Category.OTHER_INCOME: TransactionType.INCOME,
    Category.HOUSING: TransactionType.EXPENSE,
    Category.UTILITIES: TransactionType.EXPENSE,
    Category.GROCERIES: TransactionType.EXPENSE,
    Category.DINING: TransactionType.EXPENSE,
    Category.TRANSPORTATION: TransactionType.EXPENSE,
    Category.HEALTHCARE: TransactionType.EXPENSE,
    Category.INSURANCE: TransactionType.EXPENSE,
    Category.ENTERTAINMENT: TransactionType.EXPENSE,
    Category.SHOPPING: TransactionType.EXPENSE,
    Category.EDUCATION: TransactionType.EXPENSE,
    Category.TRAVEL: TransactionType.EXPENSE,
    Category.DEBT_PAYMENT: TransactionType.EXPENSE,
    Category.OTHER_EXPENSE: TransactionType.EXPENSE,
}


def parse_enum(enum_cls, value):
    """Accept a member, its name ("CREDIT_CARD") or its display value ("Credit Card")."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip()
        if key.upper().replace(" ", "_") in enum_cls.__members__:
            return enum_cls[key.upper().replace(" ", "_")]
        for member in enum_cls:
            if member.value.lower() == key.lower():
                return member
    raise ValueError(f"Invalid {enum_cls.__name__}: {value!r}")
