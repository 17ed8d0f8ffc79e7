"""
transaction_service.py — Transaction store
CRUD for transactions plus the aggregate sums the insights layer reads:
income / expenses over a date window and spending per category per month.
Every query joins through Account so a user only ever sees their own rows.
Recording a transaction does not touch the account balance.
"""

import calendar
from datetime import date
from decimal import Decimal, InvalidOperation

from sqlalchemy import func
from sqlalchemy.orm import Session

from errors import NotFoundError, ValidationError
from models.account import Account
from models.enums import Category, TransactionType, parse_enum
from models.transaction import Transaction


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def minus_months(day: date, months: int) -> date:
    """Shift back by whole months, clamping the day to the target month's length."""
    total = day.year * 12 + (day.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


CENT = Decimal("0.01")


def to_money(value, label: str = "Amount") -> Decimal:
    """Parse a money value, rejecting anything finer than a cent."""
    try:
        amount = Decimal(str(value))
        if not amount.is_finite() or amount != amount.quantize(CENT):
            raise ValidationError(f"{label} must be a number with at most two decimal places")
    except (InvalidOperation, TypeError):
        raise ValidationError(f"Invalid {label.lower()}: {value!r}")
    return amount


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


class TransactionService:
    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------
    @staticmethod
    def _sum_for_user(db: Session, user_id: int, *criteria) -> Decimal:
        total = (
            db.query(func.coalesce(func.sum(Transaction.amount), 0))
            .join(Account, Transaction.account_id == Account.id)
            .filter(Account.user_id == user_id, *criteria)
            .scalar()
        )
        return _to_decimal(total)

    @staticmethod
    def total_income(db: Session, user_id: int, start_date: date, end_date: date) -> Decimal:
        """Sum of INCOME amounts dated within [start_date, end_date]."""
        return TransactionService._sum_for_user(
            db, user_id,
            Transaction.transaction_type == TransactionType.INCOME,
            Transaction.transaction_date >= start_date,
            Transaction.transaction_date <= end_date,
        )

    @staticmethod
    def total_expenses(db: Session, user_id: int, start_date: date, end_date: date) -> Decimal:
        """Sum of EXPENSE amounts dated within [start_date, end_date]."""
        return TransactionService._sum_for_user(
            db, user_id,
            Transaction.transaction_type == TransactionType.EXPENSE,
            Transaction.transaction_date >= start_date,
            Transaction.transaction_date <= end_date,
        )

    @staticmethod
    def spending_by_category_and_month(db: Session, user_id: int, category: Category,
                                       year: int, month: int) -> Decimal:
        start_date, end_date = month_bounds(year, month)
        return TransactionService._sum_for_user(
            db, user_id,
            Transaction.category == category,
            Transaction.transaction_date >= start_date,
            Transaction.transaction_date <= end_date,
        )

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------
    @staticmethod
    def _validated_fields(data: dict, partial: bool = False) -> dict:
        fields = {}
        try:
            if "description" in data or not partial:
                description = (data.get("description") or "").strip()
                if not description:
                    raise ValidationError("Description is required")
                fields["description"] = description

            if "amount" in data or not partial:
                if data.get("amount") is None:
                    raise ValidationError("Amount is required")
                amount = to_money(data["amount"])
                if amount <= 0:
                    raise ValidationError("Amount must be greater than 0")
                fields["amount"] = amount

            if "transaction_type" in data or not partial:
                if data.get("transaction_type") is None:
                    raise ValidationError("Please select transaction type")
                fields["transaction_type"] = parse_enum(TransactionType, data["transaction_type"])

            if "category" in data or not partial:
                if data.get("category") is None:
                    raise ValidationError("Please select a category")
                fields["category"] = parse_enum(Category, data["category"])

            if "transaction_date" in data or not partial:
                tx_date = data.get("transaction_date")
                if tx_date is None:
                    if partial:
                        raise ValidationError("Transaction date cannot be cleared")
                    tx_date = date.today()
                if isinstance(tx_date, str):
                    tx_date = date.fromisoformat(tx_date)
                fields["transaction_date"] = tx_date
        except (ValueError, InvalidOperation) as e:
            raise ValidationError(str(e))
        return fields

    @staticmethod
    def _check_category(transaction_type: TransactionType, category: Category) -> None:
        if category.transaction_type is not transaction_type:
            raise ValidationError(
                f"Category {category.display_name} is not an "
                f"{transaction_type.display_name.lower()} category"
            )

    @staticmethod
    def create_transaction(db: Session, user_id: int, data: dict) -> Transaction:
        account_id = data.get("account_id")
        if account_id is None:
            raise ValidationError("Please select an account")
        account = db.query(Account).filter_by(id=account_id, user_id=user_id).first()
        if not account:
            raise NotFoundError(f"Account not found with ID: {account_id}")

        fields = TransactionService._validated_fields(data)
        TransactionService._check_category(fields["transaction_type"], fields["category"])

        t = Transaction(account_id=account.id, **fields)
        try:
            db.add(t)
            db.commit()
            db.refresh(t)
            return t
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def find_by_id(db: Session, user_id: int, transaction_id: int) -> Transaction | None:
        return (
            db.query(Transaction)
            .join(Account, Transaction.account_id == Account.id)
            .filter(Transaction.id == transaction_id, Account.user_id == user_id)
            .first()
        )

    @staticmethod
    def find_transactions_by_user(db: Session, user_id: int, filters: dict = None) -> list[Transaction]:
        query = (
            db.query(Transaction)
            .join(Account, Transaction.account_id == Account.id)
            .filter(Account.user_id == user_id)
        )
        if filters:
            if filters.get("account_id") is not None:
                query = query.filter(Transaction.account_id == filters["account_id"])
            if filters.get("transaction_type") is not None:
                query = query.filter(Transaction.transaction_type == filters["transaction_type"])
            if filters.get("category") is not None:
                query = query.filter(Transaction.category == filters["category"])
            if filters.get("start_date") is not None:
                query = query.filter(Transaction.transaction_date >= filters["start_date"])
            if filters.get("end_date") is not None:
                query = query.filter(Transaction.transaction_date <= filters["end_date"])
        return query.order_by(Transaction.transaction_date.desc(), Transaction.id.desc()).all()

    @staticmethod
    def has_transactions(db: Session, account_id: int) -> bool:
        return db.query(Transaction.id).filter(Transaction.account_id == account_id).first() is not None

    @staticmethod
    def update_transaction(db: Session, user_id: int, transaction_id: int, data: dict) -> Transaction:
        t = TransactionService.find_by_id(db, user_id, transaction_id)
        if not t:
            raise NotFoundError(f"Transaction not found with ID: {transaction_id}")

        fields = TransactionService._validated_fields(data, partial=True)
        TransactionService._check_category(
            fields.get("transaction_type", t.transaction_type),
            fields.get("category", t.category),
        )

        if data.get("account_id") is not None and data["account_id"] != t.account_id:
            account = db.query(Account).filter_by(id=data["account_id"], user_id=user_id).first()
            if not account:
                raise NotFoundError(f"Account not found with ID: {data['account_id']}")
            fields["account_id"] = account.id

        for key, value in fields.items():
            setattr(t, key, value)

        try:
            db.commit()
            db.refresh(t)
            return t
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def delete_transaction(db: Session, user_id: int, transaction_id: int) -> None:
        t = TransactionService.find_by_id(db, user_id, transaction_id)
        if not t:
            raise NotFoundError(f"Transaction not found with ID: {transaction_id}")
        try:
            db.delete(t)
            db.commit()
        except Exception:
            db.rollback()
            raise
