"""
account_service.py — Account ledger
Creates accounts, tracks current balances, and computes net worth.
Credit card balances count as liabilities; everything else is an asset.
"""

from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from errors import ConflictError, NotFoundError, ValidationError
from models.account import Account
from models.enums import AccountType
from services.transaction_service import TransactionService, to_money


class AccountService:
    @staticmethod
    def create_account(db: Session, account: Account) -> Account:
        """Persist a new account; its current balance starts at the initial balance."""
        if account.user_id is None and account.user is None:
            raise ValidationError("Account must be associated with a user")
        if not (account.account_name or "").strip():
            raise ValidationError("Account name is required")
        if account.account_type is None:
            raise ValidationError("Please select an account type")
        if account.initial_balance is None:
            raise ValidationError("Initial balance is required")
        initial = to_money(account.initial_balance, "Initial balance")
        if initial < 0:
            raise ValidationError("Initial balance cannot be negative")

        account.account_name = account.account_name.strip()
        account.initial_balance = initial
        account.current_balance = initial
        try:
            db.add(account)
            db.commit()
            db.refresh(account)
            return account
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def find_by_id(db: Session, account_id: int, user_id: int | None = None) -> Account | None:
        """Look up an account; when user_id is given, only that user's account matches."""
        query = db.query(Account).filter(Account.id == account_id)
        if user_id is not None:
            query = query.filter(Account.user_id == user_id)
        return query.first()

    @staticmethod
    def find_accounts_by_user(db: Session, user_id: int) -> list[Account]:
        return (
            db.query(Account)
            .filter(Account.user_id == user_id)
            .order_by(Account.account_name.asc())
            .all()
        )

    @staticmethod
    def find_accounts_by_type(db: Session, user_id: int, account_type: AccountType) -> list[Account]:
        return (
            db.query(Account)
            .filter(Account.user_id == user_id, Account.account_type == account_type)
            .order_by(Account.account_name.asc())
            .all()
        )

    @staticmethod
    def find_accounts_above(db: Session, user_id: int, threshold: Decimal) -> list[Account]:
        return (
            db.query(Account)
            .filter(Account.user_id == user_id, Account.current_balance > threshold)
            .order_by(Account.current_balance.desc())
            .all()
        )

    @staticmethod
    def calculate_total_balance(db: Session, user_id: int) -> Decimal:
        """Plain sum of current balances, liabilities included as positives."""
        total = db.query(func.coalesce(func.sum(Account.current_balance), 0)).filter(
            Account.user_id == user_id
        ).scalar()
        return Decimal(str(total)) if total is not None else Decimal("0")

    @staticmethod
    def calculate_net_worth(db: Session, user_id: int) -> Decimal:
        net_worth = Decimal("0")
        for account in AccountService.find_accounts_by_user(db, user_id):
            if account.account_type.is_liability:
                net_worth -= account.current_balance
            else:
                net_worth += account.current_balance
        return net_worth

    @staticmethod
    def update_account(db: Session, account_id: int, data: dict, user_id: int | None = None) -> Account:
        """Rename or retype an account. The initial balance is never changed here."""
        account = AccountService.find_by_id(db, account_id, user_id)
        if not account:
            raise NotFoundError(f"Account not found with ID: {account_id}")

        if data.get("account_name") is not None:
            name = data["account_name"].strip()
            if not name:
                raise ValidationError("Account name is required")
            account.account_name = name
        if data.get("account_type") is not None:
            account.account_type = data["account_type"]

        try:
            db.commit()
            db.refresh(account)
            return account
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def update_balance(db: Session, account_id: int, new_balance: Decimal, user_id: int | None = None) -> Account:
        account = AccountService.find_by_id(db, account_id, user_id)
        if not account:
            raise NotFoundError(f"Account not found with ID: {account_id}")

        account.current_balance = to_money(new_balance, "Balance")
        try:
            db.commit()
            db.refresh(account)
            return account
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def delete_account(db: Session, account_id: int, user_id: int | None = None) -> None:
        """Delete an account, unless any transaction still references it."""
        account = AccountService.find_by_id(db, account_id, user_id)
        if not account:
            raise NotFoundError(f"Account not found with ID: {account_id}")

        if TransactionService.has_transactions(db, account.id):
            raise ConflictError("Cannot delete account with existing transactions")

        try:
            db.delete(account)
            db.commit()
        except Exception:
            db.rollback()
            raise
