"""
budget_service.py — Monthly category budgets
One planned ceiling per (user, category, month). Status compares each
ceiling with what was actually spent in that category that month.
"""

from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from errors import ConflictError, NotFoundError, ValidationError
from models.budget import Budget
from models.enums import Category, TransactionType, parse_enum
from services.transaction_service import TransactionService, to_money


class BudgetService:
    @staticmethod
    def _parse_amount(value) -> Decimal:
        amount = to_money(value, "Budget amount")
        if amount <= 0:
            raise ValidationError("Budget amount must be greater than 0")
        return amount

    @staticmethod
    def _parse_period(year, month) -> tuple[int, int]:
        if year is None or month is None:
            raise ValidationError("Budget year and month are required")
        if not 1 <= int(month) <= 12:
            raise ValidationError(f"Invalid budget month: {month}")
        return int(year), int(month)

    @staticmethod
    def exists(db: Session, user_id: int, category: Category, year: int, month: int) -> bool:
        return db.query(Budget.id).filter_by(
            user_id=user_id, category=category, budget_year=year, budget_month=month
        ).first() is not None

    @staticmethod
    def create_budget(db: Session, user_id: int, data: dict) -> Budget:
        try:
            category = parse_enum(Category, data.get("category"))
        except ValueError as e:
            raise ValidationError(str(e))
        if category.transaction_type is not TransactionType.EXPENSE:
            raise ValidationError(f"Budgets can only be set for expense categories, not {category.display_name}")
        year, month = BudgetService._parse_period(data.get("budget_year"), data.get("budget_month"))
        amount = BudgetService._parse_amount(data.get("amount"))

        if BudgetService.exists(db, user_id, category, year, month):
            raise ConflictError(
                f"A budget for {category.display_name} in {year:04d}-{month:02d} already exists"
            )

        b = Budget(user_id=user_id, category=category, budget_year=year, budget_month=month, amount=amount)
        try:
            db.add(b)
            db.commit()
            db.refresh(b)
            return b
        except IntegrityError:
            db.rollback()
            raise ConflictError(
                f"A budget for {category.display_name} in {year:04d}-{month:02d} already exists"
            )
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def find_by_id(db: Session, user_id: int, budget_id: int) -> Budget | None:
        return db.query(Budget).filter_by(id=budget_id, user_id=user_id).first()

    @staticmethod
    def find_budget(db: Session, user_id: int, category: Category, year: int, month: int) -> Budget | None:
        return db.query(Budget).filter_by(
            user_id=user_id, category=category, budget_year=year, budget_month=month
        ).first()

    @staticmethod
    def find_budgets_for_month(db: Session, user_id: int, year: int, month: int) -> list[Budget]:
        budgets = db.query(Budget).filter_by(user_id=user_id, budget_year=year, budget_month=month).all()
        return sorted(budgets, key=lambda b: b.category.display_name)

    @staticmethod
    def find_budgets_by_user(db: Session, user_id: int) -> list[Budget]:
        """All months, newest first, categories alphabetical within a month."""
        budgets = db.query(Budget).filter_by(user_id=user_id).all()
        budgets.sort(key=lambda b: b.category.display_name)
        budgets.sort(key=lambda b: (b.budget_year, b.budget_month), reverse=True)
        return budgets

    @staticmethod
    def update_budget(db: Session, user_id: int, budget_id: int, data: dict) -> Budget:
        b = BudgetService.find_by_id(db, user_id, budget_id)
        if not b:
            raise NotFoundError(f"Budget not found with ID: {budget_id}")
        if data.get("amount") is not None:
            b.amount = BudgetService._parse_amount(data["amount"])
        try:
            db.commit()
            db.refresh(b)
            return b
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def delete_budget(db: Session, user_id: int, budget_id: int) -> None:
        b = BudgetService.find_by_id(db, user_id, budget_id)
        if not b:
            raise NotFoundError(f"Budget not found with ID: {budget_id}")
        try:
            db.delete(b)
            db.commit()
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def get_budget_status(db: Session, user_id: int, year: int, month: int) -> list[dict]:
        status = []
        for b in BudgetService.find_budgets_for_month(db, user_id, year, month):
            spent = TransactionService.spending_by_category_and_month(db, user_id, b.category, year, month)
            status.append({
                "budget_id": b.id,
                "category": b.category.display_name,
                "budget_amount": b.amount,
                "spent_amount": spent,
                "remaining": b.amount - spent,
                "percentage_used": round(float(spent / b.amount) * 100, 2) if b.amount else 0.0,
                "over_budget": spent > b.amount,
            })
        return status
