from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from errors import FinanceError, http_status_for
from models.enums import Category, TransactionType, parse_enum
from models.transaction import Transaction
from services.transaction_service import TransactionService, month_bounds

router = APIRouter(prefix="/api/v1/transactions", tags=["Transactions"])


class TransactionCreate(BaseModel):
    account_id: int
    description: str = Field(min_length=1, max_length=500)
    amount: Decimal = Field(gt=0, decimal_places=2)
    transaction_type: str
    category: str
    transaction_date: Optional[date] = None


class TransactionUpdate(BaseModel):
    account_id: Optional[int] = None
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    amount: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    transaction_type: Optional[str] = None
    category: Optional[str] = None
    transaction_date: Optional[date] = None


def serialize_transaction(t: Transaction) -> dict:
    return {
        "id": t.id,
        "account_id": t.account_id,
        "description": t.description,
        "amount": t.amount,
        "transaction_type": t.transaction_type.name,
        "category": t.category.name,
        "category_display": t.category.display_name,
        "transaction_date": t.transaction_date.isoformat(),
    }


def _parse_filter(enum_cls, value):
    if value is None:
        return None
    try:
        return parse_enum(enum_cls, value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("")
async def list_transactions(
    account_id: Optional[int] = None,
    transaction_type: Optional[str] = None,
    category: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    user_id: int = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    filters = {
        "account_id": account_id,
        "transaction_type": _parse_filter(TransactionType, transaction_type),
        "category": _parse_filter(Category, category),
        "start_date": start_date,
        "end_date": end_date,
    }
    return [serialize_transaction(t) for t in TransactionService.find_transactions_by_user(db, user_id, filters)]


@router.post("", status_code=201)
async def create_transaction(body: TransactionCreate, user_id: int = Depends(get_current_user),
                             db: Session = Depends(get_db)):
    try:
        t = TransactionService.create_transaction(db, user_id, body.model_dump())
        return {"status": "success", "data": serialize_transaction(t)}
    except FinanceError as e:
        raise HTTPException(status_code=http_status_for(e), detail=e.message)


@router.get("/categories")
async def list_categories():
    """Every category with its income/expense classification."""
    return [
        {"name": c.name, "display_name": c.display_name, "transaction_type": c.transaction_type.name}
        for c in Category
    ]


@router.get("/summary")
async def monthly_summary(year: Optional[int] = Query(None, ge=1, le=9999),
                          month: Optional[int] = Query(None, ge=1, le=12),
                          user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    """Income, expenses, savings and per-category spending for one month (default: this month)."""
    today = date.today()
    if year is None:
        year = today.year
    if month is None:
        month = today.month

    start_date, end_date = month_bounds(year, month)
    income = TransactionService.total_income(db, user_id, start_date, end_date)
    expenses = TransactionService.total_expenses(db, user_id, start_date, end_date)
    breakdown = []
    for category in Category.expense_categories():
        amount = TransactionService.spending_by_category_and_month(db, user_id, category, year, month)
        if amount > 0:
            breakdown.append({"category": category.display_name, "amount": amount})

    return {
        "year": year,
        "month": month,
        "total_income": income,
        "total_expenses": expenses,
        "net_savings": income - expenses,
        "category_breakdown": sorted(breakdown, key=lambda x: x["amount"], reverse=True),
    }


@router.get("/{transaction_id}")
async def get_transaction(transaction_id: int, user_id: int = Depends(get_current_user),
                          db: Session = Depends(get_db)):
    t = TransactionService.find_by_id(db, user_id, transaction_id)
    if not t:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return serialize_transaction(t)


@router.patch("/{transaction_id}")
async def update_transaction(transaction_id: int, body: TransactionUpdate,
                             user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        data = body.model_dump(exclude_unset=True)
        t = TransactionService.update_transaction(db, user_id, transaction_id, data)
        return {"status": "success", "data": serialize_transaction(t)}
    except FinanceError as e:
        raise HTTPException(status_code=http_status_for(e), detail=e.message)


@router.delete("/{transaction_id}")
async def delete_transaction(transaction_id: int, user_id: int = Depends(get_current_user),
                             db: Session = Depends(get_db)):
    try:
        TransactionService.delete_transaction(db, user_id, transaction_id)
        return {"status": "success"}
    except FinanceError as e:
        raise HTTPException(status_code=http_status_for(e), detail=e.message)
