from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from errors import FinanceError, http_status_for
from models.budget import Budget
from services.budget_service import BudgetService

router = APIRouter(prefix="/api/v1/budgets", tags=["Budgets"])


class BudgetCreate(BaseModel):
    category: str
    budget_year: int = Field(ge=1900, le=9999)
    budget_month: int = Field(ge=1, le=12)
    amount: Decimal = Field(gt=0, decimal_places=2)


class BudgetUpdate(BaseModel):
    amount: Decimal = Field(gt=0, decimal_places=2)


def serialize_budget(b: Budget) -> dict:
    return {
        "id": b.id,
        "category": b.category.name,
        "category_display": b.category.display_name,
        "budget_year": b.budget_year,
        "budget_month": b.budget_month,
        "period": b.period_label,
        "amount": b.amount,
    }


@router.get("")
async def list_budgets(year: Optional[int] = Query(None, ge=1, le=9999),
                       month: Optional[int] = Query(None, ge=1, le=12),
                       user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    if year is not None and month is not None:
        budgets = BudgetService.find_budgets_for_month(db, user_id, year, month)
    else:
        budgets = BudgetService.find_budgets_by_user(db, user_id)
    return [serialize_budget(b) for b in budgets]


@router.post("", status_code=201)
async def create_budget(body: BudgetCreate, user_id: int = Depends(get_current_user),
                        db: Session = Depends(get_db)):
    try:
        b = BudgetService.create_budget(db, user_id, body.model_dump())
        return {"status": "success", "data": serialize_budget(b)}
    except FinanceError as e:
        raise HTTPException(status_code=http_status_for(e), detail=e.message)


@router.get("/status")
async def budget_status(year: Optional[int] = Query(None, ge=1, le=9999),
                        month: Optional[int] = Query(None, ge=1, le=12),
                        user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    today = date.today()
    return BudgetService.get_budget_status(
        db, user_id,
        today.year if year is None else year,
        today.month if month is None else month,
    )


@router.get("/{budget_id}")
async def get_budget(budget_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    b = BudgetService.find_by_id(db, user_id, budget_id)
    if not b:
        raise HTTPException(status_code=404, detail="Budget not found")
    return serialize_budget(b)


@router.patch("/{budget_id}")
async def update_budget(budget_id: int, body: BudgetUpdate, user_id: int = Depends(get_current_user),
                        db: Session = Depends(get_db)):
    try:
        b = BudgetService.update_budget(db, user_id, budget_id, body.model_dump())
        return {"status": "success", "data": serialize_budget(b)}
    except FinanceError as e:
        raise HTTPException(status_code=http_status_for(e), detail=e.message)


@router.delete("/{budget_id}")
async def delete_budget(budget_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        BudgetService.delete_budget(db, user_id, budget_id)
        return {"status": "success"}
    except FinanceError as e:
        raise HTTPException(status_code=http_status_for(e), detail=e.message)
