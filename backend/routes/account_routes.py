from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from errors import FinanceError, http_status_for
from models.account import Account
from models.enums import AccountType, parse_enum
from services.account_service import AccountService

router = APIRouter(prefix="/api/v1/accounts", tags=["Accounts"])


class AccountCreate(BaseModel):
    account_name: str = Field(min_length=1, max_length=100)
    account_type: str
    initial_balance: Decimal = Field(ge=0, decimal_places=2)


class AccountUpdate(BaseModel):
    account_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    account_type: Optional[str] = None


class BalanceUpdate(BaseModel):
    current_balance: Decimal = Field(decimal_places=2)


def serialize_account(a: Account) -> dict:
    return {
        "id": a.id,
        "account_name": a.account_name,
        "account_type": a.account_type.name,
        "account_type_display": a.account_type.display_name,
        "initial_balance": a.initial_balance,
        "current_balance": a.current_balance,
        "formatted_current_balance": a.formatted_current_balance,
        "created_at": a.created_at.isoformat() if a.created_at else None,
    }


def _account_type(value: str) -> AccountType:
    try:
        return parse_enum(AccountType, value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("")
async def list_accounts(account_type: Optional[str] = None, user_id: int = Depends(get_current_user),
                        db: Session = Depends(get_db)):
    if account_type:
        accounts = AccountService.find_accounts_by_type(db, user_id, _account_type(account_type))
    else:
        accounts = AccountService.find_accounts_by_user(db, user_id)
    return [serialize_account(a) for a in accounts]


@router.post("", status_code=201)
async def create_account(body: AccountCreate, user_id: int = Depends(get_current_user),
                         db: Session = Depends(get_db)):
    try:
        account = Account(
            user_id=user_id,
            account_name=body.account_name,
            account_type=_account_type(body.account_type),
            initial_balance=body.initial_balance,
        )
        account = AccountService.create_account(db, account)
        return {"status": "success", "data": serialize_account(account)}
    except HTTPException:
        raise
    except FinanceError as e:
        raise HTTPException(status_code=http_status_for(e), detail=e.message)


@router.get("/net-worth")
async def net_worth(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return {
        "net_worth": AccountService.calculate_net_worth(db, user_id),
        "total_balance": AccountService.calculate_total_balance(db, user_id),
    }


@router.get("/{account_id}")
async def get_account(account_id: int, user_id: int = Depends(get_current_user),
                      db: Session = Depends(get_db)):
    account = AccountService.find_by_id(db, account_id, user_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    return serialize_account(account)


@router.patch("/{account_id}")
async def update_account(account_id: int, body: AccountUpdate, user_id: int = Depends(get_current_user),
                         db: Session = Depends(get_db)):
    try:
        data = body.model_dump(exclude_unset=True)
        if data.get("account_type") is not None:
            data["account_type"] = _account_type(data["account_type"])
        account = AccountService.update_account(db, account_id, data, user_id)
        return {"status": "success", "data": serialize_account(account)}
    except HTTPException:
        raise
    except FinanceError as e:
        raise HTTPException(status_code=http_status_for(e), detail=e.message)


@router.put("/{account_id}/balance")
async def update_balance(account_id: int, body: BalanceUpdate, user_id: int = Depends(get_current_user),
                         db: Session = Depends(get_db)):
    try:
        account = AccountService.update_balance(db, account_id, body.current_balance, user_id)
        return {"status": "success", "data": serialize_account(account)}
    except FinanceError as e:
        raise HTTPException(status_code=http_status_for(e), detail=e.message)


@router.delete("/{account_id}")
async def delete_account(account_id: int, user_id: int = Depends(get_current_user),
                         db: Session = Depends(get_db)):
    try:
        AccountService.delete_account(db, account_id, user_id)
        return {"status": "success"}
    except FinanceError as e:
        raise HTTPException(status_code=http_status_for(e), detail=e.message)
