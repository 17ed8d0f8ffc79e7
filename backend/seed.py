"""
seed.py — Create the demo user and their starter accounts.
Safe to run repeatedly: does nothing if the demo user already exists.
"""
from decimal import Decimal
import logging

from auth import hash_password
from config import DEMO_USER_EMAIL, DEMO_USER_PASSWORD
from database import SessionLocal, init_db
from models.account import Account
from models.enums import AccountType
from services.account_service import AccountService
from services.user_service import UserService

logger = logging.getLogger(__name__)


def seed_demo_data(db) -> bool:
    """Returns True if demo data was created, False if it already existed."""
    if UserService.find_by_email(db, DEMO_USER_EMAIL):
        return False

    user = UserService.create_user(db, {
        "first_name": "John",
        "last_name": "Doe",
        "email": DEMO_USER_EMAIL,
        "hashed_password": hash_password(DEMO_USER_PASSWORD),
    })
    AccountService.create_account(db, Account(
        user_id=user.id,
        account_name="Main Checking",
        account_type=AccountType.CHECKING,
        initial_balance=Decimal("2500.00"),
    ))
    AccountService.create_account(db, Account(
        user_id=user.id,
        account_name="Emergency Fund",
        account_type=AccountType.SAVINGS,
        initial_balance=Decimal("10000.00"),
    ))
    logger.info(f"Created demo user {user.email} with 2 accounts")
    return True


if __name__ == "__main__":
    init_db()
    db = SessionLocal()
    try:
        if not seed_demo_data(db):
            logger.info(f"Demo user {DEMO_USER_EMAIL} already exists")
    finally:
        db.close()
