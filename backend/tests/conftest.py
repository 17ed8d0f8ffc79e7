"""
Shared fixtures.

Every test gets a fresh in-memory SQLite database; no test talks to a real
completion endpoint.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OPENAI_API_KEY"] = ""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401  (registers tables)
from database import Base, get_db
from models.account import Account
from models.enums import AccountType
from providers.base import BaseProvider
from services.account_service import AccountService
from services.narrative_service import NarrativeService, get_narrative_service
from services.transaction_service import TransactionService
from services.user_service import UserService


TODAY = date(2026, 10, 19)


class FakeProvider(BaseProvider):
    """Returns a canned reply (or failure) and records every prompt it was sent."""

    def __init__(self, text: str | None = "AI says hello", error: str | None = None, raises: bool = False):
        self.text = text
        self.error = error
        self.raises = raises
        self.prompts: list[str] = []

    @property
    def name(self) -> str:
        return "fake"

    async def chat(self, messages, model=None):
        self.prompts.append(messages[0]["content"])
        if self.raises:
            raise RuntimeError("provider exploded")
        if self.error:
            return self._result("fake-model", error=self.error)
        return self._result("fake-model", text=self.text)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    return UserService.create_user(db, {
        "first_name": "John",
        "last_name": "Doe",
        "email": "john@example.com",
        "hashed_password": "not-a-real-hash",
    })


@pytest.fixture
def other_user(db):
    return UserService.create_user(db, {
        "first_name": "Jane",
        "last_name": "Roe",
        "email": "jane@example.com",
        "hashed_password": "not-a-real-hash",
    })


@pytest.fixture
def make_account(db):
    def _make(user_id, name="Main Checking", account_type=AccountType.CHECKING, balance="0.00"):
        return AccountService.create_account(db, Account(
            user_id=user_id,
            account_name=name,
            account_type=account_type,
            initial_balance=Decimal(balance),
        ))
    return _make


@pytest.fixture
def make_transaction(db):
    def _make(user_id, account_id, amount, transaction_type, category, on=TODAY, description="Test entry"):
        return TransactionService.create_transaction(db, user_id, {
            "account_id": account_id,
            "description": description,
            "amount": Decimal(amount),
            "transaction_type": transaction_type,
            "category": category,
            "transaction_date": on,
        })
    return _make


@pytest.fixture
def fake_provider():
    return FakeProvider(error="HTTP 503")


@pytest.fixture
def client(db, fake_provider):
    from main import app

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_narrative_service] = lambda: NarrativeService(fake_provider)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    resp = client.post("/api/v1/auth/register", json={
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "password": "correct-horse",
    })
    assert resp.status_code == 201, resp.text
    token = resp.json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}
