from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, Integer, String, Numeric, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.enums import AccountType


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    account_name = Column(String(100), nullable=False)
    account_type = Column(Enum(AccountType), nullable=False)
    initial_balance = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    current_balance = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="accounts")
    transactions = relationship("Transaction", back_populates="account", cascade="all, delete-orphan")

    @property
    def formatted_current_balance(self) -> str:
        return f"${self.current_balance:,.2f}"

    def __repr__(self):
        return f"<Account id={self.id} name={self.account_name!r} type={self.account_type.name}>"
