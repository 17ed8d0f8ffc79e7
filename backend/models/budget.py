from sqlalchemy import Column, Integer, Numeric, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.enums import Category


class Budget(Base):
    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    category = Column(Enum(Category), nullable=False)
    budget_year = Column(Integer, nullable=False)
    budget_month = Column(Integer, nullable=False)  # 1-12
    amount = Column(Numeric(12, 2), nullable=False)

    user = relationship("User", back_populates="budgets")

    __table_args__ = (
        UniqueConstraint("user_id", "category", "budget_year", "budget_month",
                         name="uq_budget_user_category_month"),
    )

    @property
    def period_label(self) -> str:
        return f"{self.budget_year:04d}-{self.budget_month:02d}"
