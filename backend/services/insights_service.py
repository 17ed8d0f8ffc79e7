"""
insights_service.py — Financial insights
Aggregates ledger and transaction sums into labelled facts for the
narrative prompts, and computes a 0-100 financial health score from
savings rate, account diversity and net worth.
"""

import logging
from datetime import date
from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import Callable

from sqlalchemy.orm import Session

from models.enums import AccountType, Category
from services.account_service import AccountService
from services.narrative_service import NarrativeService
from services.transaction_service import TransactionService, month_bounds, minus_months

logger = logging.getLogger(__name__)

INSIGHTS_UNAVAILABLE = "Unable to generate insights at this time. Please check your API configuration."

BASE_SCORE = 50
MAX_SAVINGS_BONUS = 25
CHECKING_BONUS = 5
SAVINGS_BONUS = 10
NET_WORTH_BONUS = 10
BUDGET_SHARE_OF_INCOME = Decimal("0.8")
TRAILING_MONTHS = 3


def _money(value: Decimal) -> str:
    return f"${value}"


class InsightsService:
    def __init__(self, db: Session, narrative: NarrativeService,
                 today: Callable[[], date] = date.today):
        self.db = db
        self.narrative = narrative
        self.today = today

    # ------------------------------------------------------------------
    def category_spending_for_month(self, user_id: int, year: int, month: int) -> dict[str, Decimal]:
        """Expense categories with positive spend that month, keyed by display name."""
        spending = {}
        for category in Category.expense_categories():
            amount = TransactionService.spending_by_category_and_month(self.db, user_id, category, year, month)
            if amount > 0:
                spending[category.display_name] = amount
        return spending

    def current_month_spending(self, user_id: int) -> dict[str, Decimal]:
        today = self.today()
        return self.category_spending_for_month(user_id, today.year, today.month)

    def trailing_monthly_income(self, user_id: int) -> Decimal:
        """Income over [today - 3 months, today] divided by 3, to the cent."""
        today = self.today()
        total = TransactionService.total_income(
            self.db, user_id, minus_months(today, TRAILING_MONTHS), today
        )
        return (total / TRAILING_MONTHS).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def estimated_budget(self, user_id: int) -> Decimal:
        return self.trailing_monthly_income(user_id) * BUDGET_SHARE_OF_INCOME

    def gather_financial_data(self, user_id: int) -> dict:
        data = {}

        accounts = AccountService.find_accounts_by_user(self.db, user_id)
        net_worth = AccountService.calculate_net_worth(self.db, user_id)
        data["Total Accounts"] = len(accounts)
        data["Net Worth"] = _money(net_worth)

        today = self.today()
        start_date, end_date = month_bounds(today.year, today.month)
        income = TransactionService.total_income(self.db, user_id, start_date, end_date)
        expenses = TransactionService.total_expenses(self.db, user_id, start_date, end_date)
        data["Monthly Income"] = _money(income)
        data["Monthly Expenses"] = _money(expenses)
        data["Monthly Savings"] = _money(income - expenses)

        for category, amount in self.current_month_spending(user_id).items():
            data[f"Spending on {category}"] = _money(amount)

        for account in accounts:
            label = f"{account.account_type.display_name} ({account.account_name})"
            data[label] = account.formatted_current_balance

        return data

    # ------------------------------------------------------------------
    async def generate_financial_insights(self, user_id: int) -> str:
        try:
            facts = self.gather_financial_data(user_id)
        except Exception as e:
            logger.error(f"Error gathering financial data for user {user_id}: {e}")
            return INSIGHTS_UNAVAILABLE
        return await self.narrative.generate_financial_advice(facts)

    async def analyze_monthly_spending(self, user_id: int) -> str:
        spending = self.current_month_spending(user_id)
        total_budget = self.estimated_budget(user_id)
        return await self.narrative.analyze_spending_patterns(spending, total_budget)

    async def generate_budget_recommendations(self, user_id: int) -> str:
        monthly_income = self.trailing_monthly_income(user_id)
        spending = self.current_month_spending(user_id)
        return await self.narrative.generate_budget_recommendations(monthly_income, spending)

    # ------------------------------------------------------------------
    def calculate_financial_health_score(self, user_id: int) -> int:
        score = BASE_SCORE

        try:
            # Savings rate, capped at +25 but not floored before the final clamp
            monthly_income = self.trailing_monthly_income(user_id)
            today = self.today()
            start_date, end_date = month_bounds(today.year, today.month)
            monthly_expenses = TransactionService.total_expenses(self.db, user_id, start_date, end_date)

            if monthly_income > 0:
                savings_rate = ((monthly_income - monthly_expenses) / monthly_income).quantize(
                    Decimal("0.0001"), rounding=ROUND_HALF_UP
                )
                points = int((savings_rate * 100).to_integral_value(rounding=ROUND_FLOOR))
                score += min(MAX_SAVINGS_BONUS, points)

            accounts = AccountService.find_accounts_by_user(self.db, user_id)
            if any(a.account_type is AccountType.CHECKING for a in accounts):
                score += CHECKING_BONUS
            if any(a.account_type is AccountType.SAVINGS for a in accounts):
                score += SAVINGS_BONUS

            if AccountService.calculate_net_worth(self.db, user_id) > 0:
                score += NET_WORTH_BONUS
        except Exception as e:
            logger.error(f"Error calculating financial health score for user {user_id}: {e}")

        return max(0, min(100, score))

    # ------------------------------------------------------------------
    async def get_dashboard(self, user_id: int) -> dict:
        """Everything the insights page shows, or an error message in its place."""
        try:
            return {
                "general_insights": await self.generate_financial_insights(user_id),
                "spending_analysis": await self.analyze_monthly_spending(user_id),
                "budget_recommendations": await self.generate_budget_recommendations(user_id),
                "health_score": self.calculate_financial_health_score(user_id),
            }
        except Exception as e:
            logger.error(f"Error generating insights for user {user_id}: {e}")
            return {"error_message": INSIGHTS_UNAVAILABLE}
