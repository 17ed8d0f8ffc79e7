"""
narrative_service.py — AI narratives
Renders the three prompt templates (general advice, spending analysis,
budget recommendations), sends each to the completion provider once, and
falls back to fixed text whenever the provider reports a failure.
Nothing here raises to the caller.
"""

import logging
from decimal import Decimal

from providers.base import BaseProvider
from providers.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


FALLBACK_ADVICE = (
    "Here are some general financial tips while our AI advisor is unavailable:\n\n"
    "• Track your spending regularly to understand where your money goes\n"
    "• Build an emergency fund covering 3-6 months of expenses\n"
    "• Pay off high-interest debt first\n"
    "• Automate your savings to make it consistent\n"
    "• Review and adjust your budget monthly\n"
    "• Consider increasing your income through side hustles or skill development"
)

FALLBACK_SPENDING_ANALYSIS = (
    "Unable to analyze spending patterns at this time. "
    "Please check your budget categories and try again."
)

FALLBACK_BUDGET_RECOMMENDATIONS = (
    "Consider following the 50/30/20 rule: 50% for needs, 30% for wants, "
    "and 20% for savings and debt repayment."
)


def build_financial_advice_prompt(facts: dict) -> str:
    lines = [
        "As a professional financial advisor, please analyze this financial situation "
        "and provide personalized advice:",
        "",
    ]
    lines += [f"{label}: {value}" for label, value in facts.items()]
    lines += [
        "",
        "Please provide:",
        "1. Assessment of current financial health",
        "2. Specific actionable recommendations",
        "3. Areas for improvement",
        "4. Positive reinforcement for good habits",
        "",
        "Keep the advice practical, encouraging, and under 300 words.",
    ]
    return "\n".join(lines)


def build_spending_analysis_prompt(category_spending: dict[str, Decimal], total_budget: Decimal) -> str:
    total_spent = sum(category_spending.values(), Decimal("0"))
    lines = [
        "Analyze this monthly spending breakdown and provide insights:",
        "",
        f"Total Budget: ${total_budget}",
        "",
        "Spending by Category:",
    ]
    lines += [f"- {category}: ${amount}" for category, amount in category_spending.items()]
    lines += [
        "",
        f"Total Spent: ${total_spent}",
        f"Remaining Budget: ${total_budget - total_spent}",
        "",
        "Please identify spending patterns, highlight any concerning areas, and suggest "
        "optimizations. Keep response under 200 words.",
    ]
    return "\n".join(lines)


def build_budget_recommendation_prompt(monthly_income: Decimal, current_spending: dict[str, Decimal]) -> str:
    total_spending = sum(current_spending.values(), Decimal("0"))
    lines = [
        "Create a budget recommendation for someone with:",
        "",
        f"Monthly Income: ${monthly_income}",
        "",
        "Current Spending:",
    ]
    lines += [f"- {category}: ${amount}" for category, amount in current_spending.items()]
    lines += [
        "",
        f"Total Current Spending: ${total_spending}",
        "",
        "Please suggest an optimized budget allocation with specific dollar amounts for each "
        "category. Include emergency fund and savings recommendations. Keep response under 250 words.",
    ]
    return "\n".join(lines)


class NarrativeService:
    """Prompt templating on top of a single completion provider."""

    def __init__(self, provider: BaseProvider | None = None):
        self.provider = provider or OpenAIProvider()

    async def _complete(self, prompt: str, purpose: str) -> str | None:
        """One provider call. Returns the text, or None when the call failed."""
        try:
            result = await self.provider.chat([{"role": "user", "content": prompt}])
        except Exception as e:
            logger.warning(f"Narrative provider raised during {purpose}: {e}")
            return None

        if result.get("status") != "success" or not result.get("text"):
            logger.warning(
                f"Narrative call for {purpose} failed via {result.get('provider')}: {result.get('error')}"
            )
            return None
        return result["text"]

    async def generate_financial_advice(self, facts: dict) -> str:
        text = await self._complete(build_financial_advice_prompt(facts), "financial advice")
        return text or FALLBACK_ADVICE

    async def analyze_spending_patterns(self, category_spending: dict[str, Decimal],
                                        total_budget: Decimal) -> str:
        prompt = build_spending_analysis_prompt(category_spending, total_budget)
        text = await self._complete(prompt, "spending analysis")
        return text or FALLBACK_SPENDING_ANALYSIS

    async def generate_budget_recommendations(self, monthly_income: Decimal,
                                              current_spending: dict[str, Decimal]) -> str:
        prompt = build_budget_recommendation_prompt(monthly_income, current_spending)
        text = await self._complete(prompt, "budget recommendations")
        return text or FALLBACK_BUDGET_RECOMMENDATIONS


_narrative_service: NarrativeService | None = None


def get_narrative_service() -> NarrativeService:
    """FastAPI dependency — one shared service built from config."""
    global _narrative_service
    if _narrative_service is None:
        _narrative_service = NarrativeService()
    return _narrative_service
