from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from services.insights_service import InsightsService
from services.narrative_service import NarrativeService, get_narrative_service

router = APIRouter(prefix="/api/v1/insights", tags=["Insights"])


def get_insights_service(
    db: Session = Depends(get_db),
    narrative: NarrativeService = Depends(get_narrative_service),
) -> InsightsService:
    return InsightsService(db, narrative)


@router.get("")
async def dashboard(user_id: int = Depends(get_current_user),
                    insights: InsightsService = Depends(get_insights_service)):
    """All three narratives plus the health score."""
    return await insights.get_dashboard(user_id)


@router.get("/advice")
async def advice(user_id: int = Depends(get_current_user),
                 insights: InsightsService = Depends(get_insights_service)):
    return {"text": await insights.generate_financial_insights(user_id)}


@router.get("/spending")
async def spending(user_id: int = Depends(get_current_user),
                   insights: InsightsService = Depends(get_insights_service)):
    return {"text": await insights.analyze_monthly_spending(user_id)}


@router.get("/recommendations")
async def recommendations(user_id: int = Depends(get_current_user),
                          insights: InsightsService = Depends(get_insights_service)):
    return {"text": await insights.generate_budget_recommendations(user_id)}


@router.get("/health-score")
async def health_score(user_id: int = Depends(get_current_user),
                       insights: InsightsService = Depends(get_insights_service)):
    return {"health_score": insights.calculate_financial_health_score(user_id)}
