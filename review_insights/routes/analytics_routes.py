"""Analytics API route declarations over the review history."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from review_insights.config import Settings
from review_insights.dependencies import get_app_settings, get_db
from review_insights.services.analytics_service import (
	build_category_response,
	build_language_response,
	build_recommendations_response,
	build_trends_response,
)
from review_insights.services.report_service import ReportFilters

router = APIRouter(prefix="/analytics", tags=["analytics"])


class AnalyticsQuery:
	"""Query parameters shared by every analytics endpoint; days defaults to the configured window."""

	def __init__(
		self,
		days: Optional[int] = Query(None, ge=1, le=3650),
		language: Optional[str] = Query(None),
		session_id: Optional[str] = Query(None, alias="sessionId"),
		user_id: Optional[str] = Query(None, alias="userId"),
		settings: Settings = Depends(get_app_settings),
	) -> None:
		self.days = days or settings.default_window_days
		self.filters = ReportFilters(user_id=user_id, session_id=session_id, language=language)


@router.get("/trends", summary="Score trend, recurring issues and distributions")
def trends(query: AnalyticsQuery = Depends(), db: Session = Depends(get_db)) -> dict:
	return {"success": True, **build_trends_response(db, query.days, query.filters)}


@router.get("/category-analysis", summary="Issue breakdown by category")
def category_analysis(query: AnalyticsQuery = Depends(), db: Session = Depends(get_db)) -> dict:
	return {"success": True, **build_category_response(db, query.days, query.filters)}


@router.get("/language-comparison", summary="Score comparison by language")
def language_comparison(query: AnalyticsQuery = Depends(), db: Session = Depends(get_db)) -> dict:
	return {"success": True, **build_language_response(db, query.days, query.filters)}


@router.get("/recommendations", summary="Prioritised improvement recommendations")
def recommendations(query: AnalyticsQuery = Depends(), db: Session = Depends(get_db)) -> dict:
	"""Return the highest-priority recommendations for the selected window."""
	return {"success": True, **build_recommendations_response(db, query.days, query.filters)}
