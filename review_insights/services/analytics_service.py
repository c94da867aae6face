"""Analytics orchestration over a time window of stored review reports.

Each ``build_*_response`` function fetches the window once and hands the rows
to a pure aggregation function, so the aggregations stay testable without a
database.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from review_insights.errors import ValidationError
from review_insights.models.report_model import Report, utcnow
from review_insights.services.category_service import build_category_analysis
from review_insights.services.language_service import build_language_comparison
from review_insights.services.recommendation_service import build_recommendations
from review_insights.services.report_service import ReportFilters, apply_filters
from review_insights.services.trend_service import build_trends

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 90


def fetch_window_reports(
	db: Session,
	days: int = DEFAULT_WINDOW_DAYS,
	filters: ReportFilters | None = None,
	now: datetime | None = None,
) -> list[Report]:
	"""Return every report created in the last ``days`` days, oldest first."""
	if days < 1:
		raise ValidationError("days must be a positive integer")

	window_start = (now or utcnow()) - timedelta(days=days)
	scoped = replace(filters or ReportFilters(), created_after=window_start)
	query = apply_filters(select(Report), scoped).order_by(Report.created_at.asc())
	reports = list(db.execute(query).scalars().all())
	logger.debug("Analytics window loaded | days=%s | reports=%s", days, len(reports))
	return reports


def build_trends_response(db: Session, days: int, filters: ReportFilters) -> dict[str, Any]:
	return build_trends(fetch_window_reports(db, days, filters))


def build_category_response(db: Session, days: int, filters: ReportFilters) -> dict[str, Any]:
	return build_category_analysis(fetch_window_reports(db, days, filters))


def build_language_response(db: Session, days: int, filters: ReportFilters) -> dict[str, Any]:
	return build_language_comparison(fetch_window_reports(db, days, filters))


def build_recommendations_response(db: Session, days: int, filters: ReportFilters) -> dict[str, Any]:
	return build_recommendations(fetch_window_reports(db, days, filters))
