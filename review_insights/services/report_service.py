"""Persistence gateway for review reports: create, fetch, delete, filtered listing and counters."""

from __future__ import annotations

import logging
import math
import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Literal

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session

from review_insights.errors import NotFoundError, ValidationError
from review_insights.models.report_model import Report, utcnow
from review_insights.schemas import AnalysisMetadata, ReviewResult
from review_insights.utils.identifiers import parse_report_id
from review_insights.utils.issue_keys import issue_category, iter_issues, round1

logger = logging.getLogger(__name__)

ALL = "all"
SortKey = Literal["date", "score", "issues"]


@dataclass
class ReportFilters:
	"""Optional filters shared by report listing, counters and analytics.

	The ``"all"`` sentinel on session, language and severity means no filter.
	"""

	user_id: str | None = None
	session_id: str | None = None
	language: str | None = None
	severity: str | None = None
	search: str | None = None
	min_score: float | None = None
	max_score: float | None = None
	created_after: datetime | None = None


@dataclass
class ReportPage:
	reports: list[Report] = field(default_factory=list)
	total: int = 0
	page: int = 1
	limit: int = 10
	total_pages: int = 0


def as_utc(value: datetime | None) -> datetime | None:
	"""Attach UTC to naive timestamps read back from backends that drop tzinfo."""
	if value is None:
		return None
	return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def _is_set(value: str | None) -> bool:
	return bool(value) and value != ALL


def apply_filters(query: Select, filters: ReportFilters) -> Select:
	"""Translate ReportFilters into WHERE clauses on a Report select."""
	if filters.user_id:
		query = query.where(Report.user_id == filters.user_id)
	if _is_set(filters.session_id):
		query = query.where(Report.session_id == filters.session_id)
	if _is_set(filters.language):
		query = query.where(Report.language == filters.language)
	if _is_set(filters.severity):
		query = query.where(Report.severity_tags.contains(f"|{filters.severity}|"))
	if filters.search:
		needle = filters.search.strip().lower()
		if needle:
			query = query.where(
				or_(
					func.lower(Report.file_name).contains(needle, autoescape=True),
					Report.search_text.contains(needle, autoescape=True),
				)
			)
	if filters.min_score is not None:
		query = query.where(Report.overall_score >= filters.min_score)
	if filters.max_score is not None:
		query = query.where(Report.overall_score <= filters.max_score)
	if filters.created_after is not None:
		query = query.where(Report.created_at >= filters.created_after)
	return query


def _severity_tags(review: ReviewResult) -> str:
	severities = sorted({issue.severity for issue in review.issues})
	return f"|{'|'.join(severities)}|" if severities else ""


def _search_text(review: ReviewResult) -> str:
	parts = [review.summary] + [issue.description for issue in review.issues]
	return "\n".join(parts).lower()


def create_report(
	db: Session,
	*,
	file_name: str,
	language: str,
	original_code: str,
	review: ReviewResult,
	metadata: AnalysisMetadata,
	user_id: str,
	session_id: str = "unknown",
	device_id: str = "unknown",
	device_name: str = "Unknown Device",
) -> Report:
	"""Insert a report; id and timestamps are assigned by the model defaults."""
	required = {
		"fileName": file_name,
		"language": language,
		"originalCode": original_code,
		"review": review,
		"metadata": metadata,
		"userId": user_id,
	}
	missing = [name for name, value in required.items() if value is None or value == ""]
	if missing:
		raise ValidationError(f"Missing required report fields: {', '.join(missing)}")

	report = Report(
		file_name=file_name,
		language=language,
		original_code=original_code,
		review=review.model_dump(mode="json", by_alias=True),
		overall_score=review.overall_score,
		issue_count=len(review.issues),
		severity_tags=_severity_tags(review),
		search_text=_search_text(review),
		lines_of_code=metadata.lines_of_code,
		analysis_time=metadata.analysis_time,
		model_name=metadata.model,
		user_id=user_id,
		session_id=session_id or "unknown",
		device_id=device_id or "unknown",
		device_name=device_name or "Unknown Device",
	)
	db.add(report)
	db.commit()
	db.refresh(report)
	logger.info("Report stored | id=%s | language=%s | score=%s", report.id, language, review.overall_score)
	return report


def _require_id(report_id: str) -> uuid.UUID:
	parsed = parse_report_id(report_id)
	if parsed is None:
		raise ValidationError("Invalid report ID")
	return parsed


def get_report(db: Session, report_id: str) -> Report:
	report = db.get(Report, _require_id(report_id))
	if report is None:
		raise NotFoundError("Report not found")
	return report


def delete_report(db: Session, report_id: str) -> None:
	report = db.get(Report, _require_id(report_id))
	if report is None:
		raise NotFoundError("Report not found")
	db.delete(report)
	db.commit()
	logger.info("Report deleted | id=%s", report_id)


def clamp_pagination(page: int | None, limit: int | None, max_limit: int = 20, default_limit: int = 10) -> tuple[int, int]:
	"""Return an effective (page, limit): page is at least 1, limit within [1, max_limit]."""
	effective_page = max(1, page or 1)
	effective_limit = default_limit if not limit or limit < 1 else limit
	return effective_page, min(max_limit, effective_limit)


def list_reports(
	db: Session,
	filters: ReportFilters,
	sort_by: SortKey = "date",
	page: int | None = 1,
	limit: int | None = 10,
	max_limit: int = 20,
	default_limit: int = 10,
) -> ReportPage:
	"""Return one page of reports matching ``filters``."""
	effective_page, effective_limit = clamp_pagination(page, limit, max_limit, default_limit)

	count_query = apply_filters(select(func.count()).select_from(Report), filters)
	total = int(db.execute(count_query).scalar_one())

	if sort_by == "score":
		order = (Report.overall_score.desc(), Report.created_at.desc())
	elif sort_by == "issues":
		order = (Report.issue_count.desc(), Report.created_at.desc())
	else:
		order = (Report.created_at.desc(),)

	query = (
		apply_filters(select(Report), filters)
		.order_by(*order)
		.offset((effective_page - 1) * effective_limit)
		.limit(effective_limit)
	)
	rows = list(db.execute(query).scalars().all())

	return ReportPage(
		reports=rows,
		total=total,
		page=effective_page,
		limit=effective_limit,
		total_pages=math.ceil(total / effective_limit),
	)


def get_report_stats(db: Session, filters: ReportFilters, now: datetime | None = None) -> dict[str, Any]:
	"""Dashboard counters over every report matching ``filters``."""
	reports = list(db.execute(apply_filters(select(Report), filters)).scalars().all())
	current = now or utcnow()
	week_start = current - timedelta(days=7)

	total = len(reports)
	average = sum(report.overall_score for report in reports) / total if total else 0.0
	categories = Counter(issue_category(issue) for _, issue in iter_issues(reports))
	most_common = categories.most_common(1)[0][0] if categories else "N/A"
	this_week = sum(1 for report in reports if as_utc(report.created_at) > week_start)

	return {
		"totalReviews": total,
		"averageScore": round1(average),
		"mostCommonCategory": most_common,
		"thisWeekCount": this_week,
	}


def _isoformat(value: datetime | None) -> str | None:
	converted = as_utc(value)
	return converted.isoformat() if converted else None


def serialize_report(report: Report) -> dict[str, Any]:
	"""Wire representation of a report."""
	return {
		"id": str(report.id),
		"fileName": report.file_name,
		"language": report.language,
		"originalCode": report.original_code,
		"review": report.review,
		"metadata": {
			"linesOfCode": report.lines_of_code,
			"analysisTime": report.analysis_time,
			"model": report.model_name,
		},
		"userId": report.user_id,
		"sessionId": report.session_id,
		"deviceId": report.device_id,
		"deviceName": report.device_name,
		"createdAt": _isoformat(report.created_at),
		"updatedAt": _isoformat(report.updated_at),
	}
