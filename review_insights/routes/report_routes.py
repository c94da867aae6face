"""Stored review report routes: listing, counters, detail, deletion and PDF export."""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from review_insights.config import Settings
from review_insights.dependencies import get_app_settings, get_db
from review_insights.services.export_service import build_report_pdf, export_file_name
from review_insights.services.report_service import (
	ReportFilters,
	delete_report,
	get_report,
	get_report_stats,
	list_reports,
	serialize_report,
)

router = APIRouter(prefix="/reports", tags=["reports"])


def report_filters(
	language: Optional[str] = Query(None),
	severity: Optional[str] = Query(None),
	search: Optional[str] = Query(None),
	min_score: Optional[float] = Query(None, alias="minScore"),
	max_score: Optional[float] = Query(None, alias="maxScore"),
	user_id: Optional[str] = Query(None, alias="userId"),
	session_id: Optional[str] = Query(None, alias="sessionId"),
) -> ReportFilters:
	"""Filter query parameters shared by the listing and the counters."""
	return ReportFilters(
		user_id=user_id,
		session_id=session_id,
		language=language,
		severity=severity,
		search=search,
		min_score=min_score,
		max_score=max_score,
	)


@router.get("", summary="List reports with filters and pagination")
def reports_index(
	page: int = Query(1),
	limit: int = Query(10),
	sort_by: Literal["date", "score", "issues"] = Query("date", alias="sortBy"),
	filters: ReportFilters = Depends(report_filters),
	db: Session = Depends(get_db),
	settings: Settings = Depends(get_app_settings),
) -> dict:
	result = list_reports(
		db,
		filters,
		sort_by=sort_by,
		page=page,
		limit=limit,
		max_limit=settings.max_page_size,
		default_limit=settings.default_page_size,
	)
	return {
		"success": True,
		"reports": [serialize_report(report) for report in result.reports],
		"total": result.total,
		"page": result.page,
		"totalPages": result.total_pages,
	}


# Declared before /{report_id} so "stats" is not taken for an id.
@router.get("/stats", summary="Dashboard counters")
def reports_stats(
	filters: ReportFilters = Depends(report_filters),
	db: Session = Depends(get_db),
) -> dict:
	return {"success": True, "stats": get_report_stats(db, filters)}


@router.get("/{report_id}", summary="Fetch one report")
def report_detail(report_id: str, db: Session = Depends(get_db)) -> dict:
	return {"success": True, "report": serialize_report(get_report(db, report_id))}


@router.delete("/{report_id}", summary="Delete one report")
def report_delete(report_id: str, db: Session = Depends(get_db)) -> dict:
	delete_report(db, report_id)
	return {"success": True}


@router.get("/{report_id}/export", summary="Download a report as PDF")
def report_export(report_id: str, db: Session = Depends(get_db)) -> StreamingResponse:
	"""Render the stored report with reportlab and stream it as an attachment."""
	report = get_report(db, report_id)
	pdf_content = build_report_pdf(report)
	return StreamingResponse(
		iter([pdf_content]),
		media_type="application/pdf",
		headers={"Content-Disposition": f'attachment; filename="{export_file_name(report)}"'},
	)
