"""Tests for the report persistence gateway."""

from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import NOW, review_payload
from review_insights.errors import NotFoundError, ValidationError
from review_insights.schemas import AnalysisMetadata
from review_insights.services.analytics_service import fetch_window_reports
from review_insights.services.report_service import (
    ReportFilters,
    clamp_pagination,
    create_report,
    delete_report,
    get_report,
    get_report_stats,
    list_reports,
    serialize_report,
)
from review_insights.services.review_service import normalize_review


def _store(db, *, file_name="main.py", language="python", user_id="user_1", session_id="session_1", **review):
    return create_report(
        db,
        file_name=file_name,
        language=language,
        original_code="print('hi')",
        review=normalize_review(review_payload(**review)),
        metadata=AnalysisMetadata(lines_of_code=1, analysis_time=1200, model="gpt-4o"),
        user_id=user_id,
        session_id=session_id,
    )


class TestCreateReport:
    def test_assigns_id_and_timestamps(self, db_session):
        report = _store(db_session)
        assert report.id is not None
        assert report.created_at is not None
        assert report.updated_at is not None
        assert report.issue_count == 1
        assert report.severity_tags == "|warning|"

    def test_missing_user_id_is_rejected(self, db_session):
        with pytest.raises(ValidationError, match="userId"):
            create_report(
                db_session,
                file_name="main.py",
                language="python",
                original_code="x = 1",
                review=normalize_review(review_payload()),
                metadata=AnalysisMetadata(lines_of_code=1, model="gpt-4o"),
                user_id="",
            )

    def test_defaults_for_optional_ownership(self, db_session):
        report = create_report(
            db_session,
            file_name="main.py",
            language="python",
            original_code="x = 1",
            review=normalize_review(review_payload()),
            metadata=AnalysisMetadata(lines_of_code=1, model="gpt-4o"),
            user_id="user_1",
        )
        assert (report.session_id, report.device_id, report.device_name) == ("unknown", "unknown", "Unknown Device")

    def test_serialized_review_uses_camel_case(self, db_session):
        data = serialize_report(_store(db_session))
        assert data["review"]["overallScore"] == 7.0
        assert data["metadata"] == {"linesOfCode": 1, "analysisTime": 1200, "model": "gpt-4o"}
        assert data["fileName"] == "main.py"


class TestGetAndDelete:
    def test_round_trip(self, db_session):
        report = _store(db_session)
        assert get_report(db_session, str(report.id)).file_name == "main.py"

    def test_malformed_id(self, db_session):
        with pytest.raises(ValidationError, match="Invalid report ID"):
            get_report(db_session, "not-a-uuid")

    def test_unknown_id(self, db_session):
        with pytest.raises(NotFoundError):
            get_report(db_session, "00000000-0000-4000-8000-000000000000")

    def test_delete_then_get(self, db_session):
        report = _store(db_session)
        delete_report(db_session, str(report.id))
        with pytest.raises(NotFoundError):
            get_report(db_session, str(report.id))

    def test_delete_unknown(self, db_session):
        with pytest.raises(NotFoundError):
            delete_report(db_session, "00000000-0000-4000-8000-000000000000")


class TestListReports:
    def test_filters_by_user_and_session(self, db_session):
        _store(db_session, user_id="user_1", session_id="s1")
        _store(db_session, user_id="user_1", session_id="s2")
        _store(db_session, user_id="user_2", session_id="s1")

        assert list_reports(db_session, ReportFilters(user_id="user_1")).total == 2
        assert list_reports(db_session, ReportFilters(user_id="user_1", session_id="s2")).total == 1
        assert list_reports(db_session, ReportFilters(user_id="user_1", session_id="all")).total == 2

    def test_language_filter_and_all_sentinel(self, db_session):
        _store(db_session, language="python")
        _store(db_session, file_name="app.go", language="go")
        assert list_reports(db_session, ReportFilters(language="go")).total == 1
        assert list_reports(db_session, ReportFilters(language="all")).total == 2

    def test_severity_matches_any_issue(self, db_session):
        _store(db_session)
        _store(
            db_session,
            issues=[{"severity": "critical", "category": "security", "description": "XSS", "suggestion": "Escape"}],
        )
        assert list_reports(db_session, ReportFilters(severity="critical")).total == 1
        assert list_reports(db_session, ReportFilters(severity="warning")).total == 1
        assert list_reports(db_session, ReportFilters(severity="suggestion")).total == 0

    def test_search_is_case_insensitive_across_fields(self, db_session):
        _store(db_session, file_name="Parser.py")
        _store(db_session, file_name="other.py", summary="Handles the TOKENIZER state machine carefully.")
        _store(db_session, file_name="third.py")

        assert list_reports(db_session, ReportFilters(search="parser")).total == 1
        assert list_reports(db_session, ReportFilters(search="tokenizer")).total == 1
        assert list_reports(db_session, ReportFilters(search="NULL CHECK")).total == 3
        assert list_reports(db_session, ReportFilters(search="100%")).total == 0

    def test_score_range(self, db_session):
        for score in (3, 6, 9):
            _store(db_session, overallScore=score)
        assert list_reports(db_session, ReportFilters(min_score=5, max_score=8)).total == 1

    def test_sort_by_score(self, db_session):
        for score in (3, 9, 6):
            _store(db_session, overallScore=score)
        page = list_reports(db_session, ReportFilters(), sort_by="score")
        assert [report.overall_score for report in page.reports] == [9.0, 6.0, 3.0]

    def test_pagination(self, db_session):
        for index in range(25):
            _store(db_session, file_name=f"file{index}.py")
        page = list_reports(db_session, ReportFilters(), page=3, limit=10)
        assert page.total == 25
        assert page.total_pages == 3
        assert len(page.reports) == 5

    def test_limit_is_capped(self, db_session):
        for index in range(25):
            _store(db_session, file_name=f"file{index}.py")
        page = list_reports(db_session, ReportFilters(), limit=100)
        assert page.limit == 20
        assert len(page.reports) == 20
        assert page.total_pages == 2


class TestClampPagination:
    @pytest.mark.parametrize(
        ("page", "limit", "expected"),
        [
            (0, 10, (1, 10)),
            (-4, 10, (1, 10)),
            (2, 0, (2, 10)),
            (2, -1, (2, 10)),
            (1, 50, (1, 20)),
            (None, None, (1, 10)),
        ],
    )
    def test_clamps(self, page, limit, expected):
        assert clamp_pagination(page, limit) == expected


class TestReportStats:
    def test_empty(self, db_session):
        assert get_report_stats(db_session, ReportFilters(user_id="nobody")) == {
            "totalReviews": 0,
            "averageScore": 0.0,
            "mostCommonCategory": "N/A",
            "thisWeekCount": 0,
        }

    def test_counters(self, db_session):
        recent = _store(db_session, overallScore=8)
        older = _store(db_session, overallScore=5)
        recent.created_at = NOW - timedelta(days=1)
        older.created_at = NOW - timedelta(days=30)
        db_session.commit()

        stats = get_report_stats(db_session, ReportFilters(user_id="user_1"), now=NOW)
        assert stats["totalReviews"] == 2
        assert stats["averageScore"] == 6.5
        assert stats["mostCommonCategory"] == "bug"
        assert stats["thisWeekCount"] == 1


class TestAnalyticsWindow:
    def test_only_reports_inside_the_window(self, db_session):
        old = _store(db_session, overallScore=3)
        recent = _store(db_session, overallScore=8)
        old.created_at = NOW - timedelta(days=100)
        recent.created_at = NOW - timedelta(days=1)
        db_session.commit()

        reports = fetch_window_reports(db_session, 90, ReportFilters(user_id="user_1"), now=NOW)
        assert [report.id for report in reports] == [recent.id]

    def test_filters_still_apply_inside_the_window(self, db_session):
        _store(db_session, user_id="user_2")
        assert fetch_window_reports(db_session, 90, ReportFilters(user_id="user_1")) == []

    def test_rejects_non_positive_days(self, db_session):
        with pytest.raises(ValidationError):
            fetch_window_reports(db_session, 0, now=NOW)
