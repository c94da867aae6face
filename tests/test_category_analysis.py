"""Tests for the per-category issue breakdown."""

from __future__ import annotations

from conftest import issue, make_report
from review_insights.services.category_service import CATEGORY_TIPS, build_category_analysis


class TestBuildCategoryAnalysis:
    def test_empty_window(self):
        result = build_category_analysis([])
        assert result == {
            "categories": [],
            "totalCategories": 0,
            "mostCommonCategory": "N/A",
            "mostCommonCount": 0,
        }

    def test_counts_and_affected_reviews(self):
        reports = [
            make_report(issues=[issue("critical", "security"), issue("warning", "security")]),
            make_report(issues=[issue("suggestion", "security"), issue("warning", "readability")]),
            make_report(issues=[]),
        ]
        result = build_category_analysis(reports)
        security = result["categories"][0]

        assert security["category"] == "security"
        assert security["totalIssues"] == 3
        assert security["affectedReviews"] == 2
        assert security["criticalCount"] == 1
        assert security["warningCount"] == 1
        assert security["suggestionCount"] == 1
        assert security["avgPerReview"] == 1.5
        assert result["mostCommonCategory"] == "security"
        assert result["mostCommonCount"] == 3
        assert result["totalCategories"] == 2

    def test_severity_counts_add_up(self):
        reports = [
            make_report(issues=[issue("critical", "bug"), issue("warning", "bug"), issue("suggestion", "performance")]),
            make_report(issues=[issue("warning", "performance")]),
        ]
        for category in build_category_analysis(reports)["categories"]:
            assert category["criticalCount"] + category["warningCount"] + category["suggestionCount"] == category["totalIssues"]
            assert category["affectedReviews"] <= category["totalIssues"]

    def test_sorted_by_total_descending(self):
        reports = [make_report(issues=[issue(category="bug"), issue(category="modularity"), issue(category="modularity")])]
        names = [item["category"] for item in build_category_analysis(reports)["categories"]]
        assert names == ["modularity", "bug"]

    def test_top_issues_use_description_prefix(self):
        long_a = "x" * 50 + " first variant"
        long_b = "x" * 50 + " second variant"
        reports = [make_report(issues=[issue(description=long_a), issue(description=long_b), issue(description="other")])]
        top = build_category_analysis(reports)["categories"][0]["topIssues"]
        assert top[0] == {"description": "x" * 50, "count": 2}
        assert top[1] == {"description": "other", "count": 1}

    def test_top_issues_capped_at_five(self):
        reports = [make_report(issues=[issue(description=f"problem {index}") for index in range(8)])]
        assert len(build_category_analysis(reports)["categories"][0]["topIssues"]) == 5

    def test_known_category_has_tips(self):
        result = build_category_analysis([make_report(issues=[issue(category="security")])])
        assert result["categories"][0]["tips"] == CATEGORY_TIPS["security"]
        assert len(result["categories"][0]["tips"]) == 5

    def test_unknown_stored_category_counts_as_best_practice(self):
        result = build_category_analysis([make_report(issues=[issue(category="style")])])
        assert result["categories"][0]["category"] == "best-practice"
