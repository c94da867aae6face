"""Time series and distribution views over a window of reports."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from typing import Any

import numpy as np

from review_insights.models.report_model import Report
from review_insights.services.report_service import as_utc
from review_insights.utils.issue_keys import issue_category, issue_key, iter_issues, severity_counts, top_counts

TOP_RECURRING_ISSUES = 5


def _series_stats(values: list[int], prefix: str) -> dict[str, float]:
	"""avg/min/max for one metric; all zero for an empty series."""
	if not values:
		return {f"avg{prefix}": 0, f"min{prefix}": 0, f"max{prefix}": 0}
	series = np.array(values, dtype=float)
	return {
		f"avg{prefix}": float(series.mean()),
		f"min{prefix}": float(series.min()),
		f"max{prefix}": float(series.max()),
	}


def build_trends(reports: Sequence[Report]) -> dict[str, Any]:
	"""One point per report, plus recurring issues and distributions.

	No bucketing is done here; consumers group points by day.
	"""
	points = [
		{
			"date": as_utc(report.created_at).isoformat() if report.created_at else None,
			"score": report.overall_score,
			"fileName": report.file_name,
			"analysisTime": report.analysis_time or 0,
			"linesOfCode": report.lines_of_code or 0,
		}
		for report in reports
	]

	issues = [issue for _, issue in iter_issues(reports)]
	recurring = Counter(issue_key(issue) for issue in issues)
	categories = Counter(issue_category(issue) for issue in issues)
	severities = severity_counts(issues)

	complexity = {}
	complexity.update(_series_stats([report.analysis_time or 0 for report in reports], "AnalysisTime"))
	complexity.update(_series_stats([report.lines_of_code or 0 for report in reports], "LinesOfCode"))

	return {
		"trends": points,
		"topIssues": [
			{"description": description, "count": count}
			for description, count in top_counts(recurring, TOP_RECURRING_ISSUES)
		],
		"topCategories": [{"category": category, "count": count} for category, count in top_counts(categories, None)],
		"severityDistribution": {**severities, "total": len(issues)},
		"complexityMetrics": complexity,
	}
