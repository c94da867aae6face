"""Per-language score and issue comparison."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from review_insights.models.report_model import Report
from review_insights.utils.issue_keys import report_issues, round1, severity_counts

UNKNOWN_LANGUAGE = "unknown"


def build_language_comparison(reports: Sequence[Report]) -> dict[str, Any]:
	"""Compare languages by score and issue density.

	``reports`` must already be ordered by creation time: ``trend`` is the
	last score in a group minus the first, not a fitted slope.
	"""
	groups: dict[str, list[Report]] = {}
	for report in reports:
		groups.setdefault(report.language or UNKNOWN_LANGUAGE, []).append(report)

	languages = []
	for language, members in groups.items():
		scores = np.array([report.overall_score for report in members], dtype=float)
		issues = [issue for report in members for issue in report_issues(report)]
		severities = severity_counts(issues)
		count = len(members)

		languages.append(
			{
				"language": language,
				"count": count,
				"avgScore": round1(float(scores.mean())) if scores.size else 0,
				"minScore": float(scores.min()) if scores.size else 0,
				"maxScore": float(scores.max()) if scores.size else 0,
				"totalIssues": len(issues),
				"avgIssuesPerReview": round1(len(issues) / count) if count else 0,
				"criticalCount": severities["critical"],
				"warningCount": severities["warning"],
				"suggestionCount": severities["suggestion"],
				"trend": float(scores[-1] - scores[0]) if scores.size >= 2 else 0,
			}
		)

	languages.sort(key=lambda item: item["avgScore"], reverse=True)

	return {
		"languages": languages,
		"totalLanguages": len(languages),
		"bestLanguage": languages[0]["language"] if languages else "N/A",
		"bestScore": languages[0]["avgScore"] if languages else 0,
	}
