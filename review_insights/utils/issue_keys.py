"""Helpers shared by the aggregations that read issues out of stored reviews."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from review_insights.models.report_model import Report
from review_insights.schemas import CATEGORIES, IssueCategory

ISSUE_KEY_LENGTH = 50


def issue_key(issue: dict[str, Any]) -> str:
	"""Frequency key for an issue: the first 50 characters of its description.

	Distinct issues sharing a prefix collapse into one key.
	"""
	return str(issue.get("description") or "")[:ISSUE_KEY_LENGTH]


def issue_category(issue: dict[str, Any]) -> str:
	category = issue.get("category")
	return category if category in CATEGORIES else IssueCategory.BEST_PRACTICE.value


def report_issues(report: Report) -> list[dict[str, Any]]:
	review = report.review or {}
	issues = review.get("issues") or []
	return [issue for issue in issues if isinstance(issue, dict)]


def iter_issues(reports: Iterable[Report]) -> Iterator[tuple[Report, dict[str, Any]]]:
	"""Flatten issues across reports, keeping the owning report."""
	for report in reports:
		for issue in report_issues(report):
			yield report, issue


def top_counts(counter: Counter[str], limit: int | None) -> list[tuple[str, int]]:
	"""Most frequent keys first; ties keep first-seen order."""
	ranked = sorted(counter.items(), key=lambda item: item[1], reverse=True)
	return ranked if limit is None else ranked[:limit]


def severity_counts(issues: Sequence[dict[str, Any]]) -> dict[str, int]:
	counts = {"critical": 0, "warning": 0, "suggestion": 0}
	for issue in issues:
		severity = issue.get("severity")
		if severity in counts:
			counts[severity] += 1
	return counts


def round1(value: float) -> float:
	"""Round half up to one decimal place."""
	return math.floor(value * 10 + 0.5) / 10
