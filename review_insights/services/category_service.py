"""Per-category breakdown of issues across a set of reports."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from typing import Any

from review_insights.models.report_model import Report
from review_insights.utils.issue_keys import issue_category, issue_key, iter_issues, round1, top_counts

TOP_ISSUES_PER_CATEGORY = 5

CATEGORY_TIPS: dict[str, list[str]] = {
	"readability": [
		"Use clear variable names that describe their purpose",
		"Break long functions into smaller, focused units",
		"Add comments for complex logic",
		"Keep lines under 80 characters when possible",
		"Maintain consistent indentation and formatting",
	],
	"modularity": [
		"Each function should have a single responsibility",
		"Reduce coupling between modules",
		"Create reusable utility functions",
		"Organize related functionality into modules",
		"Avoid circular dependencies",
	],
	"bug": [
		"Add null/undefined checks for all inputs",
		"Handle edge cases explicitly",
		"Use consistent error handling",
		"Test boundary conditions",
		"Avoid type coercion issues",
	],
	"performance": [
		"Use algorithms with better time complexity",
		"Cache frequently used calculations",
		"Avoid unnecessary loops and iterations",
		"Optimize database queries",
		"Profile code before optimizing",
	],
	"security": [
		"Validate all user inputs",
		"Use parameterized queries to prevent SQL injection",
		"Keep dependencies updated",
		"Never hardcode secrets in code",
		"Use HTTPS and proper authentication",
	],
	"best-practice": [
		"Follow language conventions and style guides",
		"Write unit tests for critical paths",
		"Document public APIs and functions",
		"Use version control effectively",
		"Keep code DRY (Don't Repeat Yourself)",
	],
}


class _CategoryBucket:
	def __init__(self, category: str) -> None:
		self.category = category
		self.total = 0
		self.critical = 0
		self.warning = 0
		self.suggestion = 0
		self.report_ids: set[str] = set()
		self.descriptions: Counter[str] = Counter()


def build_category_analysis(reports: Sequence[Report]) -> dict[str, Any]:
	"""Group every issue by category and summarise each group.

	``avgPerReview`` is issues per affected report, 0 when no report is
	affected. Categories are ordered by total issue count, descending.
	"""
	buckets: dict[str, _CategoryBucket] = {}

	for report, issue in iter_issues(reports):
		category = issue_category(issue)
		bucket = buckets.get(category)
		if bucket is None:
			bucket = buckets[category] = _CategoryBucket(category)

		bucket.total += 1
		bucket.report_ids.add(str(report.id))
		bucket.descriptions[issue_key(issue)] += 1

		severity = issue.get("severity")
		if severity == "critical":
			bucket.critical += 1
		elif severity == "warning":
			bucket.warning += 1
		elif severity == "suggestion":
			bucket.suggestion += 1

	categories = []
	for bucket in buckets.values():
		affected = len(bucket.report_ids)
		categories.append(
			{
				"category": bucket.category,
				"totalIssues": bucket.total,
				"affectedReviews": affected,
				"criticalCount": bucket.critical,
				"warningCount": bucket.warning,
				"suggestionCount": bucket.suggestion,
				"avgPerReview": round1(bucket.total / affected) if affected else 0,
				"topIssues": [
					{"description": description, "count": count}
					for description, count in top_counts(bucket.descriptions, TOP_ISSUES_PER_CATEGORY)
				],
				"tips": list(CATEGORY_TIPS.get(bucket.category, [])),
			}
		)

	categories.sort(key=lambda item: item["totalIssues"], reverse=True)

	return {
		"categories": categories,
		"totalCategories": len(categories),
		"mostCommonCategory": categories[0]["category"] if categories else "N/A",
		"mostCommonCount": categories[0]["totalIssues"] if categories else 0,
	}
