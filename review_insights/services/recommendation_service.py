"""Heuristic improvement recommendations ranked by impact and ease."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal

from review_insights.models.report_model import Report
from review_insights.utils.issue_keys import issue_category, issue_key, iter_issues, report_issues, round1, top_counts

Impact = Literal["high", "medium", "low"]
Difficulty = Literal["easy", "medium", "hard"]

IMPACT_WEIGHTS: dict[str, int] = {"high": 3, "medium": 2, "low": 1}
DIFFICULTY_WEIGHTS: dict[str, int] = {"easy": 3, "medium": 2, "hard": 1}

MAX_RECOMMENDATIONS = 8
TOP_CRITICAL = 3
TOP_CATEGORIES = 2
TOP_WARNINGS = 2
MIN_WARNING_OCCURRENCES = 3
LARGE_FILE_LINES = 500


@dataclass
class Recommendation:
	id: str
	title: str
	description: str
	impact: Impact
	difficulty: Difficulty
	affected_reviews: int
	issue_count: int
	category: str
	suggestion: str
	potential_score_increase: float

	def as_payload(self) -> dict[str, Any]:
		return {
			"id": self.id,
			"title": self.title,
			"description": self.description,
			"impact": self.impact,
			"difficulty": self.difficulty,
			"affectedReviews": self.affected_reviews,
			"issueCount": self.issue_count,
			"category": self.category,
			"suggestion": self.suggestion,
			"potentialScoreIncrease": self.potential_score_increase,
		}


def round_half_up(value: float) -> int:
	return math.floor(value + 0.5)


def priority(recommendation: Recommendation) -> int:
	"""Higher impact first, then easier fixes."""
	return IMPACT_WEIGHTS[recommendation.impact] * 2 + DIFFICULTY_WEIGHTS[recommendation.difficulty]


def _critical_recommendations(reports: Sequence[Report]) -> list[Recommendation]:
	counts: Counter[str] = Counter()
	reviews_with_critical: set[str] = set()
	for report, issue in iter_issues(reports):
		if issue.get("severity") == "critical":
			counts[issue_key(issue)] += 1
			reviews_with_critical.add(str(report.id))

	return [
		Recommendation(
			id=f"crit-{index}",
			title=f"Fix Critical: {key[:40]}...",
			description=key,
			impact="high",
			difficulty="medium",
			affected_reviews=len(reviews_with_critical),
			issue_count=count,
			category="critical",
			suggestion=(
				f"This critical issue appears in {count} places. Focus on understanding the root cause "
				"and implementing a systematic fix across all occurrences."
			),
			potential_score_increase=min(2 + count * 0.1, 3),
		)
		for index, (key, count) in enumerate(top_counts(counts, TOP_CRITICAL))
	]


def _category_recommendations(reports: Sequence[Report]) -> list[Recommendation]:
	counts: Counter[str] = Counter()
	affected: dict[str, set[str]] = {}
	for report, issue in iter_issues(reports):
		category = issue_category(issue)
		counts[category] += 1
		affected.setdefault(category, set()).add(str(report.id))

	recommendations = []
	for index, (category, count) in enumerate(top_counts(counts, TOP_CATEGORIES)):
		review_count = len(affected.get(category, ()))
		recommendations.append(
			Recommendation(
				id=f"cat-{index}",
				title=f"Improve {category[:1].upper()}{category[1:]}",
				description=f"{category.upper()} issues found in {review_count} reviews ({count} total issues)",
				impact="high",
				difficulty="medium",
				affected_reviews=review_count,
				issue_count=count,
				category=category,
				suggestion=(
					f"Establish team guidelines and code review checklist for {category} best practices. "
					"Consider automated linting rules."
				),
				potential_score_increase=min(1 + count * 0.05, 2),
			)
		)
	return recommendations


def _warning_recommendations(reports: Sequence[Report]) -> list[Recommendation]:
	counts: Counter[str] = Counter(
		issue_key(issue) for _, issue in iter_issues(reports) if issue.get("severity") == "warning"
	)
	frequent = Counter({key: count for key, count in counts.items() if count >= MIN_WARNING_OCCURRENCES})

	return [
		Recommendation(
			id=f"warn-{index}",
			title=f"Quick Win: {key[:35]}...",
			description=f"This warning appears {count} times - easy to fix!",
			impact="medium",
			difficulty="easy",
			affected_reviews=count,
			issue_count=count,
			category="warning",
			suggestion=(
				f"Quick fix that appears {count} times. Prioritize this - it's a quick win that will "
				"boost overall code quality score."
			),
			potential_score_increase=0.5 + count * 0.05,
		)
		for index, (key, count) in enumerate(top_counts(frequent, TOP_WARNINGS))
	]


def _complexity_recommendation(reports: Sequence[Report]) -> list[Recommendation]:
	large = [report for report in reports if (report.lines_of_code or 0) > LARGE_FILE_LINES]
	if not large:
		return []
	average_lines = sum(report.lines_of_code for report in large) / len(large)
	return [
		Recommendation(
			id="refactor-complex",
			title="Refactor Complex Code",
			description=f"{len(large)} reviews have >{LARGE_FILE_LINES} lines (avg: {round_half_up(average_lines)} lines)",
			impact="medium",
			difficulty="hard",
			affected_reviews=len(large),
			issue_count=sum(len(report_issues(report)) for report in large),
			category="modularity",
			suggestion=(
				"Break large files into smaller, focused modules. This will improve readability, "
				"testability, and maintainability."
			),
			potential_score_increase=1.5,
		)
	]


def generate_recommendations(reports: Sequence[Report]) -> list[Recommendation]:
	"""Every candidate, in priority order (stable for equal priority)."""
	candidates = (
		_critical_recommendations(reports)
		+ _category_recommendations(reports)
		+ _warning_recommendations(reports)
		+ _complexity_recommendation(reports)
	)
	return sorted(candidates, key=priority, reverse=True)


def build_recommendations(reports: Sequence[Report], limit: int = MAX_RECOMMENDATIONS) -> dict[str, Any]:
	"""Top recommendations plus the score they could lift the average to.

	``potentialScore`` adds up only the recommendations that are returned,
	capped at 10.
	"""
	ranked = generate_recommendations(reports)
	shown = ranked[:limit]

	current = round1(sum(report.overall_score for report in reports) / len(reports)) if reports else 0
	potential = min(10, current + sum(item.potential_score_increase for item in shown))

	return {
		"recommendations": [item.as_payload() for item in shown],
		"currentAvgScore": current,
		"potentialScore": potential,
		"scoreImprovement": round1(potential - current),
		"totalRecommendations": len(ranked),
	}
