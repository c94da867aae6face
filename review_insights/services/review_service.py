"""Review acquisition: obtain a validated ReviewResult from the external model."""

from __future__ import annotations

import json
import logging
import math
import re
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from review_insights.errors import UpstreamError, ValidationError
from review_insights.prompts import build_review_prompt
from review_insights.providers.base import ReviewProvider, build_review_provider
from review_insights.providers.catalog import ModelCatalog
from review_insights.schemas import (
	LANGUAGES,
	MAX_SCORE,
	MIN_SCORE,
	MIN_SUMMARY_LENGTH,
	ReviewIssue,
	ReviewResult,
)

if TYPE_CHECKING:
	from review_insights.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY = "Code review completed"
DEFAULT_SCORE = 5.0

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


class ReviewAcquisitionError(UpstreamError):
	"""Raised when every candidate model failed to produce a valid review."""

	def __init__(self, attempted: list[str]) -> None:
		self.attempted = list(attempted)
		tried = ", ".join(attempted) if attempted else "none"
		super().__init__(
			f"All available models failed to generate a valid review. Tried: {tried}. "
			"Please verify your API key has access to these models and try again."
		)


class ReviewParseError(ValueError):
	"""Raised when a provider response cannot be turned into a JSON object."""


@dataclass
class AcquiredReview:
	review: ReviewResult
	model: str
	analysis_time_ms: int


def extract_json_object(text: str) -> str | None:
	"""Return the first balanced ``{...}`` substring, ignoring braces inside strings."""
	start = text.find("{")
	while start != -1:
		depth = 0
		in_string = False
		escaped = False
		for index in range(start, len(text)):
			char = text[index]
			if in_string:
				if escaped:
					escaped = False
				elif char == "\\":
					escaped = True
				elif char == '"':
					in_string = False
				continue
			if char == '"':
				in_string = True
			elif char == "{":
				depth += 1
			elif char == "}":
				depth -= 1
				if depth == 0:
					return text[start : index + 1]
		start = text.find("{", start + 1)
	return None


def parse_review_payload(raw: str) -> dict[str, Any]:
	"""Parse a provider response into a dict.

	Tries the raw text, then the text with a markdown fence stripped, then the
	first balanced object found anywhere in the response.
	"""
	text = (raw or "").strip()
	if not text:
		raise ReviewParseError("Empty response from provider")

	stripped = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", text))
	attempts = [text, stripped]
	embedded = extract_json_object(text)
	if embedded is not None:
		attempts.append(embedded)

	for candidate in attempts:
		try:
			payload = json.loads(candidate)
		except json.JSONDecodeError:
			continue
		if isinstance(payload, dict):
			return payload
	raise ReviewParseError("Could not parse response as valid JSON")


def _coerce_score(value: Any) -> float:
	if value is None or value == "" or value == 0:
		return DEFAULT_SCORE
	if isinstance(value, bool):
		raise ReviewParseError(f"Non-numeric overallScore: {value!r}")
	try:
		score = float(value)
	except (TypeError, ValueError) as exc:
		raise ReviewParseError(f"Non-numeric overallScore: {value!r}") from exc
	if math.isnan(score):
		raise ReviewParseError("overallScore is NaN")
	return min(MAX_SCORE, max(MIN_SCORE, score))


def _text_list(value: Any) -> list[str]:
	if not isinstance(value, list):
		return []
	return [str(item).strip() for item in value if item is not None and str(item).strip()]


def normalize_review(payload: dict[str, Any]) -> ReviewResult:
	"""Fill missing fields, clamp the score and drop malformed issues."""
	issues: list[ReviewIssue] = []
	raw_issues = payload.get("issues")
	for raw_issue in raw_issues if isinstance(raw_issues, list) else []:
		if not isinstance(raw_issue, dict):
			continue
		try:
			issues.append(ReviewIssue.model_validate(raw_issue))
		except PydanticValidationError as exc:
			logger.debug("Dropping malformed issue: %s", exc.errors(include_url=False))

	summary = payload.get("summary")
	summary_text = summary.strip() if isinstance(summary, str) and summary.strip() else DEFAULT_SUMMARY

	return ReviewResult(
		summary=summary_text,
		overall_score=_coerce_score(payload.get("overallScore")),
		issues=issues,
		improvements=_text_list(payload.get("improvements")),
		positives=_text_list(payload.get("positives")),
	)


def is_valid_review(review: ReviewResult) -> bool:
	"""Minimal quality gate a review must pass before it may be stored."""
	if not review.issues and not review.improvements:
		return False
	if not review.summary or len(review.summary) < MIN_SUMMARY_LENGTH:
		return False
	if not MIN_SCORE <= review.overall_score <= MAX_SCORE:
		return False
	return True


class ReviewAcquirer:
	"""Runs the prompt against each candidate model until one yields a valid review."""

	def __init__(self, provider: ReviewProvider, catalog: ModelCatalog) -> None:
		self.provider = provider
		self.catalog = catalog

	@classmethod
	def from_settings(cls, settings: Settings) -> ReviewAcquirer:
		provider = build_review_provider(settings)
		catalog = ModelCatalog(
			provider=provider,
			fallback=settings.fallback_models,
			preferred=settings.preferred_model_list,
		)
		return cls(provider=provider, catalog=catalog)

	def acquire(self, code: str, language: str) -> AcquiredReview:
		if not code or not code.strip():
			raise ValidationError("Code content is required")
		if language not in LANGUAGES:
			raise ValidationError(f"Unsupported language: {language}")

		models = self.catalog.list_candidates()
		if not models:
			raise ReviewAcquisitionError([])

		prompt = build_review_prompt(code, language)
		logger.info("Requesting review | provider=%s | language=%s | chars=%d", self.provider.name, language, len(code))

		for model in models:
			started = time.perf_counter()
			try:
				raw = self.provider.complete(model, prompt)
				review = normalize_review(parse_review_payload(raw))
			except Exception as exc:
				logger.warning("Model %s failed: %s", model, exc)
				continue

			elapsed_ms = int(round((time.perf_counter() - started) * 1000))
			if not is_valid_review(review):
				logger.warning("Model %s produced a low-quality review. Moving to next model.", model)
				continue

			logger.info("Review accepted | model=%s | latency_ms=%d | issues=%d", model, elapsed_ms, len(review.issues))
			return AcquiredReview(review=review, model=model, analysis_time_ms=elapsed_ms)

		raise ReviewAcquisitionError(models)
