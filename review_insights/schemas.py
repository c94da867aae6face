"""Pydantic types for review results and the languages the service accepts."""

from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class IssueSeverity(str, Enum):
	CRITICAL = "critical"
	WARNING = "warning"
	SUGGESTION = "suggestion"


class IssueCategory(str, Enum):
	READABILITY = "readability"
	MODULARITY = "modularity"
	BUG = "bug"
	PERFORMANCE = "performance"
	SECURITY = "security"
	BEST_PRACTICE = "best-practice"


class ProgrammingLanguage(str, Enum):
	JAVASCRIPT = "javascript"
	TYPESCRIPT = "typescript"
	PYTHON = "python"
	JAVA = "java"
	CPP = "cpp"
	C = "c"
	GOLANG = "go"
	RUST = "rust"
	JSX = "jsx"
	TSX = "tsx"


SEVERITIES: tuple[str, ...] = tuple(item.value for item in IssueSeverity)
CATEGORIES: tuple[str, ...] = tuple(item.value for item in IssueCategory)
LANGUAGES: tuple[str, ...] = tuple(item.value for item in ProgrammingLanguage)

MIN_SUMMARY_LENGTH = 20
MIN_SCORE = 1.0
MAX_SCORE = 10.0


class CamelModel(BaseModel):
	"""Base model that reads and writes camelCase keys on the wire."""

	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReviewIssue(CamelModel):
	"""One flaw found in submitted code."""

	severity: Literal["critical", "warning", "suggestion"]
	category: Literal["readability", "modularity", "bug", "performance", "security", "best-practice"]
	line: Optional[int] = Field(default=None)
	description: str = Field(min_length=1)
	suggestion: str = Field(min_length=1)
	code_snippet: Optional[str] = None

	@field_validator("severity", mode="before")
	@classmethod
	def normalize_severity(cls, value: object) -> object:
		return value.strip().lower() if isinstance(value, str) else value

	@field_validator("category", mode="before")
	@classmethod
	def normalize_category(cls, value: object) -> str:
		"""Unknown or missing categories fall back to best-practice."""
		text = value.strip().lower() if isinstance(value, str) else ""
		return text if text in CATEGORIES else IssueCategory.BEST_PRACTICE.value

	@field_validator("line", mode="before")
	@classmethod
	def normalize_line(cls, value: object) -> Optional[int]:
		"""Lines must be positive; anything else is treated as unattached."""
		if isinstance(value, bool) or value is None:
			return None
		try:
			line = int(value)
		except (TypeError, ValueError):
			return None
		return line if line > 0 else None


class ReviewResult(CamelModel):
	"""The provider's structured verdict for one file."""

	summary: str
	overall_score: float
	issues: List[ReviewIssue] = Field(default_factory=list)
	improvements: List[str] = Field(default_factory=list)
	positives: List[str] = Field(default_factory=list)


class AnalysisMetadata(CamelModel):
	lines_of_code: int = Field(ge=0)
	analysis_time: int = Field(default=0, ge=0)
	model: str


class ReviewRequest(CamelModel):
	"""Body of POST /review. Presence checks happen in the route so each gets its own status."""

	code: Optional[str] = None
	language: Optional[str] = None
	file_name: Optional[str] = None
	user_id: Optional[str] = None
	session_id: Optional[str] = None
	device_id: Optional[str] = None
	device_name: Optional[str] = None


class EmailRequest(CamelModel):
	email: Optional[str] = None


class LogoutRequest(CamelModel):
	user_id: Optional[str] = None


class VerifyRequest(CamelModel):
	user_id: Optional[str] = None
	session_id: Optional[str] = None
