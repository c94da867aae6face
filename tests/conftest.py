"""Shared fixtures for Review Insights tests."""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from review_insights.config import Settings
from review_insights.database import Database
from review_insights.main import create_app
from review_insights.models.report_model import Report
from review_insights.providers.base import ReviewProvider
from review_insights.providers.catalog import ModelCatalog
from review_insights.services.review_service import ReviewAcquirer

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


class FakeProvider(ReviewProvider):
    """Scripted provider: each model name maps to a response string or an exception."""

    name = "fake"
    model_family = "gpt-"

    def __init__(self, responses: dict[str, Any] | None = None, listed: list[str] | Exception | None = None):
        self.responses = dict(responses or {})
        self.listed = listed
        self.calls: list[str] = []

    def list_models(self) -> list[str]:
        if isinstance(self.listed, Exception):
            raise self.listed
        return list(self.listed if self.listed is not None else self.responses)

    def complete(self, model: str, prompt: str) -> str:
        self.calls.append(model)
        outcome = self.responses.get(model, RuntimeError(f"model {model} not found"))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def review_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "summary": "The function is readable but misses input validation.",
        "overallScore": 7,
        "issues": [
            {
                "severity": "warning",
                "category": "bug",
                "line": 3,
                "description": "Missing null check on user input",
                "suggestion": "Guard against None before use",
            }
        ],
        "improvements": ["Add input validation"],
        "positives": ["Clear naming"],
    }
    payload.update(overrides)
    return payload


def review_json(**overrides: Any) -> str:
    return json.dumps(review_payload(**overrides))


def issue(severity: str = "warning", category: str = "bug", description: str = "Missing null check") -> dict[str, Any]:
    return {
        "severity": severity,
        "category": category,
        "line": 1,
        "description": description,
        "suggestion": "Fix it",
    }


def make_report(
    score: float = 7.0,
    issues: list[dict[str, Any]] | None = None,
    language: str = "python",
    file_name: str = "main.py",
    lines_of_code: int = 10,
    analysis_time: int = 1000,
    created_at: datetime | None = None,
) -> Report:
    """Build a transient Report for the pure aggregation functions."""
    return Report(
        id=uuid.uuid4(),
        file_name=file_name,
        language=language,
        original_code="print('hello')",
        review={
            "summary": "A summary that is long enough.",
            "overallScore": score,
            "issues": list(issues or []),
            "improvements": [],
            "positives": [],
        },
        overall_score=score,
        issue_count=len(issues or []),
        lines_of_code=lines_of_code,
        analysis_time=analysis_time,
        model_name="gpt-4o",
        user_id="user_1",
        session_id="session_1",
        device_id="device_1",
        device_name="Web Browser",
        created_at=created_at or NOW,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        ENVIRONMENT="test",
        OPENAI_API_KEY="",
        ANTHROPIC_API_KEY="",
        log_level="WARNING",
    )


@pytest.fixture
def database(settings: Settings):
    db = Database(settings.database_url)
    db.connect()
    yield db
    db.dispose()


@pytest.fixture
def db_session(database: Database):
    yield from database.session()


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider({"gpt-4o": review_json()})


@pytest.fixture
def acquirer(fake_provider: FakeProvider) -> ReviewAcquirer:
    catalog = ModelCatalog(provider=fake_provider, fallback=["gpt-4o", "gpt-4o-mini"])
    return ReviewAcquirer(provider=fake_provider, catalog=catalog)


@pytest.fixture
def client(settings: Settings, database: Database, acquirer: ReviewAcquirer):
    app = create_app(settings=settings, database=database, acquirer=acquirer)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
