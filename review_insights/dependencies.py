"""Shared dependency providers injected into FastAPI route handlers."""

from __future__ import annotations

from collections.abc import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from review_insights.config import Settings
from review_insights.database import Database
from review_insights.services.review_service import ReviewAcquirer


def get_app_settings(request: Request) -> Settings:
	"""Return the settings the running application was built with."""
	return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
	"""Expose a request-scoped database session from the application-owned Database."""
	database: Database = request.app.state.database
	yield from database.session()


def get_review_acquirer(request: Request) -> ReviewAcquirer:
	"""Return the acquirer, building the provider on first use.

	Provider construction needs an API key, so it is deferred until a review
	is actually requested.
	"""
	state = request.app.state
	if state.review_acquirer is None:
		state.review_acquirer = ReviewAcquirer.from_settings(state.settings)
	return state.review_acquirer
