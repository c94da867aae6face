"""Email-keyed identity and session tracking for report ownership."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from review_insights.errors import NotFoundError, UnauthorizedError, ValidationError
from review_insights.models.report_model import utcnow
from review_insights.models.user_session_model import UserSession
from review_insights.utils.identifiers import IdGenerator, UuidIdGenerator

logger = logging.getLogger(__name__)

DEFAULT_DEVICE_NAME = "Web Browser"


def normalize_email(email: Any) -> str:
	"""Lower-case and strip an email, rejecting anything without an ``@``."""
	if not isinstance(email, str) or "@" not in email:
		raise ValidationError("Valid email is required")
	return email.strip().lower()


def _find_by_email(db: Session, email: str) -> UserSession | None:
	return db.execute(select(UserSession).where(UserSession.email == email)).scalars().first()


def signup(db: Session, email: Any, id_generator: IdGenerator | None = None) -> tuple[UserSession, bool]:
	"""Return the identity for ``email``, creating it on first signup.

	Signing up twice is not an error: the existing record comes back and the
	second element of the tuple is False.
	"""
	normalized = normalize_email(email)
	existing = _find_by_email(db, normalized)
	if existing is not None:
		return existing, False

	generator = id_generator or UuidIdGenerator()
	now = utcnow()
	user_session = UserSession(
		user_id=generator.new_user_id(),
		email=normalized,
		session_id=generator.new_session_id(),
		device_id=generator.new_device_id(),
		device_name=DEFAULT_DEVICE_NAME,
		is_active=True,
		last_activity=now,
	)
	db.add(user_session)
	db.commit()
	db.refresh(user_session)
	logger.info("User session created | user_id=%s", user_session.user_id)
	return user_session, True


def login(db: Session, email: Any) -> UserSession:
	normalized = normalize_email(email)
	user_session = _find_by_email(db, normalized)
	if user_session is None:
		raise NotFoundError("User not found. Please sign up first.")

	user_session.is_active = True
	user_session.last_activity = utcnow()
	db.commit()
	db.refresh(user_session)
	return user_session


def logout(db: Session, user_id: Any) -> UserSession:
	if not user_id or not isinstance(user_id, str):
		raise ValidationError("User ID is required")
	user_session = db.execute(select(UserSession).where(UserSession.user_id == user_id)).scalars().first()
	if user_session is None:
		raise NotFoundError("User session not found")

	user_session.is_active = False
	db.commit()
	db.refresh(user_session)
	logger.info("User session deactivated | user_id=%s", user_id)
	return user_session


def verify(db: Session, user_id: Any, session_id: Any) -> UserSession:
	"""Succeed only for an active record matching both identifiers."""
	if not user_id or not session_id:
		raise ValidationError("User ID and Session ID are required")
	user_session = (
		db.execute(
			select(UserSession)
			.where(UserSession.user_id == str(user_id))
			.where(UserSession.session_id == str(session_id))
			.where(UserSession.is_active.is_(True))
		)
		.scalars()
		.first()
	)
	if user_session is None:
		raise UnauthorizedError("Invalid session")

	user_session.last_activity = utcnow()
	db.commit()
	db.refresh(user_session)
	return user_session


def serialize_user(user_session: UserSession) -> dict[str, str]:
	return {
		"userId": user_session.user_id,
		"email": user_session.email,
		"sessionId": user_session.session_id,
	}
