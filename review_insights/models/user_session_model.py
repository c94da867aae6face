"""Persistence model for email-keyed user sessions."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from review_insights.database import Base
from review_insights.models.report_model import utcnow


class UserSession(Base):
	"""Identity record mapping an email to the user and session that own reports."""

	__tablename__ = "user_sessions"
	__table_args__ = (
		Index("ix_user_sessions_user_active", "user_id", "is_active"),
		Index("ix_user_sessions_email_active", "email", "is_active"),
	)

	id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
	user_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
	email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
	session_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
	device_id: Mapped[str] = mapped_column(String(64), nullable=False)
	device_name: Mapped[str] = mapped_column(String(120), nullable=False)
	is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
	last_activity: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
	created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
	updated_at: Mapped[datetime] = mapped_column(
		DateTime(timezone=True),
		nullable=False,
		default=utcnow,
		onupdate=utcnow,
	)
