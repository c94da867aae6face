"""Persistence model for stored code review reports."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, Float, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from review_insights.database import Base


def utcnow() -> datetime:
	return datetime.now(timezone.utc)


class Report(Base):
	"""One file's review outcome plus ownership and analysis metadata.

	``overall_score``, ``issue_count``, ``severity_tags`` and ``search_text``
	are derived from ``review`` at insert time so list filters run in SQL.
	Rows are never rewritten after creation.
	"""

	__tablename__ = "reports"
	__table_args__ = (
		Index("ix_reports_user_created", "user_id", "created_at"),
		Index("ix_reports_session_created", "session_id", "created_at"),
		Index("ix_reports_device_created", "device_id", "created_at"),
	)

	id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
	file_name: Mapped[str] = mapped_column(String(255), nullable=False)
	language: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
	original_code: Mapped[str] = mapped_column(Text, nullable=False)
	review: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

	overall_score: Mapped[float] = mapped_column(Float, nullable=False, index=True)
	issue_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
	severity_tags: Mapped[str] = mapped_column(String(64), nullable=False, default="")
	search_text: Mapped[str] = mapped_column(Text, nullable=False, default="")

	lines_of_code: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
	analysis_time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
	model_name: Mapped[str] = mapped_column(String(120), nullable=False)

	user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
	session_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
	device_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
	device_name: Mapped[str] = mapped_column(String(120), nullable=False)

	created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
	updated_at: Mapped[datetime] = mapped_column(
		DateTime(timezone=True),
		nullable=False,
		default=utcnow,
		onupdate=utcnow,
	)
