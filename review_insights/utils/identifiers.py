"""Opaque identifier generation for users, sessions and devices."""

from __future__ import annotations

import uuid
from typing import Protocol


class IdGenerator(Protocol):
	def new_user_id(self) -> str: ...

	def new_session_id(self) -> str: ...

	def new_device_id(self) -> str: ...


class UuidIdGenerator:
	"""Random UUID4 identifiers with a readable type prefix."""

	def _make(self, prefix: str) -> str:
		return f"{prefix}_{uuid.uuid4().hex}"

	def new_user_id(self) -> str:
		return self._make("user")

	def new_session_id(self) -> str:
		return self._make("session")

	def new_device_id(self) -> str:
		return self._make("device")


def parse_report_id(raw: str) -> uuid.UUID | None:
	"""Return the UUID for a report id, or None when it is malformed."""
	try:
		return uuid.UUID(str(raw).strip())
	except (TypeError, ValueError, AttributeError):
		return None
