"""Error taxonomy shared by services and translated to HTTP responses in main."""

from __future__ import annotations


class ServiceError(Exception):
	"""Base class for errors that carry a client-safe message and HTTP status."""

	status_code: int = 500

	def __init__(self, message: str) -> None:
		super().__init__(message)
		self.message = message


class ValidationError(ServiceError):
	"""Raised for malformed or missing input."""

	status_code = 400


class UnauthorizedError(ServiceError):
	"""Raised when a session cannot be verified."""

	status_code = 401


class NotFoundError(ServiceError):
	"""Raised when no record matches the requested identifier."""

	status_code = 404


class UpstreamError(ServiceError):
	"""Raised when the external review provider fails or is misconfigured."""

	status_code = 500
