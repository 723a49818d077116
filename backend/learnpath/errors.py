from __future__ import annotations


class LearnPathError(Exception):
	"""Base error carrying the HTTP status it maps to."""

	status_code: int = 500

	def __init__(self, message: str, *, status_code: int | None = None) -> None:
		super().__init__(message)
		self.message = message
		if status_code is not None:
			self.status_code = status_code


class NotFoundError(LearnPathError):
	status_code = 404


class InputValidationError(LearnPathError):
	status_code = 400


class UpstreamGenerationError(LearnPathError):
	"""The language model was unreachable or returned unusable content.

	Callers substitute static content; this never reaches a client.
	"""

	status_code = 502


class PersistenceError(LearnPathError):
	status_code = 500
