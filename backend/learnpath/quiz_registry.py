"""In-process registry of issued quiz attempts.

Each issued quiz gets an opaque instance id and a per-question exposed id.
The answer key stays here until the attempt is graded (one-shot) or the
instance outlives its TTL. Nothing in this module sends answer keys to
clients.
"""

from __future__ import annotations

import logging
import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Sequence

from .schemas import Question, QuestionEntry, QuizInstance

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 2 * 60 * 60


def _utcnow() -> datetime:
	return datetime.now(timezone.utc)


def new_instance_id() -> str:
	return secrets.token_urlsafe(18)


def exposed_id_for(instance_id: str, index: int) -> str:
	return f"{instance_id}-q{index}"


class QuizInstanceRegistry:
	"""Thread-safe map of instance id -> QuizInstance with TTL expiry.

	Handlers run both on the event loop and in the threadpool, so every
	read-modify-write happens under a plain `threading.Lock`.
	"""

	def __init__(
		self,
		ttl_seconds: int = DEFAULT_TTL_SECONDS,
		*,
		clock: Callable[[], datetime] = _utcnow,
		id_factory: Callable[[], str] = new_instance_id,
	) -> None:
		if ttl_seconds <= 0:
			raise ValueError("ttl_seconds must be positive")
		self.ttl = timedelta(seconds=ttl_seconds)
		self._clock = clock
		self._id_factory = id_factory
		self._instances: Dict[str, QuizInstance] = {}
		self._lock = threading.Lock()

	def __len__(self) -> int:
		with self._lock:
			return len(self._instances)

	def __contains__(self, instance_id: object) -> bool:
		with self._lock:
			return instance_id in self._instances

	def _is_expired(self, instance: QuizInstance, now: datetime, ttl: timedelta) -> bool:
		return instance.created_at < now - ttl

	def create(self, subject: str, questions: Sequence[Question]) -> QuizInstance:
		# Amortized cleanup; the background sweeper covers idle periods
		self.sweep_expired()
		with self._lock:
			instance_id = self._id_factory()
			while instance_id in self._instances:
				instance_id = self._id_factory()
			entries = tuple(
				QuestionEntry(
					exposed_id=exposed_id_for(instance_id, index),
					original_question_id=q.id,
					correct_option_index=q.correct_option_index,
					question_text=q.text,
					options=tuple(q.options),
					explanation=q.explanation,
				)
				for index, q in enumerate(questions)
			)
			instance = QuizInstance(
				instance_id=instance_id,
				subject=subject,
				created_at=self._clock(),
				entries=entries,
			)
			self._instances[instance_id] = instance
		logger.debug("Issued quiz instance %s for %s (%d questions)", instance_id, subject, len(entries))
		return instance

	def consume(self, instance_id: Optional[str]) -> Optional[QuizInstance]:
		"""Remove and return the instance, or None if unknown, consumed or expired."""
		if not instance_id:
			return None
		with self._lock:
			instance = self._instances.pop(instance_id, None)
		if instance is None:
			return None
		if self._is_expired(instance, self._clock(), self.ttl):
			logger.info("Quiz instance %s expired before grading", instance_id)
			return None
		return instance

	def restore(self, instance: QuizInstance) -> bool:
		"""Put a consumed instance back so the attempt can be graded again."""
		if self._is_expired(instance, self._clock(), self.ttl):
			return False
		with self._lock:
			if instance.instance_id in self._instances:
				return False
			self._instances[instance.instance_id] = instance
		return True

	def sweep_expired(self, now: Optional[datetime] = None, ttl: Optional[timedelta] = None) -> int:
		now = now or self._clock()
		ttl = self.ttl if ttl is None else ttl
		with self._lock:
			stale = [key for key, inst in self._instances.items() if self._is_expired(inst, now, ttl)]
			for key in stale:
				del self._instances[key]
		if stale:
			logger.info("Swept %d expired quiz instance(s)", len(stale))
		return len(stale)
