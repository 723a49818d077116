from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import InputValidationError, NotFoundError, PersistenceError
from .grading import rounded_percentage
from .models import LearningPath, LearningPathTopic
from .recommendations import Roadmap
from .schemas import TopicStatus

logger = logging.getLogger(__name__)

_STATUSES = {s.value for s in TopicStatus}


def _commit(db: Session, what: str) -> None:
	try:
		db.commit()
	except SQLAlchemyError as err:
		db.rollback()
		logger.error("Failed to %s: %s", what, err)
		raise PersistenceError("Server error") from err


def recompute_progress(path: LearningPath) -> None:
	completed = sum(1 for t in path.topics if t.status == TopicStatus.COMPLETED.value)
	path.completed_topics = completed
	path.total_topics = len(path.topics)
	path.progress_percentage = rounded_percentage(completed, path.total_topics)
	path.last_updated = datetime.utcnow()


def save_learning_path(db: Session, username: str, roadmap: Roadmap) -> LearningPath:
	"""Store `roadmap` as the user's path, replacing any previous one."""
	path = db.get(LearningPath, username)
	now = datetime.utcnow()
	if path is None:
		path = LearningPath(username=username)
		db.add(path)
	path.topics = [
		LearningPathTopic(
			position=position,
			topic_key=topic["id"],
			title=topic["title"],
			description=topic.get("description", ""),
			subject=topic.get("subject"),
			difficulty=topic.get("difficulty"),
			estimated_time=topic.get("estimatedTime"),
			order=topic.get("order", position + 1),
			prerequisites_json=json.dumps(topic.get("prerequisites", [])),
			resources_json=json.dumps(topic.get("resources", [])),
			status=TopicStatus.NOT_STARTED.value,
		)
		for position, topic in enumerate(roadmap.topics)
	]
	path.overview = roadmap.overview
	path.estimated_duration = roadmap.estimated_duration
	path.ai_recommendations = json.dumps(roadmap.as_dict())
	path.is_ai_generated = roadmap.is_ai_generated
	path.generated_at = now
	recompute_progress(path)
	_commit(db, f"store learning path for {username}")
	db.refresh(path)
	return path


def get_learning_path(db: Session, username: str) -> LearningPath:
	path = db.get(LearningPath, username)
	if path is None:
		raise NotFoundError("No learning path found. Complete an assessment to generate one.")
	return path


def update_topic_progress(db: Session, username: str, index: int, status: str) -> LearningPath:
	path = db.get(LearningPath, username)
	if path is None:
		raise NotFoundError("Learning path not found")
	if index < 0 or index >= len(path.topics):
		raise InputValidationError("Invalid topic index")
	if status not in _STATUSES:
		raise InputValidationError(f"status must be one of {sorted(_STATUSES)}")
	topic = path.topics[index]
	topic.status = status
	topic.completed_at = datetime.utcnow() if status == TopicStatus.COMPLETED.value else None
	recompute_progress(path)
	_commit(db, f"update progress for {username}")
	db.refresh(path)
	return path


def reset_learning_path(db: Session, username: str) -> bool:
	path = db.get(LearningPath, username)
	if path is None:
		return False
	db.delete(path)
	_commit(db, f"reset learning path for {username}")
	return True


def serialize_topic(topic: LearningPathTopic) -> Dict[str, Any]:
	return {
		"id": topic.topic_key,
		"title": topic.title,
		"description": topic.description,
		"subject": topic.subject,
		"difficulty": topic.difficulty,
		"estimatedTime": topic.estimated_time,
		"order": topic.order,
		"status": topic.status,
		"prerequisites": json.loads(topic.prerequisites_json or "[]"),
		"resources": json.loads(topic.resources_json or "[]"),
		"completedAt": topic.completed_at.isoformat() if topic.completed_at else None,
	}


def progress_summary(path: LearningPath) -> Dict[str, int]:
	return {
		"completed": path.completed_topics,
		"total": path.total_topics,
		"percentage": path.progress_percentage,
	}


def serialize_learning_path(path: LearningPath) -> Dict[str, Any]:
	return {
		"overview": path.overview,
		"estimatedDuration": path.estimated_duration,
		"isAIGenerated": path.is_ai_generated,
		"topics": [serialize_topic(t) for t in path.topics],
		"totalTopics": path.total_topics,
		"completedTopics": path.completed_topics,
		"progressPercentage": path.progress_percentage,
		"generatedAt": path.generated_at.isoformat() if path.generated_at else None,
		"lastUpdated": path.last_updated.isoformat() if path.last_updated else None,
	}
