from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Dict, List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import NotFoundError, PersistenceError
from .grading import skill_level_for
from .models import Assessment
from .schemas import GradedResult

logger = logging.getLogger(__name__)


def review_payload(result: GradedResult) -> List[Dict[str, Any]]:
	return [
		{
			"questionId": r.question_id,
			"question": r.question_text,
			"options": r.options,
			"correctAnswer": r.correct_option_index,
			"selectedAnswer": r.selected_option_index,
			"isCorrect": r.is_correct,
			"explanation": r.explanation,
		}
		for r in result.per_question
	]


def record_assessment(db: Session, username: str, result: GradedResult) -> Assessment:
	# Re-derive the tier from the score so stored rows never disagree with it
	skill_level = skill_level_for(result.score)
	answers = [
		{
			"questionId": r.original_question_id,
			"selectedOption": r.selected_option_index,
			"isCorrect": r.is_correct,
		}
		for r in result.per_question
		if r.selected_option_index is not None
	]
	row = Assessment(
		id=uuid.uuid4().hex,
		username=username,
		subject=result.subject,
		score=result.score,
		total_questions=result.total_questions,
		correct_answers=result.correct_count,
		time_taken=result.time_taken_seconds,
		skill_level=skill_level.value,
		answers_json=json.dumps(answers),
		results_json=json.dumps(review_payload(result)),
	)
	try:
		db.add(row)
		db.commit()
		db.refresh(row)
	except SQLAlchemyError as err:
		db.rollback()
		logger.error("Failed to store assessment for %s: %s", username, err)
		raise PersistenceError("Server error") from err
	return row


def list_assessments(db: Session, username: str) -> List[Assessment]:
	return (
		db.query(Assessment)
		.filter(Assessment.username == username)
		.order_by(Assessment.completed_at.desc(), Assessment.id)
		.all()
	)


def get_assessment(db: Session, username: str, assessment_id: str) -> Assessment:
	row = db.get(Assessment, assessment_id)
	if row is None or row.username != username:
		raise NotFoundError("Assessment not found")
	return row


def summarize(assessments: Sequence[Assessment]) -> List[Dict[str, Any]]:
	return [
		{
			"subject": a.subject,
			"score": a.score,
			"skillLevel": a.skill_level,
			"correctAnswers": a.correct_answers,
			"totalQuestions": a.total_questions,
		}
		for a in assessments
	]


def serialize_assessment(row: Assessment) -> Dict[str, Any]:
	return {
		"id": row.id,
		"subject": row.subject,
		"score": row.score,
		"totalQuestions": row.total_questions,
		"correctAnswers": row.correct_answers,
		"timeTaken": row.time_taken,
		"skillLevel": row.skill_level,
		"answers": json.loads(row.answers_json or "[]"),
		"results": json.loads(row.results_json or "[]"),
		"completedAt": row.completed_at.isoformat() if row.completed_at else None,
	}
