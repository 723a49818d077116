from __future__ import annotations
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from ..assessment_store import (
	get_assessment,
	list_assessments,
	record_assessment,
	review_payload,
	serialize_assessment,
)
from ..db import get_db
from ..errors import NotFoundError
from ..grading import grade
from ..question_bank import get_subject, list_subjects
from ..quiz_generator import generate_quiz
from ..quiz_registry import QuizInstanceRegistry
from ..schemas import SubmittedAnswer
from ..settings import settings
from .auth import User, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assessments", tags=["assessments"])


def get_quiz_registry(request: Request) -> QuizInstanceRegistry:
	return request.app.state.quiz_registry


class AnswerIn(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	question_id: str = Field(alias="questionId")
	selected_option: Optional[int] = Field(default=None, alias="selectedOption")


class SubmitRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	subject: str
	answers: List[AnswerIn] = Field(default_factory=list)
	time_taken: int = Field(default=0, alias="timeTaken")
	quiz_instance_id: Optional[str] = Field(default=None, alias="quizInstanceId")


@router.get("/subjects")
def subjects():
	return [
		{
			"id": info.id,
			"title": info.title,
			"description": info.description,
			"questionCount": settings.quiz_question_count,
			"timeLimit": info.time_limit,
		}
		for info in list_subjects()
	]


@router.get("/quiz/{subject}")
async def get_quiz(
	subject: str,
	user: User = Depends(get_current_user),
	registry: QuizInstanceRegistry = Depends(get_quiz_registry),
):
	quiz = await generate_quiz(subject, settings.quiz_question_count)
	instance = registry.create(quiz.subject, quiz.questions)
	return {
		"subject": quiz.subject,
		"title": quiz.title,
		"description": quiz.description,
		"timeLimit": quiz.time_limit,
		"quizInstanceId": instance.instance_id,
		"isAIGenerated": quiz.is_ai_generated,
		"questions": [entry.client_view() for entry in instance.entries],
	}


@router.post("/submit", status_code=201)
async def submit(
	req: SubmitRequest,
	user: User = Depends(get_current_user),
	db: Session = Depends(get_db),
	registry: QuizInstanceRegistry = Depends(get_quiz_registry),
):
	info = get_subject(req.subject)
	if info is None:
		raise NotFoundError("Subject not found")
	instance = registry.consume(req.quiz_instance_id)
	if instance is None and req.quiz_instance_id:
		logger.info("Quiz instance %s not available, grading against static answers", req.quiz_instance_id)
	elif instance is not None and instance.subject != info.id:
		logger.warning("Submission for %s used an instance issued for %s", info.id, instance.subject)
	answers = [SubmittedAnswer(exposed_id=a.question_id, selected_option_index=a.selected_option) for a in req.answers]
	result = grade(info.id, answers, instance, info.questions, time_taken_seconds=req.time_taken)
	try:
		row = record_assessment(db, user.username, result)
	except Exception:
		# Keep the attempt gradable if the record could not be written
		if instance is not None:
			registry.restore(instance)
		raise
	return {
		"assessmentId": row.id,
		"subject": result.subject,
		"score": result.score,
		"skillLevel": row.skill_level,
		"correctAnswers": result.correct_count,
		"totalQuestions": result.total_questions,
		"timeTaken": result.time_taken_seconds,
		"results": review_payload(result),
	}


@router.get("/history")
def history(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	return [serialize_assessment(row) for row in list_assessments(db, user.username)]


@router.get("/{assessment_id}")
def assessment_detail(assessment_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	return serialize_assessment(get_assessment(db, user.username, assessment_id))
