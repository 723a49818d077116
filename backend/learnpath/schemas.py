"""Domain types shared by the quiz registry, grading and the stores."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class SkillLevel(str, Enum):
	BEGINNER = "beginner"
	INTERMEDIATE = "intermediate"
	ADVANCED = "advanced"


class TopicStatus(str, Enum):
	NOT_STARTED = "not_started"
	IN_PROGRESS = "in_progress"
	COMPLETED = "completed"


class Question(BaseModel):
	"""A multiple-choice question as produced by a question source.

	The answer key never leaves the server; see `client_view`.
	"""

	model_config = ConfigDict(frozen=True)

	id: str
	text: str
	options: Tuple[str, ...] = Field(min_length=4, max_length=4)
	correct_option_index: int = Field(ge=0, le=3)
	explanation: str = ""
	difficulty: str = "medium"


class QuestionEntry(BaseModel):
	model_config = ConfigDict(frozen=True)

	exposed_id: str
	original_question_id: str
	correct_option_index: int
	question_text: str
	options: Tuple[str, ...]
	explanation: str = ""

	def client_view(self) -> dict:
		return {"id": self.exposed_id, "question": self.question_text, "options": list(self.options)}


class QuizInstance(BaseModel):
	model_config = ConfigDict(frozen=True)

	instance_id: str
	subject: str
	created_at: datetime
	entries: Tuple[QuestionEntry, ...]


class SubmittedAnswer(BaseModel):
	# Unvalidated client input; range checks happen during grading
	exposed_id: str
	selected_option_index: Optional[int] = None


class QuestionReview(BaseModel):
	original_question_id: str
	question_id: str
	question_text: str
	options: List[str]
	correct_option_index: int
	selected_option_index: Optional[int]
	is_correct: bool
	explanation: str


class GradedResult(BaseModel):
	model_config = ConfigDict(frozen=True)

	subject: str
	score: int = Field(ge=0, le=100)
	correct_count: int
	total_questions: int
	time_taken_seconds: int = 0
	skill_level: SkillLevel
	per_question: Tuple[QuestionReview, ...]
	instanced: bool = True
