"""Grading of submitted quiz answers.

Pure computation: no I/O. A submission is graded against the issued quiz
instance when the registry still holds it, otherwise against the static
question set of the subject (quizzes served before instances existed).
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Sequence

from .schemas import (
	GradedResult,
	Question,
	QuestionEntry,
	QuestionReview,
	QuizInstance,
	SkillLevel,
	SubmittedAnswer,
)

BEGINNER_BELOW = 40
ADVANCED_FROM = 75

DEFAULT_EXPLANATION = "Review the topic for more details."


def skill_level_for(score: int) -> SkillLevel:
	if score < BEGINNER_BELOW:
		return SkillLevel.BEGINNER
	if score < ADVANCED_FROM:
		return SkillLevel.INTERMEDIATE
	return SkillLevel.ADVANCED


def rounded_percentage(part: int, whole: int) -> int:
	"""round(100 * part / whole), halves rounded up; 0 when whole is 0."""
	if whole <= 0:
		return 0
	return (200 * part + whole) // (2 * whole)


class ResolutionSource(str, Enum):
	INSTANCED = "instanced"
	STATIC_FALLBACK = "static_fallback"


class ResolvedQuestion(NamedTuple):
	source: ResolutionSource
	# id the client answered with: exposed id, or the raw id for static quizzes
	answer_id: str
	original_question_id: str
	question_text: str
	options: Sequence[str]
	correct_option_index: int
	explanation: str

	@classmethod
	def instanced(cls, entry: QuestionEntry) -> "ResolvedQuestion":
		return cls(
			ResolutionSource.INSTANCED,
			entry.exposed_id,
			entry.original_question_id,
			entry.question_text,
			entry.options,
			entry.correct_option_index,
			entry.explanation,
		)

	@classmethod
	def static_fallback(cls, question: Question) -> "ResolvedQuestion":
		return cls(
			ResolutionSource.STATIC_FALLBACK,
			question.id,
			question.id,
			question.text,
			question.options,
			question.correct_option_index,
			question.explanation,
		)


def resolve_question_set(
	instance: Optional[QuizInstance],
	static_questions: Sequence[Question],
) -> List[ResolvedQuestion]:
	if instance is not None:
		return [ResolvedQuestion.instanced(entry) for entry in instance.entries]
	return [ResolvedQuestion.static_fallback(q) for q in static_questions]


def _valid_selection(selected: Optional[int], option_count: int) -> Optional[int]:
	# bool is an int subclass; a JSON true is not an option index
	if selected is None or isinstance(selected, bool):
		return None
	if 0 <= selected < option_count:
		return selected
	return None


def grade(
	subject: str,
	answers: Sequence[SubmittedAnswer],
	instance: Optional[QuizInstance],
	static_questions: Sequence[Question],
	*,
	time_taken_seconds: int = 0,
) -> GradedResult:
	questions = resolve_question_set(instance, static_questions)

	selections: Dict[str, Optional[int]] = {}
	for answer in answers:
		# first answer for a question wins
		if answer.exposed_id not in selections:
			selections[answer.exposed_id] = answer.selected_option_index

	reviews: List[QuestionReview] = []
	correct = 0
	for q in questions:
		selected = _valid_selection(selections.get(q.answer_id), len(q.options))
		is_correct = selected is not None and selected == q.correct_option_index
		if is_correct:
			correct += 1
		reviews.append(
			QuestionReview(
				original_question_id=q.original_question_id,
				question_id=q.answer_id,
				question_text=q.question_text,
				options=list(q.options),
				correct_option_index=q.correct_option_index,
				selected_option_index=selected,
				is_correct=is_correct,
				explanation=q.explanation or DEFAULT_EXPLANATION,
			)
		)

	total = len(questions)
	score = rounded_percentage(correct, total)
	return GradedResult(
		subject=instance.subject if instance is not None else subject,
		score=score,
		correct_count=correct,
		total_questions=total,
		time_taken_seconds=max(0, int(time_taken_seconds or 0)),
		skill_level=skill_level_for(score),
		per_question=tuple(reviews),
		instanced=instance is not None,
	)
