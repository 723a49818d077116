from __future__ import annotations

import logging
import random
import uuid
from typing import Any, List, NamedTuple

from .errors import NotFoundError, UpstreamGenerationError
from .gemini_client import GeminiClient
from .question_bank import SubjectInfo, get_subject
from .schemas import Question

logger = logging.getLogger(__name__)

AI_TIME_LIMIT_SECONDS = 600


class GeneratedQuiz(NamedTuple):
	subject: str
	title: str
	description: str
	time_limit: int
	questions: List[Question]
	is_ai_generated: bool


def _build_quiz_prompt(info: SubjectInfo, count: int) -> str:
	return (
		f"You are an expert quiz writer. Create {count} unique multiple-choice questions for a {info.title} skill assessment.\n"
		f"Topics to cover: {info.topics}\n"
		f"Random seed: {uuid.uuid4().hex} (use it to vary the questions between requests)\n\n"
		"Requirements:\n"
		"- Mix difficulties: roughly 30% easy, 40% medium, 30% hard.\n"
		"- Exactly 4 options per question; only ONE is correct.\n"
		"- Test practical understanding, include short code snippets where useful.\n"
		"- Avoid the most common textbook questions.\n\n"
		"Return ONLY JSON, no markdown, in this shape:\n"
		'{"questions": [{"question": "...", "options": ["A", "B", "C", "D"], '
		'"correctAnswer": 0, "explanation": "...", "difficulty": "easy|medium|hard"}]}'
	)


def _parse_questions(data: Any, subject: str, count: int) -> List[Question]:
	items = data.get("questions") if isinstance(data, dict) else data
	if not isinstance(items, list):
		raise UpstreamGenerationError("Model output has no questions array")
	batch = uuid.uuid4().hex[:8]
	questions: List[Question] = []
	for raw in items:
		if len(questions) >= count:
			break
		if not isinstance(raw, dict):
			continue
		text = raw.get("question")
		options = raw.get("options")
		correct = raw.get("correctAnswer")
		if not isinstance(text, str) or not text.strip():
			continue
		if not isinstance(options, list) or len(options) != 4 or not all(isinstance(o, str) and o.strip() for o in options):
			continue
		if isinstance(correct, bool) or not isinstance(correct, int) or not 0 <= correct <= 3:
			continue
		explanation = raw.get("explanation")
		difficulty = raw.get("difficulty")
		questions.append(
			Question(
				id=f"{subject}-ai-{batch}-{len(questions)}",
				text=text.strip(),
				options=tuple(o.strip() for o in options),
				correct_option_index=correct,
				explanation=explanation.strip() if isinstance(explanation, str) else "",
				difficulty=difficulty if difficulty in ("easy", "medium", "hard") else "medium",
			)
		)
	if not questions:
		raise UpstreamGenerationError("Model output contained no usable questions")
	return questions


def fallback_quiz(info: SubjectInfo) -> GeneratedQuiz:
	return GeneratedQuiz(
		subject=info.id,
		title=info.title,
		description=info.description,
		time_limit=info.time_limit,
		questions=random.sample(info.questions, len(info.questions)),
		is_ai_generated=False,
	)


async def generate_quiz(subject: str, count: int = 10) -> GeneratedQuiz:
	"""Fresh AI-written questions for `subject`, or the static set if generation fails."""
	info = get_subject(subject)
	if info is None:
		raise NotFoundError("Subject not found")
	logger.info("Generating fresh quiz for %s", info.id)
	try:
		async with GeminiClient() as client:
			data = await client.generate_json(_build_quiz_prompt(info, count))
		questions = _parse_questions(data, info.id, count)
	except UpstreamGenerationError as err:
		logger.warning("Quiz generation for %s failed, serving static questions: %s", info.id, err)
		return fallback_quiz(info)
	return GeneratedQuiz(
		subject=info.id,
		title=f"{info.title} Assessment",
		description=f"AI-generated assessment to test your {info.title} knowledge",
		time_limit=AI_TIME_LIMIT_SECONDS,
		questions=questions,
		is_ai_generated=True,
	)
