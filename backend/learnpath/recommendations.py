"""Learning roadmap generation from assessment summaries.

The model is asked for a roadmap; anything unusable is replaced by a fixed
per-subject topic table so generation never fails for the user.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, NamedTuple, Sequence

from .errors import UpstreamGenerationError
from .gemini_client import GeminiClient
from .schemas import SkillLevel, TopicStatus

logger = logging.getLogger(__name__)

MAX_TOPICS = 12
MAX_TOPIC_ORDER = 1000
WEAK_SCORE_BELOW = 50
RESOURCE_TYPES = ("video", "article", "course", "documentation", "practice")
FALLBACK_OVERVIEW = (
	"Based on your assessment results, we've created a personalized learning path to help you improve your skills."
)
FALLBACK_DURATION = "4-6 weeks"


class Roadmap(NamedTuple):
	overview: str
	estimated_duration: str
	topics: List[Dict[str, Any]]
	is_ai_generated: bool

	def as_dict(self) -> Dict[str, Any]:
		return {"overview": self.overview, "estimatedDuration": self.estimated_duration, "topics": self.topics}


def _res(title: str, url: str, type_: str) -> Dict[str, Any]:
	return {"title": title, "url": url, "type": type_}


FALLBACK_TOPICS: Dict[str, List[Dict[str, Any]]] = {
	"javascript": [
		{
			"title": "JavaScript Fundamentals",
			"description": "Core JavaScript concepts including variables, functions, and control flow",
			"difficulty": "beginner",
			"resources": [
				_res("JavaScript Basics - MDN", "https://developer.mozilla.org/en-US/docs/Learn/JavaScript/First_steps", "documentation"),
				_res("JavaScript Course - freeCodeCamp", "https://www.freecodecamp.org/learn/javascript-algorithms-and-data-structures/", "course"),
			],
		},
		{
			"title": "ES6+ Features",
			"description": "Modern JavaScript features including arrow functions, destructuring, and modules",
			"difficulty": "intermediate",
			"resources": [
				_res("ES6 Features Overview", "https://www.freecodecamp.org/news/write-less-do-more-with-javascript-es6-5fd4a8e50ee2/", "article"),
			],
		},
		{
			"title": "Asynchronous JavaScript",
			"description": "Promises, async/await, and handling asynchronous operations",
			"difficulty": "advanced",
			"resources": [
				_res("Async JavaScript - MDN", "https://developer.mozilla.org/en-US/docs/Learn/JavaScript/Asynchronous", "documentation"),
			],
		},
	],
	"databases": [
		{
			"title": "Database Fundamentals",
			"description": "Understanding relational and non-relational databases",
			"difficulty": "beginner",
			"resources": [
				_res("Database Design Course", "https://www.freecodecamp.org/news/database-design-course/", "course"),
			],
		},
		{
			"title": "MongoDB Essentials",
			"description": "Working with MongoDB, documents, and queries",
			"difficulty": "intermediate",
			"resources": [
				_res("MongoDB University", "https://learn.mongodb.com/", "course"),
			],
		},
		{
			"title": "Indexing and Query Performance",
			"description": "Indexes, query plans and transaction isolation",
			"difficulty": "advanced",
			"resources": [
				_res("Use The Index, Luke", "https://use-the-index-luke.com/", "article"),
			],
		},
	],
	"react": [
		{
			"title": "React Basics",
			"description": "Components, JSX, and React fundamentals",
			"difficulty": "beginner",
			"resources": [
				_res("React Documentation", "https://react.dev/learn", "documentation"),
			],
		},
		{
			"title": "React Hooks",
			"description": "useState, useEffect, and custom hooks",
			"difficulty": "intermediate",
			"resources": [
				_res("React Hooks Guide", "https://react.dev/reference/react/hooks", "documentation"),
			],
		},
		{
			"title": "State Management and Performance",
			"description": "Context, reducers, memoization and rendering performance",
			"difficulty": "advanced",
			"resources": [
				_res("Managing State", "https://react.dev/learn/managing-state", "documentation"),
			],
		},
	],
	"nodejs": [
		{
			"title": "Node.js Basics",
			"description": "Understanding Node.js runtime and core modules",
			"difficulty": "beginner",
			"resources": [
				_res("Node.js Tutorial", "https://nodejs.org/en/learn/getting-started/introduction-to-nodejs", "documentation"),
			],
		},
		{
			"title": "Express.js Framework",
			"description": "Building REST APIs with Express",
			"difficulty": "intermediate",
			"resources": [
				_res("Express.js Guide", "https://expressjs.com/en/starter/installing.html", "documentation"),
			],
		},
		{
			"title": "Streams and the Event Loop",
			"description": "Streams, buffers and keeping the event loop responsive",
			"difficulty": "advanced",
			"resources": [
				_res("Node.js Streams", "https://nodejs.org/api/stream.html", "documentation"),
			],
		},
	],
}


def _fallback_topics_for(subject: str, is_weak: bool, start_order: int) -> List[Dict[str, Any]]:
	topics = []
	for index, topic in enumerate(FALLBACK_TOPICS.get(subject, [])):
		topics.append({
			"id": f"{subject}-{index + 1}",
			"title": topic["title"],
			"description": topic["description"],
			"subject": subject,
			"difficulty": topic["difficulty"],
			"estimatedTime": "1-2 weeks" if is_weak else "3-5 days",
			"order": start_order + index,
			"prerequisites": [f"{subject}-{index}"] if index > 0 else [],
			"resources": [{**r, "duration": "Self-paced", "isFree": True} for r in topic["resources"]],
		})
	return topics


def fallback_learning_path(summaries: Sequence[Dict[str, Any]]) -> Roadmap:
	"""Deterministic roadmap: weakest subject first, three fixed topics each.

	`summaries` are most recent first; only the latest result per subject counts.
	"""
	latest: Dict[str, Dict[str, Any]] = {}
	for summary in summaries:
		latest.setdefault(summary.get("subject"), summary)
	ordered = sorted(latest.values(), key=lambda s: (s.get("score", 0), str(s.get("subject"))))
	topics: List[Dict[str, Any]] = []
	order = 1
	for summary in ordered:
		subject_topics = _fallback_topics_for(summary.get("subject"), summary.get("score", 0) < WEAK_SCORE_BELOW, order)
		topics.extend(subject_topics)
		order += len(subject_topics)
	return Roadmap(FALLBACK_OVERVIEW, FALLBACK_DURATION, topics[:MAX_TOPICS], False)


def _build_roadmap_prompt(summaries: Sequence[Dict[str, Any]]) -> str:
	return (
		"You are an expert learning path designer. Based on these assessment results, create a personalized roadmap.\n\n"
		f"Assessment results:\n{json.dumps(list(summaries), indent=2)}\n\n"
		"Produce 8-12 topics. Weak areas (low scores) get foundational topics, strong areas get advanced ones.\n"
		"Express prerequisites as ids of earlier topics. Prefer real, free resources (MDN, official docs, freeCodeCamp).\n\n"
		"Return ONLY JSON, no markdown:\n"
		'{"overview": "...", "estimatedDuration": "...", "topics": [{"id": "topic-1", "title": "...", '
		'"description": "...", "subject": "javascript|databases|react|nodejs|general", '
		'"difficulty": "beginner|intermediate|advanced", "estimatedTime": "...", "order": 1, "prerequisites": [], '
		'"resources": [{"title": "...", "url": "https://...", "type": "video|article|course|documentation|practice", '
		'"duration": "...", "isFree": true}]}]}'
	)


def _text(value: Any, default: str) -> str:
	return value.strip() if isinstance(value, str) and value.strip() else default


def _choice(value: Any, allowed: Sequence[str], default: str) -> str:
	return value if isinstance(value, str) and value in allowed else default


def _normalize_resource(raw: Any) -> Dict[str, Any] | None:
	if not isinstance(raw, dict):
		return None
	title = _text(raw.get("title"), "")
	url = _text(raw.get("url"), "")
	if not title or not url:
		return None
	is_free = raw.get("isFree", True)
	return {
		"title": title,
		"url": url,
		"type": _choice(raw.get("type"), RESOURCE_TYPES, "article"),
		"duration": _text(raw.get("duration"), "Self-paced"),
		"isFree": is_free if isinstance(is_free, bool) else True,
	}


def _normalize_roadmap(data: Any) -> Roadmap:
	if not isinstance(data, dict) or not isinstance(data.get("topics"), list):
		raise UpstreamGenerationError("Roadmap output has no topics array")
	levels = tuple(level.value for level in SkillLevel)
	topics: List[Dict[str, Any]] = []
	for index, raw in enumerate(data["topics"]):
		if not isinstance(raw, dict) or not _text(raw.get("title"), ""):
			continue
		order = raw.get("order")
		if isinstance(order, bool) or not isinstance(order, int) or not 1 <= order <= MAX_TOPIC_ORDER:
			order = index + 1
		prerequisites = raw.get("prerequisites")
		resources = raw.get("resources") if isinstance(raw.get("resources"), list) else []
		topics.append({
			"id": _text(raw.get("id"), f"topic-{index + 1}"),
			"title": raw["title"].strip(),
			"description": _text(raw.get("description"), ""),
			"subject": _text(raw.get("subject"), "general"),
			"difficulty": _choice(raw.get("difficulty"), levels, SkillLevel.INTERMEDIATE.value),
			"estimatedTime": _text(raw.get("estimatedTime"), "1 week"),
			"order": order,
			"prerequisites": [p for p in prerequisites if isinstance(p, str)] if isinstance(prerequisites, list) else [],
			"resources": [r for r in (_normalize_resource(x) for x in resources) if r is not None],
		})
	if not topics:
		raise UpstreamGenerationError("Roadmap output contained no usable topics")
	return Roadmap(
		overview=_text(data.get("overview"), FALLBACK_OVERVIEW),
		estimated_duration=_text(data.get("estimatedDuration"), FALLBACK_DURATION),
		topics=topics[:MAX_TOPICS],
		is_ai_generated=True,
	)


async def generate_learning_path(summaries: Sequence[Dict[str, Any]]) -> Roadmap:
	try:
		async with GeminiClient() as client:
			data = await client.generate_json(_build_roadmap_prompt(summaries))
		return _normalize_roadmap(data)
	except UpstreamGenerationError as err:
		logger.warning("Roadmap generation failed, using fallback topics: %s", err)
		return fallback_learning_path(summaries)


FALLBACK_NEXT_STEPS = {
	"message": "Great progress! Keep going!",
	"nextSteps": ["Continue with the next topic in your path"],
	"focusTopic": None,
}


async def next_recommendations(topics: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
	completed = [t["title"] for t in topics if t.get("status") == TopicStatus.COMPLETED.value]
	remaining = [t["title"] for t in topics if t.get("status") != TopicStatus.COMPLETED.value]
	prompt = (
		"Based on the learner's progress, suggest what to focus on next.\n"
		f"Completed topics: {', '.join(completed) or 'none'}\n"
		f"Remaining topics: {', '.join(remaining) or 'none'}\n\n"
		"Give a brief motivational message and 2-3 specific next steps. Return ONLY JSON:\n"
		'{"message": "...", "nextSteps": ["..."], "focusTopic": "..."}'
	)
	try:
		async with GeminiClient() as client:
			data = await client.generate_json(prompt)
		if not isinstance(data, dict) or not isinstance(data.get("message"), str):
			raise UpstreamGenerationError("Next-steps output is missing a message")
		steps = data.get("nextSteps")
		return {
			"message": data["message"],
			"nextSteps": [s for s in steps if isinstance(s, str)] if isinstance(steps, list) else [],
			"focusTopic": data.get("focusTopic") if isinstance(data.get("focusTopic"), str) else None,
		}
	except UpstreamGenerationError as err:
		logger.warning("Next-step recommendation failed: %s", err)
		fallback = dict(FALLBACK_NEXT_STEPS, nextSteps=list(FALLBACK_NEXT_STEPS["nextSteps"]))
		if remaining:
			fallback["focusTopic"] = remaining[0]
		return fallback
