"""Create a demo account with two finished assessments.

Usage: python -m learnpath.seed
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from sqlalchemy.orm import Session

from .assessment_store import record_assessment
from .db import Base, SessionLocal, engine
from .grading import grade
from .logging_config import configure_logging
from .models import Assessment, AuthSession, AuthUser, LearningPath
from .question_bank import get_subject
from .routers.auth import hash_password
from .schemas import SubmittedAnswer

logger = logging.getLogger(__name__)

DEMO_USERNAME = "demo"
DEMO_PASSWORD = "demo123"
DEMO_EMAIL = "demo@learningpath.com"

# (subject, indexes of questions answered wrongly, seconds taken)
DEMO_ATTEMPTS: List[Tuple[str, Tuple[int, ...], int]] = [
	("javascript", (5, 8), 420),
	("databases", (4, 6, 9), 380),
]


def _demo_answers(subject: str, wrong: Tuple[int, ...]) -> List[SubmittedAnswer]:
	answers = []
	for index, q in enumerate(get_subject(subject).questions):
		selected = q.correct_option_index
		if index in wrong:
			selected = (selected + 1) % len(q.options)
		answers.append(SubmittedAnswer(exposed_id=q.id, selected_option_index=selected))
	return answers


def seed_demo(db: Session) -> AuthUser:
	for model in (Assessment, AuthSession):
		db.query(model).filter(model.username == DEMO_USERNAME).delete()
	existing_path = db.get(LearningPath, DEMO_USERNAME)
	if existing_path is not None:
		db.delete(existing_path)
	user = db.get(AuthUser, DEMO_USERNAME)
	if user is None:
		user = AuthUser(username=DEMO_USERNAME)
		db.add(user)
	user.password_hash = hash_password(DEMO_PASSWORD)
	user.email = DEMO_EMAIL
	db.commit()

	for subject, wrong, seconds in DEMO_ATTEMPTS:
		info = get_subject(subject)
		result = grade(subject, _demo_answers(subject, wrong), None, info.questions, time_taken_seconds=seconds)
		record_assessment(db, DEMO_USERNAME, result)
		logger.info("Seeded %s assessment: %d%% (%s)", subject, result.score, result.skill_level.value)
	return user


def main() -> None:
	configure_logging()
	Base.metadata.create_all(bind=engine)
	db = SessionLocal()
	try:
		seed_demo(db)
	finally:
		db.close()
	logger.info("Demo user ready: %s / %s", DEMO_USERNAME, DEMO_PASSWORD)


if __name__ == "__main__":
	main()
