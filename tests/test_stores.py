# =============================================================================
# Assessment record store and learning path store
# =============================================================================

from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from learnpath.assessment_store import (
	get_assessment,
	list_assessments,
	record_assessment,
	serialize_assessment,
	summarize,
)
from learnpath.errors import InputValidationError, NotFoundError, PersistenceError
from learnpath.learning_path_store import (
	get_learning_path,
	reset_learning_path,
	save_learning_path,
	serialize_learning_path,
	update_topic_progress,
)
from learnpath.recommendations import fallback_learning_path
from learnpath.schemas import GradedResult, QuestionReview, SkillLevel


def _result(score=80, subject="javascript", skill_level=SkillLevel.ADVANCED):
	review = QuestionReview(
		original_question_id="js-1",
		question_id="abc-q0",
		question_text="?",
		options=["a", "b", "c", "d"],
		correct_option_index=2,
		selected_option_index=2,
		is_correct=True,
		explanation="",
	)
	skipped = review.model_copy(update={"original_question_id": "js-2", "selected_option_index": None, "is_correct": False})
	return GradedResult(
		subject=subject,
		score=score,
		correct_count=1,
		total_questions=2,
		time_taken_seconds=42,
		skill_level=skill_level,
		per_question=(review, skipped),
	)


class TestAssessmentStore:
	def test_record_and_serialize(self, db_session):
		row = record_assessment(db_session, "alice", _result())

		data = serialize_assessment(row)
		assert data["subject"] == "javascript"
		assert data["score"] == 80
		assert data["timeTaken"] == 42
		assert data["answers"] == [{"questionId": "js-1", "selectedOption": 2, "isCorrect": True}]
		assert len(data["results"]) == 2

	def test_skill_level_is_rederived_from_score(self, db_session):
		row = record_assessment(db_session, "alice", _result(score=40, skill_level=SkillLevel.ADVANCED))

		assert row.skill_level == "intermediate"

	def test_history_is_most_recent_first(self, db_session):
		older = record_assessment(db_session, "alice", _result(subject="react"))
		newer = record_assessment(db_session, "alice", _result(subject="nodejs"))
		older.completed_at = datetime.utcnow() - timedelta(days=1)
		db_session.commit()
		record_assessment(db_session, "bob", _result())

		rows = list_assessments(db_session, "alice")

		assert [r.id for r in rows] == [newer.id, older.id]
		assert summarize(rows)[0] == {
			"subject": "nodejs", "score": 80, "skillLevel": "advanced", "correctAnswers": 1, "totalQuestions": 2,
		}

	def test_refresh_failure_is_a_persistence_error(self, db_session, monkeypatch):
		def failing_refresh(*args, **kwargs):
			raise OperationalError("SELECT", {}, Exception("database is locked"))

		monkeypatch.setattr(db_session, "refresh", failing_refresh)

		with pytest.raises(PersistenceError):
			record_assessment(db_session, "alice", _result())

	def test_other_users_records_are_not_found(self, db_session):
		row = record_assessment(db_session, "alice", _result())

		assert get_assessment(db_session, "alice", row.id).id == row.id
		with pytest.raises(NotFoundError):
			get_assessment(db_session, "bob", row.id)
		with pytest.raises(NotFoundError):
			get_assessment(db_session, "alice", "missing")


@pytest.fixture
def roadmap():
	return fallback_learning_path([
		{"subject": "javascript", "score": 30},
		{"subject": "react", "score": 90},
	])


class TestLearningPathStore:
	def test_save_starts_every_topic_not_started(self, db_session, roadmap):
		path = save_learning_path(db_session, "alice", roadmap)

		data = serialize_learning_path(path)
		assert data["totalTopics"] == 6
		assert data["completedTopics"] == 0
		assert data["progressPercentage"] == 0
		assert {t["status"] for t in data["topics"]} == {"not_started"}
		assert data["topics"][1]["prerequisites"] == ["javascript-1"]

	def test_save_replaces_existing_path(self, db_session, roadmap):
		save_learning_path(db_session, "alice", roadmap)
		update_topic_progress(db_session, "alice", 0, "completed")

		smaller = fallback_learning_path([{"subject": "nodejs", "score": 60}])
		path = save_learning_path(db_session, "alice", smaller)

		assert [t.topic_key for t in path.topics] == ["nodejs-1", "nodejs-2", "nodejs-3"]
		assert path.completed_topics == 0

	def test_progress_is_recomputed(self, db_session, roadmap):
		save_learning_path(db_session, "alice", roadmap)

		update_topic_progress(db_session, "alice", 0, "completed")
		update_topic_progress(db_session, "alice", 1, "in_progress")
		path = update_topic_progress(db_session, "alice", 5, "completed")

		assert path.completed_topics == 2
		assert path.total_topics == 6
		assert path.progress_percentage == 33
		assert path.topics[0].completed_at is not None
		assert path.topics[1].completed_at is None

	def test_uncompleting_clears_completion(self, db_session, roadmap):
		save_learning_path(db_session, "alice", roadmap)
		update_topic_progress(db_session, "alice", 2, "completed")

		path = update_topic_progress(db_session, "alice", 2, "in_progress")

		assert path.topics[2].completed_at is None
		assert path.progress_percentage == 0

	@pytest.mark.parametrize("index", [-1, 6, 100])
	def test_out_of_range_index_is_rejected(self, db_session, roadmap, index):
		save_learning_path(db_session, "alice", roadmap)

		with pytest.raises(InputValidationError):
			update_topic_progress(db_session, "alice", index, "completed")

	def test_unknown_status_is_rejected(self, db_session, roadmap):
		save_learning_path(db_session, "alice", roadmap)

		with pytest.raises(InputValidationError):
			update_topic_progress(db_session, "alice", 0, "done")

	def test_missing_path(self, db_session):
		with pytest.raises(NotFoundError):
			get_learning_path(db_session, "alice")
		with pytest.raises(NotFoundError):
			update_topic_progress(db_session, "alice", 0, "completed")
		assert reset_learning_path(db_session, "alice") is False

	def test_reset_removes_path_and_topics(self, db_session, roadmap):
		from learnpath.models import LearningPathTopic

		save_learning_path(db_session, "alice", roadmap)

		assert reset_learning_path(db_session, "alice") is True
		assert db_session.query(LearningPathTopic).count() == 0
		with pytest.raises(NotFoundError):
			get_learning_path(db_session, "alice")
