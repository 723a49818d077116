# =============================================================================
# Grading engine: score, skill tier, instanced and static resolution
# =============================================================================

import pytest

from learnpath.grading import (
	ResolutionSource,
	grade,
	resolve_question_set,
	rounded_percentage,
	skill_level_for,
)
from learnpath.question_bank import static_questions
from learnpath.quiz_registry import QuizInstanceRegistry
from learnpath.schemas import SkillLevel, SubmittedAnswer


@pytest.fixture
def questions():
	return static_questions("javascript")


@pytest.fixture
def instance(clock, questions):
	return QuizInstanceRegistry(clock=clock).create("javascript", questions)


def _answers(instance, correct_count):
	"""Answer every entry, the first `correct_count` of them correctly."""
	answers = []
	for index, entry in enumerate(instance.entries):
		selected = entry.correct_option_index
		if index >= correct_count:
			selected = (selected + 1) % 4
		answers.append(SubmittedAnswer(exposed_id=entry.exposed_id, selected_option_index=selected))
	return answers


class TestSkillLevel:
	@pytest.mark.parametrize(
		"score,expected",
		[
			(0, SkillLevel.BEGINNER),
			(39, SkillLevel.BEGINNER),
			(40, SkillLevel.INTERMEDIATE),
			(74, SkillLevel.INTERMEDIATE),
			(75, SkillLevel.ADVANCED),
			(100, SkillLevel.ADVANCED),
		],
	)
	def test_boundaries(self, score, expected):
		assert skill_level_for(score) == expected


class TestRoundedPercentage:
	@pytest.mark.parametrize(
		"part,whole,expected",
		[(1, 8, 13), (1, 3, 33), (2, 3, 67), (5, 10, 50), (1, 200, 1), (0, 10, 0), (10, 10, 100), (3, 0, 0)],
	)
	def test_half_up(self, part, whole, expected):
		assert rounded_percentage(part, whole) == expected


class TestInstancedGrading:
	def test_eight_of_ten_is_advanced(self, instance):
		result = grade("javascript", _answers(instance, 8), instance, [])

		assert result.score == 80
		assert result.correct_count == 8
		assert result.total_questions == 10
		assert result.skill_level == SkillLevel.ADVANCED
		assert result.instanced is True

	@pytest.mark.parametrize("correct", range(11))
	def test_score_matches_formula(self, instance, correct):
		result = grade("javascript", _answers(instance, correct), instance, [])

		assert 0 <= result.score <= 100
		assert result.score == round(100 * correct / 10)
		assert result.skill_level == skill_level_for(result.score)

	def test_missing_answers_still_count_full_total(self, instance):
		answers = _answers(instance, 3)[:3]

		result = grade("javascript", answers, instance, [])

		assert result.total_questions == 10
		assert result.score == 30
		unanswered = result.per_question[3:]
		assert all(r.selected_option_index is None and not r.is_correct for r in unanswered)

	def test_review_keeps_issued_order(self, instance):
		answers = list(reversed(_answers(instance, 10)))

		result = grade("javascript", answers, instance, [])

		assert [r.question_id for r in result.per_question] == [e.exposed_id for e in instance.entries]
		assert [r.original_question_id for r in result.per_question] == [
			e.original_question_id for e in instance.entries
		]

	def test_out_of_range_selection_is_incorrect_not_error(self, instance):
		entry = instance.entries[0]
		answers = [
			SubmittedAnswer(exposed_id=entry.exposed_id, selected_option_index=7),
			SubmittedAnswer(exposed_id=instance.entries[1].exposed_id, selected_option_index=-1),
		]

		result = grade("javascript", answers, instance, [])

		assert result.correct_count == 0
		assert result.per_question[0].selected_option_index is None
		assert result.per_question[1].selected_option_index is None

	def test_first_answer_for_a_question_wins(self, instance):
		entry = instance.entries[0]
		wrong = (entry.correct_option_index + 1) % 4
		answers = [
			SubmittedAnswer(exposed_id=entry.exposed_id, selected_option_index=wrong),
			SubmittedAnswer(exposed_id=entry.exposed_id, selected_option_index=entry.correct_option_index),
		]

		result = grade("javascript", answers, instance, [])

		assert result.correct_count == 0
		assert result.per_question[0].selected_option_index == wrong

	def test_unknown_ids_are_ignored(self, instance):
		answers = [SubmittedAnswer(exposed_id="js-1", selected_option_index=2)]

		result = grade("javascript", answers, instance, static_questions("javascript"))

		assert result.correct_count == 0
		assert result.total_questions == 10

	def test_instance_subject_is_authoritative(self, instance):
		result = grade("react", _answers(instance, 10), instance, [])

		assert result.subject == "javascript"


class TestStaticFallback:
	def test_unknown_instance_grades_by_raw_id(self, questions):
		answers = [
			SubmittedAnswer(exposed_id=q.id, selected_option_index=q.correct_option_index)
			for q in questions[:6]
		]

		result = grade("javascript", answers, None, questions)

		assert result.instanced is False
		assert result.total_questions == len(questions)
		assert result.correct_count == 6
		assert result.score == 60
		assert result.skill_level == SkillLevel.INTERMEDIATE

	def test_exposed_ids_do_not_match_static_set(self, instance, questions):
		result = grade("javascript", _answers(instance, 10), None, questions)

		assert result.correct_count == 0
		assert result.score == 0
		assert result.skill_level == SkillLevel.BEGINNER

	def test_resolution_source_is_tagged(self, instance, questions):
		assert {q.source for q in resolve_question_set(instance, questions)} == {ResolutionSource.INSTANCED}
		assert {q.source for q in resolve_question_set(None, questions)} == {ResolutionSource.STATIC_FALLBACK}

	def test_empty_question_set_scores_zero(self):
		result = grade("unknown", [SubmittedAnswer(exposed_id="x", selected_option_index=0)], None, [])

		assert result.total_questions == 0
		assert result.score == 0

	def test_explanations_have_a_default(self, clock):
		from learnpath.schemas import Question

		q = Question(id="x-1", text="?", options=("a", "b", "c", "d"), correct_option_index=0)
		result = grade("x", [], None, [q])

		assert result.per_question[0].explanation == "Review the topic for more details."
