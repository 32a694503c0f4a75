"""Unit tests for quiz grading."""

from types import SimpleNamespace
from uuid import uuid4

from academy.services.user.quiz import grade_quiz, is_correct_answer


def question(correct, points=1):
    return SimpleNamespace(id=uuid4(), correct_answer=correct, points=points)


class TestIsCorrectAnswer:
    def test_case_and_whitespace_are_ignored(self):
        assert is_correct_answer("  Paris ", "paris")
        assert is_correct_answer("New   York", "new york")

    def test_empty_answer_is_wrong(self):
        assert not is_correct_answer(None, "a")
        assert not is_correct_answer("   ", "a")

    def test_different_answer(self):
        assert not is_correct_answer("true", "false")


class TestGradeQuiz:
    def test_scores_and_percentage(self):
        q1, q2, q3 = question("4", 2), question("true", 1), question("blue", 1)
        graded = grade_quiz(
            [q1, q2, q3], {str(q1.id): "4", str(q2.id): "False", str(q3.id): "BLUE"}
        )
        assert graded["score"] == 3
        assert graded["total_points"] == 4
        assert graded["percentage"] == 75.0
        assert [a["is_correct"] for a in graded["answers"]] == [True, False, True]

    def test_unanswered_counts_as_wrong(self):
        q1 = question("4")
        graded = grade_quiz([q1], {})
        assert graded["score"] == 0
        assert graded["answers"][0]["student_answer"] is None
        assert graded["answers"][0]["points_obtained"] == 0

    def test_rounds_to_two_decimals(self):
        qs = [question("a"), question("b"), question("c")]
        graded = grade_quiz(qs, {str(qs[0].id): "a"})
        assert graded["percentage"] == 33.33

    def test_no_points_gives_zero_percentage(self):
        graded = grade_quiz([question("a", points=0)], {})
        assert graded["percentage"] == 0
