"""Unit tests for plan to course matching."""

from types import SimpleNamespace

from academy.services.shares.course_access import course_matches_plan


def course(curriculum="egyptian", grade="grade-5", level=None):
    return SimpleNamespace(
        target_curriculum=curriculum, target_grade=grade, target_level=level
    )


def plan(curriculum="egyptian", grade="grade-5", level=None, language=None):
    return SimpleNamespace(
        curriculum=curriculum, grade=grade, level=level, language=language
    )


class TestCourseMatchesPlan:
    def test_same_targets_match(self):
        assert course_matches_plan(course(), plan())

    def test_different_curriculum(self):
        assert not course_matches_plan(course(curriculum="british"), plan())

    def test_different_grade(self):
        assert not course_matches_plan(course(grade="grade-6"), plan())

    def test_null_plan_fields_match_anything(self):
        assert course_matches_plan(course("british", "grade-9"), plan(None, None))

    def test_level_is_lenient_when_either_side_is_null(self):
        assert course_matches_plan(course(level="advanced"), plan(level=None))
        assert course_matches_plan(course(level=None), plan(level="advanced"))

    def test_level_mismatch(self):
        assert not course_matches_plan(course(level="basic"), plan(level="advanced"))

    def test_language_is_ignored(self):
        assert course_matches_plan(course(), plan(language="arabic"))
