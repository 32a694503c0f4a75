"""Unit tests for the small formatting helpers."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from academy.core.settings import settings
from academy.libs.formats.datetime import parse_hhmm, to_utc_naive
from academy.libs.formats.text import (
    first_name,
    normalize_answer,
    parent_email,
    public_storage_url,
)
from academy.services.parent.children import average_best_percentage
from academy.services.shares.timetables import DAY_NAMES, validate_time_range
from academy.services.user.dashboard import message_matches_student
from academy.services.user.livestreams import livestream_has_ended, livestream_status


class TestText:
    def test_normalize_answer(self):
        assert normalize_answer("  Hello\t World ") == "hello world"
        assert normalize_answer(None) == ""

    def test_parent_email_keeps_digits(self):
        assert parent_email("+20 100-123") == f"parent_20100123@{settings.PARENT_EMAIL_DOMAIN}"

    def test_first_name(self):
        assert first_name("  Omar Khaled ") == "Omar"

    def test_public_storage_url(self, monkeypatch):
        monkeypatch.setattr(settings, "R2_PUBLIC_URL", "https://cdn.example.com")
        assert public_storage_url("certs/a.png") == "https://cdn.example.com/certs/a.png"
        assert public_storage_url("https://x.example.com/a.png") == "https://x.example.com/a.png"
        assert public_storage_url("") is None


class TestDatetime:
    def test_parse_hhmm(self):
        assert parse_hhmm("09:30") == 570

    async def test_to_utc_naive(self):
        aware = datetime(2025, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert await to_utc_naive(aware) == datetime(2025, 1, 1, 10, 0)
        assert await to_utc_naive(None) is None


class TestTimeRange:
    def test_valid_range(self):
        validate_time_range("09:00", "10:30")

    @pytest.mark.parametrize(
        "start,end",
        [("10:00", "10:00"), ("11:00", "10:00"), ("9:00", "10:00"), ("24:00", "24:30")],
    )
    def test_rejected(self, start, end):
        with pytest.raises(HTTPException) as exc:
            validate_time_range(start, end)
        assert exc.value.status_code == 400

    def test_week_starts_on_sunday(self):
        assert DAY_NAMES[0] == "Sunday"
        assert len(DAY_NAMES) == 7


class TestMessageTargeting:
    def student(self, **kwargs):
        values = dict(curriculum="egyptian", curriculum_type=None, level=None, language=None, grade="grade-5")
        values.update(kwargs)
        return SimpleNamespace(**values)

    def message(self, **kwargs):
        values = dict(target_curriculum=None, target_level=None, target_language=None, target_grade=None)
        values.update(kwargs)
        return SimpleNamespace(**values)

    def test_untargeted_message_reaches_everyone(self):
        assert message_matches_student(self.message(), self.student())

    def test_every_target_must_match(self):
        msg = self.message(target_curriculum="egyptian", target_grade="grade-6")
        assert not message_matches_student(msg, self.student())

    def test_curriculum_type_only_counts_as_default_curriculum(self):
        student = self.student(curriculum=None, curriculum_type="national")
        assert message_matches_student(self.message(target_curriculum="egyptian"), student)


class TestLiveStreamTiming:
    def test_status_transitions(self):
        start = datetime(2025, 1, 1, 10, 0)
        stream = SimpleNamespace(scheduled_at=start, duration=60)
        assert livestream_status(stream, start - timedelta(minutes=1)) == "upcoming"
        assert livestream_status(stream, start + timedelta(minutes=30)) == "live"
        assert not livestream_has_ended(stream, start + timedelta(minutes=60))
        assert livestream_has_ended(stream, start + timedelta(minutes=61))
        assert livestream_status(stream, start + timedelta(minutes=61)) == "ended"


class TestParentAverage:
    def test_average_is_rounded(self):
        assert average_best_percentage({"a": 80, "b": 75.5}) == 78
        assert average_best_percentage({}) == 0
