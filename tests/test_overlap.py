"""
Tests for the slot arithmetic used by the scheduler.
"""
import itertools
import pytest

from ruralcare.exceptions import ValidationError
from ruralcare.services.scheduling_service import (
    normalize_duration,
    parse_calendar_date,
    parse_clock_time,
    times_overlap,
)


class TestTimesOverlap:
    def test_adjacent_slots_do_not_overlap(self):
        assert times_overlap("10:00", 30, "10:30", 30) is False

    def test_partial_overlap(self):
        assert times_overlap("10:00", 30, "10:15", 30) is True

    def test_last_minute_overlap(self):
        assert times_overlap("09:00", 60, "09:59", 30) is True

    def test_contained_slot_overlaps(self):
        assert times_overlap("09:00", 60, "09:15", 30) is True

    def test_identical_slots_overlap(self):
        assert times_overlap("14:00", 30, "14:00", 30) is True

    def test_earlier_slot_ending_at_start(self):
        assert times_overlap("10:30", 30, "10:00", 30) is False

    def test_commutative(self):
        starts = ["08:00", "08:30", "08:45", "09:00", "09:30"]
        durations = [30, 60]
        for (a, da), (b, db) in itertools.product(itertools.product(starts, durations), repeat=2):
            assert times_overlap(a, da, b, db) == times_overlap(b, db, a, da)


class TestParsing:
    def test_time_is_zero_padded(self):
        assert parse_clock_time("9:05") == "09:05"
        assert parse_clock_time("23:59") == "23:59"

    @pytest.mark.parametrize("value", ["", "noon", "24:00", "10:60", "10-30", "10:3", None])
    def test_malformed_time_rejected(self, value):
        with pytest.raises(ValidationError):
            parse_clock_time(value)

    def test_date_accepted(self):
        assert parse_calendar_date("2025-10-28") == "2025-10-28"

    @pytest.mark.parametrize("value", ["2025-13-01", "28/10/2025", "2025-1-1", "", None])
    def test_malformed_date_rejected(self, value):
        with pytest.raises(ValidationError):
            parse_calendar_date(value)

    @pytest.mark.parametrize("value,expected", [
        (60, 60), ("60", 60), (30, 30), (None, 30), (45, 30), ("abc", 30), (90, 30),
    ])
    def test_duration_normalization(self, value, expected):
        assert normalize_duration(value) == expected
