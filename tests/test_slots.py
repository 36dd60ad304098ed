"""
Tests for slot generation.
"""

from datetime import date, time

import pytest

from clinic_api.scheduling import Slot, WorkingWindow, generate_slots

DAY = date(2030, 1, 15)

def window(start: time, end: time, doctor_id: int = 1) -> WorkingWindow:
    return WorkingWindow(doctor_id=doctor_id, date=DAY, start_time=start, end_time=end)

def starts(slots):
    return [slot.label() for slot in slots]

class TestGenerateSlots:
    """Tests for generate_slots."""

    def test_two_hour_window(self):
        """A 09:00-11:00 window yields four half-hour slots."""
        slots = generate_slots([window(time(9, 0), time(11, 0))])

        assert starts(slots) == ["09:00", "09:30", "10:00", "10:30"]
        assert slots[-1] == Slot(start_time=time(10, 30), end_time=time(11, 0))

    @pytest.mark.parametrize("start,end,expected", [
        (time(9, 0), time(9, 30), 1),
        (time(9, 0), time(9, 59), 1),
        (time(8, 15), time(12, 0), 7),
        (time(0, 0), time(23, 59), 47),
        (time(13, 10), time(17, 40), 9),
    ])
    def test_slot_count_is_floor_of_duration(self, start, end, expected):
        """Every slot is 30 minutes, starts on the window start grid and ends inside it."""
        slots = generate_slots([window(start, end)])

        assert len(slots) == expected
        assert slots[0].start_time == start
        for slot in slots:
            duration = (slot.end_time.hour * 60 + slot.end_time.minute) - (
                slot.start_time.hour * 60 + slot.start_time.minute
            )
            assert duration == 30
            assert slot.end_time <= end

    def test_trailing_partial_period_is_dropped(self):
        """09:00-10:45 offers nothing starting at 10:30."""
        slots = generate_slots([window(time(9, 0), time(10, 45))])

        assert starts(slots) == ["09:00", "09:30", "10:00"]

    def test_window_shorter_than_a_slot(self):
        assert generate_slots([window(time(9, 0), time(9, 20))]) == []

    def test_empty_window_list(self):
        assert generate_slots([]) == []

    def test_multiple_windows_keep_iteration_order(self):
        """Windows are not sorted; afternoon listed first stays first."""
        slots = generate_slots([
            window(time(14, 0), time(15, 0)),
            window(time(9, 0), time(10, 0)),
        ])

        assert starts(slots) == ["14:00", "14:30", "09:00", "09:30"]

    def test_generation_is_idempotent(self):
        windows = [window(time(9, 0), time(12, 0)), window(time(15, 0), time(16, 30))]

        assert generate_slots(windows) == generate_slots(windows)

    def test_custom_slot_length(self):
        slots = generate_slots([window(time(9, 0), time(10, 0))], slot_minutes=15)

        assert starts(slots) == ["09:00", "09:15", "09:30", "09:45"]

    def test_non_positive_slot_length_rejected(self):
        with pytest.raises(ValueError):
            generate_slots([window(time(9, 0), time(10, 0))], slot_minutes=0)

class TestWorkingWindow:
    """Tests for the WorkingWindow value type."""

    def test_start_must_precede_end(self):
        with pytest.raises(ValueError):
            window(time(10, 0), time(9, 0))

        with pytest.raises(ValueError):
            window(time(10, 0), time(10, 0))

    def test_contains_is_half_open(self):
        w = window(time(9, 0), time(17, 0))

        assert w.contains(time(9, 0))
        assert w.contains(time(16, 59))
        assert not w.contains(time(17, 0))
        assert not w.contains(time(8, 59))
