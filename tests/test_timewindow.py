"""Tests for time arithmetic and window overlap."""

from datetime import time
from itertools import product

import pytest

from shiftcover.domain.errors import InvalidTimeFormat, InvalidWindow
from shiftcover.domain.timewindow import (
    TimeWindow,
    format_time,
    overlaps,
    parse_time,
    span_minutes,
    to_minutes,
)


def window(start: str, end: str, crosses: bool = False) -> TimeWindow:
    return TimeWindow.parse(start, end, crosses)


class TestParseTime:
    """Tests for parse_time."""

    def test_hh_mm(self):
        assert parse_time("09:30") == 570

    def test_hh_mm_ss_drops_seconds(self):
        assert parse_time("21:00:59") == 1260

    def test_bounds(self):
        assert parse_time("00:00") == 0
        assert parse_time("23:59:59") == 1439

    @pytest.mark.parametrize(
        "value",
        ["24:00", "12:60", "12:00:60", "9:00", "09:00:", "0900", "", "ab:cd", "09:00:00:00", " 09:00"],
    )
    def test_rejects_malformed(self, value):
        with pytest.raises(InvalidTimeFormat):
            parse_time(value)

    @pytest.mark.parametrize(
        "value",
        ["09:00\n", "09:00:00\n", "\uff10\uff19:\uff10\uff10", "\u0660\u0669:\u0660\u0660"],
    )
    def test_rejects_trailing_newline_and_non_ascii_digits(self, value):
        """Only a whole string of ASCII digits is accepted."""
        with pytest.raises(InvalidTimeFormat):
            parse_time(value)

    def test_rejects_non_string(self):
        with pytest.raises(InvalidTimeFormat):
            parse_time(None)

    def test_invalid_time_format_is_value_error(self):
        with pytest.raises(ValueError):
            parse_time("25:00")

    def test_to_minutes(self):
        assert to_minutes(time(hour=13, minute=15)) == 795

    def test_format_time(self):
        assert format_time(0) == "00:00"
        assert format_time(1439) == "23:59"


class TestTimeWindow:
    """Tests for TimeWindow construction and span."""

    def test_span_non_crossing(self):
        assert span_minutes(window("09:00", "17:00")) == 480

    def test_span_crossing(self):
        assert span_minutes(window("22:00", "06:00", True)) == 480

    def test_span_crossing_to_midnight(self):
        w = window("22:00", "00:00", True)
        assert w.span_minutes == 120
        assert w.duration_hours == 2

    def test_zero_length_rejected(self):
        with pytest.raises(InvalidWindow):
            window("09:00", "09:00", False)

    def test_full_day_rejected(self):
        with pytest.raises(InvalidWindow):
            window("09:00", "09:00", True)

    def test_reversed_non_crossing_rejected(self):
        with pytest.raises(InvalidWindow):
            window("17:00", "09:00", False)

    def test_crossing_flag_on_forward_window_rejected(self):
        with pytest.raises(InvalidWindow):
            window("09:00", "17:00", True)

    def test_out_of_range_minutes_rejected(self):
        with pytest.raises(InvalidWindow):
            TimeWindow(0, 1440)

    def test_crossing_inferred_when_flag_omitted(self):
        assert TimeWindow.parse("21:00", "01:00").crosses_midnight is True
        assert TimeWindow.parse("01:00", "05:00").crosses_midnight is False

    def test_str(self):
        assert str(window("22:00", "06:00", True)) == "22:00-06:00"


class TestOverlaps:
    """Tests for the overlap detector."""

    def test_adjacent_windows_do_not_overlap(self):
        assert overlaps(window("09:00", "17:00"), window("17:00", "21:00")) is False

    def test_crossing_overlaps_morning(self):
        assert overlaps(window("22:00", "06:00", True), window("05:00", "09:00")) is True

    def test_disjoint_non_crossing(self):
        assert overlaps(window("05:00", "09:00"), window("09:00", "13:00")) is False

    def test_partial_overlap(self):
        assert overlaps(window("09:00", "13:00"), window("12:00", "18:00")) is True

    def test_containment(self):
        assert overlaps(window("09:00", "21:00"), window("12:00", "13:00")) is True

    def test_two_crossing_windows_overlap(self):
        assert overlaps(window("21:00", "01:00", True), window("23:30", "00:30", True)) is True

    def test_crossing_touching_morning_window(self):
        assert overlaps(window("22:00", "06:00", True), window("06:00", "09:00")) is False

    def test_crossing_touching_evening_window(self):
        assert overlaps(window("22:00", "06:00", True), window("18:00", "22:00")) is False

    def test_crossing_against_late_evening(self):
        assert overlaps(window("21:00", "01:00", True), window("20:00", "21:30")) is True

    def test_crossing_against_midday(self):
        assert overlaps(window("21:00", "01:00", True), window("09:00", "21:00")) is False

    def test_consecutive_night_blocks(self):
        assert overlaps(window("21:00", "01:00", True), window("01:00", "05:00")) is False

    def test_method_matches_function(self):
        a = window("15:00", "01:00", True)
        b = window("00:30", "02:00")
        assert a.overlaps(b) == overlaps(a, b) is True

    def test_symmetry(self):
        windows = [
            window("09:00", "17:00"),
            window("17:00", "21:00"),
            window("22:00", "06:00", True),
            window("05:00", "09:00"),
            window("21:00", "01:00", True),
            window("01:00", "05:00"),
            window("00:00", "23:59"),
            window("23:59", "00:01", True),
        ]
        for a, b in product(windows, repeat=2):
            assert overlaps(a, b) == overlaps(b, a), f"{a} vs {b}"

    def test_window_overlaps_itself(self):
        for w in (window("09:00", "17:00"), window("22:00", "06:00", True)):
            assert overlaps(w, w)
