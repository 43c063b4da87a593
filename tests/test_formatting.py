"""Tests for display helpers."""

from __future__ import annotations

from datetime import date

from core.services.formatting import day_label, format_finish_time, pace_display, pace_range_display


def test_pace_display():
    assert pace_display(9.5) == "9:30/mi"
    assert pace_display(8.0) == "8:00/mi"
    assert pace_display(7.99) == "7:59/mi"
    assert pace_display(0) == "n/a"


def test_pace_range_display():
    assert pace_range_display(8.7, 9.5) == "8:42 - 9:30/mi"
    assert pace_range_display(0.0, 0.0) == "n/a"


def test_format_finish_time():
    assert format_finish_time(95) == "1h 35m"
    assert format_finish_time(45) == "45m"
    assert format_finish_time(119.6) == "2h 0m"
    assert format_finish_time(-3) == "0m"


def test_day_label():
    assert day_label(date(2026, 3, 2)) == "Mon"
    assert day_label(date(2026, 3, 8)) == "Sun"
