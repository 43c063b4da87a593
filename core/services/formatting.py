"""Human-readable formatting for paces, finish times and day labels."""

from __future__ import annotations

from datetime import date


def pace_display(min_per_mile: float) -> str:
    """Format minutes-per-mile as 'M:SS/mi' for display."""
    if min_per_mile <= 0:
        return "n/a"
    total_seconds = int(round(min_per_mile * 60))
    return f"{total_seconds // 60}:{total_seconds % 60:02d}/mi"


def pace_range_display(low: float, high: float) -> str:
    """Format a pace band as 'M:SS - M:SS /mi'."""
    if low <= 0 and high <= 0:
        return "n/a"
    return f"{pace_display(low)[:-3]} - {pace_display(high)}"


def format_finish_time(minutes: float) -> str:
    """Format minutes as 'Xh Ym' or 'Ym'."""
    total = int(round(max(0.0, minutes)))
    hours, mins = divmod(total, 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


def day_label(day: date) -> str:
    return day.strftime("%a")
