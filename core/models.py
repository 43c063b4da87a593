"""Domain value objects for the training-plan engine.

Every object here is an immutable computed value: plans are rebuilt from
(runs or assessment) + goal on each request and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

RUN_CATEGORIES = {"easy", "tempo", "interval", "long", "race", "recovery"}
RUN_TYPES = ("easy", "tempo", "interval", "long", "rest")
FITNESS_LEVELS = ("beginner", "intermediate", "advanced")
EXPERIENCE_LEVELS = ("none", "some", "regular")
FITNESS_TRENDS = ("improving", "stable", "declining")
DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def parse_date(value: Union[str, date, datetime]) -> date:
    """Coerce an ISO string, date or datetime to a calendar date.

    Raises ValueError for anything that is not a recognisable date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty date string")
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(text[:10])
        except ValueError as exc:
            raise ValueError(f"Malformed date: {value!r}") from exc
    raise ValueError(f"Malformed date: {value!r}")


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_datetime(value: Union[str, date, datetime]) -> datetime:
    """Like parse_date but keeps the time of day. Aware values become naive UTC."""
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return _naive_utc(datetime.fromisoformat(text))
        except ValueError:
            day = parse_date(value)
            return datetime(day.year, day.month, day.day)
    raise ValueError(f"Malformed datetime: {value!r}")


@dataclass(frozen=True)
class Run:
    id: str
    date: datetime
    distance_miles: float
    duration_seconds: int
    average_pace_min_per_mile: float
    category: Optional[str] = None
    elevation_feet: Optional[float] = None
    notes: Optional[str] = None
    effort: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "date", parse_datetime(self.date))

    @property
    def day(self) -> date:
        return self.date.date()


@dataclass(frozen=True)
class Goal:
    """Target race. Distance in miles, target time in minutes."""

    race_date: date
    distance: float
    target_time_minutes: float

    def __post_init__(self):
        if not isinstance(self.race_date, date) or isinstance(self.race_date, datetime):
            object.__setattr__(self, "race_date", parse_date(self.race_date))
        if self.distance is None or self.distance <= 0:
            raise ValueError("Goal distance must be greater than zero")
        if self.target_time_minutes is None or self.target_time_minutes <= 0:
            raise ValueError("Goal target time must be greater than zero")

    @property
    def goal_pace(self) -> float:
        return self.target_time_minutes / self.distance


@dataclass(frozen=True)
class FitnessAssessment:
    """Self-reported fitness used when no run history is available."""

    fitness_level: str
    weekly_mileage: float
    days_per_week: int
    recent_running_experience: str = "regular"
    easy_pace_min_per_mile: Optional[float] = None
    longest_run_miles: Optional[float] = None
    completed_at: Optional[datetime] = None


@dataclass(frozen=True)
class PaceProfile:
    easy_pace_range: tuple[float, float]
    threshold_pace: float
    fitness_trend: str = "stable"

    def __post_init__(self):
        if self.fitness_trend not in FITNESS_TRENDS:
            raise ValueError(f"fitness_trend must be one of {FITNESS_TRENDS}")

    @property
    def easy_midpoint(self) -> float:
        return (self.easy_pace_range[0] + self.easy_pace_range[1]) / 2


@dataclass(frozen=True)
class WeeklyPlanDay:
    date: date
    day_of_week: str
    run_type: str
    distance_miles: float
    pace_range_min_per_mile: tuple[float, float]
    coaching_intent: str

    def __post_init__(self):
        if self.run_type not in RUN_TYPES:
            raise ValueError(f"run_type must be one of {RUN_TYPES}")

    @property
    def is_rest(self) -> bool:
        return self.run_type == "rest"


@dataclass(frozen=True)
class WeeklyPlan:
    week_start_date: date
    days: tuple[WeeklyPlanDay, ...]
    total_miles: float

    @classmethod
    def from_days(cls, week_start: date, days: list[WeeklyPlanDay]) -> "WeeklyPlan":
        if len(days) != 7:
            raise ValueError(f"A weekly plan needs 7 days, got {len(days)}")
        total = round(sum(d.distance_miles for d in days), 1)
        return cls(week_start_date=week_start, days=tuple(days), total_miles=total)

    @property
    def week_end_date(self) -> date:
        return self.week_start_date + timedelta(days=6)

    def days_of_type(self, run_type: str) -> list[WeeklyPlanDay]:
        return [d for d in self.days if d.run_type == run_type]


# -- Data sources --


@dataclass(frozen=True)
class HistoricalSource:
    """Real run history (e.g. imported from a wearable provider)."""

    runs: tuple[Run, ...]


@dataclass(frozen=True)
class SynthesizedSource:
    """History fabricated from a self-assessment."""

    assessment: FitnessAssessment
    runs: tuple[Run, ...]


@dataclass(frozen=True)
class NoHistory:
    runs: tuple[Run, ...] = ()


DataSource = Union[HistoricalSource, SynthesizedSource, NoHistory]


@dataclass(frozen=True)
class PlanningContext:
    """Everything the scheduler needs to know about the athlete for one week."""

    goal: Goal
    source: DataSource
    as_of: date
    days_per_week: int
    fitness_level: str
    weekly_mileage: float
    avg_miles_per_run: float
    recent_weekly_miles: float
    pace_profile: PaceProfile

    @property
    def history(self) -> tuple[Run, ...]:
        return self.source.runs

    @property
    def assessment(self) -> Optional[FitnessAssessment]:
        if isinstance(self.source, SynthesizedSource):
            return self.source.assessment
        return None

    @property
    def is_cold_start(self) -> bool:
        if isinstance(self.source, NoHistory):
            return True
        return len(self.source.runs) < 2

    def for_week(self, weekly_mileage: float, pace_profile: PaceProfile) -> "PlanningContext":
        """Copy of this context with week-specific volume and paces."""
        days = max(1, self.days_per_week)
        return replace(
            self,
            weekly_mileage=round(weekly_mileage, 1),
            avg_miles_per_run=round(weekly_mileage / days, 2),
            pace_profile=pace_profile,
        )
