from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from statistics import mean
from typing import Optional, Sequence

from core.models import Goal, Run
from core.services.formatting import format_finish_time


@dataclass(frozen=True)
class LoadTrend:
    trend: str
    last_7d: float
    previous_7d: float


@dataclass(frozen=True)
class StatusKPIs:
    """Header summary: race countdown and a finish-time estimate."""
    days_to_goal: int
    estimated_finish_time: str
    confidence: str
    predicted_time_minutes: float


@dataclass(frozen=True)
class TrainingSummary:
    weekly_miles: float
    load: LoadTrend
    recent_run_count: int
    average_paces: dict[str, Optional[float]]
    last_run_date: Optional[date]


def _window(runs: Sequence[Run], days: int, as_of: date) -> list[Run]:
    cutoff = as_of - timedelta(days=days)
    return [r for r in runs if cutoff < r.day <= as_of]


def weekly_miles(runs: Sequence[Run], days: int = 7, as_of: Optional[date] = None) -> float:
    """Total miles run in the ``days`` days ending on ``as_of`` (inclusive)."""
    as_of = as_of or date.today()
    return sum(r.distance_miles for r in _window(runs, days, as_of))


def recent_pace_distribution(runs: Sequence[Run], days: int = 14, as_of: Optional[date] = None) -> dict[str, list[float]]:
    as_of = as_of or date.today()
    distribution: dict[str, list[float]] = {"easy": [], "tempo": [], "interval": [], "long": [], "all": []}
    for run in _window(runs, days, as_of):
        pace = run.average_pace_min_per_mile
        distribution["all"].append(pace)
        if run.category in ("easy", "recovery"):
            distribution["easy"].append(pace)
        elif run.category in ("tempo", "interval", "long"):
            distribution[run.category].append(pace)
    return distribution


def training_load_trend(runs: Sequence[Run], as_of: Optional[date] = None, threshold_miles: float = 2.0) -> LoadTrend:
    """Compare mileage over the last 7 days with the 7 days before that."""
    as_of = as_of or date.today()
    last_7d = weekly_miles(runs, 7, as_of)
    previous_7d = weekly_miles(runs, 7, as_of - timedelta(days=7))
    diff = last_7d - previous_7d
    trend = "stable"
    if diff > threshold_miles:
        trend = "increasing"
    elif diff < -threshold_miles:
        trend = "decreasing"
    return LoadTrend(trend=trend, last_7d=round(last_7d, 1), previous_7d=round(previous_7d, 1))


def days_to_goal(goal: Goal, today: Optional[date] = None) -> int:
    today = today or date.today()
    return max(0, (goal.race_date - today).days)


def average_pace_for_category(
    runs: Sequence[Run], category: str, days: int = 14, as_of: Optional[date] = None
) -> Optional[float]:
    as_of = as_of or date.today()
    categories = {"easy", "recovery"} if category == "easy" else {category}
    paces = [r.average_pace_min_per_mile for r in _window(runs, days, as_of) if r.category in categories]
    if not paces:
        return None
    return mean(paces)


def most_recent_run(runs: Sequence[Run]) -> Optional[Run]:
    if not runs:
        return None
    return max(runs, key=lambda r: r.date)


def status_kpis(goal: Goal, runs: Sequence[Run], today: Optional[date] = None) -> StatusKPIs:
    """Estimate finish time from long, tempo or race-length-ish runs.

    Confidence is low with fewer than three runs or no relevant ones,
    high with three or more relevant runs.
    """
    predicted = goal.target_time_minutes
    confidence = "low"
    if len(runs) >= 3:
        relevant = [
            r for r in runs
            if r.category in ("long", "tempo") or r.distance_miles >= goal.distance * 0.5
        ]
        if relevant:
            predicted = mean(r.average_pace_min_per_mile for r in relevant) * goal.distance
            confidence = "high" if len(relevant) >= 3 else "medium"
    return StatusKPIs(
        days_to_goal=days_to_goal(goal, today),
        estimated_finish_time=format_finish_time(predicted),
        confidence=confidence,
        predicted_time_minutes=round(predicted, 1),
    )


def training_summary(runs: Sequence[Run], as_of: Optional[date] = None) -> TrainingSummary:
    """Snapshot of the last two weeks of training."""
    as_of = as_of or date.today()
    distribution = recent_pace_distribution(runs, as_of=as_of)
    average_paces: dict[str, Optional[float]] = {}
    for category in ("easy", "tempo", "interval", "long"):
        pace = average_pace_for_category(runs, category, as_of=as_of)
        average_paces[category] = round(pace, 2) if pace is not None else None
    last_run = most_recent_run(runs)
    return TrainingSummary(
        weekly_miles=round(weekly_miles(runs, 7, as_of), 1),
        load=training_load_trend(runs, as_of=as_of),
        recent_run_count=len(distribution["all"]),
        average_paces=average_paces,
        last_run_date=last_run.day if last_run else None,
    )
