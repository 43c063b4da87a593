"""Resolve the athlete's data source into a PlanningContext.

Three input modes are possible: real run history, a synthesised history
built from a fitness assessment, or nothing at all. Every downstream
decision reads the resolved context instead of re-deriving it.
"""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta
from statistics import mean
from typing import Optional, Sequence

from core.logging_config import get_logger
from core.models import (
    DataSource,
    FitnessAssessment,
    Goal,
    HistoricalSource,
    NoHistory,
    PlanningContext,
    Run,
    SynthesizedSource,
)
from core.services.assessment import assessment_to_runs
from core.services.pace_profile import DEFAULT_PROFILE, GOAL_PULL_FACTOR, infer_pace_profile, most_recent
from core.services.run_metrics import weekly_miles

logger = get_logger(__name__)

COLD_START_DAYS_PER_WEEK = 4
COLD_START_MILES_PER_RUN = 3.0
MIN_HISTORICAL_DAYS = 3


def fitness_level_for_mileage(weekly_mileage: float) -> str:
    if weekly_mileage >= 30:
        return "advanced"
    if weekly_mileage >= 15:
        return "intermediate"
    return "beginner"


def _days_per_week_from_history(runs: Sequence[Run]) -> int:
    newest = max(r.day for r in runs)
    window_start = newest - timedelta(days=6)
    run_days = {r.day for r in runs if window_start <= r.day <= newest}
    return max(MIN_HISTORICAL_DAYS, min(7, len(run_days)))


def resolve_source(
    runs: Optional[Sequence[Run]],
    assessment: Optional[FitnessAssessment],
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> DataSource:
    if runs:
        return HistoricalSource(runs=tuple(sorted(runs, key=lambda r: r.date, reverse=True)))
    if assessment is not None:
        synthetic = assessment_to_runs(assessment, rng=rng, now=now)
        return SynthesizedSource(assessment=assessment, runs=tuple(synthetic))
    return NoHistory()


def build_planning_context(
    goal: Goal,
    runs: Optional[Sequence[Run]] = None,
    assessment: Optional[FitnessAssessment] = None,
    *,
    as_of: Optional[date] = None,
    rng: Optional[random.Random] = None,
    goal_pull: float = GOAL_PULL_FACTOR,
) -> PlanningContext:
    """Build the context for plan generation.

    Measured history is profiled as-is. A synthesised history is also pulled
    toward the goal pace, since the self-reported numbers are coarse.
    """
    as_of = as_of or date.today()
    now = datetime(as_of.year, as_of.month, as_of.day, 12)
    source = resolve_source(runs, assessment, rng=rng, now=now)
    history = source.runs
    recent_weekly = round(weekly_miles(history, days=7, as_of=as_of), 1)

    if isinstance(source, HistoricalSource):
        recent = most_recent(history)
        avg_miles = mean(r.distance_miles for r in recent)
        days_per_week = _days_per_week_from_history(history)
        weekly = recent_weekly if recent_weekly > 0 else avg_miles * days_per_week
        fitness_level = fitness_level_for_mileage(weekly)
        profile = infer_pace_profile(history, goal_pull=goal_pull)
    elif isinstance(source, SynthesizedSource):
        days_per_week = max(1, min(7, int(source.assessment.days_per_week)))
        weekly = float(source.assessment.weekly_mileage)
        avg_miles = weekly / days_per_week
        fitness_level = source.assessment.fitness_level
        profile = infer_pace_profile(history, goal=goal, assessment=source.assessment, goal_pull=goal_pull)
    elif isinstance(source, NoHistory):
        days_per_week = COLD_START_DAYS_PER_WEEK
        avg_miles = COLD_START_MILES_PER_RUN
        weekly = avg_miles * days_per_week
        fitness_level = "beginner"
        profile = DEFAULT_PROFILE
    else:
        raise TypeError(f"Unsupported data source: {type(source).__name__}")

    context = PlanningContext(
        goal=goal,
        source=source,
        as_of=as_of,
        days_per_week=days_per_week,
        fitness_level=fitness_level,
        weekly_mileage=round(weekly, 1),
        avg_miles_per_run=round(avg_miles, 2),
        recent_weekly_miles=recent_weekly,
        pace_profile=profile,
    )
    logger.debug(
        "planning_context_built",
        extra={
            "ctx_source": type(source).__name__,
            "ctx_runs": len(history),
            "ctx_days_per_week": days_per_week,
            "ctx_fitness_level": fitness_level,
            "ctx_weekly_mileage": context.weekly_mileage,
        },
    )
    return context
