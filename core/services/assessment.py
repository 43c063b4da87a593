"""Turn a coarse fitness self-assessment into a plausible recent run history.

The output is a best-effort fabrication so the rest of the pipeline sees the
same input shape whether the athlete connected a wearable or filled in the
questionnaire. It is not a statistical model.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import Optional

from core.logging_config import get_logger
from core.models import FitnessAssessment, Run

logger = get_logger(__name__)

LOOKBACK_DAYS = 21
MAX_SYNTHETIC_RUNS = 10
MIN_SYNTHETIC_DISTANCE = 1.0

# Base easy pace per level plus the extra applied to low-volume athletes.
_LEVEL_EASY_PACE = {
    "beginner": (10.0, 10.0, 1.5),
    "intermediate": (8.5, 20.0, 0.5),
    "advanced": (7.0, 30.0, 0.5),
}
_EXPERIENCE_PENALTY = {"none": 1.5, "some": 0.5, "regular": 0.0}
_TYPE_PACE_OFFSET = {"easy": 0.0, "tempo": -1.0, "interval": -1.5, "long": 0.5}


def estimate_easy_pace(assessment: FitnessAssessment) -> float:
    """Easy pace in min/mile implied by an assessment, clamped to [7.0, 14.0]."""
    if assessment.easy_pace_min_per_mile:
        return max(7.0, min(14.0, float(assessment.easy_pace_min_per_mile)))
    base, low_volume_cutoff, low_volume_extra = _LEVEL_EASY_PACE.get(
        assessment.fitness_level, _LEVEL_EASY_PACE["beginner"]
    )
    pace = base
    if assessment.weekly_mileage < low_volume_cutoff:
        pace += low_volume_extra
    pace += _EXPERIENCE_PENALTY.get(assessment.recent_running_experience, 0.0)
    return max(7.0, min(14.0, pace))


def _pick_run_type(assessment: FitnessAssessment, roll: float) -> str:
    if assessment.fitness_level == "advanced" and roll < 0.2:
        return "tempo"
    if assessment.fitness_level != "beginner" and roll < 0.1:
        return "interval"
    if roll < 0.15 and assessment.longest_run_miles:
        return "long"
    return "easy"


def _distance_for(run_type: str, avg_miles: float, assessment: FitnessAssessment, rng: random.Random) -> float:
    if run_type == "tempo":
        return avg_miles * 0.8
    if run_type == "interval":
        return avg_miles * 0.7
    if run_type == "long":
        return min(float(assessment.longest_run_miles or 0.0) * 0.9, avg_miles * 1.5)
    return avg_miles * (0.8 + rng.random() * 0.4)


def assessment_to_runs(
    assessment: FitnessAssessment,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> list[Run]:
    """Fabricate up to min(days_per_week * 2, 10) runs over the last 21 days.

    Most recent first. Pass a seeded ``random.Random`` for reproducible output.
    """
    if assessment.days_per_week < 1:
        raise ValueError("days_per_week must be at least 1 to synthesise runs")
    rng = rng or random.Random()
    now = now or datetime.now()

    days_per_week = min(7, int(assessment.days_per_week))
    target_count = min(days_per_week * 2, MAX_SYNTHETIC_RUNS)
    avg_miles = max(0.0, float(assessment.weekly_mileage)) / days_per_week
    easy_pace = estimate_easy_pace(assessment)
    run_probability = days_per_week / 7

    runs: list[Run] = []
    days_ago = 0
    while len(runs) < target_count and days_ago < LOOKBACK_DAYS:
        # First day always included so the history is never empty.
        if runs and rng.random() >= run_probability:
            days_ago += 1
            continue

        run_type = _pick_run_type(assessment, rng.random())
        distance = max(MIN_SYNTHETIC_DISTANCE, _distance_for(run_type, avg_miles, assessment, rng))
        pace = easy_pace + _TYPE_PACE_OFFSET[run_type] + (rng.random() - 0.5) * 0.5
        pace = max(5.0, min(14.0, pace))
        run_date = (now - timedelta(days=days_ago)).replace(
            hour=8 + rng.randrange(4), minute=0, second=0, microsecond=0
        )
        runs.append(
            Run(
                id=f"synthetic-{len(runs)}",
                date=run_date,
                distance_miles=round(distance, 1),
                duration_seconds=max(1, int(round(distance * pace * 60))),
                average_pace_min_per_mile=round(pace, 1),
                category=run_type,
            )
        )
        days_ago += 1

    runs.sort(key=lambda r: r.date, reverse=True)
    logger.debug(
        "synthetic_runs_generated",
        extra={"ctx_count": len(runs), "ctx_fitness_level": assessment.fitness_level},
    )
    return runs
