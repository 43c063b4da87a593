"""Infer training paces from recent runs or a fitness self-assessment.

All paces are minutes per mile. The profile has three parts:

- easy pace range: conversational effort, the slowest trained pace
- threshold pace: "comfortably hard" tempo effort
- fitness trend: whether the last couple of runs got faster or slower

Numbers are clamped rather than rejected; noisy history should produce
imprecise advice, never an error.
"""

from __future__ import annotations

from statistics import mean
from typing import Optional, Sequence

from core.models import FitnessAssessment, Goal, PaceProfile, Run
from core.services.assessment import estimate_easy_pace

RECENT_RUN_WINDOW = 5
GOAL_PULL_FACTOR = 0.95
DEFAULT_PROFILE = PaceProfile(easy_pace_range=(9.0, 10.0), threshold_pace=8.0, fitness_trend="stable")

EASY_PACE_BOUNDS = (5.0, 14.0)
THRESHOLD_BOUNDS = (5.0, 12.0)
TREND_DELTA = 0.2


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def average_pace(runs: Sequence[Run]) -> Optional[float]:
    if not runs:
        return None
    return mean(r.average_pace_min_per_mile for r in runs)


def most_recent(runs: Sequence[Run], limit: int = RECENT_RUN_WINDOW) -> list[Run]:
    return sorted(runs, key=lambda r: r.date, reverse=True)[:limit]


def pull_toward_goal(threshold: float, goal: Optional[Goal], goal_pull: float = GOAL_PULL_FACTOR) -> float:
    """Nudge threshold pace toward goal pace without overshooting it."""
    if goal is None:
        return threshold
    goal_pace = goal.goal_pace
    if goal_pace < threshold:
        return max(goal_pace + 0.3, threshold * goal_pull)
    return threshold


def _easy_range(low: float, high: float) -> tuple[float, float]:
    """Clamp and round an easy band, keeping low strictly below high."""
    low = round(clamp(low, *EASY_PACE_BOUNDS), 1)
    high = round(clamp(high, *EASY_PACE_BOUNDS), 1)
    if low >= high:
        low = min(low, EASY_PACE_BOUNDS[1] - 0.5)
        high = round(low + 0.5, 1)
    return (low, high)


def _bounded_threshold(threshold: float, easy_range: tuple[float, float]) -> float:
    easy_mid = (easy_range[0] + easy_range[1]) / 2
    return min(threshold, easy_mid - 0.1)


def fitness_trend(recent_runs: Sequence[Run]) -> str:
    """Compare the two newest runs with the two before them.

    Expects runs sorted most recent first.
    """
    if len(recent_runs) < 4:
        return "stable"
    newest = mean(r.average_pace_min_per_mile for r in recent_runs[:2])
    previous = mean(r.average_pace_min_per_mile for r in recent_runs[2:4])
    diff = newest - previous
    if diff < -TREND_DELTA:
        return "improving"
    if diff > TREND_DELTA:
        return "declining"
    return "stable"


def _profile_from_assessment(
    assessment: FitnessAssessment, goal: Optional[Goal], goal_pull: float
) -> PaceProfile:
    easy = estimate_easy_pace(assessment)
    easy_range = _easy_range(easy - 0.3, easy + 0.5)
    threshold = clamp(easy - 0.75, *THRESHOLD_BOUNDS)
    threshold = _bounded_threshold(pull_toward_goal(threshold, goal, goal_pull), easy_range)
    return PaceProfile(
        easy_pace_range=easy_range,
        threshold_pace=round(threshold, 1),
        fitness_trend="stable",
    )


def infer_pace_profile(
    runs: Sequence[Run],
    goal: Optional[Goal] = None,
    assessment: Optional[FitnessAssessment] = None,
    goal_pull: float = GOAL_PULL_FACTOR,
) -> PaceProfile:
    """Infer easy range, threshold pace and trend from the five newest runs.

    Falls back to the assessment when there are no runs, and to conservative
    defaults when there is neither.
    """
    recent = most_recent(runs)
    if not recent:
        if assessment is not None:
            return _profile_from_assessment(assessment, goal, goal_pull)
        return DEFAULT_PROFILE

    easy_runs = [r for r in recent if r.category in ("easy", "recovery")]
    tempo_runs = [r for r in recent if r.category == "tempo"]
    interval_runs = [r for r in recent if r.category == "interval"]

    if len(easy_runs) >= 2:
        avg_easy = average_pace(easy_runs)
        easy_range = _easy_range(avg_easy - 0.3, avg_easy + 0.5)
    else:
        # Mixed history: easy days sit well behind the overall average.
        avg_all = average_pace(recent)
        easy_range = _easy_range(avg_all + 1.0, avg_all + 2.0)

    if tempo_runs:
        threshold = average_pace(tempo_runs)
    elif interval_runs:
        threshold = average_pace(interval_runs) + 0.5
    else:
        threshold = (easy_range[0] + easy_range[1]) / 2 - 0.75
    threshold = clamp(threshold, *THRESHOLD_BOUNDS)
    threshold = _bounded_threshold(pull_toward_goal(threshold, goal, goal_pull), easy_range)

    return PaceProfile(
        easy_pace_range=easy_range,
        threshold_pace=round(threshold, 1),
        fitness_trend=fitness_trend(recent),
    )
