"""Twelve-week build-to-taper macrocycle.

Weeks 0-7 ramp weekly mileage linearly from the athlete's current volume to a
goal-dependent peak; weeks 8-11 taper to 80/70/60/50% of peak. Paces migrate
from current fitness toward goal pace, about 85% of the way by week 8 and
95% by race week.
"""

from __future__ import annotations

import random
from datetime import date, timedelta
from statistics import mean
from typing import Optional, Sequence

from core.logging_config import get_logger
from core.models import FitnessAssessment, Goal, PaceProfile, PlanningContext, Run, WeeklyPlan
from core.services.mileage import adjust_distances_to_target
from core.services.pace_profile import GOAL_PULL_FACTOR, most_recent
from core.services.planning import days_between, generate_weekly_plan_with_paces, monday_of_week
from core.services.planning_context import build_planning_context

logger = get_logger(__name__)

TOTAL_WEEKS = 12
BUILD_WEEKS = 8
TAPER_FRACTIONS = [0.8, 0.7, 0.6, 0.5]
DEFAULT_RECENT_MILES = 15.0
STARTING_MILES_FLOOR = 15.0
STARTING_PEAK_FRACTION = 0.6


def peak_weekly_miles(goal: Goal) -> float:
    if goal.distance >= 26:
        return 55.0
    if goal.distance >= 13:
        return 40.0
    if goal.distance >= 6:
        return 30.0
    return 25.0


def starting_weekly_miles(recent_weekly_miles: float, peak: float) -> float:
    return min(max(recent_weekly_miles * 1.1, STARTING_MILES_FLOOR), STARTING_PEAK_FRACTION * peak)


def weekly_mileage_targets(starting: float, peak: float) -> list[float]:
    targets = []
    for week in range(TOTAL_WEEKS):
        if week < BUILD_WEEKS:
            targets.append(starting + (peak - starting) * week / (BUILD_WEEKS - 1))
        else:
            targets.append(peak * TAPER_FRACTIONS[week - BUILD_WEEKS])
    return [round(t, 1) for t in targets]


def pace_progress(week: int) -> float:
    """Fraction of the gap to goal pace closed by ``week``."""
    if week < BUILD_WEEKS:
        return week / BUILD_WEEKS * 0.85
    return 0.85 + (week - BUILD_WEEKS) / 4 * 0.1


def current_average_pace(context: PlanningContext) -> float:
    recent = most_recent(context.history)
    if recent:
        return mean(r.average_pace_min_per_mile for r in recent)
    return context.pace_profile.easy_midpoint


def progressive_pace_profile(base: PaceProfile, goal: Goal, week: int, current_avg_pace: float) -> PaceProfile:
    """Shift the base profile toward goal pace for the given week."""
    goal_pace = goal.goal_pace
    # Athletes already at or under goal pace keep their current paces.
    pace_gap = max(0.0, current_avg_pace - goal_pace)
    progress = pace_progress(week)

    easy_shift = pace_gap * 0.2 * progress
    threshold_shift = pace_gap * 0.6 * progress
    easy_low = max(base.easy_pace_range[0] - easy_shift, goal_pace + 2.0)
    easy_high = max(base.easy_pace_range[1] - easy_shift, goal_pace + 2.5)
    threshold = max(base.threshold_pace - threshold_shift, goal_pace + 0.2)
    return PaceProfile(
        easy_pace_range=(round(easy_low, 1), round(easy_high, 1)),
        threshold_pace=round(threshold, 1),
        fitness_trend=base.fitness_trend,
    )


def macrocycle_start(goal: Goal) -> date:
    return monday_of_week(goal.race_date - timedelta(days=TOTAL_WEEKS * 7))


def generate_twelve_week_plan(
    goal: Goal,
    runs: Optional[Sequence[Run]] = None,
    *,
    assessment: Optional[FitnessAssessment] = None,
    as_of: Optional[date] = None,
    rng: Optional[random.Random] = None,
    goal_pull: float = GOAL_PULL_FACTOR,
) -> list[WeeklyPlan]:
    context = build_planning_context(goal, runs, assessment, as_of=as_of, rng=rng, goal_pull=goal_pull)
    recent = context.recent_weekly_miles if context.history else DEFAULT_RECENT_MILES
    peak = peak_weekly_miles(goal)
    targets = weekly_mileage_targets(starting_weekly_miles(recent, peak), peak)
    avg_pace = current_average_pace(context)
    start = macrocycle_start(goal)

    plans: list[WeeklyPlan] = []
    for week, target in enumerate(targets):
        week_start = start + timedelta(days=week * 7)
        profile = progressive_pace_profile(context.pace_profile, goal, week, avg_pace)
        week_context = context.for_week(target, profile)
        days = generate_weekly_plan_with_paces(week_context, week_start, profile, days_between(week_start, goal.race_date))
        days = adjust_distances_to_target(days, target, goal)
        plans.append(WeeklyPlan.from_days(week_start, days))

    logger.info(
        "macrocycle_generated",
        extra={
            "ctx_start": start.isoformat(),
            "ctx_race_date": goal.race_date.isoformat(),
            "ctx_peak_miles": peak,
            "ctx_totals": [p.total_miles for p in plans],
        },
    )
    return plans
