from __future__ import annotations

import random
from datetime import date, datetime, timedelta
from typing import Optional, Sequence, Union

from core.logging_config import get_logger
from core.models import (
    DAY_NAMES,
    FitnessAssessment,
    Goal,
    PaceProfile,
    PlanningContext,
    Run,
    WeeklyPlan,
    WeeklyPlanDay,
    parse_date,
)
from core.services.formatting import pace_display, pace_range_display
from core.services.mileage import adjust_distances_to_target, long_run_cap
from core.services.pace_profile import GOAL_PULL_FACTOR
from core.services.planning_context import build_planning_context

logger = get_logger(__name__)

DAY_TO_INDEX = {name[:3]: idx for idx, name in enumerate(DAY_NAMES)}
LONG_RUN_DAY = DAY_TO_INDEX["Sat"]
QUALITY_DAYS = [DAY_TO_INDEX["Tue"], DAY_TO_INDEX["Thu"]]
EASY_FILL_ORDER = [DAY_TO_INDEX[d] for d in ("Sun", "Wed", "Fri")]
COLD_START_REST_DAYS = {DAY_TO_INDEX["Mon"], DAY_TO_INDEX["Thu"], DAY_TO_INDEX["Sun"]}
COLD_START_DISTANCE = 3.0

# (tempo share, interval share) of weekly run days.
QUALITY_SHARE = {
    "beginner": (0.15, 0.05),
    "intermediate": (0.20, 0.10),
    "advanced": (0.20, 0.15),
}
LONG_RUN_SHARE = {"beginner": 0.25, "intermediate": 0.30, "advanced": 0.35}
EASY_VARIATION = [0.8, 0.9, 1.0]
SHARPENING_DAYS = 21

EASY_BOUNDS = (2.0, 8.0)
TEMPO_BOUNDS = (3.0, 8.0)
INTERVAL_BOUNDS = (2.5, 6.0)
LONG_RUN_FLOOR = 6.0
PACE_BOUNDS = (5.0, 14.0)


def monday_of_week(day: date) -> date:
    return day - timedelta(days=day.weekday())


def days_between(start: date, end: date) -> int:
    return (end - start).days


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    return max(bounds[0], min(bounds[1], value))


def _pace_band(low: float, high: float) -> tuple[float, float]:
    low, high = round(_clamp(low, PACE_BOUNDS), 1), round(_clamp(high, PACE_BOUNDS), 1)
    if low > high:
        low, high = high, low
    return (low, high)


def quality_sessions(days_per_week: int, fitness_level: str, days_to_goal: int) -> list[str]:
    """Ordered quality workouts for the week (first goes on Tuesday, second on Thursday)."""
    tempo_share, interval_share = QUALITY_SHARE.get(fitness_level, QUALITY_SHARE["beginner"])
    tempo = int(days_per_week * tempo_share + 1e-9)
    interval = int(days_per_week * interval_share + 1e-9)
    sharpening = days_to_goal <= SHARPENING_DAYS
    if tempo + interval == 0:
        if sharpening:
            interval = 1
        else:
            tempo = 1
    elif sharpening and interval == 0:
        tempo, interval = tempo - 1, 1

    if sharpening:
        order = ["interval"] * interval + ["tempo"] * tempo
    else:
        order = ["tempo"] * tempo + ["interval"] * interval
    slots = min(len(QUALITY_DAYS), max(0, days_per_week - 1))
    return order[:slots]


def allocate_run_types(context: PlanningContext, days_to_goal: int) -> list[str]:
    """Workout category for each day, Monday first."""
    if context.is_cold_start:
        return ["rest" if idx in COLD_START_REST_DAYS else "easy" for idx in range(7)]

    active = max(1, min(7, context.days_per_week))
    types = ["rest"] * 7
    types[LONG_RUN_DAY] = "long"
    quality = quality_sessions(active, context.fitness_level, days_to_goal)
    for idx, kind in zip(QUALITY_DAYS, quality):
        types[idx] = kind

    remaining = active - 1 - len(quality)
    for idx in EASY_FILL_ORDER:
        if remaining <= 0:
            break
        if types[idx] == "rest":
            types[idx] = "easy"
            remaining -= 1
    return types


def long_run_distance(context: PlanningContext, days_to_goal: int) -> float:
    share = LONG_RUN_SHARE.get(context.fitness_level, LONG_RUN_SHARE["beginner"])
    distance = min(context.weekly_mileage * share, long_run_cap(context.goal))
    if days_to_goal <= 7:
        distance *= 0.5
    elif days_to_goal <= 14:
        distance *= 0.7
    return round(max(LONG_RUN_FLOOR, distance), 1)


def _easy_intent(types: list[str], idx: int) -> str:
    following = types[idx + 1] if idx + 1 < 7 else None
    previous = types[idx - 1] if idx > 0 else None
    if following == "long":
        return "Easy run before the weekend long effort. Stay relaxed and save your legs."
    if previous in ("tempo", "interval"):
        return "Easy run between harder efforts. Active recovery, keep it conversational."
    if previous == "long":
        return "Easy recovery run after the long run. Focus on form and staying relaxed."
    return "Easy run to build aerobic base. Keep it conversational."


def _rest_intent(types: list[str], idx: int) -> str:
    if idx + 1 < 7 and types[idx + 1] == "long":
        return "Rest day to prepare for tomorrow's long run."
    return "Rest day to allow recovery and adaptation."


def _long_intent(days_to_goal: int) -> str:
    if days_to_goal <= 7:
        return "Short long run in race week. Keep it easy and arrive at the start line fresh."
    if days_to_goal <= 14:
        return "Tapering long run. Shorter than recent weeks to absorb training before race day."
    return "Long run to build endurance. Run at easy pace and focus on time on feet."


def _build_day(
    types: list[str],
    idx: int,
    day: date,
    context: PlanningContext,
    pace_profile: PaceProfile,
    days_to_goal: int,
) -> WeeklyPlanDay:
    run_type = types[idx]
    avg = context.avg_miles_per_run
    easy_low, easy_high = pace_profile.easy_pace_range
    threshold = pace_profile.threshold_pace

    if run_type == "rest":
        distance, paces, intent = 0.0, (0.0, 0.0), _rest_intent(types, idx)
    elif context.is_cold_start:
        distance = COLD_START_DISTANCE
        paces = _pace_band(easy_low, easy_high)
        intent = "Easy run to build base fitness. Keep it conversational."
    elif run_type == "easy":
        distance = _clamp(avg * EASY_VARIATION[idx % len(EASY_VARIATION)], EASY_BOUNDS)
        paces = _pace_band(easy_low, easy_high)
        intent = _easy_intent(types, idx)
    elif run_type == "tempo":
        distance = _clamp(avg * 0.9, TEMPO_BOUNDS)
        paces = _pace_band(threshold - 0.2, threshold + 0.2)
        intent = f"Tempo run at threshold pace ({pace_display(threshold)}). Comfortably hard effort."
    elif run_type == "interval":
        target = max(context.goal.goal_pace - 0.3, threshold - 0.5)
        distance = _clamp(avg * 0.7, INTERVAL_BOUNDS)
        paces = _pace_band(target - 0.2, target + 0.2)
        if days_to_goal <= SHARPENING_DAYS:
            intent = f"Race-sharpening intervals at {pace_range_display(*paces)}. Include warm-up and cool-down."
        else:
            intent = f"Interval workout to build speed at {pace_range_display(*paces)}. Include warm-up and cool-down."
    elif run_type == "long":
        distance = long_run_distance(context, days_to_goal)
        paces = _pace_band(easy_low + 0.5, easy_high + 0.5)
        intent = _long_intent(days_to_goal)
    else:
        raise ValueError(f"Unknown run type: {run_type}")

    return WeeklyPlanDay(
        date=day,
        day_of_week=DAY_NAMES[idx],
        run_type=run_type,
        distance_miles=round(distance, 1),
        pace_range_min_per_mile=paces,
        coaching_intent=intent,
    )


def generate_weekly_plan_with_paces(
    context: PlanningContext,
    week_start: date,
    pace_profile: PaceProfile,
    days_to_goal: int,
) -> list[WeeklyPlanDay]:
    """Lay out seven days, Monday to Sunday, for the week containing ``week_start``."""
    monday = monday_of_week(week_start)
    types = allocate_run_types(context, days_to_goal)
    return [
        _build_day(types, idx, monday + timedelta(days=idx), context, pace_profile, days_to_goal)
        for idx in range(7)
    ]


def generate_weekly_plan(
    goal: Goal,
    runs: Optional[Sequence[Run]] = None,
    week_start: Optional[Union[str, date, datetime]] = None,
    *,
    assessment: Optional[FitnessAssessment] = None,
    target_weekly_miles: Optional[float] = None,
    as_of: Optional[date] = None,
    rng: Optional[random.Random] = None,
    goal_pull: float = GOAL_PULL_FACTOR,
) -> WeeklyPlan:
    """Single-week pipeline: resolve history, profile paces, schedule, reconcile."""
    context = build_planning_context(goal, runs, assessment, as_of=as_of, rng=rng, goal_pull=goal_pull)
    start = monday_of_week(parse_date(week_start) if week_start is not None else context.as_of)
    days_to_goal = days_between(start, goal.race_date)

    days = generate_weekly_plan_with_paces(context, start, context.pace_profile, days_to_goal)
    if target_weekly_miles is not None:
        days = adjust_distances_to_target(days, target_weekly_miles, goal)

    plan = WeeklyPlan.from_days(start, days)
    logger.info(
        "weekly_plan_generated",
        extra={
            "ctx_week_start": start.isoformat(),
            "ctx_days_to_goal": days_to_goal,
            "ctx_total_miles": plan.total_miles,
            "ctx_cold_start": context.is_cold_start,
        },
    )
    return plan
