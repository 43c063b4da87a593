"""Scale a generated week so its total lands on a target weekly mileage.

Only aerobic volume is elastic: surplus goes to the long run first and then
to easy days, a deficit comes out of easy days alone. Tempo and interval
distances are set by the scheduler and are never touched here.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from core.logging_config import get_logger
from core.models import Goal, WeeklyPlanDay

logger = get_logger(__name__)

TOLERANCE_MILES = 0.5
EASY_RUN_MAX = 8.0
EASY_RUN_MIN = 2.0
LONG_RUN_ABSOLUTE_MAX = 22.0
_EPSILON = 0.01


def long_run_cap(goal: Goal) -> float:
    """Longest long run worth prescribing for the goal distance."""
    if goal.distance >= 26:
        cap = 22.0
    elif goal.distance >= 13:
        cap = 20.0
    else:
        cap = 0.9 * goal.distance
    return min(cap, LONG_RUN_ABSOLUTE_MAX)


def _spread(distances: list[float], indices: list[int], amount: float, bound: float, direction: int) -> float:
    """Water-fill ``amount`` across ``indices`` without crossing ``bound``.

    Returns whatever could not be placed.
    """
    remaining = amount
    active = [i for i in indices if (bound - distances[i]) * direction > _EPSILON]
    while remaining > _EPSILON and active:
        share = remaining / len(active)
        still_open = []
        for i in active:
            room = (bound - distances[i]) * direction
            step = min(share, room)
            distances[i] += step * direction
            remaining -= step
            if room - step > _EPSILON:
                still_open.append(i)
        active = still_open
    return remaining


def _settle_rounding(distances: list[float], days: Sequence[WeeklyPlanDay], target: float, goal: Goal) -> None:
    """Move the residue left by one-decimal rounding onto the long run, else an easy day."""
    residue = round(target - sum(distances), 1)
    if residue == 0:
        return
    if residue > 0:
        candidates = [(i, long_run_cap(goal)) for i, d in enumerate(days) if d.run_type == "long"]
        candidates += [(i, EASY_RUN_MAX) for i, d in enumerate(days) if d.run_type == "easy"]
        for i, cap in candidates:
            if distances[i] + residue <= cap + _EPSILON:
                distances[i] = round(distances[i] + residue, 1)
                return
    else:
        for i, d in enumerate(days):
            if d.run_type == "easy" and distances[i] + residue >= EASY_RUN_MIN - _EPSILON:
                distances[i] = round(distances[i] + residue, 1)
                return


def adjust_distances_to_target(
    days: Sequence[WeeklyPlanDay],
    target_weekly_miles: float,
    goal: Goal,
) -> list[WeeklyPlanDay]:
    """Return a new list of days whose total is as close to the target as the caps allow."""
    current = round(sum(d.distance_miles for d in days), 1)
    diff = target_weekly_miles - current
    if abs(diff) < TOLERANCE_MILES:
        return list(days)

    distances = [d.distance_miles for d in days]
    easy_idx = [i for i, d in enumerate(days) if d.run_type == "easy"]
    long_idx = [i for i, d in enumerate(days) if d.run_type == "long"]

    if diff > 0:
        remaining = _spread(distances, long_idx, diff, long_run_cap(goal), 1)
        remaining = _spread(distances, easy_idx, remaining, EASY_RUN_MAX, 1)
    else:
        remaining = _spread(distances, easy_idx, -diff, EASY_RUN_MIN, -1)

    if remaining > TOLERANCE_MILES:
        logger.debug(
            "mileage_target_unreachable",
            extra={"ctx_target": target_weekly_miles, "ctx_current": current, "ctx_unplaced": round(remaining, 1)},
        )

    rounded = [round(miles, 1) for miles in distances]
    if remaining <= _EPSILON:
        _settle_rounding(rounded, days, target_weekly_miles, goal)

    adjusted = []
    for day, miles in zip(days, rounded):
        if day.run_type in ("easy", "long"):
            adjusted.append(replace(day, distance_miles=miles))
        else:
            adjusted.append(day)
    return adjusted
