from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from api.schemas import PaceProfileOut, StatusOut, TrainingSummaryOut, WeeklyPlanOut
from core.config import get_settings
from core.services.macrocycle import generate_twelve_week_plan
from core.services.pace_profile import infer_pace_profile
from core.services.planning import generate_weekly_plan
from core.services.run_metrics import status_kpis, training_summary
from core.validators import (
    PaceProfileRequest,
    StatusRequest,
    TrainingSummaryRequest,
    TwelveWeekPlanRequest,
    WeeklyPlanRequest,
)

logger = logging.getLogger(__name__)
settings = get_settings()
router = APIRouter(prefix="/api/v1")


def _unprocessable(exc: ValueError) -> HTTPException:
    logger.warning("plan_request_rejected", extra={"ctx_error": str(exc)})
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


@router.post("/plans/weekly", response_model=WeeklyPlanOut, tags=["plans"])
def weekly_plan(body: WeeklyPlanRequest):
    try:
        plan = generate_weekly_plan(
            body.goal.to_domain(),
            body.domain_runs(),
            body.week_start,
            assessment=body.domain_assessment(),
            target_weekly_miles=body.target_weekly_miles,
            as_of=body.as_of,
            rng=body.rng(),
            goal_pull=settings.goal_pull_factor,
        )
    except ValueError as exc:
        raise _unprocessable(exc) from exc
    return WeeklyPlanOut.from_domain(plan)


@router.post("/plans/twelve-week", response_model=list[WeeklyPlanOut], tags=["plans"])
def twelve_week_plan(body: TwelveWeekPlanRequest):
    try:
        plans = generate_twelve_week_plan(
            body.goal.to_domain(),
            body.domain_runs(),
            assessment=body.domain_assessment(),
            as_of=body.as_of,
            rng=body.rng(),
            goal_pull=settings.goal_pull_factor,
        )
    except ValueError as exc:
        raise _unprocessable(exc) from exc
    return [WeeklyPlanOut.from_domain(p) for p in plans]


@router.post("/pace-profile", response_model=PaceProfileOut, tags=["paces"])
def pace_profile(body: PaceProfileRequest):
    try:
        goal = body.goal.to_domain() if body.goal else None
        profile = infer_pace_profile(
            body.domain_runs(),
            goal=goal,
            assessment=body.domain_assessment(),
            goal_pull=settings.goal_pull_factor,
        )
    except ValueError as exc:
        raise _unprocessable(exc) from exc
    return PaceProfileOut.from_domain(profile)


@router.post("/status", response_model=StatusOut, tags=["status"])
def status_bar(body: StatusRequest):
    try:
        kpis = status_kpis(body.goal.to_domain(), [r.to_domain() for r in body.runs], today=body.today)
    except ValueError as exc:
        raise _unprocessable(exc) from exc
    return StatusOut.from_domain(kpis)


@router.post("/training-summary", response_model=TrainingSummaryOut, tags=["status"])
def training_summary_view(body: TrainingSummaryRequest):
    summary = training_summary([r.to_domain() for r in body.runs], as_of=body.as_of)
    return TrainingSummaryOut.from_domain(summary)
