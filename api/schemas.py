from __future__ import annotations

from datetime import date as dt_date
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from core.models import PaceProfile, WeeklyPlan, WeeklyPlanDay
from core.services.run_metrics import LoadTrend, StatusKPIs, TrainingSummary


class CamelOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WeeklyPlanDayOut(CamelOut):
    date: dt_date
    day_of_week: str
    run_type: str
    distance_miles: float
    pace_range_min_per_mile: tuple[float, float]
    coaching_intent: str

    @classmethod
    def from_domain(cls, day: WeeklyPlanDay) -> "WeeklyPlanDayOut":
        return cls(
            date=day.date,
            day_of_week=day.day_of_week,
            run_type=day.run_type,
            distance_miles=day.distance_miles,
            pace_range_min_per_mile=day.pace_range_min_per_mile,
            coaching_intent=day.coaching_intent,
        )


class WeeklyPlanOut(CamelOut):
    week_start_date: dt_date
    days: list[WeeklyPlanDayOut]
    total_miles: float

    @classmethod
    def from_domain(cls, plan: WeeklyPlan) -> "WeeklyPlanOut":
        return cls(
            week_start_date=plan.week_start_date,
            days=[WeeklyPlanDayOut.from_domain(d) for d in plan.days],
            total_miles=plan.total_miles,
        )


class PaceProfileOut(CamelOut):
    easy_pace_range: tuple[float, float]
    threshold_pace: float
    fitness_trend: str

    @classmethod
    def from_domain(cls, profile: PaceProfile) -> "PaceProfileOut":
        return cls(
            easy_pace_range=profile.easy_pace_range,
            threshold_pace=profile.threshold_pace,
            fitness_trend=profile.fitness_trend,
        )


class StatusOut(CamelOut):
    days_to_goal: int
    estimated_finish_time: str
    confidence: str
    predicted_time_minutes: float

    @classmethod
    def from_domain(cls, kpis: StatusKPIs) -> "StatusOut":
        return cls(
            days_to_goal=kpis.days_to_goal,
            estimated_finish_time=kpis.estimated_finish_time,
            confidence=kpis.confidence,
            predicted_time_minutes=kpis.predicted_time_minutes,
        )


class LoadTrendOut(CamelOut):
    trend: str
    last_week_miles: float
    previous_week_miles: float

    @classmethod
    def from_domain(cls, load: LoadTrend) -> "LoadTrendOut":
        return cls(trend=load.trend, last_week_miles=load.last_7d, previous_week_miles=load.previous_7d)


class TrainingSummaryOut(CamelOut):
    weekly_miles: float
    load: LoadTrendOut
    recent_run_count: int
    average_paces: dict[str, Optional[float]]
    last_run_date: Optional[dt_date] = None

    @classmethod
    def from_domain(cls, summary: TrainingSummary) -> "TrainingSummaryOut":
        return cls(
            weekly_miles=summary.weekly_miles,
            load=LoadTrendOut.from_domain(summary.load),
            recent_run_count=summary.recent_run_count,
            average_paces=summary.average_paces,
            last_run_date=summary.last_run_date,
        )


class HealthOut(BaseModel):
    status: str
    env: str
