"""Pydantic validation models for all user-facing data entry points."""

from __future__ import annotations

import random
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from core.models import (
    EXPERIENCE_LEVELS,
    FITNESS_LEVELS,
    RUN_CATEGORIES,
    FitnessAssessment,
    Goal,
    Run,
    parse_date,
    parse_datetime,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GoalInput(CamelModel):
    race_date: date
    distance: float = Field(gt=0)
    target_time_minutes: float = Field(gt=0)

    @field_validator("race_date", mode="before")
    @classmethod
    def lenient_date(cls, v):
        return parse_date(v)

    def to_domain(self) -> Goal:
        return Goal(race_date=self.race_date, distance=self.distance, target_time_minutes=self.target_time_minutes)


class RunInput(CamelModel):
    id: str = ""
    date: datetime
    distance_miles: float = Field(gt=0)
    duration_seconds: int = Field(gt=0)
    average_pace_min_per_mile: Optional[float] = Field(default=None, gt=0)
    type: Optional[str] = None
    elevation_feet: Optional[float] = None
    notes: Optional[str] = Field(default=None, max_length=2000)
    effort: Optional[int] = Field(default=None, ge=1, le=10)

    @field_validator("date", mode="before")
    @classmethod
    def lenient_datetime(cls, v):
        return parse_datetime(v)

    @field_validator("type")
    @classmethod
    def valid_category(cls, v):
        if v is not None and v not in RUN_CATEGORIES:
            raise ValueError(f"type must be one of {sorted(RUN_CATEGORIES)}")
        return v

    @model_validator(mode="after")
    def _fill_pace(self):
        if self.average_pace_min_per_mile is None:
            self.average_pace_min_per_mile = round(self.duration_seconds / 60.0 / self.distance_miles, 2)
        return self

    def to_domain(self) -> Run:
        return Run(
            id=self.id,
            date=self.date,
            distance_miles=self.distance_miles,
            duration_seconds=self.duration_seconds,
            average_pace_min_per_mile=float(self.average_pace_min_per_mile),
            category=self.type,
            elevation_feet=self.elevation_feet,
            notes=self.notes,
            effort=self.effort,
        )


class FitnessAssessmentInput(CamelModel):
    fitness_level: str
    weekly_mileage: float = Field(ge=0)
    days_per_week: int = Field(ge=1, le=7)
    easy_pace_min_per_mile: Optional[float] = Field(default=None, gt=0)
    recent_running_experience: str = "regular"
    longest_run_miles: Optional[float] = Field(default=None, ge=0)
    completed_at: Optional[datetime] = None

    @field_validator("fitness_level")
    @classmethod
    def valid_fitness_level(cls, v):
        if v not in FITNESS_LEVELS:
            raise ValueError(f"fitness_level must be one of {FITNESS_LEVELS}")
        return v

    @field_validator("recent_running_experience")
    @classmethod
    def valid_experience(cls, v):
        if v not in EXPERIENCE_LEVELS:
            raise ValueError(f"recent_running_experience must be one of {EXPERIENCE_LEVELS}")
        return v

    def to_domain(self) -> FitnessAssessment:
        return FitnessAssessment(
            fitness_level=self.fitness_level,
            weekly_mileage=self.weekly_mileage,
            days_per_week=self.days_per_week,
            recent_running_experience=self.recent_running_experience,
            easy_pace_min_per_mile=self.easy_pace_min_per_mile,
            longest_run_miles=self.longest_run_miles,
            completed_at=self.completed_at,
        )


class _HistoryInput(CamelModel):
    runs: list[RunInput] = Field(default_factory=list)
    assessment: Optional[FitnessAssessmentInput] = None
    as_of: Optional[date] = None
    seed: Optional[int] = None

    @field_validator("as_of", mode="before")
    @classmethod
    def lenient_as_of(cls, v):
        return None if v is None else parse_date(v)

    def domain_runs(self) -> list[Run]:
        return [r.to_domain() for r in self.runs]

    def domain_assessment(self) -> Optional[FitnessAssessment]:
        return self.assessment.to_domain() if self.assessment else None

    def rng(self) -> Optional[random.Random]:
        return random.Random(self.seed) if self.seed is not None else None


class WeeklyPlanRequest(_HistoryInput):
    goal: GoalInput
    week_start: Optional[date] = None
    target_weekly_miles: Optional[float] = Field(default=None, ge=0, le=200)

    @field_validator("week_start", mode="before")
    @classmethod
    def lenient_week_start(cls, v):
        return None if v is None else parse_date(v)


class TwelveWeekPlanRequest(_HistoryInput):
    goal: GoalInput


class PaceProfileRequest(_HistoryInput):
    goal: Optional[GoalInput] = None


class StatusRequest(CamelModel):
    goal: GoalInput
    runs: list[RunInput] = Field(default_factory=list)
    today: Optional[date] = None


class TrainingSummaryRequest(CamelModel):
    runs: list[RunInput] = Field(default_factory=list)
    as_of: Optional[date] = None

    @field_validator("as_of", mode="before")
    @classmethod
    def lenient_as_of(cls, v):
        return None if v is None else parse_date(v)
