"""Tests for synthesising run history from a fitness assessment."""

from __future__ import annotations

import random
from datetime import datetime, timedelta

import pytest

from core.models import FitnessAssessment
from core.services.assessment import assessment_to_runs, estimate_easy_pace

NOW = datetime(2026, 3, 2, 12, 0)


def _assessment(**overrides) -> FitnessAssessment:
    fields = {
        "fitness_level": "intermediate",
        "weekly_mileage": 35.0,
        "days_per_week": 7,
        "recent_running_experience": "regular",
    }
    fields.update(overrides)
    return FitnessAssessment(**fields)


def test_seven_days_35_miles_averages_about_five():
    runs = assessment_to_runs(_assessment(), rng=random.Random(42), now=NOW)
    assert runs
    avg = sum(r.distance_miles for r in runs) / len(runs)
    assert 3.5 <= avg <= 6.0
    assert abs(avg - 5.0) <= 1.5


def test_run_count_capped():
    runs = assessment_to_runs(_assessment(), rng=random.Random(1), now=NOW)
    assert len(runs) == 10
    few = assessment_to_runs(_assessment(days_per_week=2, weekly_mileage=10), rng=random.Random(1), now=NOW)
    assert 1 <= len(few) <= 4


def test_single_day_per_week_never_empty():
    for seed in range(25):
        runs = assessment_to_runs(_assessment(days_per_week=1, weekly_mileage=4), rng=random.Random(seed), now=NOW)
        assert 1 <= len(runs) <= 2


def test_runs_sorted_most_recent_first_within_lookback():
    runs = assessment_to_runs(_assessment(days_per_week=4, weekly_mileage=20), rng=random.Random(3), now=NOW)
    dates = [r.date for r in runs]
    assert dates == sorted(dates, reverse=True)
    assert all(NOW - timedelta(days=21) <= d <= NOW + timedelta(hours=12) for d in dates)


def test_synthetic_runs_are_physically_plausible():
    runs = assessment_to_runs(
        _assessment(fitness_level="advanced", weekly_mileage=45, days_per_week=6, longest_run_miles=14),
        rng=random.Random(11),
        now=NOW,
    )
    for run in runs:
        assert run.distance_miles > 0
        assert run.duration_seconds > 0
        assert 5.0 <= run.average_pace_min_per_mile <= 14.0
        assert run.category in {"easy", "tempo", "interval", "long"}
        assert run.id.startswith("synthetic-")


def test_zero_mileage_still_produces_positive_distances():
    runs = assessment_to_runs(
        _assessment(fitness_level="beginner", weekly_mileage=0, days_per_week=3, recent_running_experience="none"),
        rng=random.Random(5),
        now=NOW,
    )
    assert runs
    assert all(r.distance_miles >= 1.0 for r in runs)


def test_seeded_source_is_reproducible():
    a = assessment_to_runs(_assessment(days_per_week=5), rng=random.Random(99), now=NOW)
    b = assessment_to_runs(_assessment(days_per_week=5), rng=random.Random(99), now=NOW)
    assert a == b


def test_zero_days_per_week_is_rejected():
    with pytest.raises(ValueError):
        assessment_to_runs(_assessment(days_per_week=0), rng=random.Random(0), now=NOW)


def test_estimate_easy_pace_levels():
    assert estimate_easy_pace(_assessment(fitness_level="beginner", weekly_mileage=5, recent_running_experience="none")) == 13.0
    assert estimate_easy_pace(_assessment(fitness_level="intermediate", weekly_mileage=25)) == 8.5
    assert estimate_easy_pace(_assessment(fitness_level="intermediate", weekly_mileage=10, recent_running_experience="some")) == 9.5
    assert estimate_easy_pace(_assessment(fitness_level="advanced", weekly_mileage=40)) == 7.0


def test_estimate_easy_pace_reported_value_is_clamped():
    assert estimate_easy_pace(_assessment(easy_pace_min_per_mile=6.0)) == 7.0
    assert estimate_easy_pace(_assessment(easy_pace_min_per_mile=9.25)) == 9.25
