"""HTTP tests for the plan API."""

from __future__ import annotations

from datetime import date, timedelta

from fastapi.testclient import TestClient

from api.main import create_app

AS_OF = date(2026, 3, 2)
GOAL = {"raceDate": (AS_OF + timedelta(days=84)).isoformat(), "distance": 13.1, "targetTimeMinutes": 95}


def _client() -> TestClient:
    return TestClient(create_app())


def _runs(count=5):
    return [
        {
            "id": f"run-{i}",
            "date": f"{(AS_OF - timedelta(days=i)).isoformat()}T07:00:00Z",
            "distanceMiles": 3.0,
            "durationSeconds": 1620,
            "averagePaceMinPerMile": 9.0,
            "type": "easy",
        }
        for i in range(count)
    ]


def test_health():
    resp = _client().get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_request_id_is_echoed_or_generated():
    client = _client()
    resp = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"
    generated = client.get("/health").headers["X-Request-ID"]
    assert len(generated) == 32


def test_weekly_plan_camel_case_payload():
    resp = _client().post("/api/v1/plans/weekly", json={"goal": GOAL, "runs": _runs(), "asOf": AS_OF.isoformat()})
    assert resp.status_code == 200
    body = resp.json()
    assert set(body) == {"weekStartDate", "days", "totalMiles"}
    assert body["weekStartDate"] == "2026-03-02"
    assert body["totalMiles"] == 17.1
    assert len(body["days"]) == 7
    first = body["days"][0]
    assert set(first) == {"date", "dayOfWeek", "runType", "distanceMiles", "paceRangeMinPerMile", "coachingIntent"}
    assert first["dayOfWeek"] == "Monday"
    assert [d["runType"] for d in body["days"]] == ["rest", "tempo", "easy", "rest", "easy", "long", "easy"]


def test_weekly_plan_from_assessment_is_reproducible_with_seed():
    payload = {
        "goal": GOAL,
        "assessment": {"fitnessLevel": "intermediate", "weeklyMileage": 20, "daysPerWeek": 4},
        "asOf": AS_OF.isoformat(),
        "seed": 12,
    }
    client = _client()
    first = client.post("/api/v1/plans/weekly", json=payload)
    second = client.post("/api/v1/plans/weekly", json=payload)
    assert first.status_code == 200
    assert first.json() == second.json()


def test_weekly_plan_without_history_is_cold_start():
    resp = _client().post("/api/v1/plans/weekly", json={"goal": GOAL, "asOf": AS_OF.isoformat()})
    assert resp.status_code == 200
    assert resp.json()["totalMiles"] == 12.0


def test_twelve_week_plan():
    resp = _client().post("/api/v1/plans/twelve-week", json={"goal": GOAL, "runs": _runs(), "asOf": AS_OF.isoformat()})
    assert resp.status_code == 200
    weeks = resp.json()
    assert len(weeks) == 12
    assert weeks[0]["weekStartDate"] == "2026-03-02"
    assert weeks[-1]["weekStartDate"] == "2026-05-18"


def test_zero_distance_goal_is_unprocessable():
    goal = dict(GOAL, distance=0)
    resp = _client().post("/api/v1/plans/weekly", json={"goal": goal})
    assert resp.status_code == 422


def test_malformed_race_date_is_unprocessable():
    goal = dict(GOAL, raceDate="someday")
    resp = _client().post("/api/v1/plans/twelve-week", json={"goal": goal})
    assert resp.status_code == 422


def test_pace_profile_defaults_without_data():
    resp = _client().post("/api/v1/pace-profile", json={})
    assert resp.status_code == 200
    assert resp.json() == {"easyPaceRange": [9.0, 10.0], "thresholdPace": 8.0, "fitnessTrend": "stable"}


def test_pace_profile_from_runs():
    resp = _client().post("/api/v1/pace-profile", json={"runs": _runs()})
    assert resp.status_code == 200
    body = resp.json()
    assert body["easyPaceRange"] == [8.7, 9.5]
    assert body["thresholdPace"] == 8.3


def test_status():
    resp = _client().post("/api/v1/status", json={"goal": GOAL, "runs": _runs(2), "today": AS_OF.isoformat()})
    assert resp.status_code == 200
    assert resp.json() == {
        "daysToGoal": 84,
        "estimatedFinishTime": "1h 35m",
        "confidence": "low",
        "predictedTimeMinutes": 95.0,
    }


def test_training_summary():
    resp = _client().post("/api/v1/training-summary", json={"runs": _runs(), "asOf": AS_OF.isoformat()})
    assert resp.status_code == 200
    body = resp.json()
    assert body["weeklyMiles"] == 15.0
    assert body["load"] == {"trend": "increasing", "lastWeekMiles": 15.0, "previousWeekMiles": 0.0}
    assert body["recentRunCount"] == 5
    assert body["averagePaces"]["easy"] == 9.0
    assert body["averagePaces"]["tempo"] is None
    assert body["lastRunDate"] == "2026-03-02"
