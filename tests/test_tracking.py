from datetime import date, timedelta

import pytest

from quranpro.exceptions import NotFound, ValidationError
from quranpro.tracking.service import TrackingService, clamp_limit


@pytest.fixture
def tracking(db):
    return TrackingService(db)


def test_clamp_limit():
    assert clamp_limit(None, 50, 100) == 50
    assert clamp_limit("abc", 50, 100) == 50
    assert clamp_limit("0", 50, 100) == 50
    assert clamp_limit("20", 50, 100) == 20
    assert clamp_limit(500, 50, 100) == 100


def test_progress_defaults_then_upserts(client, make_user, auth_headers):
    user = make_user()
    headers = auth_headers(user)

    assert client.get("/api/progress", headers=headers).json()["progress"] == {"surah": 1, "ayah": 1, "updated_at": None}

    client.post("/api/progress", json={"surah": 2, "ayah": 255}, headers=headers)
    client.post("/api/progress", json={"surah": 18, "ayah": 10}, headers=headers)

    progress = client.get("/api/progress", headers=headers).json()["progress"]
    assert (progress["surah"], progress["ayah"]) == (18, 10)


def test_progress_validates_surah(client, make_user, auth_headers):
    response = client.post("/api/progress", json={"surah": 115, "ayah": 1}, headers=auth_headers(make_user()))

    assert response.status_code == 400


def test_history_is_newest_first_and_limited(client, make_user, auth_headers):
    headers = auth_headers(make_user())
    for ayah in (1, 2, 3):
        client.post("/api/history", json={"surah": 1, "ayah": ayah, "actionType": "read", "duration": 5}, headers=headers)

    limited = client.get("/api/history/2", headers=headers).json()["history"]
    everything = client.get("/api/history", headers=headers).json()["history"]

    assert [entry["ayah"] for entry in limited] == [3, 2]
    assert len(everything) == 3
    assert everything[0]["action_type"] == "read"


def test_favorites_are_owned(client, make_user, auth_headers):
    owner, other = make_user(), make_user()
    created = client.post(
        "/api/favorites",
        json={"type": "verse", "referenceId": "2:255", "referenceText": "Ayat al-Kursi", "notes": "Night"},
        headers=auth_headers(owner),
    ).json()

    favorites = client.get("/api/favorites", headers=auth_headers(owner)).json()["favorites"]
    assert favorites[0]["reference_id"] == "2:255"
    assert client.get("/api/favorites", headers=auth_headers(other)).json()["favorites"] == []

    assert client.delete(f"/api/favorites/{created['id']}", headers=auth_headers(other)).status_code == 404
    assert client.delete(f"/api/favorites/{created['id']}", headers=auth_headers(owner)).status_code == 200


def test_goals_lifecycle(client, make_user, auth_headers):
    owner, other = make_user(), make_user()
    goal_id = client.post(
        "/api/goals",
        json={"goalType": "daily_verses", "targetValue": 20, "startDate": "2024-03-01", "endDate": "2024-03-31"},
        headers=auth_headers(owner),
    ).json()["goalId"]

    assert client.put(
        f"/api/goals/{goal_id}", json={"currentValue": 5, "isCompleted": False}, headers=auth_headers(other)
    ).status_code == 404
    assert client.put(
        f"/api/goals/{goal_id}", json={"currentValue": 20, "isCompleted": True}, headers=auth_headers(owner)
    ).status_code == 200

    goal = client.get("/api/goals", headers=auth_headers(owner)).json()["goals"][0]
    assert goal["current_value"] == 20
    assert goal["is_completed"] is True
    assert goal["start_date"] == "2024-03-01"


def test_goal_dates_must_be_ordered(tracking, make_user):
    with pytest.raises(ValidationError):
        tracking.create_goal(make_user().id, "khatm", 1, date(2024, 5, 1), date(2024, 4, 1))


def test_reading_session_start_and_end(client, make_user, auth_headers):
    owner, other = make_user(), make_user()
    session_id = client.post(
        "/api/sessions/start", json={"deviceInfo": {"platform": "ios"}}, headers=auth_headers(owner)
    ).json()["sessionId"]

    assert client.put(f"/api/sessions/{session_id}/end", json={}, headers=auth_headers(other)).status_code == 404

    response = client.put(
        f"/api/sessions/{session_id}/end", json={"versesRead": 12, "hasanatEarned": 340}, headers=auth_headers(owner)
    )

    assert response.status_code == 200
    session = response.json()["session"]
    assert session["verses_read"] == 12
    assert session["hasanat_earned"] == 340
    assert session["duration_seconds"] >= 0
    assert session["end_time"] is not None
    assert session["device_info"] == {"platform": "ios"}


def test_stats_increment_accumulates_with_both_field_names(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    client.post("/api/stats", json={"hasanat": 100, "verses": 2, "time": 60, "pages": 1}, headers=headers)
    client.post(
        "/api/quran/stats/increment",
        json={"hasanat": 50, "verses": 1, "time_seconds": 30, "pages_read": 0},
        headers=headers,
    )

    today = client.get("/api/stats/today", headers=headers).json()["stats"]
    assert today == [{
        "date": date.today().isoformat(),
        "hasanat": 150,
        "verses": 3,
        "time_seconds": 90,
        "pages_read": 1,
    }]


def test_stats_all_zero_is_noop(client, make_user, auth_headers, count_rows):
    user = make_user()

    response = client.post("/api/stats", json={"hasanat": 0, "verses": 0}, headers=auth_headers(user))

    assert response.json()["message"] == "No stats to increment"
    assert count_rows("quran_stats", user_id=user.id) == 0


def test_stats_ranges(db, tracking, make_user):
    user = make_user()
    today = date.today()
    for offset, hasanat in ((0, 10), (3, 20), (10, 40), (400, 80)):
        db.increment_daily_stats(user.id, (today - timedelta(days=offset)).isoformat(), hasanat, 1, 60, 1)

    assert [row.hasanat for row in tracking.get_week(user.id)] == [20, 10]
    assert [row.hasanat for row in tracking.get_all(user.id)] == [80, 40, 20, 10]
    assert [row.hasanat for row in tracking.get_daily(user.id, "2")] == [10, 20]

    assert tracking.get_period(user.id, "today").hasanat == 10
    assert tracking.get_period(user.id, "week").hasanat == 30
    assert tracking.get_period(user.id, "month").hasanat == 70
    assert tracking.get_period(user.id, "year").hasanat == 70
    assert tracking.get_period(user.id, "all").to_dict() == {
        "hasanat": 150, "verses": 4, "time_seconds": 240, "pages_read": 4,
    }


def test_stats_period_for_a_single_date(db, tracking, make_user):
    user = make_user()
    db.increment_daily_stats(user.id, "2024-02-10", 70, 7, 700, 2)

    assert tracking.get_period(user.id, "2024-02-10").to_dict() == {
        "hasanat": 70, "verses": 7, "time_seconds": 700, "pages_read": 2,
    }
    assert tracking.get_period(user.id, "2024-02-11").to_dict() == {
        "hasanat": 0, "verses": 0, "time_seconds": 0, "pages_read": 0,
    }

    with pytest.raises(ValidationError):
        tracking.get_period(user.id, "2024-13-45")
    with pytest.raises(ValidationError):
        tracking.get_period(user.id, "decade")


def test_stats_endpoints(client, make_user, auth_headers):
    headers = auth_headers(make_user())
    client.post("/api/stats", json={"hasanat": 10}, headers=headers)

    assert client.get("/api/stats/week", headers=headers).json()["stats"][0]["hasanat"] == 10
    assert client.get("/api/stats/all", headers=headers).json()["stats"][0]["hasanat"] == 10
    assert client.get("/api/stats/daily/30", headers=headers).json()["stats"][0]["hasanat"] == 10
    assert client.get("/api/stats/period/week", headers=headers).json()["stats"]["hasanat"] == 10
    assert client.get("/api/stats/period/forever", headers=headers).status_code == 400


def test_tracking_requires_auth(client):
    assert client.get("/api/progress").status_code == 401
    assert client.post("/api/stats", json={"hasanat": 1}).status_code == 401


def test_delete_unknown_favorite(tracking, make_user):
    with pytest.raises(NotFound):
        tracking.delete_favorite(make_user().id, 12345)
