from datetime import date


def test_admin_routes_reject_regular_users(client, make_user, auth_headers):
    reader = make_user()

    assert client.get("/admin/users").status_code == 401
    assert client.get("/admin/users", headers=auth_headers(reader)).status_code == 403
    assert client.get("/admin/stats/global", headers=auth_headers(reader)).status_code == 403


def test_list_and_search_users(client, make_user, auth_headers):
    admin = make_user(email="admin@example.com", role="admin")
    make_user(email="aisha@example.com")
    make_user(email="omar@example.com")

    everyone = client.get("/admin/users", headers=auth_headers(admin)).json()
    found = client.get("/admin/users", params={"search": "AISHA"}, headers=auth_headers(admin)).json()

    assert everyone["count"] == 3
    assert [user["email"] for user in found["users"]] == ["aisha@example.com"]


def test_reset_and_set_quota(client, db, make_user, auth_headers):
    admin = make_user(email="admin@example.com", role="admin")
    reader = make_user(quota=10, used=10)

    assert client.post(f"/admin/users/{reader.id}/quota/reset", headers=auth_headers(admin)).status_code == 200
    assert client.put(f"/admin/users/{reader.id}/quota", json={"quota": 50}, headers=auth_headers(admin)).status_code == 200
    assert client.put(f"/admin/users/{reader.id}/quota", json={"quota": 0}, headers=auth_headers(admin)).status_code == 400
    assert client.post("/admin/users/nobody/quota/reset", headers=auth_headers(admin)).status_code == 404

    refreshed = db.get_user_by_id(reader.id)
    assert (refreshed.messages_used, refreshed.messages_quota) == (0, 50)


def test_delete_user_cascades(client, make_user, auth_headers, count_rows):
    admin = make_user(email="admin@example.com", role="admin")
    reader = make_user()
    client.post("/api/chat", json={"message": "Hello"}, headers=auth_headers(reader))

    response = client.delete(f"/admin/users/{reader.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json()["email"] == reader.email
    assert count_rows("conversations", user_id=reader.id) == 0
    assert count_rows("messages", user_id=reader.id) == 0
    assert client.delete(f"/admin/users/{reader.id}", headers=auth_headers(admin)).status_code == 404


def test_global_and_user_stats(client, db, make_user, auth_headers):
    admin = make_user(email="admin@example.com", role="admin")
    first, second = make_user(), make_user()
    today = date.today().isoformat()
    db.increment_daily_stats(first.id, today, 100, 5, 60, 1)
    db.increment_daily_stats(second.id, today, 300, 9, 120, 2)

    global_stats = client.get("/admin/stats/global", headers=auth_headers(admin)).json()["stats"]
    user_stats = client.get("/admin/stats/users", headers=auth_headers(admin)).json()["stats"]

    assert global_stats == [{
        "date": today,
        "active_users": 2,
        "hasanat": 400,
        "verses": 14,
        "time_seconds": 180,
        "pages_read": 3,
    }]
    assert [row["id"] for row in user_stats[:2]] == [second.id, first.id]
    assert user_stats[0]["total_hasanat"] == 300
    assert user_stats[-1]["active_days"] == 0
