"""Profile, export and account deletion endpoints."""

from __future__ import annotations


def test_profile_includes_counts(client, auth_headers):
    habit = client.post("/api/habits", json={"name": "Read"}, headers=auth_headers).get_json()
    client.post(
        f"/api/habits/{habit['id']}/log",
        json={"date": "2025-01-01", "completed": True},
        headers=auth_headers,
    )

    me = client.get("/api/users/me", headers=auth_headers).get_json()

    assert me["email"] == "alice@example.com"
    assert me["name"] == "alice"
    assert me["provider"] == "local"
    assert me["createdAt"]
    assert me["stats"] == {"habitsCount": 1, "logsCount": 1}


def test_rename_profile(client, auth_headers):
    response = client.patch("/api/users/me", json={"name": "  Alice A.  "}, headers=auth_headers)
    blank = client.patch("/api/users/me", json={"name": " "}, headers=auth_headers)

    assert response.get_json()["name"] == "Alice A."
    assert blank.status_code == 400


def test_export_streams_csv(client, auth_headers):
    habit = client.post(
        "/api/habits", json={"name": 'She said "hi", then left'}, headers=auth_headers
    ).get_json()
    client.post(
        f"/api/habits/{habit['id']}/log",
        json={"date": "2025-01-02", "completed": True},
        headers=auth_headers,
    )

    response = client.get("/api/users/me/export?format=csv", headers=auth_headers)

    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    assert 'filename="habit-progress.csv"' in response.headers["Content-Disposition"]
    assert response.get_data(as_text=True) == (
        "Date,Habit,Category,Completed\n"
        '"2025-01-02","She said ""hi"", then left","General","Yes"\n'
    )


def test_export_rejects_unknown_format(client, auth_headers):
    response = client.get("/api/users/me/export?format=pdf", headers=auth_headers)

    assert response.status_code == 400


def test_delete_account_removes_everything(client, register, auth_headers):
    habit = client.post("/api/habits", json={"name": "Read"}, headers=auth_headers).get_json()
    client.post(
        f"/api/habits/{habit['id']}/log",
        json={"date": "2025-01-01", "completed": True},
        headers=auth_headers,
    )

    deleted = client.delete("/api/users/me", headers=auth_headers)
    after = client.get("/api/users/me", headers=auth_headers)
    fresh = register()

    assert deleted.status_code == 200
    assert after.status_code == 401
    assert client.get("/api/habits", headers=fresh).get_json() == []
    assert client.get("/api/users/me", headers=fresh).get_json()["stats"] == {
        "habitsCount": 0,
        "logsCount": 0,
    }


def test_unknown_api_route_is_json_404(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.get_json()["error"] == "NotFound"
