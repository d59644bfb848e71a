"""Client bundle serving and Flask CLI commands."""

from __future__ import annotations

import pytest

from trackitall import create_app
from trackitall.models import Habit


@pytest.fixture
def production_app(test_env, monkeypatch, mailer, google_verifier):
    build = test_env / "build"
    (build / "static").mkdir(parents=True)
    (build / "index.html").write_text("<html>app</html>", encoding="utf-8")
    (build / "static" / "main.js").write_text("console.log(1)", encoding="utf-8")
    monkeypatch.setenv("TRACKITALL_CLIENT_BUILD_DIR", str(build))

    application = create_app("production", mailer=mailer, google_verifier=google_verifier)
    yield application
    application.extensions["trackitall"].engine.dispose()


def test_production_serves_bundle_and_index_fallback(production_app):
    client = production_app.test_client()

    assert client.get("/").get_data(as_text=True) == "<html>app</html>"
    assert client.get("/dashboard/settings").get_data(as_text=True) == "<html>app</html>"
    assert client.get("/static/main.js").get_data(as_text=True) == "console.log(1)"


def test_production_keeps_api_misses_as_json(production_app):
    response = production_app.test_client().get("/api/unknown")

    assert response.status_code == 404
    assert response.get_json()["error"] == "NotFound"


def test_client_not_served_outside_production(client):
    assert client.get("/").status_code == 404


@pytest.fixture
def seeded(app):
    services = app.extensions["trackitall"]
    client = app.test_client()
    client.post("/api/auth/register", json={"email": "cli@example.com", "password": "pw"})
    user = services.users.get_by_email("cli@example.com")
    habit = services.habits.create(Habit(user_id=user.id, name="Walk"), user_id=user.id)
    services.habits.upsert_log(habit.id, "2025-04-01", True, user_id=user.id)
    services.habits.upsert_log(habit.id, "2025-04-02", False, user_id=user.id)
    return user


def test_cli_init_db(app):
    result = app.test_cli_runner().invoke(args=["trackitall-init-db"])

    assert result.exit_code == 0
    assert "Database ready" in result.output


def test_cli_export_writes_csv(app, seeded, tmp_path):
    target = tmp_path / "export.csv"

    result = app.test_cli_runner().invoke(
        args=["trackitall-export", "--email", "cli@example.com", "--output", str(target)]
    )

    assert result.exit_code == 0
    assert "Exported 2 logs" in result.output
    assert target.read_text(encoding="utf-8").splitlines() == [
        "Date,Habit,Category,Completed",
        '"2025-04-01","Walk","General","Yes"',
        '"2025-04-02","Walk","General","No"',
    ]


def test_cli_stats_prints_summary(app, seeded):
    result = app.test_cli_runner().invoke(
        args=["trackitall-stats", "--email", "cli@example.com", "--month", "2025-04"]
    )

    assert result.exit_code == 0
    assert "2025-04: 3% (1/30 check-ins)" in result.output
    assert "Week 5 [29-30]" in result.output


def test_cli_rejects_unknown_account_and_bad_month(app, seeded):
    runner = app.test_cli_runner()

    missing = runner.invoke(args=["trackitall-stats", "--email", "nobody@example.com", "--month", "2025-04"])
    bad_month = runner.invoke(args=["trackitall-stats", "--email", "cli@example.com", "--month", "April"])

    assert missing.exit_code == 1
    assert "No account" in missing.output
    assert bad_month.exit_code == 2


def test_bundle_assets_under_static_are_not_shadowed(production_app):
    rules = {rule.rule for rule in production_app.url_map.iter_rules()}

    assert "/static/<path:filename>" not in rules
    response = production_app.test_client().get("/static/missing.js")
    assert response.get_data(as_text=True) == "<html>app</html>"
