from __future__ import annotations

import json

from fastapi.testclient import TestClient

from studylog.app import create_app
from studylog.repositories.json_storage import StorageError
from studylog.repositories.store import EntityStore

from conftest import make_settings


def _post_session(client, subject="Math", hours=2, date="2024-03-01"):
    response = client.post("/api/study", json={"subject": subject, "hours": hours, "date": date})
    assert response.status_code == 200, response.text
    return response.json()


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["storage"] == "json"


def test_add_and_list_study_sessions(client):
    created = _post_session(client, subject="Physics", hours=1.5, date="2024-02-01")
    _post_session(client, subject="Math", date="2024-03-01")

    assert set(created) == {"id", "subject", "hours", "date"}
    sessions = client.get("/api/study").json()
    assert [s["subject"] for s in sessions] == ["Math", "Physics"]
    assert sessions[1] == created


def test_out_of_range_hours_are_rejected_before_the_store(client, store):
    for hours in (0.4, 24.1):
        response = client.post("/api/study", json={"subject": "Math", "hours": hours, "date": "2024-03-01"})
        assert response.status_code == 400
        assert "hours" in response.json()["error"]
    assert store.list_study_sessions() == []


def test_string_hours_are_rejected(client, store):
    response = client.post("/api/study", json={"subject": "Math", "hours": "5", "date": "2024-03-01"})
    assert response.status_code == 400
    assert "hours" in response.json()["error"]
    assert store.list_study_sessions() == []


def test_get_study_session_by_id(client):
    created = _post_session(client, subject="Biology", hours=1.5, date="2024-04-02")
    response = client.get(f"/api/study/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created
    missing = client.get("/api/study/missing")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Study session not found"}


def test_update_study_session(client):
    created = _post_session(client)
    response = client.put(f"/api/study/{created['id']}", json={"hours": 3})
    assert response.status_code == 200
    assert response.json() == {**created, "hours": 3}


def test_update_with_empty_payload_succeeds_unchanged(client):
    created = _post_session(client)
    response = client.put(f"/api/study/{created['id']}", json={})
    assert response.status_code == 200
    assert response.json() == created


def test_update_rejects_invalid_fields(client):
    created = _post_session(client)
    response = client.put(f"/api/study/{created['id']}", json={"subject": ""})
    assert response.status_code == 400


def test_update_unknown_session_is_404(client):
    response = client.put("/api/study/missing", json={"hours": 2})
    assert response.status_code == 404
    assert response.json() == {"error": "Study session not found"}


def test_delete_study_session(client):
    created = _post_session(client)
    response = client.delete(f"/api/study/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Study session deleted successfully"}
    assert client.get("/api/study").json() == []
    assert client.delete(f"/api/study/{created['id']}").status_code == 404


def test_stats_endpoint(client):
    assert client.get("/api/stats").json() == {
        "totalHours": 0,
        "numberOfSubjects": 0,
        "averageHoursPerSubject": 0,
    }
    _post_session(client, subject="Math", hours=2)
    _post_session(client, subject="math", hours=3)
    _post_session(client, subject="History", hours=1)
    assert client.get("/api/stats").json() == {
        "totalHours": 6,
        "numberOfSubjects": 2,
        "averageHoursPerSubject": 3,
    }


def test_chart_endpoints(client):
    _post_session(client, subject="Math", hours=2)
    _post_session(client, subject="Art", hours=5)
    subjects = client.get("/api/stats/subjects").json()
    assert subjects == [{"subject": "Art", "hours": 5}, {"subject": "Math", "hours": 2}]

    weekly = client.get("/api/stats/weekly", params={"weeks": 4}).json()
    assert len(weekly) == 4
    assert set(weekly[0]) == {"weekStart", "hours"}
    assert client.get("/api/stats/weekly", params={"weeks": 0}).status_code == 400


def test_todo_lifecycle(client):
    response = client.post("/api/todo", json={"task": "Revise notes"})
    assert response.status_code == 200
    todo = response.json()
    assert todo["completed"] is False

    updated = client.put(f"/api/todo/{todo['id']}", json={"task": "Revise all notes"}).json()
    assert updated == {**todo, "task": "Revise all notes"}
    assert client.get("/api/todo").json() == [updated]

    assert client.delete(f"/api/todo/{todo['id']}").json() == {
        "success": True,
        "message": "Todo deleted successfully",
    }
    assert client.get("/api/todo").json() == []


def test_todo_validation_and_not_found(client):
    assert client.post("/api/todo", json={"task": ""}).status_code == 400
    assert client.put("/api/todo/missing", json={"completed": True}).status_code == 404
    response = client.delete("/api/todo/missing")
    assert response.status_code == 404
    assert response.json() == {"error": "Todo not found"}


def test_get_todo_by_id(client):
    todo = client.post("/api/todo", json={"task": "Outline essay"}).json()
    assert client.get(f"/api/todo/{todo['id']}").json() == todo
    missing = client.get("/api/todo/missing")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Todo not found"}


def test_non_boolean_completed_is_rejected(client, store):
    assert client.post("/api/todo", json={"task": "Read", "completed": "yes"}).status_code == 400
    todo = client.post("/api/todo", json={"task": "Read"}).json()
    assert client.put(f"/api/todo/{todo['id']}", json={"completed": "yes"}).status_code == 400
    assert store.list_todos() == [store.get_todo(todo["id"])]
    assert store.get_todo(todo["id"]).completed is False


def test_toggle_flips_stored_value_and_ignores_body(client):
    todo = client.post("/api/todo", json={"task": "Practice"}).json()
    first = client.post(f"/api/todo/{todo['id']}/toggle", json={"completed": False})
    assert first.status_code == 200
    assert first.json()["completed"] is True
    second = client.post(f"/api/todo/{todo['id']}/toggle", json={"completed": True})
    assert second.json()["completed"] is False
    assert client.post("/api/todo/missing/toggle").status_code == 404


def test_feedback_submission(client):
    response = client.post("/api/feedback", json={"message": "Great tool"})
    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"id", "message", "timestamp"}
    assert client.get("/api/feedback").json() == [body]
    assert client.post("/api/feedback", json={"message": ""}).status_code == 400


def test_feedback_is_rate_limited(store, data_dir):
    app = create_app(store=store, settings=make_settings(data_dir, feedback_rate_limit=2))
    with TestClient(app) as client:
        statuses = [client.post("/api/feedback", json={"message": f"m{i}"}).status_code for i in range(3)]
    assert statuses == [200, 200, 429]
    assert len(store.list_feedback()) == 2


def test_each_app_counts_feedback_separately(store, data_dir):
    settings = make_settings(data_dir, feedback_rate_limit=1)
    first = create_app(store=store, settings=settings)
    second = create_app(store=store, settings=settings)
    assert first.state.rate_limiter is not second.state.rate_limiter
    with TestClient(first) as client:
        assert client.post("/api/feedback", json={"message": "a"}).status_code == 200
        assert client.post("/api/feedback", json={"message": "b"}).status_code == 429
    with TestClient(second) as client:
        assert client.post("/api/feedback", json={"message": "c"}).status_code == 200
    first.state.rate_limiter.reset()
    with TestClient(first) as client:
        assert client.post("/api/feedback", json={"message": "d"}).status_code == 200


def test_report_json_download(client):
    _post_session(client, subject="Math", hours=2, date="2024-03-01")
    response = client.get("/api/report")
    assert response.status_code == 200
    assert response.headers["content-disposition"] == "attachment; filename=study-report.json"
    report = json.loads(response.text)
    assert set(report) >= {"generatedAt", "statistics", "sessions"}
    assert report["statistics"]["totalHours"] == 2
    assert [s["subject"] for s in report["sessions"]] == ["Math"]


def test_report_txt_download(client):
    _post_session(client, subject="Math", hours=2, date="2024-03-01")
    response = client.get("/api/report", params={"format": "txt"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert response.headers["content-disposition"] == "attachment; filename=study-report.txt"
    assert "STUDENT STUDY TRACKER - REPORT" in response.text
    assert "1. Math" in response.text


def test_report_csv_honours_date_range(client):
    _post_session(client, subject="Math", date="2024-03-01")
    _post_session(client, subject="Art", date="2024-04-01")
    response = client.get(
        "/api/report", params={"format": "csv", "startDate": "2024-03-01", "endDate": "2024-03-31"}
    )
    assert response.status_code == 200
    assert response.headers["content-disposition"] == "attachment; filename=study-report.csv"
    lines = response.text.strip().splitlines()
    assert lines[0] == "id,subject,hours,date"
    assert len(lines) == 2
    assert lines[1].endswith(",Math,2,2024-03-01")


def test_report_rejects_bad_dates(client):
    assert client.get("/api/report", params={"startDate": "soon"}).status_code == 400


def test_startup_loads_the_store(store, settings):
    app = create_app(store=store, settings=settings)
    assert not store.loaded
    with TestClient(app):
        assert store.loaded


def test_data_survives_app_restart(client, data_dir, settings):
    created = _post_session(client, subject="Biology")
    restarted = create_app(store=EntityStore(data_dir), settings=settings)
    with TestClient(restarted) as other:
        assert other.get("/api/study").json() == [created]


def test_storage_failures_become_500(client, store, monkeypatch):
    def boom(records):
        raise StorageError("disk full")

    monkeypatch.setattr(store.sessions.file, "write", boom)
    response = client.post("/api/study", json={"subject": "Math", "hours": 2, "date": "2024-03-01"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to save study session"}
    assert "disk full" not in response.text


def test_corrupt_file_surfaces_as_500(data_dir, settings):
    data_dir.mkdir(parents=True)
    (data_dir / "todos.json").write_text("{oops", encoding="utf-8")
    app = create_app(store=EntityStore(data_dir), settings=settings)
    response = TestClient(app).get("/api/todo")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch todos"}


def test_security_headers(client):
    response = client.get("/api/health")
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["x-content-type-options"] == "nosniff"
    assert "strict-transport-security" not in response.headers
