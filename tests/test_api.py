"""Tests for API endpoints."""

import pytest
from fastapi.testclient import TestClient

from api.http_server import create_app
from config import Settings


def add_task(client, **fields):
    response = client.post("/api/task", json=fields)
    assert response.status_code == 200, response.text
    return response.json()["id"]


class TestCreateTask:
    """Test POST /api/task."""

    def test_create_task(self, client):
        """Test creating a task dated in the future."""
        task_id = add_task(client, date="20240201", title="Dentist", comment="at 10:00", repeat="")

        response = client.get("/api/task", params={"id": task_id})

        assert response.status_code == 200
        assert response.json() == {
            "id": task_id,
            "date": "20240201",
            "title": "Dentist",
            "comment": "at 10:00",
            "repeat": ""
        }

    def test_empty_date_defaults_to_today(self, client):
        task_id = add_task(client, title="Call mom")

        assert client.get("/api/task", params={"id": task_id}).json()["date"] == "20240126"

    def test_past_one_shot_task_moves_to_today(self, client):
        task_id = add_task(client, date="20240101", title="Overdue")

        assert client.get("/api/task", params={"id": task_id}).json()["date"] == "20240126"

    def test_past_repeating_task_moves_to_next_occurrence(self, client):
        task_id = add_task(client, date="20240110", title="Water plants", repeat="d 7")

        assert client.get("/api/task", params={"id": task_id}).json()["date"] == "20240131"

    def test_past_yearly_leap_day_task(self, client):
        task_id = add_task(client, date="20200229", title="Birthday", repeat="y")

        assert client.get("/api/task", params={"id": task_id}).json()["date"] == "20240228"

    def test_missing_title(self, client):
        response = client.post("/api/task", json={"date": "20240201", "title": ""})

        assert response.status_code == 400
        assert "error" in response.json()

    def test_invalid_date(self, client):
        response = client.post("/api/task", json={"date": "26.01.2024", "title": "Task"})

        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.parametrize("repeat", ["weekly", "d 401", "d 0", "d"])
    def test_invalid_repeat(self, client, repeat):
        response = client.post("/api/task", json={"date": "20240201", "title": "Task", "repeat": repeat})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid recurrence rule"}

    def test_malformed_json(self, client):
        response = client.post(
            "/api/task",
            content="{bad json}",
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert "error" in response.json()


class TestGetTask:
    """Test GET /api/task."""

    def test_missing_id(self, client):
        response = client.get("/api/task")

        assert response.status_code == 400
        assert response.json() == {"error": "Task id is not specified"}

    def test_invalid_id(self, client):
        assert client.get("/api/task", params={"id": "abc"}).status_code == 400

    def test_not_found(self, client):
        response = client.get("/api/task", params={"id": "999"})

        assert response.status_code == 404
        assert response.json() == {"error": "Task not found"}


class TestUpdateTask:
    """Test PUT /api/task."""

    def test_update_task(self, client):
        task_id = add_task(client, date="20240201", title="Draft")

        response = client.put("/api/task", json={
            "id": task_id,
            "date": "20240301",
            "title": "Final",
            "comment": "updated",
            "repeat": "y"
        })

        assert response.status_code == 200
        assert response.json() == {}
        assert client.get("/api/task", params={"id": task_id}).json() == {
            "id": task_id,
            "date": "20240301",
            "title": "Final",
            "comment": "updated",
            "repeat": "y"
        }

    def test_update_with_numeric_id(self, client):
        task_id = add_task(client, date="20240201", title="Draft")

        response = client.put("/api/task", json={"id": int(task_id), "date": "20240202", "title": "Final"})

        assert response.status_code == 200
        assert client.get("/api/task", params={"id": task_id}).json()["date"] == "20240202"

    @pytest.mark.parametrize("payload", [
        {"date": "20240201", "title": "No id"},
        {"id": "abc", "date": "20240201", "title": "Bad id"},
        {"id": "1", "date": "20240201", "title": ""},
        {"id": "1", "date": "2024-02-01", "title": "Bad date"},
        {"id": "1", "date": "20240125", "title": "Past date"},
        {"id": "1", "date": "20240201", "title": "Bad repeat", "repeat": "x"},
    ])
    def test_invalid_update(self, client, payload):
        add_task(client, date="20240201", title="Draft")

        response = client.put("/api/task", json=payload)

        assert response.status_code == 400
        assert "error" in response.json()

    def test_update_not_found(self, client):
        response = client.put("/api/task", json={"id": "999", "date": "20240201", "title": "Ghost"})

        assert response.status_code == 404


class TestDeleteTask:
    """Test DELETE /api/task."""

    def test_delete_task(self, client):
        task_id = add_task(client, date="20240201", title="Temporary")

        response = client.delete("/api/task", params={"id": task_id})

        assert response.status_code == 200
        assert response.json() == {}
        assert client.get("/api/task", params={"id": task_id}).status_code == 404

    def test_delete_not_found(self, client):
        assert client.delete("/api/task", params={"id": "999"}).status_code == 404

    def test_delete_missing_id(self, client):
        assert client.delete("/api/task").status_code == 400


class TestCompleteTask:
    """Test POST /api/task/done."""

    def test_one_shot_task_is_deleted(self, client):
        task_id = add_task(client, date="20240126", title="Once")

        response = client.post("/api/task/done", params={"id": task_id})

        assert response.status_code == 200
        assert response.json() == {}
        assert client.get("/api/task", params={"id": task_id}).status_code == 404

    def test_daily_task_moves_forward(self, client):
        task_id = add_task(client, date="20240126", title="Daily", comment="keep", repeat="d 1")

        client.post("/api/task/done", params={"id": task_id})

        assert client.get("/api/task", params={"id": task_id}).json() == {
            "id": task_id,
            "date": "20240127",
            "title": "Daily",
            "comment": "keep",
            "repeat": "d 1"
        }

    def test_future_task_moves_past_its_date(self, client):
        task_id = add_task(client, date="20240201", title="Weekly", repeat="d 7")

        client.post("/api/task/done", params={"id": task_id})

        assert client.get("/api/task", params={"id": task_id}).json()["date"] == "20240208"

    def test_yearly_task(self, client):
        task_id = add_task(client, date="20240229", title="Leap", repeat="y")

        client.post("/api/task/done", params={"id": task_id})

        assert client.get("/api/task", params={"id": task_id}).json()["date"] == "20250228"

    def test_not_found(self, client):
        assert client.post("/api/task/done", params={"id": "999"}).status_code == 404

    def test_missing_id(self, client):
        assert client.post("/api/task/done").status_code == 400


class TestListTasks:
    """Test GET /api/tasks."""

    def test_empty_list(self, client):
        response = client.get("/api/tasks")

        assert response.status_code == 200
        assert response.json() == {"tasks": []}

    def test_ordered_by_date(self, client):
        add_task(client, date="20240301", title="Third")
        add_task(client, date="20240127", title="First")
        add_task(client, date="20240215", title="Second")

        titles = [task["title"] for task in client.get("/api/tasks").json()["tasks"]]

        assert titles == ["First", "Second", "Third"]

    def test_search_text(self, client):
        add_task(client, date="20240201", title="Buy milk")
        add_task(client, date="20240202", title="Gym", comment="leg day, bring MILK shake")
        add_task(client, date="20240203", title="Read")

        titles = [task["title"] for task in client.get("/api/tasks", params={"search": "milk"}).json()["tasks"]]

        assert titles == ["Buy milk", "Gym"]

    @pytest.mark.parametrize("search", ["02.02.2024", "20240202"])
    def test_search_date(self, client, search):
        add_task(client, date="20240201", title="Before")
        add_task(client, date="20240202", title="Target")

        tasks = client.get("/api/tasks", params={"search": search}).json()["tasks"]

        assert [task["title"] for task in tasks] == ["Target"]

    def test_limit(self, web_dir):
        settings = Settings(database_url="sqlite://", web_dir=str(web_dir), password="", tasks_limit=2)

        with TestClient(create_app(settings)) as client:
            for day in ("20990101", "20990102", "20990103"):
                add_task(client, date=day, title=day)

            tasks = client.get("/api/tasks").json()["tasks"]

        assert [task["date"] for task in tasks] == ["20990101", "20990102"]


class TestNextDateEndpoint:
    """Test GET /api/nextdate."""

    def test_next_date(self, client):
        response = client.get("/api/nextdate", params={"now": "20240126", "date": "20240126", "repeat": "d 7"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "20240202"

    @pytest.mark.parametrize("params", [
        {"now": "20240126", "date": "20240126", "repeat": ""},
        {"now": "20240126", "date": "20240126", "repeat": "d 405"},
        {"now": "bad", "date": "20240126", "repeat": "d 1"},
        {"now": "20240126", "date": "bad", "repeat": "y"},
        {},
    ])
    def test_errors_give_empty_body(self, client, params):
        response = client.get("/api/nextdate", params=params)

        assert response.status_code == 200
        assert response.text == ""


class TestServerEndpoints:
    """Test health and static file endpoints."""

    def test_health_endpoint(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "dayplanner"

    def test_index_page(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "<h1>Planner</h1>" in response.text

    def test_static_asset(self, client):
        response = client.get("/css/style.css")

        assert response.status_code == 200
        assert response.text == "body { background-color: #fff; }"

    def test_missing_asset(self, client):
        assert client.get("/js/missing.js").status_code == 404
