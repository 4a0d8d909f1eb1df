"""Integration tests for API endpoints.

These tests verify API endpoints work correctly end-to-end with the language
model replaced by an in-process fake.
"""

import pytest

from nltask.integrations.errors import ApiError, InvalidResponse, MissingCredential, NetworkError

SCENARIO = "Call @Mom tomorrow #family high priority"


class TestHealthEndpoint:
    """Test GET /health."""

    def test_health(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestParseNaturalLanguageEndpoint:
    """Test POST /parse-natural-language."""

    def test_success_uses_wire_names(self, test_client, fake_extractor, remote_call_result):
        fake_extractor.result = remote_call_result

        response = test_client.post("/parse-natural-language", json={"text": SCENARIO})

        assert response.status_code == 200
        data = response.json()
        assert data["people"] == ["Mom"]
        assert data["tags"] == ["family"]
        assert data["priority"] == "high"
        assert data["dueDate"] == "2024-05-02"
        assert data["originalDatePhrase"] == "tomorrow"
        assert data["taskTitle"] == "Call high priority"
        assert data["success"] is True

    def test_live_typing_flag_forwarded(self, test_client, fake_extractor):
        response = test_client.post("/parse-natural-language", json={"text": "meet @Al", "isLiveTyping": True})

        assert response.status_code == 200
        assert fake_extractor.calls[0]["is_live_typing"] is True

    @pytest.mark.parametrize("body", [{}, {"text": ""}, {"text": "   "}, {"text": None}])
    def test_invalid_request(self, test_client, fake_extractor, body):
        response = test_client.post("/parse-natural-language", json=body)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Invalid input: text field is required",
            "success": False,
            "errorType": "invalid_request",
        }
        assert fake_extractor.calls == []

    @pytest.mark.parametrize("error,status_code", [
        (MissingCredential("OPENAI_API_KEY not configured"), 500),
        (InvalidResponse("No JSON object found in model response"), 502),
        (ApiError("Language model error: 429", status_code=429), 502),
        (NetworkError("Could not reach the language model"), 504),
    ])
    def test_typed_errors(self, test_client, fake_extractor, error, status_code):
        fake_extractor.error = error

        response = test_client.post("/parse-natural-language", json={"text": SCENARIO})

        assert response.status_code == status_code
        data = response.json()
        assert data["success"] is False
        assert data["errorType"] == error.error_type
        assert data["error"] == str(error)


class TestTaskParseEndpoint:
    """Test POST /tasks/parse."""

    def test_merged_task(self, test_client, fake_extractor, remote_call_result):
        fake_extractor.result = remote_call_result

        response = test_client.post("/tasks/parse", json={"text": SCENARIO})

        assert response.status_code == 200
        data = response.json()
        assert data["draft"]["source"] == "merged"
        assert data["notice"] is None
        task = data["task"]
        assert task["title"] == "Call high priority"
        assert task["priority"] == "high"
        assert task["due_date"] == "2024-05-02"
        assert [t["name"] for t in task["tags"]] == ["family"]
        assert [p["name"] for p in task["people"]] == ["Mom"]

    def test_remote_failure_falls_back(self, test_client, fake_extractor):
        fake_extractor.error = InvalidResponse("I'm sorry")

        response = test_client.post("/tasks/parse", json={"text": SCENARIO})

        assert response.status_code == 200
        data = response.json()
        assert data["draft"]["source"] == "local"
        assert data["task"]["title"] == SCENARIO
        assert [t["name"] for t in data["task"]["tags"]] == ["family"]

    def test_people_reused_across_tasks(self, test_client):
        first = test_client.post("/tasks/parse", json={"text": "Call @Mom"}).json()
        second = test_client.post("/tasks/parse", json={"text": "Visit @mom"}).json()

        assert first["task"]["people"][0]["id"] == second["task"]["people"][0]["id"]

    def test_blank_text_returns_notice(self, test_client):
        response = test_client.post("/tasks/parse", json={"text": "  "})

        assert response.status_code == 200
        assert response.json()["notice"] == "Could not parse task input. Please try rephrasing."

    def test_missing_text(self, test_client):
        response = test_client.post("/tasks/parse", json={})
        assert response.status_code == 422
