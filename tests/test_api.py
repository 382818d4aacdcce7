"""
Integration tests for API endpoints
"""
import pytest
from fastapi.testclient import TestClient

from speaknotes.config import Settings
from speaknotes.main import LIVENESS_MESSAGE, create_app

PHOTOSYNTHESIS = (
    "Photosynthesis is the process by which plants convert light into energy. "
    "This is an important topic for exams. Chlorophyll absorbs light."
)
INVALID_PROMPT = "Missing or invalid 'prompt' field in request body"


@pytest.fixture
def client():
    app = create_app(Settings(api_key=None, rate_limit_enabled=False))
    return TestClient(app)


class TestHealthEndpoints:
    def test_liveness(self, client):
        """Root returns the plain-text liveness string"""
        response = client.get("/")
        assert response.status_code == 200
        assert response.text == LIVENESS_MESSAGE
        assert "text/plain" in response.headers["content-type"]

    def test_health_check(self, client):
        """Test health check endpoint"""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert data["checks"]["pipeline"]["status"] == "healthy"

    def test_metrics_endpoint(self, client):
        """Test metrics endpoint"""
        client.post("/api/process", json={"prompt": PHOTOSYNTHESIS})
        response = client.get("/metrics")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "notes_generation_requests_total" in response.text

    def test_process_time_header(self, client):
        response = client.get("/")
        assert "x-process-time" in response.headers


class TestProcessEndpoint:
    def test_generates_notes(self, client):
        """A valid prompt yields structured notes"""
        response = client.post(
            "/api/process",
            json={"prompt": PHOTOSYNTHESIS, "note_id": "n-42", "timestamp": "2024-01-01T10:00:00Z"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["message"] == "Lecture notes generated"
        assert body["note_id"] == "n-42"
        assert body["timestamp"] == "2024-01-01T10:00:00Z"

        data = body["data"]
        assert "Photosynthesis" in [d["term"] for d in data["definitions"]]
        assert data["keywords"][0]["word"] in ("light", "photosynthesis")
        assert data["rawSentenceCount"] == 2
        assert data["keyPoints"] == ["• This is an important topic for exams."]
        assert len(data["questions"]) == 5

    def test_missing_ids_are_null(self, client):
        response = client.post("/api/process", json={"prompt": PHOTOSYNTHESIS, "note_id": 0})
        body = response.json()
        assert body["note_id"] is None
        assert body["timestamp"] is None

    @pytest.mark.parametrize("value,expected", [
        ([], []),
        ({}, {}),
        (7, 7),
        (False, None),
        ("", None),
        (0.0, None),
    ])
    def test_ids_echoed_unless_falsy_scalar(self, client, value, expected):
        """Empty arrays and objects are echoed; falsy scalars become null"""
        response = client.post("/api/process", json={"prompt": PHOTOSYNTHESIS, "note_id": value, "timestamp": value})
        body = response.json()
        assert body["note_id"] == expected
        assert body["timestamp"] == expected

    @pytest.mark.parametrize("payload", [
        {},
        {"prompt": ""},
        {"prompt": 42},
        {"prompt": ["not", "a", "string"]},
        {"text": PHOTOSYNTHESIS},
    ])
    def test_invalid_prompt(self, client, payload):
        """Missing or non-string prompts are rejected with 400"""
        response = client.post("/api/process", json=payload)
        assert response.status_code == 400
        assert response.json() == {"status": "error", "message": INVALID_PROMPT}

    def test_non_json_body(self, client):
        response = client.post(
            "/api/process", content=b"not json", headers={"content-type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == INVALID_PROMPT

    def test_json_array_body(self, client):
        response = client.post("/api/process", json=[PHOTOSYNTHESIS])
        assert response.status_code == 400

    def test_internal_error_hides_detail(self, client, monkeypatch):
        """Unexpected pipeline failures become a generic 500"""
        def explode(text):
            raise RuntimeError("secret internal detail")

        monkeypatch.setattr("speaknotes.routers.notes.generate_notes", explode)
        response = client.post("/api/process", json={"prompt": PHOTOSYNTHESIS})
        assert response.status_code == 500
        assert response.json() == {
            "status": "error",
            "message": "Internal server error while generating notes",
        }
        assert "secret internal detail" not in response.text

    def test_get_not_allowed(self, client):
        response = client.get("/api/process")
        assert response.status_code == 405


class TestRateLimiting:
    def test_limit_exceeded(self):
        """Requests over the configured limit get a JSON 429"""
        app = create_app(Settings(api_key=None, rate_limit="2/minute"))
        client = TestClient(app)

        assert client.get("/").status_code == 200
        assert client.get("/").status_code == 200
        response = client.get("/")
        assert response.status_code == 429
        body = response.json()
        assert body["status"] == "error"
        assert body["message"].startswith("Rate limit exceeded")
