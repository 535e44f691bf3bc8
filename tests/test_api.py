import pytest
from fastapi.testclient import TestClient

from voiceguard.main import create_app
from voiceguard.runner import RunState
from voiceguard.utils.audio import SILENCE_MP3_BASE64

from conftest import FailingClassifier, VALID_KEY

ENDPOINT = "/api/voice-detection"


@pytest.fixture
def client(settings, stub):
    return TestClient(create_app(settings, classifier=stub))


def payload(**overrides):
    p = {"language": "English", "audioFormat": "mp3", "audioBase64": SILENCE_MP3_BASE64}
    p.update(overrides)
    return p


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "endpoint": "https://your-domain.com/api/voice-detection"}


def test_detect_success(client):
    resp = client.post(ENDPOINT, json=payload(language="Malayalam"), headers={"x-api-key": VALID_KEY})
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "success"
    assert data["language"] == "Malayalam"
    assert data["classification"] == "HUMAN"
    assert data["confidenceScore"] == 0.92
    assert data["explanation"]


def test_detect_uppercase_header(client):
    resp = client.post(ENDPOINT, json=payload(), headers={"X-API-KEY": VALID_KEY})
    assert resp.status_code == 200


def test_detect_data_uri_payload(client, stub):
    resp = client.post(
        ENDPOINT,
        json=payload(audioBase64="data:audio/mp3;base64," + SILENCE_MP3_BASE64),
        headers={"x-api-key": VALID_KEY},
    )
    assert resp.status_code == 200
    assert stub.calls[-1] == (SILENCE_MP3_BASE64, "English")


def test_detect_wrong_key(client):
    resp = client.post(ENDPOINT, json=payload(), headers={"x-api-key": "wrong_key"})
    assert resp.status_code == 401
    assert resp.json() == {"status": "error", "message": "Invalid API key or malformed request"}


def test_detect_no_key(client):
    resp = client.post(ENDPOINT, json=payload())
    assert resp.status_code == 401


@pytest.mark.parametrize("body,fragment", [
    ({"language": "English", "audioFormat": "mp3"}, "Missing required fields"),
    (payload(language="Spanish"), "Unsupported language"),
    (payload(audioFormat="wav"), "Invalid audioFormat"),
])
def test_detect_validation_errors(client, body, fragment):
    resp = client.post(ENDPOINT, json=body, headers={"x-api-key": VALID_KEY})
    assert resp.status_code == 400
    data = resp.json()
    assert data["status"] == "error"
    assert fragment in data["message"]
    assert set(data) == {"status", "message"}


def test_detect_invalid_json(client):
    resp = client.post(
        ENDPOINT,
        content=b"{not json",
        headers={"x-api-key": VALID_KEY, "Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid API key or malformed request"


def test_detect_empty_body(client):
    resp = client.post(ENDPOINT, headers={"x-api-key": VALID_KEY})
    assert resp.status_code == 400
    assert "Missing required fields" in resp.json()["message"]


def test_detect_internal_error(settings):
    client = TestClient(create_app(settings, classifier=FailingClassifier(RuntimeError("secret detail"))))
    resp = client.post(ENDPOINT, json=payload(), headers={"x-api-key": VALID_KEY})
    assert resp.status_code == 500
    assert resp.json() == {"status": "error", "message": "Internal processing error during voice analysis."}
    assert "secret detail" not in resp.text


def test_suite_status_before_run(client):
    data = client.get("/api/test-suite").json()
    assert data["state"] == "IDLE"
    assert data["currentScenario"] is None
    assert data["stats"] == {"total": 9, "executed": 0, "passed": 0, "failed": 0}
    assert [s["state"] for s in data["scenarios"]] == ["PENDING"] * 9
    assert data["scenarios"][0]["category"] == "AUTH"
    assert data["scenarios"][0]["expectedMessageFragment"] == "Invalid API key"


def test_suite_run(client):
    resp = client.post("/api/test-suite/run")
    assert resp.status_code == 200
    data = resp.json()
    assert data["state"] == "COMPLETED"
    assert data["stats"] == {"total": 9, "executed": 9, "passed": 9, "failed": 0}
    assert [s["state"] for s in data["scenarios"]] == ["PASSED"] * 9
    assert data["scenarios"][5]["outcome"]["response"]["language"] == "Tamil"

    # The status endpoint reflects the finished run
    assert client.get("/api/test-suite").json()["stats"]["passed"] == 9


def test_suite_run_rejected_while_running(settings, stub):
    app = create_app(settings, classifier=stub)
    app.state.runner.state = RunState.RUNNING
    resp = TestClient(app).post("/api/test-suite/run")
    assert resp.status_code == 409
    assert resp.json()["status"] == "error"


def test_detect_wrong_key_checked_before_body(client):
    resp = client.post(
        ENDPOINT,
        content=b"{bad",
        headers={"x-api-key": "wrong_key", "Content-Type": "application/json"},
    )
    assert resp.status_code == 401
    assert resp.json() == {"status": "error", "message": "Invalid API key or malformed request"}
