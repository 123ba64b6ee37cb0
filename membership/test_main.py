"""Tests for application wiring: root, metrics and validation messages."""
from fastapi.testclient import TestClient

from membership.main import app, validation_message


def test_root_runs_lifespan():
    with TestClient(app) as c:
        response = c.get("/")
    assert response.status_code == 200
    assert response.json()["version"] == "1.0.0"


def test_metrics_count_writes(client, student_payload):
    client.post("/students", json=student_payload())
    body = client.get("/metrics").text
    assert 'student_writes_total{operation="create"}' in body


class TestValidationMessage:
    def test_missing_wins(self):
        errors = [
            {"type": "value_error", "msg": "Value error, Phone number must be a non-empty string", "input": " "},
            {"type": "missing", "msg": "Field required", "input": {}},
        ]
        assert validation_message(errors) == "Missing required fields"

    def test_null_counts_as_missing(self):
        assert validation_message([{"type": "string_type", "msg": "x", "input": None}]) == "Missing required fields"

    def test_value_error_prefix_stripped(self):
        errors = [{"type": "value_error", "msg": "Value error, Title is required", "input": ""}]
        assert validation_message(errors) == "Title is required"
