from __future__ import annotations

import csv
import io
from datetime import datetime, timedelta

import pytest

from src.face_attendance.face_attendance.container import build_container
from src.face_attendance.face_attendance.core.exceptions import StorageFailure
from src.face_attendance.face_attendance.main import create_app


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock(fixed_now):
    return Clock(fixed_now)


@pytest.fixture
def container(clock):
    return build_container(backend="memory", threshold=0.5, cooldown_seconds=60, clock=clock)


@pytest.fixture
def client(container):
    app = create_app("config.testing", container=container)
    return app.test_client()


def _enroll(client, make_vec, identity_id="E001", name="Alice", head=(0.2,)):
    return client.post(
        "/api/enroll",
        json={"identityId": identity_id, "displayName": name, "department": "HR", "descriptor": make_vec(*head)},
    )


def test_enroll_then_identify(client, make_vec):
    res = _enroll(client, make_vec)
    assert res.status_code == 200
    assert res.get_json()["status"] == "ok"

    res = client.post("/api/identify", json={"descriptor": make_vec(0.2), "image": "data:image/jpeg;base64,AAAA"})
    assert res.status_code == 200
    assert res.get_json() == {"found": True, "name": "Alice", "empId": "E001", "distance": 0.0}


def test_identify_unknown_face_is_not_found(client, make_vec):
    _enroll(client, make_vec, head=(0.0,))
    res = client.post("/api/identify", json={"descriptor": make_vec(0.9)})
    assert res.status_code == 200
    assert res.get_json() == {"found": False}


def test_identify_on_empty_store_is_not_found(client, make_vec):
    res = client.post("/api/identify", json={"descriptor": make_vec(0.1)})
    assert res.status_code == 200
    assert res.get_json() == {"found": False}


@pytest.mark.parametrize("body", [{}, {"descriptor": None}, {"descriptor": []}, {"descriptor": [0.1, 0.2]}])
def test_identify_rejects_missing_descriptor(client, body):
    res = client.post("/api/identify", json=body)
    assert res.status_code == 400
    data = res.get_json()
    assert data["found"] is False
    assert data["message"]


def test_identify_rejects_non_json_body(client):
    res = client.post("/api/identify", data="not json", content_type="text/plain")
    assert res.status_code == 400


def test_enroll_validation_error_shape(client, make_vec):
    res = client.post("/api/enroll", json={"identityId": "", "displayName": "Alice", "descriptor": make_vec(0.1)})
    assert res.status_code == 400
    assert res.get_json()["status"] == "error"


def test_enroll_is_additive_and_replace_mode_resets(client, container, make_vec):
    _enroll(client, make_vec, head=(0.1,))
    _enroll(client, make_vec, head=(0.2,))
    assert container.enrollments_repo.get("E001").sample_count == 2

    res = client.post(
        "/api/enroll?mode=replace",
        json={"identityId": "E001", "displayName": "Alice", "descriptor": make_vec(0.3)},
    )
    assert res.status_code == 200
    assert container.enrollments_repo.get("E001").sample_count == 1


def test_exec_endpoint_register_and_mark(client, make_vec):
    res = client.post("/api/exec?action=register", json={"empId": "E007", "name": "Bond", "descriptor": make_vec(0.4)})
    assert res.status_code == 200
    assert res.get_json()["status"] == "ok"

    res = client.post("/api/exec?action=mark", json={"descriptor": make_vec(0.4)})
    assert res.get_json()["empId"] == "E007"


@pytest.mark.parametrize(
    "action, expected",
    [
        ("mark", {"found": False, "message": "Request body must be a JSON object"}),
        ("register", {"status": "error", "message": "Request body must be a JSON object"}),
    ],
)
def test_exec_endpoint_rejects_non_json_in_the_action_shape(client, action, expected):
    res = client.post(f"/api/exec?action={action}", data="descriptor=1,2,3", content_type="text/plain")
    assert res.status_code == 400
    assert res.get_json() == expected


def test_exec_endpoint_unknown_action(client, make_vec):
    res = client.post("/api/exec?action=delete", json={"descriptor": make_vec(0.4)})
    assert res.status_code == 400


def test_debounced_identification_still_reports_found(client, clock, make_vec):
    _enroll(client, make_vec)
    first = client.post("/api/identify", json={"descriptor": make_vec(0.2)})
    clock.now += timedelta(seconds=5)
    second = client.post("/api/identify", json={"descriptor": make_vec(0.2)})

    assert first.get_json()["found"] is True
    assert second.get_json()["found"] is True

    history = client.get("/api/attendance/E001").get_json()
    assert history["success"] is True
    assert len(history["events"]) == 1


def test_history_rejects_bad_limit(client):
    assert client.get("/api/attendance/E001?limit=abc").status_code == 400
    assert client.get("/api/attendance/E001?limit=0").status_code == 400


def test_report_csv(client, clock, make_vec):
    _enroll(client, make_vec)
    client.post("/api/identify", json={"descriptor": make_vec(0.2)})

    day = clock.now.strftime("%Y-%m-%d")
    res = client.get(f"/api/attendance/report.csv?start={day}&end={day}")

    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    rows = list(csv.DictReader(io.StringIO(res.data.decode("utf-8-sig"))))
    assert len(rows) == 1
    assert rows[0]["identity_id"] == "E001"
    assert rows[0]["display_name"] == "Alice"


def test_report_csv_rejects_bad_dates(client):
    assert client.get("/api/attendance/report.csv?start=2026-13-01&end=2026-01-01").status_code == 400
    assert client.get("/api/attendance/report.csv?start=2026-02-02&end=2026-02-01").status_code == 400


def test_storage_failure_maps_to_503(client, container, make_vec, monkeypatch):
    def boom(*args, **kwargs):
        raise StorageFailure("down")

    monkeypatch.setattr(container.enrollments_repo, "put", boom)
    res = _enroll(client, make_vec)
    assert res.status_code == 503
    assert res.get_json()["status"] == "error"

    monkeypatch.setattr(container.enrollments_repo, "get_all", boom)
    res = client.post("/api/identify", json={"descriptor": make_vec(0.2)})
    assert res.status_code == 503
    assert res.get_json()["found"] is False


def test_health(client, make_vec):
    _enroll(client, make_vec)
    data = client.get("/health").get_json()
    assert data["status"] == "running"
    assert data["backend"] == "memory"
    assert data["threshold"] == 0.5
    assert data["cooldownSeconds"] == 60
    assert data["enrolled"] == 1
