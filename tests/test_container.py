from __future__ import annotations

import pytest

from src.face_attendance.face_attendance.container import build_container
from src.face_attendance.face_attendance.core.enums import StorageBackend
from src.face_attendance.face_attendance.core.exceptions import ValidationError


def test_memory_container_wires_configuration():
    c = build_container(backend="MEMORY", dimension=64, threshold=0.4, cooldown_seconds=30)
    assert c.backend == StorageBackend.MEMORY
    assert c.conn is None
    assert c.dimension == 64
    assert c.matcher.threshold == 0.4
    assert c.ledger.cooldown.total_seconds() == 30


def test_container_dimension_reaches_validation():
    c = build_container(backend="memory", dimension=4)
    record = c.enrollment_service.enroll(identity_id="E001", display_name="A", descriptor=[0.1, 0.2, 0.3, 0.4])
    assert record.sample_count == 1
    with pytest.raises(ValidationError):
        c.enrollment_service.enroll(identity_id="E001", display_name="A", descriptor=[0.1] * 128)


def test_unknown_backend_is_rejected():
    with pytest.raises(ValidationError):
        build_container(backend="sqlite")


def test_mysql_backend_requires_db_config():
    with pytest.raises(ValidationError):
        build_container(backend="mysql", db_config=None)
