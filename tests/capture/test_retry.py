from __future__ import annotations

import pytest

from src.face_attendance.face_attendance.capture.retry import capture_descriptor
from src.face_attendance.face_attendance.core.exceptions import ValidationError


def _extractor(results):
    calls = {"n": 0}
    it = iter(results)

    def extract():
        calls["n"] += 1
        return next(it)

    return extract, calls


def test_returns_first_detection_and_backs_off():
    extract, calls = _extractor([None, [], [0.1, 0.2], [9.9]])
    sleeps = []

    result = capture_descriptor(extract, attempts=5, backoff_seconds=0.2, sleep=sleeps.append)

    assert result == [0.1, 0.2]
    assert calls["n"] == 3
    assert sleeps == pytest.approx([0.2, 0.4])


def test_gives_up_after_attempts_without_trailing_sleep():
    extract, calls = _extractor([None] * 3)
    sleeps = []

    assert capture_descriptor(extract, attempts=3, backoff_seconds=1, sleep=sleeps.append) is None
    assert calls["n"] == 3
    assert sleeps == [1, 2]


@pytest.mark.parametrize("attempts, backoff", [(0, 0.1), (3, -1)])
def test_rejects_bad_policy(attempts, backoff):
    with pytest.raises(ValidationError):
        capture_descriptor(lambda: None, attempts=attempts, backoff_seconds=backoff, sleep=lambda s: None)
