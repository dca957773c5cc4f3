"""Example: drive the service layer directly (no Flask).

Enrolls two people with synthetic descriptors, then identifies a noisy
capture of one of them twice to show the debounce.
"""

from datetime import datetime, timedelta

import numpy as np

from src.face_attendance.face_attendance.container import build_container


def main():
    rng = np.random.default_rng(7)
    container = build_container(backend="memory", threshold=0.5, cooldown_seconds=60)

    alice = rng.normal(0.0, 0.1, 128)
    bob = rng.normal(0.0, 0.1, 128)
    container.enrollment_service.enroll(identity_id="E001", display_name="Alice", descriptor=alice.tolist())
    container.enrollment_service.enroll(identity_id="E002", display_name="Bob", descriptor=bob.tolist())

    capture = (alice + rng.normal(0.0, 0.01, 128)).tolist()
    t0 = datetime(2026, 1, 5, 8, 30)
    for now in (t0, t0 + timedelta(seconds=5)):
        outcome = container.identification_service.identify(capture, now=now)
        print(now.time(), outcome.status.value, outcome.to_response())


if __name__ == "__main__":
    main()
