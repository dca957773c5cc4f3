from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Sequence

from ..core.constants import DEFAULT_CAPTURE_ATTEMPTS, DEFAULT_CAPTURE_BACKOFF_SECONDS
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def capture_descriptor(
    extract: Callable[[], Optional[Sequence[float]]],
    *,
    attempts: int = DEFAULT_CAPTURE_ATTEMPTS,
    backoff_seconds: float = DEFAULT_CAPTURE_BACKOFF_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> Optional[Sequence[float]]:
    """Call ``extract`` until it yields a descriptor, at most ``attempts`` times.

    ``extract`` wraps the external recognizer and returns ``None`` (or an
    empty sequence) when no face was detected. The wait doubles after each
    miss. Returns ``None`` once every attempt has missed.
    """

    if attempts < 1:
        raise ValidationError("attempts must be at least 1")
    if backoff_seconds < 0:
        raise ValidationError("backoff_seconds must not be negative")

    for attempt in range(attempts):
        descriptor = extract()
        if descriptor is not None and len(descriptor) > 0:
            return descriptor
        if attempt + 1 < attempts:
            delay = backoff_seconds * (2 ** attempt)
            logger.debug("No face on attempt %d/%d, retrying in %.2fs", attempt + 1, attempts, delay)
            sleep(delay)

    logger.info("No face detected after %d attempts", attempts)
    return None
