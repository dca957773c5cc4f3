from __future__ import annotations

from enum import Enum


class IdentifyStatus(str, Enum):
    """Terminal state of one identification request."""

    RECORDED = "RECORDED"
    DEBOUNCED = "DEBOUNCED"
    NO_MATCH = "NO_MATCH"
    AMBIGUOUS = "AMBIGUOUS"
    EMPTY_STORE = "EMPTY_STORE"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    MYSQL = "mysql"
