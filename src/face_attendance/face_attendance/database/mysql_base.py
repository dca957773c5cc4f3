from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StorageFailure
from ..descriptors.model import DescriptorVector
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)`` inside one transaction.

    Commits on success, rolls back on any error. Driver errors surface as
    StorageFailure so callers never see a half-applied write, even when the
    connection is already gone and rollback or close fail too.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("Database unavailable: %s", e)
        raise StorageFailure("Database unavailable") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            _quietly(cur.close, "close cursor")
    except mysql.connector.Error as e:
        _quietly(conn.rollback, "roll back")
        logger.error("Database operation failed, rolled back: %s", e)
        raise StorageFailure("Database operation failed") from e
    except Exception:
        _quietly(conn.rollback, "roll back")
        raise
    finally:
        _quietly(conn.close, "close connection")


def _quietly(action, what: str) -> None:
    # cleanup on a dropped connection must not mask the original error
    try:
        action()
    except mysql.connector.Error as e:
        logger.warning("Could not %s: %s", what, e)


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def descriptor_to_json(descriptor: DescriptorVector) -> str:
    return json.dumps(descriptor.to_list())


def descriptor_from_json(value: Any) -> DescriptorVector:
    """Decode a stored descriptor column.

    Stored samples were validated on the way in, so only the shape is rebuilt here.
    """

    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    return DescriptorVector(tuple(float(v) for v in json.loads(value)))
