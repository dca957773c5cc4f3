from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .api.controller import register as register_api
from .common.logging_config import setup_logging
from .container import Container, build_container
from .core.enums import StorageBackend
from .database.bootstrap import apply_schema, default_schema_path, list_tables

logger = logging.getLogger(__name__)


def create_app(settings_module: Optional[str] = None, *, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(
        app,
        log_level=getattr(settings, "LOG_LEVEL", "INFO"),
        log_dir=getattr(settings, "LOG_DIR", "logs"),
    )

    if container is None:
        container = build_container(
            backend=getattr(settings, "STORAGE_BACKEND", StorageBackend.MEMORY.value),
            db_config=getattr(settings, "DB_CONFIG", None),
            dimension=int(getattr(settings, "DESCRIPTOR_DIM", 128)),
            threshold=float(getattr(settings, "MATCH_THRESHOLD", 0.5)),
            cooldown_seconds=float(getattr(settings, "COOLDOWN_SECONDS", 60)),
        )

    logger.info(
        "settings=%s backend=%s dim=%d threshold=%.3f cooldown=%ss",
        settings_module,
        container.backend.value,
        container.dimension,
        container.matcher.threshold,
        container.ledger.cooldown.total_seconds(),
    )

    if container.backend == StorageBackend.MYSQL and bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(container.conn, schema_path=default_schema_path())
        logger.info("Schema ready (tables=%d)", len(list_tables(container.conn)))

    app.extensions["face_attendance"] = container
    register_api(app, container)

    return app
