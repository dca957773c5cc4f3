"""
Logging setup for the face attendance service.
"""

import logging
import logging.handlers
from pathlib import Path


def setup_logging(app, log_level="INFO", log_dir="logs", max_log_size=10 * 1024 * 1024, backup_count=5):
    """
    Configure logging for the Flask app.

    Args:
        app: Flask app instance
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_dir: directory for rotating log files; None logs to console only
        max_log_size: maximum size of one log file (bytes)
        backup_count: number of rotated files to keep
    """

    level = getattr(logging, str(log_level).upper(), logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            path / "face_attendance.log",
            maxBytes=max_log_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

        # Errors also go to their own file for quick triage
        error_handler = logging.handlers.RotatingFileHandler(
            path / "errors.log",
            maxBytes=max_log_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        handlers.append(error_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)

    app.logger.setLevel(level)
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    app.logger.info("Logging configured (level=%s, dir=%s)", logging.getLevelName(level), log_dir or "-")
    return root_logger
