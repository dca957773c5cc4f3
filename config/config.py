import os


class Config:
    """Settings shared by every environment. Values come from the environment (.env)."""

    SECRET_KEY = os.environ.get("SECRET_KEY") or "change-me"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "face_attendance")

    STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "memory")

    # Matching policy. Tune THRESHOLD against logged NoMatch distances.
    DESCRIPTOR_DIM = int(os.environ.get("DESCRIPTOR_DIM", "128"))
    MATCH_THRESHOLD = float(os.environ.get("MATCH_THRESHOLD", "0.5"))
    COOLDOWN_SECONDS = float(os.environ.get("COOLDOWN_SECONDS", "60"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_DIR = os.environ.get("LOG_DIR", "logs")

    AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))


DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}
