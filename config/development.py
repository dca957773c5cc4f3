import os

from .config import DB_CONFIG, Config

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = dict(DB_CONFIG)

STORAGE_BACKEND = Config.STORAGE_BACKEND
DESCRIPTOR_DIM = Config.DESCRIPTOR_DIM
MATCH_THRESHOLD = Config.MATCH_THRESHOLD
COOLDOWN_SECONDS = Config.COOLDOWN_SECONDS

DEBUG = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_DIR = Config.LOG_DIR

# If enabled, the app applies database/schema.sql on startup (CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
