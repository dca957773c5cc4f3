import os

from .config import DB_CONFIG

SECRET_KEY = "test-secret"

DB_CONFIG = dict(DB_CONFIG)

STORAGE_BACKEND = "memory"
DESCRIPTOR_DIM = 128
MATCH_THRESHOLD = 0.5
COOLDOWN_SECONDS = 60

DEBUG = False
TESTING = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
LOG_DIR = None

AUTO_INIT_DB = False
