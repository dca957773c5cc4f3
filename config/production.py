import os

from .config import DB_CONFIG, Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = dict(DB_CONFIG)

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")
DESCRIPTOR_DIM = Config.DESCRIPTOR_DIM
MATCH_THRESHOLD = Config.MATCH_THRESHOLD
COOLDOWN_SECONDS = Config.COOLDOWN_SECONDS

DEBUG = False

LOG_LEVEL = Config.LOG_LEVEL
LOG_DIR = Config.LOG_DIR

AUTO_INIT_DB = Config.AUTO_INIT_DB
