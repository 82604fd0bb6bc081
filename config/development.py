import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "edutracker"),
}

IMAGE_UPLOAD_DIR = os.getenv("IMAGE_UPLOAD_DIR", "uploads")
IMAGE_BASE_URL = os.getenv("IMAGE_BASE_URL", "/uploads")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Applies database/schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Hourly check that runs the monthly cleanup on days 1-3 once the archive is confirmed
CLEANUP_SCHEDULER_ENABLED = bool(int(os.getenv("CLEANUP_SCHEDULER_ENABLED", "0")))
