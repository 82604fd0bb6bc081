import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "edutracker"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "edutracker"),
}

IMAGE_UPLOAD_DIR = os.getenv("IMAGE_UPLOAD_DIR", "/var/lib/edutracker/uploads")
IMAGE_BASE_URL = os.getenv("IMAGE_BASE_URL", "/uploads")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
CLEANUP_SCHEDULER_ENABLED = bool(int(os.getenv("CLEANUP_SCHEDULER_ENABLED", "1")))
