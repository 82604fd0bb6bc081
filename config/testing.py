import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "edutracker_test"),
}

IMAGE_UPLOAD_DIR = os.getenv("IMAGE_UPLOAD_DIR", "uploads-test")
IMAGE_BASE_URL = "/uploads"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
CLEANUP_SCHEDULER_ENABLED = False
