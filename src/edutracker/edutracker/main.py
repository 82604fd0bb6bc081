from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, abort, jsonify, send_file

from config import get_settings_module

from .archive.controller import register as register_archive
from .assessments.controller import register as register_assessments
from .attendance.controller import register as register_attendance
from .common.datetime_utils import now_local
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .images.store import ImageStoreError, LocalImageStore
from .submissions.controller import register as register_submissions
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


def _register_uploads(app: Flask, container: Container) -> None:
    store = container.image_store
    if not isinstance(store, LocalImageStore):
        return

    @app.route("/uploads/<path:public_id>", methods=["GET"], endpoint="uploaded_image")
    def uploaded_image(public_id: str):
        try:
            path = store.open_path(public_id)
        except ImageStoreError:
            abort(404)
        if path is None:
            abort(404)
        return send_file(path)


def create_app(*, container: Container | None = None, start_scheduler: bool | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_CONTENT_LENGTH", 6 * 1024 * 1024))
    db_config = getattr(settings, "DB_CONFIG")

    if container is None:
        container = build_container(
            db_config=db_config,
            image_upload_dir=getattr(settings, "IMAGE_UPLOAD_DIR", str(REPO_ROOT / "uploads")),
            image_base_url=getattr(settings, "IMAGE_BASE_URL", "/uploads"),
        )
        logger.info("settings=%s db=%s", settings_module, container.conn.config.describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(container.conn)))

    app.extensions["edutracker"] = container

    register_users(app, container)
    register_attendance(app, container)
    register_assessments(app, container)
    register_submissions(app, container)
    register_archive(app, container)
    _register_uploads(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "OK", "message": "EduTracker API is running", "timestamp": now_local().isoformat()})

    if start_scheduler is None:
        start_scheduler = bool(getattr(settings, "CLEANUP_SCHEDULER_ENABLED", False))
    if start_scheduler:
        container.cleanup_scheduler.start()
        atexit.register(container.cleanup_scheduler.stop)

    return app
