"""Example: use the service layer without Flask.

Controllers are thin; the archive workflow lives entirely in the services.
"""

import importlib
import json

from config import get_settings_module

from src.edutracker.edutracker.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, image_upload_dir=settings.IMAGE_UPLOAD_DIR)
    print(json.dumps(container.cleanup_engine.get_cleanup_summary(), indent=2, default=str))


if __name__ == "__main__":
    main()
