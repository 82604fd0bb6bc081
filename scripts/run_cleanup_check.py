"""Run one scheduler tick by hand and print the outcome.

Pass --force to call the cleanup directly, skipping the day-of-month window.
"""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.edutracker.edutracker.container import build_container


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--force", action="store_true")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        image_upload_dir=getattr(settings, "IMAGE_UPLOAD_DIR", str(REPO_ROOT / "uploads")),
        image_base_url=getattr(settings, "IMAGE_BASE_URL", "/uploads"),
    )

    if args.force:
        outcome = container.cleanup_engine.execute_monthly_cleanup().to_dict()
    else:
        outcome = container.cleanup_scheduler.run_check()
    print(json.dumps(outcome, indent=2, default=str))


if __name__ == "__main__":
    main()
