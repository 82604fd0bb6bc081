"""Create the admin account (or reset its password).

Usage: python scripts/create_admin.py --email admin@school.edu --name "System Admin"
The password is read from --password or prompted for.
"""

from __future__ import annotations

import argparse
import getpass
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.edutracker.edutracker.core.exceptions import ValidationError
from src.edutracker.edutracker.database.connection import DBConfig, DatabaseConnection
from src.edutracker.edutracker.users.mysql_user_repository import MySQLUserRepository
from src.edutracker.edutracker.users.service import UserService


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="System Administrator")
    parser.add_argument("--password")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Admin password: ")

    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(dict(settings.DB_CONFIG)))
    service = UserService(MySQLUserRepository(conn))

    try:
        user_id = service.ensure_admin(full_name=args.name, email=args.email, password=password)
    except ValidationError as e:
        raise SystemExit(f"ERROR: {e}")
    print(f"OK: admin {args.email} ready (id={user_id})")


if __name__ == "__main__":
    main()
