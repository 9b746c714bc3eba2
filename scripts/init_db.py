"""Create the database (if missing) and apply database/schema.sql.

Usage: ``APP_ENV=production python scripts/init_db.py``
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.school_attendance.school_attendance.database.bootstrap import apply_schema, list_tables
from src.school_attendance.school_attendance.database.connection import DBConfig

EXPECTED_TABLES = ("users", "grades", "students", "attendance_records", "logs")


def main() -> int:
    load_dotenv(override=False)
    settings_module = get_settings_module()
    db_config = dict(importlib.import_module(settings_module).DB_CONFIG)
    target = DBConfig.from_settings(db_config)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")

    tables = set(list_tables(db_config))
    missing = [t for t in EXPECTED_TABLES if t not in tables]
    print(f"[{settings_module}] {target.user}@{target.host}:{target.port}/{target.database}")
    for name in EXPECTED_TABLES:
        print(f"  {'ok' if name in tables else 'MISSING'}  {name}")

    return 1 if missing else 0


if __name__ == "__main__":
    sys.exit(main())
