from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .common.http import register_error_handlers
from .database.bootstrap import apply_schema, apply_sql_file, ensure_admin_user, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .grades.controller import register as register_grades
from .logs.controller import register as register_logs
from .reports.controller import register as register_reports
from .students.controller import register as register_students
from .users.controller import register as register_users

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _register_health(app: Flask, container: Container) -> None:
    @app.route("/api/db-health", methods=["GET"], endpoint="db_health")
    def db_health():
        try:
            student_count = container.students_repo.count_all()
            grade_count = container.grades_repo.count_active()
        except Exception as e:
            app.logger.exception("Database health check failed")
            return jsonify({"ok": False, "error": str(e)}), 500
        return jsonify({"ok": True, "studentCount": student_count, "gradeCount": grade_count})


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    app.logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_sql_file(db_config, sql_path=DATABASE_DIR / "seed.sql")
            ensure_admin_user(
                db_config,
                name=getattr(settings, "ADMIN_NAME"),
                email=getattr(settings, "ADMIN_EMAIL"),
                password=getattr(settings, "ADMIN_PASSWORD"),
            )
            app.logger.info("seed ready")

        container = build_container(db_config=db_config)

    register_error_handlers(app)

    register_users(app, container)
    register_grades(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_logs(app, container)
    register_reports(app, container)
    _register_health(app, container)

    return app
