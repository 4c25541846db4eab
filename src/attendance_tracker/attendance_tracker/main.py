from __future__ import annotations

import importlib
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import RequestEntityTooLarge

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .core.constants import DEFAULT_SESSION_HOURS, FACE_MATCH_THRESHOLD, MAX_UPLOAD_BYTES
from .core.enums import StorageBackend
from .core.logging_config import setup_logging
from .courses.controller import register as register_courses
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .database.demo_data import seed_demo_data
from .students.controller import register as register_students
from .users.controller import register as register_users
from .verification.controller import register as register_verification

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_UPLOAD_BYTES", MAX_UPLOAD_BYTES))
    app.permanent_session_lifetime = timedelta(hours=int(getattr(settings, "SESSION_HOURS", DEFAULT_SESSION_HOURS)))

    setup_logging(
        app,
        getattr(settings, "LOG_LEVEL", "INFO"),
        log_dir=getattr(settings, "LOG_DIR", None),
    )

    backend = StorageBackend(str(getattr(settings, "STORAGE_BACKEND", StorageBackend.MYSQL.value)).lower())
    db_config = dict(getattr(settings, "DB_CONFIG", {}) or {})
    auto_init_db = bool(getattr(settings, "AUTO_INIT_DB", False))
    auto_seed_db = bool(getattr(settings, "AUTO_SEED_DB", False))

    app.logger.info("Settings %s, storage backend %s", settings_module, backend.value)

    if backend == StorageBackend.MYSQL:
        if auto_init_db:
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            app.logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if auto_seed_db:
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_users(db_config)
            app.logger.info("Demo seed ready")

    container = build_container(
        backend=backend.value,
        db_config=db_config,
        face_match_policy=getattr(settings, "FACE_MATCH_POLICY", "always_accept"),
        face_match_threshold=float(getattr(settings, "FACE_MATCH_THRESHOLD", FACE_MATCH_THRESHOLD)),
        max_upload_bytes=app.config["MAX_CONTENT_LENGTH"],
    )
    app.extensions["attendance_tracker"] = container

    if backend == StorageBackend.MEMORY and auto_seed_db:
        seed_demo_data(container)

    @app.errorhandler(RequestEntityTooLarge)
    def payload_too_large(_e):
        limit_mb = app.config["MAX_CONTENT_LENGTH"] // (1024 * 1024)
        return jsonify({"message": f"Upload exceeds the {limit_mb} MB limit"}), 413

    register_users(app, container)
    register_students(app, container)
    register_courses(app, container)
    register_attendance(app, container)
    register_verification(app, container)

    return app
