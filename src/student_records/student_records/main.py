from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .container import Container, build_container, build_storage
from .core.enums import StorageBackend
from .core.exceptions import IntegrityError, NotFoundError, PersistenceError, ValidationError
from .database.bootstrap import apply_schema, list_tables
from .seed.sample_data import seed_sample_data

from .attendance.controller import register as register_attendance
from .dashboard.controller import register as register_dashboard
from .reports.controller import register as register_reports
from .students.controller import register as register_students

logger = logging.getLogger(__name__)


def _register_error_handlers(app: Flask) -> None:
    def _error(status: int):
        def handler(e):
            return jsonify({"success": False, "message": str(e)}), status

        return handler

    app.register_error_handler(ValidationError, _error(400))
    app.register_error_handler(NotFoundError, _error(404))
    app.register_error_handler(IntegrityError, _error(409))
    app.register_error_handler(PersistenceError, _error(503))


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        backend = StorageBackend(getattr(settings, "STORAGE_BACKEND", StorageBackend.FILE.value))
        db_config = dict(getattr(settings, "DB_CONFIG", {}))
        data_dir = getattr(settings, "DATA_DIR", "data")

        storage, conn = build_storage(backend, data_dir=data_dir, db_config=db_config)
        if conn is not None and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(conn)
            logger.info("kv_store ready (tables=%d)", len(list_tables(conn)))

        container = build_container(
            storage=storage,
            storage_mode=getattr(settings, "STORAGE_MODE", "lenient"),
        )

        if bool(getattr(settings, "AUTO_SEED_DATA", False)) and not container.store.get_classes():
            seed_sample_data(container.store)

    logger.info("settings=%s backend=%s mode=%s", settings_module, type(container.storage).__name__, container.store.mode.value)

    app.extensions["student_records"] = container
    _register_error_handlers(app)

    register_students(app, container)
    register_attendance(app, container)
    register_reports(app, container)
    register_dashboard(app, container)

    return app
