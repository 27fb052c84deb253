from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .classes.controller import register as register_classes
from .common.http import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_migrations, ensure_database_exists
from .database.connection import DBConfig, DatabaseConnection
from .notifications.controller import register as register_notifications
from .reports.controller import register as register_reports
from .schools.controller import register as register_schools
from .settings import get_settings_module
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if getattr(settings, "AUTO_MIGRATE", False):
            conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
            ensure_database_exists(conn)
            applied = apply_migrations(conn)
            logger.info("schema ready (%s migrations applied)", len(applied))
        container = build_container(db_config=db_config)

    register_error_handlers(app)
    register_users(app, container)
    register_schools(app, container)
    register_classes(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_reports(app, container)
    register_notifications(app, container)

    return app
