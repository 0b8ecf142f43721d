from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from .admin_settings.controller import register as register_admin_settings
from .common.web import register_error_handlers
from .config import get_settings_module
from .container import build_container
from .database.bootstrap import apply_schema, ensure_demo_data, list_tables
from .holidays.controller import register as register_holidays
from .projects.controller import register as register_projects
from .hours.controller import register as register_hours
from .reports.controller import register as register_reports
from .statuses.controller import register as register_statuses
from .task_types.controller import register as register_task_types
from .tasks.controller import register as register_tasks
from .users.controller import register as register_users
from .work_items.controller import register as register_work_items

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def register_blueprints(app: Flask, container) -> None:
    register_error_handlers(app)
    register_users(app, container)
    register_hours(app, container)
    register_projects(app, container)
    register_tasks(app, container)
    register_task_types(app, container)
    register_statuses(app, container)
    register_work_items(app, container)
    register_reports(app, container)
    register_holidays(app, container)
    register_admin_settings(app, container)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        app.logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        ensure_demo_data(db_config)
        app.logger.info("demo seed ready")

    container = build_container(
        db_config=db_config,
        functions_base_url=getattr(settings, "FUNCTIONS_BASE_URL", ""),
        functions_timeout=float(getattr(settings, "FUNCTIONS_TIMEOUT", 30)),
    )
    app.extensions["trackly.container"] = container
    register_blueprints(app, container)

    return app
