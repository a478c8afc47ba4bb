from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.http import ok, register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables, ping
from .daily_schedules.controller import register as register_daily_schedules
from .schedules.controller import register as register_schedules
from .staff.controller import register as register_staff
from .tasks.controller import register as register_tasks

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
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
        if getattr(settings, "AUTO_INIT_DB", False):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            mail_config=getattr(settings, "MAIL_CONFIG", None),
            email_delay_seconds=float(getattr(settings, "EMAIL_SEND_DELAY_SECONDS", 0.5)),
            strict_availability_default=bool(getattr(settings, "STRICT_AVAILABILITY_DEFAULT", True)),
        )

    register_error_handlers(app)
    register_staff(app, container)
    register_tasks(app, container)
    register_schedules(app, container)
    register_daily_schedules(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        database = "unknown"
        if container.conn is not None:
            database = "connected" if ping(container.conn) else "unreachable"
        return ok(
            {
                "status": "ok",
                "database": database,
                "email_service": "configured" if container.notifier.available else "not_configured",
                "metrics": container.metrics.snapshot(),
            },
            message="Staff scheduler is running",
        )

    return app
