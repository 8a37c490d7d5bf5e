from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .core.constants import DEFAULT_BASE_SALARIES, DEFAULT_MAX_IMPORT_BYTES, DEFAULT_TIMEZONE, SALARY_DAYS_PER_MONTH
from .database.bootstrap import apply_schema, list_tables

from .container import build_container
from .attendance.controller import register as register_attendance
from .catalog.controller import register as register_catalog
from .payroll.controller import register as register_payroll
from .reports.controller import register as register_reports

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_IMPORT_BYTES", DEFAULT_MAX_IMPORT_BYTES))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        timezone=getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE),
        base_salaries=getattr(settings, "BASE_SALARIES", DEFAULT_BASE_SALARIES),
        days_per_month=int(getattr(settings, "SALARY_DAYS_PER_MONTH", SALARY_DAYS_PER_MONTH)),
    )

    register_catalog(app, container)
    register_attendance(app, container)
    register_payroll(app, container)
    register_reports(app, container)

    return app
