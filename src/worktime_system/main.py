from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from .config import get_settings_module
from .container import Container, build_container
from .core.constants import DEFAULT_BATCH_WRITE_INTERVAL_SECONDS, DEFAULT_REFERENCE_TIMEZONE
from .core.exceptions import (
    DomainError,
    EntryNotFoundError,
    InvalidTransitionError,
    PersistenceConflict,
    ValidationError,
)
from .database.bootstrap import apply_schema, list_tables
from .deadlines.controller import register as register_deadlines
from .recurrence.controller import register as register_recurrence
from .reports.controller import register as register_reports
from .schedules.controller import register as register_schedules

logger = logging.getLogger(__name__)


def _register_error_handlers(app: Flask) -> None:
    def _error(exc: Exception, status: int):
        return jsonify({"error": exc.__class__.__name__, "message": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation(exc: ValidationError):
        return _error(exc, 400)

    @app.errorhandler(EntryNotFoundError)
    def handle_not_found(exc: EntryNotFoundError):
        return _error(exc, 404)

    @app.errorhandler(InvalidTransitionError)
    def handle_transition(exc: InvalidTransitionError):
        return _error(exc, 409)

    @app.errorhandler(PersistenceConflict)
    def handle_conflict(exc: PersistenceConflict):
        return _error(exc, 409)

    @app.errorhandler(DomainError)
    def handle_domain(exc: DomainError):
        return _error(exc, 400)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    A prebuilt ``container`` skips database wiring (used by tests).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    reference_tz = str(getattr(settings, "REFERENCE_TIMEZONE", DEFAULT_REFERENCE_TIMEZONE))
    batch_interval = float(getattr(settings, "BATCH_WRITE_INTERVAL_SECONDS", DEFAULT_BATCH_WRITE_INTERVAL_SECONDS))

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        container = build_container(db_config=db_config, reference_tz=reference_tz, batch_interval=batch_interval)

    _register_error_handlers(app)
    register_recurrence(app, container)
    register_schedules(app, container)
    register_reports(app, container)
    register_deadlines(app, container)

    return app
