from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_AUTOSAVE_SECONDS
from .core.exceptions import (
    DomainError,
    FinalizedError,
    NoActiveYearError,
    NotFoundError,
    RemoteError,
    ValidationError,
)
from .assessments.controller import register as register_assessments
from .attendance.controller import register as register_attendance

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _register_error_handlers(app: Flask) -> None:
    def _fail(message: str, status: int):
        return jsonify({"success": False, "message": message}), status

    @app.errorhandler(ValidationError)
    def _validation(e):
        return _fail(str(e), 400)

    @app.errorhandler(NotFoundError)
    def _not_found(e):
        return _fail(str(e), 404)

    @app.errorhandler(FinalizedError)
    def _finalized(e):
        return _fail(str(e), 409)

    @app.errorhandler(NoActiveYearError)
    def _no_year(e):
        return _fail(str(e), 422)

    @app.errorhandler(RemoteError)
    def _remote(e):
        return _fail(str(e), 502)

    @app.errorhandler(DomainError)
    def _domain(e):
        return _fail(str(e), 400)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    api_config = getattr(settings, "API_CONFIG")
    if app.config["DEBUG"]:
        logger.info("settings=%s api=%s locale=%s", settings_module, api_config.get("url"), api_config.get("locale"))

    if container is None:
        container = build_container(
            api_config=api_config,
            attendance_autosave_seconds=float(getattr(settings, "ATTENDANCE_AUTOSAVE_SECONDS", DEFAULT_AUTOSAVE_SECONDS)),
            answers_autosave_seconds=float(getattr(settings, "ANSWERS_AUTOSAVE_SECONDS", DEFAULT_AUTOSAVE_SECONDS)),
            offline_queue_path=getattr(settings, "OFFLINE_QUEUE_PATH", None),
        )
    app.extensions["school_admin"] = container

    _register_error_handlers(app)
    register_attendance(app, container)
    register_assessments(app, container)

    return app
