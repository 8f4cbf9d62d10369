from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import fail, ok
from .container import AppSettings, Container, build_container
from .core.exceptions import (
    AccountLockedError,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from .database.bootstrap import apply_schema, ensure_demo_data, list_tables
from .database.connection import DBConfig
from .payroll.controller import register as register_payroll
from .staff.controller import register as register_staff
from .stores.controller import register as register_stores
from .subscriptions.controller import register as register_subscriptions
from .users.controller import register as register_users


def settings_from_module(settings) -> AppSettings:
    return AppSettings(
        jwt_secret=str(getattr(settings, "JWT_SECRET", None) or getattr(settings, "SECRET_KEY")),
        jwt_expire_days=int(getattr(settings, "JWT_EXPIRE_DAYS", 7)),
        default_staff_password=str(getattr(settings, "DEFAULT_STAFF_PASSWORD", "staff123")),
    )


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DuplicateError)
    def handle_duplicate(e: DuplicateError):
        return fail(str(e), status=400, field=e.field, value=e.value)

    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return fail(str(e), status=400, errors=e.errors or None)

    @app.errorhandler(AccountLockedError)
    def handle_locked(e: AccountLockedError):
        return fail(str(e), status=423)

    @app.errorhandler(AuthenticationError)
    def handle_authentication(e: AuthenticationError):
        return fail(str(e), status=401)

    @app.errorhandler(AuthorizationError)
    def handle_authorization(e: AuthorizationError):
        return fail(str(e), status=403)

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return fail(str(e), status=404)

    @app.errorhandler(DomainError)
    def handle_domain(e: DomainError):
        app.logger.error("Domain error: %s", e)
        return fail(str(e), status=500)

    @app.errorhandler(HTTPException)
    def handle_http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        app.logger.exception("Unhandled error")
        return fail("Server Error", status=500, error=str(e) if app.config.get("DEBUG") else None)


def create_app(container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False
    if app.config["DEBUG"]:
        app.logger.setLevel(logging.INFO)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        app.logger.info("settings=%s db=%s", settings_module, DBConfig.from_mapping(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            app.logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_data(db_config)
            app.logger.info("demo seed ready")

        container = build_container(db_config=db_config, settings=settings_from_module(settings))

    app.extensions["shelfcure"] = container
    register_error_handlers(app)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return ok({"status": "ok"})

    register_users(app, container)
    register_subscriptions(app, container)
    register_stores(app, container)
    register_staff(app, container)
    register_attendance(app, container)
    register_payroll(app, container)

    return app
