"""Flask application factory."""

import logging
import os
import secrets
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_session import Session
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound

from .errors import ApiError
from .extensions import db
from .services.password_service import PasswordService
from .services.session_manager import SessionManager
from .services.user_store import UserStore
from .services.workout_store import WorkoutStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _resolve_secret_key() -> str:
    """Return a secret key for Flask.

    In production we expect ``SESSION_SECRET`` (or ``FLASK_SECRET_KEY`` /
    ``SECRET_KEY``) to be configured. When none is set, such as during local
    testing, we generate a temporary key to avoid crashing at import time.
    """

    for name in ("SESSION_SECRET", "FLASK_SECRET_KEY", "SECRET_KEY"):
        value = os.environ.get(name)
        if value:
            return value

    return secrets.token_hex(32)


def _bool_from_env(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _int_from_env(name: str, default: int) -> int:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {value!r}") from exc


def configure_logging() -> None:
    """Install a console handler on the root logger once per process."""

    root = logging.getLogger()
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root.setLevel(level)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError):
        return jsonify({"message": error.message}), error.status_code

    @app.errorhandler(NotFound)
    def handle_not_found(error: NotFound):
        return jsonify({"message": "Route not found"}), 404

    @app.errorhandler(MethodNotAllowed)
    def handle_method_not_allowed(error: MethodNotAllowed):
        return jsonify({"message": "Method not allowed"}), 405

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        if isinstance(error, HTTPException) and (error.code or 500) < 500:
            return jsonify({"message": error.description}), error.code
        # Detail stays in the server log only.
        original = getattr(error, "original_exception", None) or error
        logger.error("app.unhandled_error", exc_info=original, extra={"path": request.path})
        return jsonify({"message": "Server error"}), 500


def create_app() -> Flask:
    """Configure and return the Flask application."""

    load_dotenv()
    configure_logging()

    app = Flask(__name__)
    app.config["SECRET_KEY"] = _resolve_secret_key()

    flask_env = (os.environ.get("FLASK_ENV") or os.environ.get("APP_ENV") or "").lower()
    is_production = flask_env in {"production", "prod"}
    app.config["IS_PRODUCTION"] = is_production

    # --- Session configuration -----------------------------------------
    app.config.update(
        SESSION_TYPE="sqlalchemy",
        SESSION_SQLALCHEMY=db,
        SESSION_SQLALCHEMY_TABLE=os.environ.get("SESSION_TABLE", "sessions"),
        SESSION_PERMANENT=True,
        PERMANENT_SESSION_LIFETIME=timedelta(
            hours=_int_from_env("SESSION_LIFETIME_HOURS", 24)
        ),
        SESSION_REFRESH_EACH_REQUEST=_bool_from_env("SESSION_REFRESH_EACH_REQUEST", False),
        SESSION_COOKIE_SECURE=_bool_from_env("SESSION_COOKIE_SECURE", is_production),
        SESSION_COOKIE_SAMESITE=os.environ.get("SESSION_COOKIE_SAMESITE", "Strict"),
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_NAME=os.environ.get("SESSION_COOKIE_NAME", "fittrack_session"),
        SESSION_COOKIE_DOMAIN=os.environ.get("SESSION_COOKIE_DOMAIN"),
    )

    app.config["BCRYPT_ROUNDS"] = _int_from_env("BCRYPT_ROUNDS", 10)
    app.config["ENFORCE_WORKOUT_OWNERSHIP"] = _bool_from_env("ENFORCE_WORKOUT_OWNERSHIP", False)
    absolute_lifetime = timedelta(hours=_int_from_env("SESSION_ABSOLUTE_LIFETIME_HOURS", 168))

    # --- Database ----------------------------------------------------------
    database_uri = os.environ.get("DATABASE_URL")
    if not database_uri:
        if is_production:
            raise RuntimeError("DATABASE_URL is required in production.")
        default_sqlite_path = Path(app.instance_path) / "fittrack.db"
        database_uri = f"sqlite:///{default_sqlite_path}"

    if database_uri.startswith("sqlite:///"):
        sqlite_path = database_uri.replace("sqlite:///", "", 1)
        if sqlite_path and sqlite_path != ":memory:":
            Path(sqlite_path).expanduser().parent.mkdir(parents=True, exist_ok=True)

    app.config["SQLALCHEMY_DATABASE_URI"] = database_uri
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {"pool_pre_ping": True}
    app.config.setdefault("SQLALCHEMY_TRACK_MODIFICATIONS", False)

    # Ensure models are registered with SQLAlchemy before any table creation.
    from . import models  # noqa: F401

    db.init_app(app)

    # Surface configuration issues at startup rather than mid-request.
    if is_production:
        try:
            with app.app_context():
                connection = db.engine.connect()
                connection.close()
        except SQLAlchemyError as exc:  # pragma: no cover - network dependent
            raise RuntimeError("Database connectivity check failed") from exc

    # Flask-Session declares its own model; drop a table left over from a
    # previous app built on the same metadata.
    session_table = app.config["SESSION_SQLALCHEMY_TABLE"]
    if session_table in db.metadata.tables:
        db.metadata.remove(db.metadata.tables[session_table])

    Session(app)

    if not is_production:
        with app.app_context():
            db.create_all()

    app.password_service = PasswordService(rounds=app.config["BCRYPT_ROUNDS"])
    app.user_store = UserStore()
    app.workout_store = WorkoutStore()
    app.session_manager = SessionManager(absolute_lifetime=absolute_lifetime)

    @app.before_request
    def log_request() -> None:
        logger.info("%s %s", request.method, request.path)

    _register_error_handlers(app)

    from .routes import auth_bp, workouts_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(workouts_bp)

    return app
