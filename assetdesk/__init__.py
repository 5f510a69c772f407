"""
Application factory for the AssetDesk employee asset console.

Usage::

    from assetdesk import create_app
    app = create_app()           # Uses FLASK_ENV to pick config.
    app = create_app("testing")  # Explicit config for tests.
"""

import logging
import os

from flask import Flask, render_template

from .config import config_by_name
from .extensions import bcrypt, csrf, db, login_manager, migrate


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_name: One of 'development', 'testing', or 'production'.
                     Defaults to the FLASK_ENV environment variable,
                     falling back to 'development'.

    Returns:
        A fully configured Flask application instance.
    """
    # Resolve the configuration class.
    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")
    config_class = config_by_name.get(config_name)
    if config_class is None:
        raise ValueError(
            f"Unknown config '{config_name}'. "
            f"Valid options: {list(config_by_name.keys())}"
        )

    app = Flask(__name__)
    app.config.from_object(config_class)

    # Refuse to run production with insecure defaults.
    if config_name == "production":
        config_class.validate_production_secrets(app.config)

    # -- Bound store calls so a stalled database surfaces as an error ------
    _configure_store_timeout(app)

    # -- Initialize extensions ---------------------------------------------
    _register_extensions(app)

    # -- Register blueprints -----------------------------------------------
    _register_blueprints(app)

    # -- Register error handlers -------------------------------------------
    _register_error_handlers(app)

    # -- Register custom CLI commands --------------------------------------
    _register_cli_commands(app)

    # -- Configure logging -------------------------------------------------
    _configure_logging(app)

    return app


def _configure_store_timeout(app: Flask) -> None:
    """
    Apply ``STORE_TIMEOUT_SECONDS`` as the driver-level timeout.

    SQLite takes a ``timeout`` connect argument (how long to wait on a
    locked database); other drivers get ``pool_timeout`` instead.
    """
    timeout = app.config.get("STORE_TIMEOUT_SECONDS")
    if not timeout:
        return

    engine_options = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS", {}))
    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite"):
        connect_args = dict(engine_options.get("connect_args", {}))
        connect_args.setdefault("timeout", timeout)
        engine_options["connect_args"] = connect_args
    else:
        engine_options.setdefault("pool_timeout", timeout)
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = engine_options


def _register_extensions(app: Flask) -> None:
    """Bind all Flask extensions to the application instance."""
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    bcrypt.init_app(app)
    csrf.init_app(app)

    # Imported here to avoid circular imports with models.
    from .models.user import User  # pylint: disable=import-outside-toplevel

    @login_manager.user_loader
    def load_user(user_id: str):
        """Load a user by primary key for Flask-Login session management."""
        return db.session.get(User, int(user_id))


def _register_blueprints(app: Flask) -> None:
    """
    Import and register each blueprint with its URL prefix.

    Blueprints are imported inside this function to avoid circular
    imports — models and services can safely import ``db`` from
    extensions at module level.
    """
    # pylint: disable=import-outside-toplevel

    # Main blueprint: dashboard at root URL and health check.
    from .blueprints.main import bp as main_bp

    app.register_blueprint(main_bp)

    # Authentication: administrator login and logout.
    from .blueprints.auth import bp as auth_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")

    # Employees: employee records with guarded delete.
    from .blueprints.employees import bp as employees_bp

    app.register_blueprint(employees_bp, url_prefix="/employees")

    # Assets: inventory records with guarded delete.
    from .blueprints.assets import bp as assets_bp

    app.register_blueprint(assets_bp, url_prefix="/assets")

    # Assignments: assign and return workflow.
    from .blueprints.assignments import bp as assignments_bp

    app.register_blueprint(assignments_bp, url_prefix="/assignments")


def _register_error_handlers(app: Flask) -> None:
    """Register custom error pages for common HTTP error codes."""

    @app.errorhandler(403)
    def forbidden(error):  # pylint: disable=unused-argument
        """Handle 403 Forbidden errors."""
        return render_template("errors/403.html"), 403

    @app.errorhandler(404)
    def not_found(error):  # pylint: disable=unused-argument
        """Handle 404 Not Found errors."""
        return render_template("errors/404.html"), 404

    @app.errorhandler(500)
    def internal_error(error):  # pylint: disable=unused-argument
        """Handle 500 Internal Server Error."""
        db.session.rollback()
        return render_template("errors/500.html"), 500


def _register_cli_commands(app: Flask) -> None:
    """Register custom Flask CLI commands (e.g., flask reconcile)."""
    from .cli import register_commands  # pylint: disable=import-outside-toplevel

    register_commands(app)


def _configure_logging(app: Flask) -> None:
    """
    Set the root log level from ``LOG_LEVEL``.

    Quiets the SQLAlchemy engine logger in debug mode unless SQL echo
    was explicitly requested.
    """
    log_level = app.config.get("LOG_LEVEL", "INFO")
    logging.basicConfig(level=getattr(logging, log_level, logging.INFO))

    if app.debug and not app.config.get("SQLALCHEMY_ECHO"):
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
