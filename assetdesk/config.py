"""
Application configuration classes.

Each class represents a deployment environment. The factory function
``create_app`` in ``assetdesk/__init__.py`` selects the appropriate
config based on the FLASK_ENV environment variable.

The default database is a local SQLite file so the console runs with
no external services.  Point ``DATABASE_URL`` at any SQLAlchemy URL to
use a server database instead.
"""

import logging
import os

# Module-level logger for startup warnings emitted by config classes.
_logger = logging.getLogger(__name__)

# =========================================================================
# Sentinels for detecting unset secrets in production.
# =========================================================================
_DEFAULT_SECRET_KEY = "dev-secret-change-me"
_DEFAULT_ADMIN_PASSWORD = "admin123"


def _env_flag(name: str, default: str = "false") -> bool:
    """Read a boolean flag from the environment ("true" / "false")."""
    return os.environ.get(name, default).strip().lower() == "true"


class BaseConfig:
    """
    Shared configuration values inherited by all environments.

    Secrets and connection strings are loaded from environment variables
    so they never appear in source control.
    """

    # -- Flask core --------------------------------------------------------
    SECRET_KEY: str = os.environ.get("SECRET_KEY", _DEFAULT_SECRET_KEY)

    # -- Session cookie hardening ------------------------------------------
    SESSION_COOKIE_HTTPONLY: bool = True
    SESSION_COOKIE_SAMESITE: str = "Lax"

    # Secure flag is False by default so http://localhost works in dev.
    # ProductionConfig overrides this to True (requires HTTPS).
    SESSION_COOKIE_SECURE: bool = False

    # Expire idle sessions after 1 hour instead of Flask's 31-day default.
    PERMANENT_SESSION_LIFETIME: int = int(
        os.environ.get("PERMANENT_SESSION_LIFETIME", "3600")
    )

    # -- SQLAlchemy --------------------------------------------------------
    SQLALCHEMY_DATABASE_URI: str = os.environ.get(
        "DATABASE_URL", "sqlite:///assetdesk.db"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False

    # Echo SQL statements to the log for debugging (override per env).
    SQLALCHEMY_ECHO: bool = False

    # Seconds a store call may wait on the database before failing.
    # Applied as the driver connect/busy timeout by the app factory.
    STORE_TIMEOUT_SECONDS: int = int(os.environ.get("STORE_TIMEOUT_SECONDS", "10"))

    # -- Administrator account ---------------------------------------------
    # Used by ``flask seed-admin``; the password is stored hashed.
    ADMIN_EMAIL: str = os.environ.get("ADMIN_EMAIL", "admin@company.com")
    ADMIN_PASSWORD: str = os.environ.get("ADMIN_PASSWORD", _DEFAULT_ADMIN_PASSWORD)
    ADMIN_NAME: str = os.environ.get("ADMIN_NAME", "Admin User")

    # -- UI ----------------------------------------------------------------
    ROWS_PER_PAGE: int = int(os.environ.get("ROWS_PER_PAGE", "10"))
    # Sizes offered by the list pages; other per_page values are ignored.
    PAGE_SIZE_OPTIONS: list[int] = [5, 10, 25]

    DEPARTMENTS: list[str] = [
        "Engineering",
        "Design",
        "Marketing",
        "HR",
        "Finance",
        "Operations",
        "Sales",
        "Support",
    ]

    ASSET_TYPES: list[str] = [
        "Laptop",
        "Monitor",
        "Mobile",
        "Tablet",
        "Peripheral",
        "Furniture",
        "Printer",
        "Networking",
        "Other",
    ]

    # -- Startup sanity pass -----------------------------------------------
    # When True, wsgi.py logs asset/assignment inconsistencies at startup.
    RECONCILE_ON_STARTUP: bool = _env_flag("RECONCILE_ON_STARTUP")

    # -- Logging -----------------------------------------------------------
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    # =====================================================================
    # Production validation helpers
    # =====================================================================

    @classmethod
    def validate_production_secrets(cls, app_config: dict) -> None:
        """
        Verify that all required secrets are set for production.

        Called by ``create_app()`` when ``config_name == 'production'``.

        Args:
            app_config: The ``app.config`` dict after loading the
                        config class.

        Raises:
            RuntimeError: If any critical secret is missing or still
                          set to its insecure default value.
        """
        errors: list[str] = []

        if app_config.get("SECRET_KEY") == _DEFAULT_SECRET_KEY:
            errors.append(
                "SECRET_KEY is still the insecure default. "
                "Generate one with: python -c "
                '"import secrets; print(secrets.token_hex(32))"'
            )

        if errors:
            combined = "\n  - ".join(errors)
            raise RuntimeError(f"Production configuration errors:\n  - {combined}")

        # The admin password only matters when seeding, so warn instead.
        if app_config.get("ADMIN_PASSWORD") == _DEFAULT_ADMIN_PASSWORD:
            _logger.warning(
                "ADMIN_PASSWORD is the default value. Set it in the "
                "environment before running 'flask seed-admin'."
            )

        if app_config.get("LOG_LEVEL", "").upper() == "DEBUG":
            _logger.warning(
                "LOG_LEVEL=DEBUG is not recommended in production. "
                "Consider INFO or WARNING."
            )


class DevelopmentConfig(BaseConfig):
    """Development environment: verbose logging, SQL echo enabled."""

    DEBUG: bool = True
    SQLALCHEMY_ECHO: bool = _env_flag("SQLALCHEMY_ECHO", "true")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    """
    Testing environment: in-memory SQLite database.

    WTF_CSRF_ENABLED is disabled so form submissions in tests don't
    need CSRF tokens.  Bcrypt uses the minimum work factor to keep the
    suite fast.
    """

    TESTING: bool = True
    WTF_CSRF_ENABLED: bool = False
    BCRYPT_LOG_ROUNDS: int = 4

    SQLALCHEMY_DATABASE_URI: str = os.environ.get("TEST_DATABASE_URL", "sqlite://")
    LOG_LEVEL: str = "DEBUG"
    RECONCILE_ON_STARTUP: bool = False


class ProductionConfig(BaseConfig):
    """
    Production environment: strict settings, no debug output.

    The application factory calls ``validate_production_secrets()`` at
    startup and will refuse to launch if critical values are missing.
    """

    DEBUG: bool = False
    SQLALCHEMY_ECHO: bool = False
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "WARNING")

    # -- Session cookie: require HTTPS in production -----------------------
    SESSION_COOKIE_SECURE: bool = True


# Lookup dict used by the application factory.
config_by_name: dict[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}
