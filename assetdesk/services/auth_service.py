"""
Auth service — administrator credential checks and account seeding.

The console has one administrator account whose password is stored as
a bcrypt hash.  Login verifies the submitted credentials against that
row; ``seed_admin`` creates or resets it from configuration.
"""

import logging
import re
from datetime import datetime, timezone

from flask import session

from assetdesk.errors import ValidationError
from assetdesk.extensions import db
from assetdesk.models.user import User

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Shortest password the login form will submit.
MIN_PASSWORD_LENGTH = 5


def clean_login_form(form) -> tuple[str, str]:
    """
    Validate the login form.

    Returns:
        ``(email, password)`` with the email stripped.

    Raises:
        ValidationError: If either field is missing or malformed.
    """
    email = form.get("email", "").strip()
    password = form.get("password", "")

    errors = []
    if not email:
        errors.append("Email is required.")
    elif not EMAIL_PATTERN.match(email):
        errors.append("Invalid email format.")
    if not password.strip():
        errors.append("Password is required.")
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors.append(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
        )

    if errors:
        raise ValidationError(errors)
    return email, password


def get_user_by_email(email: str) -> User | None:
    """Return a user by email address (case-insensitive)."""
    return User.query.filter(User.email.ilike(email)).first()


def verify_credentials(email: str, password: str) -> User | None:
    """
    Return the active user matching ``email`` and ``password``, else None.

    Failures are logged without saying which half was wrong.
    """
    user = get_user_by_email(email)
    if user is None or not user.is_active or not user.check_password(password):
        logger.warning("Failed login attempt for %s", email)
        return None
    return user


def record_login(user: User) -> None:
    """Stamp ``last_login`` and remember the user's display name."""
    user.last_login = datetime.now(timezone.utc)
    db.session.commit()
    session["user_name"] = user.name
    logger.info("User %s signed in", user.email)


def clear_session() -> None:
    """Remove application-specific keys from the Flask session on logout."""
    for key in ("user_name", "_flashes"):
        session.pop(key, None)


def seed_admin(email: str, password: str, name: str = "Admin User") -> tuple[User, bool]:
    """
    Create the administrator account, or reset its password.

    Returns:
        ``(user, created)`` where ``created`` is False when an existing
        account was updated.
    """
    user = get_user_by_email(email)
    created = user is None
    if created:
        user = User(email=email, name=name, role="Administrator")
        db.session.add(user)
    user.name = name
    user.is_active = True
    user.set_password(password)
    db.session.commit()

    logger.info("%s admin account %s", "Created" if created else "Reset", email)
    return user, created
