"""
Tests for the auth service: login form validation, credential checks
and admin seeding.
"""

import pytest
from werkzeug.datastructures import MultiDict

from assetdesk.errors import ValidationError
from assetdesk.services import auth_service


class TestCleanLoginForm:
    """Tests for clean_login_form()."""

    def test_valid_form(self):
        """A well-formed email and password pass through."""
        email, password = auth_service.clean_login_form(
            MultiDict({"email": " admin@company.com ", "password": "admin123"})
        )
        assert email == "admin@company.com"
        assert password == "admin123"

    @pytest.mark.parametrize(
        "form, message",
        [
            ({"email": "", "password": "admin123"}, "Email is required."),
            ({"email": "admin", "password": "admin123"}, "Invalid email format."),
            ({"email": "admin@company.com", "password": ""}, "Password is required."),
            (
                {"email": "admin@company.com", "password": "abc"},
                "Password must be at least 5 characters.",
            ),
        ],
    )
    def test_invalid_form(self, form, message):
        """Each problem produces a specific message."""
        with pytest.raises(ValidationError) as exc_info:
            auth_service.clean_login_form(MultiDict(form))
        assert exc_info.value.errors == [message]


class TestCredentials:
    """Tests for seed_admin() and verify_credentials()."""

    def test_seed_creates_hashed_admin(self, db_session):
        """The password is stored as a bcrypt hash, never in clear."""
        user, created = auth_service.seed_admin("admin@company.com", "admin123")
        assert created is True
        assert user.password_hash != "admin123"
        assert user.password_hash.startswith("$2")

    def test_seed_twice_resets_password(self, db_session):
        """Seeding an existing account updates its password."""
        auth_service.seed_admin("admin@company.com", "admin123")
        user, created = auth_service.seed_admin("admin@company.com", "s3cret!")

        assert created is False
        assert user.check_password("s3cret!")
        assert not user.check_password("admin123")

    def test_verify_good_credentials(self, db_session):
        """Matching credentials return the user; email case is ignored."""
        auth_service.seed_admin("admin@company.com", "admin123")
        user = auth_service.verify_credentials("Admin@Company.com", "admin123")
        assert user is not None
        assert user.email == "admin@company.com"

    def test_verify_wrong_password(self, db_session):
        """A wrong password returns None."""
        auth_service.seed_admin("admin@company.com", "admin123")
        assert auth_service.verify_credentials("admin@company.com", "nope!") is None

    def test_verify_unknown_user(self, db_session):
        """An unknown email returns None."""
        assert auth_service.verify_credentials("who@company.com", "admin123") is None

    def test_inactive_user_is_refused(self, db_session):
        """Disabled accounts cannot sign in."""
        user, _ = auth_service.seed_admin("admin@company.com", "admin123")
        user.is_active = False
        db_session.commit()
        assert auth_service.verify_credentials("admin@company.com", "admin123") is None
