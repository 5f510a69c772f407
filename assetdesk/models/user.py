"""
Administrator account model.

The console has a single administrator.  The password is stored as a
bcrypt hash and verified by ``auth_service.verify_credentials``.
"""

from flask_login import UserMixin

from assetdesk.extensions import bcrypt, db


class User(UserMixin, db.Model):
    """
    Console login account.

    Inherits from ``UserMixin`` to satisfy Flask-Login requirements
    (``is_authenticated``, ``is_active``, ``get_id``).
    """

    __tablename__ = "app_user"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    email = db.Column(db.String(200), unique=True, nullable=False)
    name = db.Column(db.String(200), nullable=False)
    role = db.Column(db.String(50), nullable=False, default="Administrator")
    password_hash = db.Column(db.String(128), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    last_login = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    def set_password(self, password: str) -> None:
        """Hash and store a new password."""
        self.password_hash = bcrypt.generate_password_hash(password).decode("utf-8")

    def check_password(self, password: str) -> bool:
        """Return True if ``password`` matches the stored hash."""
        return bcrypt.check_password_hash(self.password_hash, password)

    def __repr__(self) -> str:
        return f"<User {self.email} role={self.role}>"
