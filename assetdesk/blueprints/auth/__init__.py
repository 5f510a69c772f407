"""
Auth blueprint — administrator login and logout.
"""

from flask import Blueprint

bp = Blueprint("auth", __name__)

# Import routes after blueprint creation to avoid circular imports.
from assetdesk.blueprints.auth import routes  # noqa: E402, F401
