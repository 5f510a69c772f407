"""
Assets blueprint — inventory records with guarded delete.
"""

from flask import Blueprint

bp = Blueprint("assets", __name__)

# Import routes after blueprint creation to avoid circular imports.
from assetdesk.blueprints.assets import routes  # noqa: E402, F401
