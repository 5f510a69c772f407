"""
Assignments blueprint — assign and return workflow.
"""

from flask import Blueprint

bp = Blueprint("assignments", __name__)

# Import routes after blueprint creation to avoid circular imports.
from assetdesk.blueprints.assignments import routes  # noqa: E402, F401
