"""
Employees blueprint — employee records with guarded delete.
"""

from flask import Blueprint

bp = Blueprint("employees", __name__)

# Import routes after blueprint creation to avoid circular imports.
from assetdesk.blueprints.employees import routes  # noqa: E402, F401
