"""
Routes for the main blueprint — dashboard and health check.
"""

from flask import render_template
from flask_login import login_required
from sqlalchemy import text

from assetdesk.blueprints.main import bp
from assetdesk.extensions import db
from assetdesk.services import dashboard_service


@bp.route("/")
@login_required
def dashboard():
    """
    Main dashboard displaying summary statistics.

    Shows employee and asset counts by status, the most recent
    assignments, and headcount per department.
    """
    stats = dashboard_service.get_dashboard_stats()
    return render_template("main/dashboard.html", stats=stats)


@bp.route("/health")
def health_check():
    """
    Health check endpoint for monitoring and load balancers.

    Returns 200 if the app is running and can reach the database.
    """
    try:
        db.session.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}, 200
    except Exception as exc:  # pylint: disable=broad-except
        return {"status": "unhealthy", "database": str(exc)}, 503
