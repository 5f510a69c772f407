"""
Waitress WSGI entry point for production deployment.

Usage::

    python wsgi.py

Set ``RECONCILE_ON_STARTUP=true`` to log any asset/assignment
inconsistencies before the server starts accepting requests.
"""

import logging
import os

from waitress import serve

from assetdesk import create_app
from assetdesk.services import assignment_service

logger = logging.getLogger(__name__)

app = create_app(os.environ.get("FLASK_ENV", "production"))

if app.config.get("RECONCILE_ON_STARTUP"):
    with app.app_context():
        problems = assignment_service.reconcile()
    if problems:
        logger.warning(
            "Startup reconcile found %d inconsistency(ies); run 'flask reconcile'",
            len(problems),
        )

if __name__ == "__main__":
    host = os.environ.get("WAITRESS_HOST", "127.0.0.1")
    port = int(os.environ.get("WAITRESS_PORT", "8080"))
    print(f"Starting Waitress on {host}:{port}")
    serve(app, host=host, port=port)
