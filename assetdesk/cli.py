"""
Custom Flask CLI commands.

These commands are registered with the app via ``register_commands()``
in the application factory. Run them with ``flask <command_name>``.

Usage::

    flask db-check      # Verify database connectivity and schema
    flask init-db       # Create tables without running migrations
    flask seed-admin    # Create or reset the administrator account
    flask reconcile     # Report asset/assignment inconsistencies
"""

import sys

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from assetdesk.extensions import db

EXPECTED_TABLES = ("employee", "asset", "assignment", "app_user")


@click.command("db-check")
@with_appcontext
def db_check_command():
    """
    Verify database connectivity and confirm the expected tables exist.

    Runs a trivial query against the configured database and then
    counts the rows in each application table.
    """
    click.echo("=" * 60)
    click.echo("  AssetDesk — Database Connectivity Check")
    click.echo("=" * 60)

    db_uri = db.engine.url.render_as_string(hide_password=True)
    click.echo(f"\n  Connection string: {db_uri}\n")

    # -- Step 1: Basic connectivity ----------------------------------------
    click.echo("[1/2] Testing connection...")
    try:
        row = db.session.execute(db.text("SELECT 1 AS connected")).fetchone()
    except SQLAlchemyError as exc:
        click.secho(f"      ✗ Connection failed: {exc}", fg="red")
        click.echo("\n  Troubleshooting tips:")
        click.echo("    - Does DATABASE_URL point at the right database?")
        click.echo("    - Is the SQLite file writable by this user?")
        sys.exit(1)
    if not row or row[0] != 1:
        click.secho("      ✗ Unexpected result from test query.", fg="red")
        sys.exit(1)
    click.secho("      ✓ Connected successfully.", fg="green")

    # -- Step 2: Tables and row counts -------------------------------------
    click.echo("[2/2] Checking tables...\n")
    present = set(inspect(db.engine).get_table_names())
    missing = [name for name in EXPECTED_TABLES if name not in present]
    for name in EXPECTED_TABLES:
        if name in missing:
            click.secho(f"      {name:>12}  — missing", fg="red")
            continue
        count = db.session.execute(
            db.text(f"SELECT COUNT(*) FROM {name}")  # noqa: S608
        ).scalar()
        click.echo(f"      {name:>12}  — {count} row(s)")

    if missing:
        click.secho(
            "\n  Schema incomplete. Run 'flask db upgrade' or 'flask init-db'.",
            fg="yellow",
        )
        sys.exit(1)

    click.echo("\n" + "=" * 60)
    click.secho("  All checks passed. Database is ready.", fg="green", bold=True)
    click.echo("=" * 60)


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create all tables directly from the models."""
    db.create_all()
    click.secho("Database tables created.", fg="green")


@click.command("seed-admin")
@click.option("--email", default=None, help="Admin email (default: ADMIN_EMAIL).")
@click.option(
    "--password", default=None, help="Admin password (default: ADMIN_PASSWORD)."
)
@click.option("--name", default=None, help="Display name (default: ADMIN_NAME).")
@with_appcontext
def seed_admin_command(email, password, name):
    """Create the administrator account, or reset its password."""
    from assetdesk.services import auth_service

    email = email or current_app.config["ADMIN_EMAIL"]
    password = password or current_app.config["ADMIN_PASSWORD"]
    name = name or current_app.config["ADMIN_NAME"]

    user, created = auth_service.seed_admin(email, password, name=name)
    if created:
        click.secho(f"Created administrator {user.email}.", fg="green")
    else:
        click.secho(f"Reset password for administrator {user.email}.", fg="yellow")


@click.command("reconcile")
@with_appcontext
def reconcile_command():
    """Report assets and assignments that disagree with each other."""
    from assetdesk.services import assignment_service

    problems = assignment_service.reconcile()
    if not problems:
        click.secho("No inconsistencies found.", fg="green")
        return

    click.secho(f"Found {len(problems)} inconsistency(ies):", fg="red")
    for problem in problems:
        line = f"  {problem.kind}: asset={problem.asset_id}"
        if problem.assignment_id:
            line += f" assignment={problem.assignment_id}"
        if problem.detail:
            line += f" ({problem.detail})"
        click.echo(line)
    sys.exit(1)


def register_commands(app):
    """Register all custom CLI commands with the Flask application."""
    app.cli.add_command(db_check_command)
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_admin_command)
    app.cli.add_command(reconcile_command)
