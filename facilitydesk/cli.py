"""
Custom Flask CLI commands.

These commands are registered with the app via ``register_commands()``
in the application factory. Run them with ``flask <command_name>``.

Usage::

    flask db-check                        # Verify connectivity and tables
    flask run-automation --days-ahead 7   # Generate PM tasks now
    flask create-user --email a@b.c --name "Front Desk"
"""

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy import inspect

from facilitydesk.exceptions import ValidationError
from facilitydesk.extensions import db


@click.command("db-check")
@with_appcontext
def db_check_command():
    """
    Verify database connectivity and confirm the expected tables exist.

    Runs a trivial query against the configured database and compares
    the tables it finds with the ones declared by the models.  Useful
    for confirming ``DATABASE_URL`` is right and ``flask db upgrade``
    has been run.
    """
    click.echo("=" * 60)
    click.echo("  FacilityDesk — Database Connectivity Check")
    click.echo("=" * 60)

    # Show the connection string (mask any password).
    db_url = db.engine.url.render_as_string(hide_password=True)
    click.echo(f"\n  Connection string: {db_url}\n")

    # -- Step 1: Basic connectivity ----------------------------------------
    click.echo("[1/2] Testing connection...")
    try:
        result = db.session.execute(db.text("SELECT 1 AS connected"))
        row = result.fetchone()
        if row and row[0] == 1:
            click.secho(
                f"      ✓ Connected to {db.engine.dialect.name} successfully.",
                fg="green",
            )
        else:
            click.secho("      ✗ Unexpected result from test query.", fg="red")
            return
    except Exception as exc:  # pylint: disable=broad-exception-caught
        click.secho(f"      ✗ Connection failed: {exc}", fg="red")
        click.echo("\n  Troubleshooting tips:")
        click.echo("    - Is the database server running?")
        click.echo("    - Does DATABASE_URL match your server config?")
        return

    # -- Step 2: Compare tables with the models ----------------------------
    click.echo("[2/2] Checking tables...\n")
    expected = set(db.metadata.tables)
    found = set(inspect(db.engine).get_table_names())
    for name in sorted(expected):
        marker = "✓" if name in found else "✗"
        click.echo(f"      {marker} {name}")

    missing = expected - found
    if missing:
        click.secho(
            f"\n      ✗ {len(missing)} table(s) missing. Run 'flask db upgrade'.",
            fg="red",
        )
        return

    click.echo("\n" + "=" * 60)
    click.secho("  All checks passed. Database is ready.", fg="green", bold=True)
    click.echo("=" * 60)


@click.command("run-automation")
@click.option(
    "--days-ahead",
    type=click.IntRange(min=0),
    default=None,
    help="Lookahead window in days (defaults to AUTOMATION_DAYS_AHEAD).",
)
@with_appcontext
def run_automation_command(days_ahead: int | None):
    """Run the preventive-maintenance automation once."""
    from facilitydesk.services import automation_service

    if days_ahead is None:
        days_ahead = current_app.config["AUTOMATION_DAYS_AHEAD"]
    click.echo(f"Running maintenance automation ({days_ahead} day(s) ahead)...")
    result = automation_service.run_maintenance_automation(days_ahead=days_ahead)
    click.echo(f"Status: {result.status.value}")
    click.echo(
        f"Tasks created: {result.tasks_created}  "
        f"Work orders created: {result.work_orders_created}  "
        f"Marked overdue: {result.tasks_marked_overdue}  "
        f"Work orders synced: {result.work_orders_synced}"
    )
    if result.error_message:
        click.secho(f"Error: {result.error_message}", fg="red")
        raise SystemExit(1)


@click.command("create-user")
@click.option("--email", required=True, help="Email address of the new user.")
@click.option("--name", "full_name", required=True, help="Display name.")
@with_appcontext
def create_user_command(email: str, full_name: str):
    """
    Create an API user and print their token.

    The token is shown once; only its digest is stored.
    """
    from facilitydesk.services import user_service

    try:
        user, token = user_service.create_user(email=email, full_name=full_name)
    except ValidationError as exc:
        click.secho(f"✗ {exc}", fg="red")
        raise SystemExit(1) from exc

    click.secho(f"✓ Created user {user.email} (ID {user.id})", fg="green")
    click.echo(f"  API token: {token}")
    click.echo("  Send it as 'Authorization: Bearer <token>'.")


def register_commands(app):
    """Register all custom CLI commands with the Flask application."""
    from facilitydesk.seed_demo import seed_demo_command

    app.cli.add_command(db_check_command)
    app.cli.add_command(run_automation_command)
    app.cli.add_command(create_user_command)
    app.cli.add_command(seed_demo_command)
