# rentbook/cli.py
"""Flask CLI commands for cron jobs and local setup.

    flask --app wsgi init-db
    flask --app wsgi rent generate 2024-03
    flask --app wsgi rent remind 2024-03
    flask --app wsgi seed-demo
"""
from datetime import date
from decimal import Decimal

import click
from flask import current_app
from flask.cli import AppGroup, with_appcontext

from .errors import RentbookError
from .extensions import db
from .models import Tenant
from .services import monthly_generation
from .services.notification_service import NotificationService
from .utils.months import current_month

rent_cli = AppGroup("rent", help="Rent record jobs.")

DEMO_TENANTS = [
    {"name": "Ravi Kumar", "contact_number": "9876543210", "address": "12 MG Road, Pune",
     "aadhaar_number": "123412341234", "pan_number": "ABCDE1234F",
     "monthly_rent": Decimal("10000"), "deposit": Decimal("20000")},
    {"name": "Priya Sharma", "contact_number": "8765432109", "address": "4 Park Street, Kolkata",
     "aadhaar_number": "567856785678", "pan_number": "PQRSX6789K",
     "monthly_rent": Decimal("8000"), "deposit": Decimal("16000")},
]


@click.command("init-db")
@with_appcontext
def init_db():
    """Create all tables (development only; use `flask db upgrade` otherwise)."""
    db.create_all()
    click.echo("Database tables created")


@click.command("seed-demo")
@with_appcontext
def seed_demo():
    """Insert demo tenants if they are not present."""
    created = 0
    for row in DEMO_TENANTS:
        if Tenant.query.filter_by(aadhaar_number=row["aadhaar_number"]).first():
            continue
        db.session.add(Tenant(
            accommodation_from_date=date.today().replace(day=1),
            aadhaar_file="demo-aadhaar.pdf",
            pan_file="demo-pan.pdf",
            **row,
        ))
        created += 1
    db.session.commit()
    click.echo(f"Seeded {created} demo tenants")


@rent_cli.command("generate")
@click.argument("month", required=False)
def generate(month):
    """Generate pending rent records for MONTH (default: current month)."""
    month = month or current_month()
    try:
        result = monthly_generation.generate_monthly(month)
    except RentbookError as e:
        raise click.ClickException(e.message)
    click.echo(f"Generated {len(result.done)} rent records for {month} "
               f"({len(result.skipped)} already present)")
    for item in result.failed:
        click.echo(item.error, err=True)


@rent_cli.command("remind")
@click.argument("month", required=False)
def remind(month):
    """Send WhatsApp reminders for pending, unsent records of MONTH."""
    month = month or current_month()
    service = NotificationService(
        current_app.extensions["whatsapp"],
        country_code=current_app.config["WHATSAPP_COUNTRY_CODE"],
    )
    try:
        result = service.send_bulk_reminders(month)
    except RentbookError as e:
        raise click.ClickException(e.message)
    click.echo(f"Sent {len(result.done)} of {result.total} reminders for {month}")
    for item in result.failed:
        click.echo(f"{item.tenant_name}: {item.error}", err=True)


def register_commands(app):
    app.cli.add_command(init_db)
    app.cli.add_command(seed_demo)
    app.cli.add_command(rent_cli)
