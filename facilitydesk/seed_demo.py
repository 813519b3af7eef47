"""
Seed script — load a small demo data set for local development.

Registers a ``flask seed-demo`` CLI command that creates a handful of
assets, schedules, contacts, complaints, staff and packages through the
normal service layer, so every record gets its audit entry.

Usage::

    flask seed-demo

The command refuses to run when assets already exist.
"""

from datetime import date, time, timedelta

import click
from flask.cli import with_appcontext

from facilitydesk.models.asset import Asset
from facilitydesk.models.enums import ContactType, FrequencyType, Priority
from facilitydesk.schemas.asset import AssetCreate
from facilitydesk.schemas.maintenance import MaintenanceTypeCreate, ScheduleCreate
from facilitydesk.schemas.package import PackageCreate
from facilitydesk.schemas.scheduler import ComplaintCreate, ContactCreate
from facilitydesk.schemas.staff import StaffCreate

_ASSETS = [
    {
        "name": "Lift A1",
        "asset_type": "Lift / Elevator",
        "make_model": "Schindler 3300",
        "location_building": "Tower A",
        "location_floor": "G",
        "contractor_name": "Apex Lifts Sdn Bhd",
        "criticality": Priority.HIGH,
    },
    {
        "name": "Lift B1",
        "asset_type": "Lift / Elevator",
        "make_model": "KONE MonoSpace 500",
        "location_building": "Tower B",
        "location_floor": "G",
        "contractor_name": "Apex Lifts Sdn Bhd",
    },
    {
        "name": "Standby Generator",
        "asset_type": "Generator",
        "make_model": "Cummins C500",
        "location_building": "Podium",
        "location_floor": "B1",
        "criticality": Priority.CRITICAL,
    },
]

_CONTACTS = [
    {"name": "Apex Lifts Sdn Bhd", "contact_type": ContactType.CONTRACTOR},
    {"name": "Ravi Kumar", "contact_type": ContactType.TECHNICIAN, "phone": "012-3456789"},
    {"name": "Unit 12-3 Owner", "contact_type": ContactType.RESIDENT},
]

_STAFF = [
    {"employee_id": "EMP001", "name": "Aisyah Rahman", "email": "aisyah@example.com",
     "position": "Supervisor", "department": "maintenance"},
    {"employee_id": "EMP002", "name": "Daniel Tan", "email": "daniel@example.com",
     "position": "Technician", "department": "maintenance"},
    {"employee_id": "EMP003", "name": "Mei Ling", "email": "meiling@example.com",
     "position": "Receptionist", "department": "front_desk"},
]


@click.command("seed-demo")
@with_appcontext
def seed_demo_command():
    """Load demo assets, schedules, contacts, complaints, staff and packages."""
    # pylint: disable=import-outside-toplevel
    from facilitydesk.services import (
        asset_service,
        complaint_service,
        contact_service,
        package_service,
        schedule_service,
        staff_service,
    )

    click.echo("=" * 60)
    click.echo("  FacilityDesk — Seed Demo Data")
    click.echo("=" * 60)

    if Asset.query.first() is not None:
        click.secho("  ✗ Assets already exist; refusing to seed twice.", fg="yellow")
        return

    today = date.today()

    click.echo("\n[1/4] Assets and schedules...")
    inspection = schedule_service.create_maintenance_type(
        MaintenanceTypeCreate(name="Inspection", description="Routine inspection")
    )
    for index, values in enumerate(_ASSETS):
        asset = asset_service.create_asset(
            AssetCreate(
                next_certification_date=today + timedelta(days=20 + 60 * index),
                **values,
            )
        )
        schedule_service.create_schedule(
            ScheduleCreate(
                asset_id=asset.id,
                maintenance_type_id=inspection.id,
                schedule_name=f"{asset.name} monthly inspection",
                frequency_type=FrequencyType.MONTHLY,
                start_date=today - timedelta(days=30),
                priority=values.get("criticality", Priority.MEDIUM),
            )
        )
    click.secho(f"      ✓ {len(_ASSETS)} assets with monthly schedules", fg="green")

    click.echo("[2/4] Contacts and complaints...")
    for values in _CONTACTS:
        contact_service.create_contact(ContactCreate(**values))
    complaint_service.create_complaint(
        ComplaintCreate(
            title="Water leak at corridor",
            property_unit="12-3",
            priority=Priority.HIGH,
            scheduled_date=today + timedelta(days=1),
            scheduled_start=time(10, 0),
            scheduled_end=time(11, 0),
        )
    )
    complaint_service.create_complaint(
        ComplaintCreate(title="Lobby light flickering", property_unit="Lobby")
    )
    click.secho("      ✓ contacts and complaints", fg="green")

    click.echo("[3/4] Staff...")
    for values in _STAFF:
        staff_service.create_staff(StaffCreate(**values))
    click.secho(f"      ✓ {len(_STAFF)} staff", fg="green")

    click.echo("[4/4] Packages...")
    package_service.create_package(
        PackageCreate(
            tracking_number="MY123456789",
            recipient_name="Unit 12-3 Owner",
            recipient_unit="12-3",
            sender="Shopee Express",
            delivery_date=today,
        )
    )
    click.secho("      ✓ 1 package", fg="green")

    click.echo("\n" + "=" * 60)
    click.secho("  Demo data loaded.", fg="green", bold=True)
    click.echo("=" * 60)
