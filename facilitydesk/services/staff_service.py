"""
Staff service — CRUD for the staff directory.
"""

import logging

from sqlalchemy import or_

from facilitydesk.extensions import db
from facilitydesk.models.enums import StaffStatus
from facilitydesk.models.staff import Staff
from facilitydesk.schemas.common import changes
from facilitydesk.schemas.staff import StaffCreate, StaffUpdate
from facilitydesk.services import crud

logger = logging.getLogger(__name__)


def get_staff_list(
    page: int = 1,
    per_page: int = 10,
    search: str | None = None,
    department: str | None = None,
    status: StaffStatus | None = None,
):
    """
    Return a page of staff ordered by name.

    Args:
        search: Case-insensitive match on name, email or employee id.
    """
    query = Staff.query.order_by(Staff.name, Staff.id)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Staff.name.ilike(pattern),
                Staff.email.ilike(pattern),
                Staff.employee_id.ilike(pattern),
            )
        )
    if department:
        query = query.filter(Staff.department == department)
    if status is not None:
        query = query.filter(Staff.status == status)
    return query.paginate(page=page, per_page=per_page, error_out=False)


def get_departments() -> list[str]:
    """Distinct department names for the directory filter."""
    rows = (
        db.session.query(Staff.department)
        .filter(Staff.department.isnot(None))
        .distinct()
        .order_by(Staff.department)
        .all()
    )
    return [row[0] for row in rows]


def get_staff(staff_id: int) -> Staff:
    return crud.get_or_raise(Staff, staff_id, "Staff")


def create_staff(payload: StaffCreate, user_id: int | None = None) -> Staff:
    return crud.create_record(Staff, payload.model_dump(), user_id=user_id)


def update_staff(
    staff_id: int, payload: StaffUpdate, user_id: int | None = None
) -> Staff:
    staff = get_staff(staff_id)
    return crud.update_record(staff, changes(payload), user_id=user_id)


def delete_staff(staff_id: int, user_id: int | None = None) -> None:
    """Hard-delete a staff member with their attendance and leave history."""
    crud.delete_record(get_staff(staff_id), user_id=user_id)
