"""
Contact service — CRUD for the contacts address book.
"""

import logging

from sqlalchemy import or_

from facilitydesk.exceptions import ValidationError
from facilitydesk.models.enums import ASSIGNABLE_CONTACT_TYPES, ContactType
from facilitydesk.models.scheduler import Contact
from facilitydesk.schemas.common import changes
from facilitydesk.schemas.scheduler import ContactCreate, ContactUpdate
from facilitydesk.services import crud

logger = logging.getLogger(__name__)


def get_contacts(
    page: int = 1,
    per_page: int = 10,
    search: str | None = None,
    contact_type: ContactType | None = None,
):
    """Return a page of contacts ordered by name."""
    query = Contact.query.order_by(Contact.name, Contact.id)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Contact.name.ilike(pattern),
                Contact.company.ilike(pattern),
                Contact.email.ilike(pattern),
            )
        )
    if contact_type is not None:
        query = query.filter(Contact.contact_type == contact_type)
    return query.paginate(page=page, per_page=per_page, error_out=False)


def get_assignable_contacts() -> list[Contact]:
    """Contacts that can be assigned to jobs, ordered by name."""
    return (
        Contact.query.filter(Contact.contact_type.in_(ASSIGNABLE_CONTACT_TYPES))
        .order_by(Contact.name)
        .all()
    )


def get_contact(contact_id: int) -> Contact:
    return crud.get_or_raise(Contact, contact_id, "Contact")


def get_assignable_contact(contact_id: int) -> Contact:
    """
    Return a contact that may be put on a job or complaint.

    Raises:
        RecordNotFoundError: If the contact does not exist.
        ValidationError: If its type cannot be assigned work.
    """
    contact = get_contact(contact_id)
    if contact.contact_type not in ASSIGNABLE_CONTACT_TYPES:
        raise ValidationError(
            f"technician_id: contact '{contact.name}' of type "
            f"'{contact.contact_type.value}' cannot be assigned work"
        )
    return contact


def create_contact(payload: ContactCreate, user_id: int | None = None) -> Contact:
    return crud.create_record(Contact, payload.model_dump(), user_id=user_id)


def update_contact(
    contact_id: int, payload: ContactUpdate, user_id: int | None = None
) -> Contact:
    contact = get_contact(contact_id)
    return crud.update_record(contact, changes(payload), user_id=user_id)


def delete_contact(contact_id: int, user_id: int | None = None) -> None:
    """Hard-delete a contact; jobs assigned to it become unassigned."""
    crud.delete_record(get_contact(contact_id), user_id=user_id)
