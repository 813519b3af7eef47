"""
User service — user lookup, API token issue and profile updates.

Sign-up and password flows live outside this application.  This service
manages the local user records: the actor recorded in audit logs, the
approver on leave requests and the owner of an uploaded avatar.
"""

import hashlib
import logging
import secrets

from facilitydesk.exceptions import RecordNotFoundError, ValidationError
from facilitydesk.extensions import db
from facilitydesk.models.user import User
from facilitydesk.services import audit_service, crud

logger = logging.getLogger(__name__)


def hash_token(token: str) -> str:
    """SHA-256 hex digest stored in place of the raw API token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


# -- User lookup -----------------------------------------------------------


def get_user_by_id(user_id: int) -> User | None:
    """Return a user by primary key, or None if not found."""
    return db.session.get(User, user_id)


def get_user_by_email(email: str) -> User | None:
    """Return a user by email address (case-insensitive)."""
    return User.query.filter(User.email.ilike(email)).first()


def get_user_by_token(token: str | None) -> User | None:
    """
    Resolve a bearer token to an active user.

    Returns None for a missing, unknown or deactivated token owner.
    """
    if not token:
        return None
    user = User.query.filter_by(api_token_hash=hash_token(token)).first()
    if user is None or not user.is_active:
        return None
    return user


# -- User creation ---------------------------------------------------------


def create_user(
    email: str,
    full_name: str,
    created_by: int | None = None,
) -> tuple[User, str]:
    """
    Create a user and issue their API token.

    Returns:
        ``(user, token)``.  The raw token is only available here; the
        database keeps its digest.

    Raises:
        ValidationError: If a user with this email already exists.
    """
    if get_user_by_email(email) is not None:
        raise ValidationError(f"email: a user with '{email}' already exists")

    token = secrets.token_urlsafe(32)
    user = User(email=email, full_name=full_name, api_token_hash=hash_token(token))
    db.session.add(user)
    db.session.flush()  # Get the user ID for audit logging.

    audit_service.log_change(
        user_id=created_by,
        action_type="CREATE",
        entity_type=User.__tablename__,
        entity_id=user.id,
        new_value=user.to_dict(),
    )
    db.session.commit()

    logger.info("Created user %s", email)
    return user, token


def rotate_token(user_id: int, changed_by: int | None = None) -> str:
    """Replace a user's API token and return the new raw value."""
    user = get_user_by_id(user_id)
    if user is None:
        raise RecordNotFoundError("User", user_id)

    token = secrets.token_urlsafe(32)
    user.api_token_hash = hash_token(token)
    user.updated_at = crud.utcnow()

    audit_service.log_change(
        user_id=changed_by,
        action_type="UPDATE",
        entity_type=User.__tablename__,
        entity_id=user.id,
        new_value={"api_token": "rotated"},
    )
    db.session.commit()

    logger.info("Rotated API token for user %s", user.email)
    return token


def deactivate_user(user_id: int, changed_by: int | None = None) -> User:
    """Disable a user; their token stops resolving immediately."""
    user = get_user_by_id(user_id)
    if user is None:
        raise RecordNotFoundError("User", user_id)

    user.is_active = False
    user.updated_at = crud.utcnow()

    audit_service.log_change(
        user_id=changed_by,
        action_type="UPDATE",
        entity_type=User.__tablename__,
        entity_id=user.id,
        previous_value={"is_active": True},
        new_value={"is_active": False},
    )
    db.session.commit()

    logger.info("Deactivated user %s", user.email)
    return user


# -- Profile ---------------------------------------------------------------


def set_avatar(user: User, avatar_url: str) -> User:
    """Store the public URL of a freshly uploaded avatar on the user."""
    return crud.update_record(user, {"avatar_url": avatar_url}, user_id=user.id)
