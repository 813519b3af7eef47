"""
Request parsing helpers shared by the API blueprints.

Query-string values are parsed here so that a malformed ``page`` or
``status`` becomes a 400 ``ValidationError`` instead of silently falling
back to a default.
"""

from datetime import date
from enum import Enum
from typing import Any, Callable, TypeVar

from flask import current_app, request
from flask_login import current_user

from facilitydesk.exceptions import ValidationError
from facilitydesk.schemas.common import PayloadT, validate_payload

EnumT = TypeVar("EnumT", bound=Enum)


def current_user_id() -> int | None:
    """ID of the authenticated user, or None when auth is disabled."""
    if current_user and current_user.is_authenticated:
        return current_user.id
    return None


def json_payload(schema: type[PayloadT]) -> PayloadT:
    """Validate the JSON request body against ``schema``."""
    return validate_payload(schema, request.get_json(silent=True))


# -- Query string ----------------------------------------------------------


def arg_int(name: str, default: int | None = None, minimum: int | None = None) -> int | None:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{name}: must be an integer") from None
    if minimum is not None and value < minimum:
        raise ValidationError(f"{name}: must be at least {minimum}")
    return value


def arg_date(name: str) -> date | None:
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"{name}: must be a date (YYYY-MM-DD)") from None


def arg_enum(name: str, enum_cls: type[EnumT]) -> EnumT | None:
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"{name}: must be one of {allowed}") from None


def arg_bool(name: str) -> bool | None:
    raw = request.args.get(name)
    if not raw:
        return None
    lowered = raw.lower()
    if lowered in ("1", "true", "yes"):
        return True
    if lowered in ("0", "false", "no"):
        return False
    raise ValidationError(f"{name}: must be true or false")


def arg_str(name: str) -> str | None:
    raw = request.args.get(name, "").strip()
    return raw or None


# -- Pagination ------------------------------------------------------------


def get_pagination_args() -> tuple[int, int]:
    """
    Read ``page`` and ``per_page`` from the query string.

    ``per_page`` defaults to ``DEFAULT_PAGE_SIZE`` and is capped at
    ``MAX_PAGE_SIZE``.
    """
    page = arg_int("page", default=1, minimum=1)
    per_page = arg_int(
        "per_page", default=current_app.config["DEFAULT_PAGE_SIZE"], minimum=1
    )
    return page, min(per_page, current_app.config["MAX_PAGE_SIZE"])


def paginated(
    pagination, serializer: Callable[[Any], dict] | None = None
) -> dict[str, Any]:
    """Render a Flask-SQLAlchemy pagination object as the list envelope."""
    serializer = serializer or (lambda record: record.to_dict())
    return {
        "items": [serializer(record) for record in pagination.items],
        "total": pagination.total,
        "page": pagination.page,
        "per_page": pagination.per_page,
        "pages": pagination.pages,
    }
