"""
Shared pydantic plumbing for request payloads.

Every ``*Create`` / ``*Update`` model derives from ``PayloadModel``:
whitespace is stripped, blank strings become ``None`` and unknown keys
are rejected.  ``validate_payload`` turns pydantic's error list into the
application's ``ValidationError`` so routes never see pydantic types.
"""

from datetime import timezone
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, field_validator

from facilitydesk.exceptions import ValidationError

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class PayloadModel(BaseModel):
    """Base class for request bodies."""

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def empty_str_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


def reject_nulls(*field_names: str):
    """
    Build a validator that refuses an explicit ``null`` for fields that
    are optional in an update payload but required on the record.
    """

    def _check(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be empty")
        return v

    return field_validator(*field_names)(classmethod(_check))


def naive_utc(*field_names: str):
    """
    Build a validator that converts timezone-aware datetimes to naive UTC,
    which is how the DateTime columns store them.
    """

    def _convert(cls, v):
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    return field_validator(*field_names)(classmethod(_convert))


def format_errors(exc: pydantic.ValidationError) -> list[str]:
    """Flatten pydantic errors into ``"field: message"`` strings."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        message = error["msg"]
        # Errors raised from our own validators carry a "Value error, " prefix.
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        messages.append(f"{location}: {message}" if location else message)
    return messages


def validate_payload(schema: type[PayloadT], data: Any) -> PayloadT:
    """
    Validate a decoded JSON body against ``schema``.

    Raises:
        ValidationError: If the body is not an object or fails validation.
    """
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(format_errors(exc)) from exc


def changes(payload: BaseModel) -> dict[str, Any]:
    """Return only the fields the client actually sent."""
    return payload.model_dump(exclude_unset=True)
