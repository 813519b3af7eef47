"""
Serialization helper shared by every model.

Routes return ``model.to_dict()`` straight from the view function, so
the dict must be JSON-safe: enum members become their values and
date/time objects become ISO-8601 strings.
"""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any


def to_json_value(value: Any) -> Any:
    """Convert a single column value into something ``json.dumps`` accepts."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


class SerializerMixin:
    """Adds ``to_dict()`` built from the mapped table columns."""

    # Columns that must never leave the server (e.g. token hashes).
    __serialize_exclude__: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            column.name: to_json_value(getattr(self, column.name))
            for column in self.__table__.columns
            if column.name not in self.__serialize_exclude__
        }
