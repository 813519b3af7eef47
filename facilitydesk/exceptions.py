"""
Domain exceptions raised by the service layer.

Routes never build error responses by hand: the handlers registered in
``create_app()`` translate these into JSON bodies with the right status
code.
"""


class ValidationError(ValueError):
    """A payload failed validation before any database call was made."""

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = errors
        super().__init__("; ".join(errors))


class RecordNotFoundError(LookupError):
    """The requested record does not exist."""

    def __init__(self, entity: str, record_id):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} ID {record_id} not found.")


class InvalidTransitionError(ValueError):
    """A status change is not allowed by the entity's transition table."""

    def __init__(self, entity: str, current, requested):
        self.entity = entity
        self.current = getattr(current, "value", current)
        self.requested = getattr(requested, "value", requested)
        super().__init__(
            f"{entity} cannot move from '{self.current}' to '{self.requested}'."
        )


class UnsupportedFrequencyError(ValueError):
    """The recurrence calculator cannot advance this frequency type."""


class ImportFileError(ValueError):
    """A CSV upload could not be read at all (bad encoding or header)."""
