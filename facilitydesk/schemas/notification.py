"""Notification request payloads."""

from pydantic import Field

from facilitydesk.schemas.common import PayloadModel


class NotificationCreate(PayloadModel):
    """
    A message to send.  Without ``recipient_ids`` it goes to every
    active user.
    """

    module: str = Field(max_length=50)
    action: str = Field(max_length=50)
    message: str
    entity_id: int | None = None
    recipient_ids: list[int] | None = None
