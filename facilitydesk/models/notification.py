"""
In-app notifications.

One row per recipient: a message fanned out to five users is five rows,
so each user reads and deletes their own copy.
"""

from facilitydesk.extensions import db
from facilitydesk.models.mixins import SerializerMixin


class Notification(SerializerMixin, db.Model):
    """
    A message for one user about something that happened in a module.

    ``module`` names the area (``packages``, ``leave``, ...), ``action``
    what happened in it (``received``, ``approved``, ...) and
    ``entity_id`` the record it concerns, if any.
    """

    __tablename__ = "notifications"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_by = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    module = db.Column(db.String(50), nullable=False)
    action = db.Column(db.String(50), nullable=False)
    entity_id = db.Column(db.Integer, nullable=True)
    message = db.Column(db.Text, nullable=False)
    is_read = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    def __repr__(self) -> str:
        return f"<Notification {self.module}.{self.action} user={self.user_id}>"
