"""
Application user model.

Sign-up and password flows live outside this application.  A user is
provisioned with ``flask create-user``, which prints a one-time API
token; only its SHA-256 digest is stored.  API clients send the token
as ``Authorization: Bearer <token>``.
"""

from flask_login import UserMixin

from facilitydesk.extensions import db
from facilitydesk.models.mixins import SerializerMixin


class User(UserMixin, SerializerMixin, db.Model):
    """
    Application user.

    Inherits from ``UserMixin`` to satisfy Flask-Login requirements
    (``is_authenticated``, ``is_active``, ``get_id``).  The user is the
    actor recorded in audit logs and leave approvals, and the owner of
    an uploaded avatar.
    """

    __tablename__ = "users"
    __serialize_exclude__ = ("api_token_hash",)

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    email = db.Column(db.String(200), unique=True, nullable=False)
    full_name = db.Column(db.String(200), nullable=False)
    avatar_url = db.Column(db.String(500), nullable=True)
    api_token_hash = db.Column(db.String(64), unique=True, nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
