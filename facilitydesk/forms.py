"""
Multipart upload forms.

The API is token-authenticated, so these Flask-WTF forms only carry the
file validators; CSRF is switched off per form.
"""

from flask import current_app
from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField, FileRequired, FileSize

from facilitydesk.services.storage_service import AVATAR_EXTENSIONS


class UploadForm(FlaskForm):
    """Base form: no CSRF token, errors flattened for JSON responses."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("meta", {"csrf": False})
        super().__init__(*args, **kwargs)

    def error_messages(self) -> list[str]:
        return [
            f"{name}: {message}"
            for name, messages in self.errors.items()
            for message in messages
        ]


class AvatarForm(UploadForm):
    file = FileField(
        "Avatar",
        validators=[
            FileRequired(message="an image file is required"),
            FileAllowed(AVATAR_EXTENSIONS, message="must be a jpg, png, gif or webp image"),
        ],
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        max_bytes = current_app.config["AVATAR_MAX_BYTES"]
        # A fresh list per instance; the class-level one is shared.
        self.file.validators = [
            *self.file.validators,
            FileSize(max_size=max_bytes, message=f"must be at most {max_bytes} bytes"),
        ]


class CsvImportForm(UploadForm):
    file = FileField(
        "CSV file",
        validators=[
            FileRequired(message="a CSV file is required"),
            FileAllowed(["csv"], message="must be a .csv file"),
        ],
    )
