"""
Storage service — writes uploaded files under ``UPLOAD_FOLDER``.

Files are renamed to a random hex name on the way in, keeping only the
original extension, and are served back from ``/uploads/<path>``.
"""

import logging
import os
import uuid

from flask import current_app
from werkzeug.datastructures import FileStorage

logger = logging.getLogger(__name__)

AVATAR_DIR = "avatars"
AVATAR_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp")


def upload_root() -> str:
    return current_app.config["UPLOAD_FOLDER"]


def save_avatar(upload: FileStorage) -> str:
    """
    Persist an already-validated avatar image.

    Returns:
        The public URL, ``/uploads/avatars/<name>``.
    """
    ext = os.path.splitext(upload.filename or "")[1].lower().lstrip(".")
    filename = f"{uuid.uuid4().hex}.{ext}"

    directory = os.path.join(upload_root(), AVATAR_DIR)
    os.makedirs(directory, exist_ok=True)
    upload.save(os.path.join(directory, filename))

    logger.info("Stored avatar %s", filename)
    return f"/uploads/{AVATAR_DIR}/{filename}"
