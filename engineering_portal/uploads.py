from __future__ import annotations

import logging
import os
import uuid

from flask import current_app
from werkzeug.datastructures import FileStorage

logger = logging.getLogger(__name__)

DEPARTMENT_IMAGES = "img/departments"
FACULTY_PHOTOS = "img/faculty"
NEWS_IMAGES = "img/news"
ARCHIVE_DOCS = "docs/archive"
SUPPORT_UPLOADS = "uploads/support"


def upload_root() -> str:
    return os.path.abspath(current_app.config["UPLOAD_ROOT"])


def has_file(uploaded: FileStorage | None) -> bool:
    return bool(uploaded and uploaded.filename)


def save_upload(
    uploaded: FileStorage | None,
    subdir: str,
    allowed_extensions: set[str],
    max_bytes: int | None = None,
) -> tuple[str | None, str | None]:
    if not has_file(uploaded):
        return None, None

    # Stored names are generated, so only the extension of the client name matters.
    ext = os.path.splitext(uploaded.filename)[1].lower()
    if ext not in allowed_extensions:
        return None, "Unsupported file type."

    blob = uploaded.read()
    if not blob:
        return None, "Uploaded file is empty."

    if max_bytes is not None and len(blob) > max_bytes:
        return None, f"File too large. Max size is {max_bytes // (1024 * 1024)} MB."

    folder = os.path.join(upload_root(), *subdir.split("/"))
    os.makedirs(folder, exist_ok=True)
    stored_name = f"{uuid.uuid4().hex}{ext}"
    with open(os.path.join(folder, stored_name), "wb") as handle:
        handle.write(blob)

    relative = f"{subdir}/{stored_name}"
    logger.info("Stored upload %s (%d bytes)", relative, len(blob))
    return relative, None


def delete_upload(relative_path: str | None, subdir: str) -> bool:
    if not relative_path:
        return False

    safe_root = os.path.join(upload_root(), *subdir.split("/"))
    full_path = os.path.abspath(os.path.join(upload_root(), relative_path.lstrip("~/")))
    if os.path.commonpath([safe_root, full_path]) != safe_root:
        return False

    if not os.path.isfile(full_path):
        return False

    try:
        os.remove(full_path)
    except OSError as exc:
        logger.warning("Could not delete upload %s: %s", relative_path, exc)
        return False
    return True
