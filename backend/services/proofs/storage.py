"""
Proof image storage.

Images go through Django's default_storage; the stored name is the stable
reference kept on the order or report.
"""

import logging
import os
import uuid
from typing import Iterable, List

from django.conf import settings
from django.core.files.storage import default_storage
from PIL import Image, UnidentifiedImageError

from services.exceptions import OrderValidationError

logger = logging.getLogger(__name__)

PICKUP_FOLDER = "proofs/pickup"
DELIVERY_FOLDER = "proofs/delivery"
REPORT_FOLDER = "proofs/reports"


def validate_proof_image(upload) -> None:
    max_bytes = getattr(settings, "PROOF_MAX_UPLOAD_BYTES", 5 * 1024 * 1024)

    content_type = getattr(upload, "content_type", "") or ""
    if not content_type.startswith("image/"):
        raise OrderValidationError("Proof must be an image file")
    if upload.size > max_bytes:
        raise OrderValidationError(f"Proof image must be at most {max_bytes // (1024 * 1024)} MB")

    try:
        upload.seek(0)
        Image.open(upload).verify()
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise OrderValidationError("Proof image could not be read")
    finally:
        upload.seek(0)


def save_proof_image(upload, folder: str) -> str:
    """Validate and store one image; returns its storage reference."""
    validate_proof_image(upload)
    extension = os.path.splitext(upload.name or "")[1].lower() or ".jpg"
    name = f"{folder}/{uuid.uuid4().hex}{extension}"
    return default_storage.save(name, upload)


def save_proof_images(uploads: Iterable, folder: str) -> List[str]:
    """
    Store every image or none of them: if one fails validation the ones
    already saved are removed before the error propagates.
    """
    uploads = list(uploads)
    if not uploads:
        raise OrderValidationError("At least one proof image is required")

    for upload in uploads:
        validate_proof_image(upload)

    saved = []
    try:
        for upload in uploads:
            saved.append(save_proof_image(upload, folder))
    except Exception:
        discard_proofs(saved)
        raise
    return saved


def discard_proofs(refs: Iterable[str]) -> None:
    """Best-effort removal of stored blobs that no record ended up referencing."""
    for ref in refs:
        try:
            default_storage.delete(ref)
        except OSError:
            logger.warning("Could not delete orphaned proof %s", ref)


def proof_url(ref: str) -> str:
    return default_storage.url(ref)
