"""
Image upload service.

Files are written through ``default_storage`` so the backend (local media
directory, S3, ...) is a settings concern. Callers get back a URL they can
persist on a record; ``delete_image`` takes that same URL.
"""
import logging
import os
import uuid
from urllib.parse import urlparse

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)


class UploadError(ValidationError):
    """The file was rejected or could not be stored."""


def validate_image(file):
    """
    Check content type and size against ERP_ALLOWED_IMAGE_TYPES and
    ERP_MAX_IMAGE_SIZE.

    Raises:
        UploadError: file missing, wrong type or too large
    """
    if file is None:
        raise UploadError("No file provided.")

    content_type = (getattr(file, 'content_type', '') or '').lower()
    if content_type not in settings.ERP_ALLOWED_IMAGE_TYPES:
        raise UploadError(
            f"Unsupported image type '{content_type or 'unknown'}'. "
            f"Allowed types: JPEG, PNG, WebP."
        )

    max_size = settings.ERP_MAX_IMAGE_SIZE
    if file.size > max_size:
        raise UploadError(
            f"Image is too large ({file.size} bytes). "
            f"Maximum size is {max_size // (1024 * 1024)} MB."
        )


def _storage_name(folder, filename):
    _, ext = os.path.splitext(filename or '')
    return f"{folder.strip('/')}/{uuid.uuid4().hex}{ext.lower()}"


def upload_image(file, folder):
    """
    Validate and store an uploaded image under ``folder``.

    Returns:
        str: URL of the stored file

    Raises:
        UploadError: validation failed or the storage backend refused the file
    """
    validate_image(file)

    try:
        saved_name = default_storage.save(_storage_name(folder, file.name), file)
        url = default_storage.url(saved_name)
    except (OSError, ValueError) as exc:
        logger.error("Image upload to '%s' failed", folder, exc_info=True)
        raise UploadError(f"Image upload failed: {exc}") from exc

    logger.info("Stored image %s", saved_name)
    return url


def storage_name_from_url(url):
    """Map a URL returned by ``upload_image`` back to its storage name."""
    path = urlparse(url).path
    media_path = urlparse(settings.MEDIA_URL).path
    if media_path and path.startswith(media_path):
        path = path[len(media_path):]
    return path.lstrip('/')


def delete_image(url):
    """
    Remove a previously uploaded image.

    Returns:
        bool: True when a file was removed
    """
    if not url:
        return False

    name = storage_name_from_url(url)
    if not default_storage.exists(name):
        return False

    default_storage.delete(name)
    logger.info("Deleted image %s", name)
    return True
