# apps/tasks/storage.py
import logging
import os

from django.conf import settings
from django.core.files.storage import default_storage
from django.utils import timezone
from django.utils.crypto import get_random_string

logger = logging.getLogger(__name__)


def attachment_key(task_id, file_name, now=None) -> str:
    """<katalog>/<task id>/<timestamp ms>-<losowy>.<rozszerzenie>"""
    now = now or timezone.now()
    ext = os.path.splitext(file_name)[1].lstrip('.').lower() or 'bin'
    stamp = int(now.timestamp() * 1000)
    return f"{settings.ATTACHMENTS_DIR}/{task_id}/{stamp}-{get_random_string(8).lower()}.{ext}"


def store_upload(task_id, upload):
    """Zapisuje plik w storage przed utworzeniem wiersza metadanych. Zwraca (ścieżka, url)."""
    path = default_storage.save(attachment_key(task_id, upload.name), upload)
    return path, default_storage.url(path)


def delete_stored_object(path):
    if path and default_storage.exists(path):
        default_storage.delete(path)
        logger.info("Deleted stored object %s", path)
