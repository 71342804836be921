"""
Files API

Functions to create, copy and look up StoredFiles. Please look at the
models.py file for how files are addressed and where their bytes live.

A "file record" is a dict that describes where a new file goes::

    {
        "contextid": 12,
        "component": "core",
        "filearea": "moodlenet_resource",
        "itemid": "421700000000",
        "filename": "resource_backup.mbz",
        "timemodified": datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc),
    }

``timecreated`` and ``timemodified`` are optional and default to now.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from django.core.files.base import ContentFile
from django.db.transaction import atomic

from ....lib.fields import create_hash_digest
from .models import StorageContext, StoredFile

# The public API that will be re-exported by activity_share.api.sharing is
# listed in the __all__ entries below. Internal helper functions that are
# private to this module should start with an underscore.
__all__ = [
    "get_or_create_context",
    "get_or_create_course_context",
    "get_stored_file",
    "create_file_from_bytes",
    "create_file_from_stored_file",
]

FILE_RECORD_FIELDS = frozenset([
    "contextid",
    "component",
    "filearea",
    "itemid",
    "filename",
    "timecreated",
    "timemodified",
])

logger = logging.getLogger(__name__)


def get_or_create_context(level: str, instance_id: int, /) -> StorageContext:
    """
    Return the StorageContext for the given level and instance ID.

    If it is not found in the database, a new entry will be created for it.
    """
    context, _created = StorageContext.objects.get_or_create(
        level=level,
        instance_id=instance_id,
    )
    return context


def get_or_create_course_context(course_id: int, /) -> StorageContext:
    """
    Return the StorageContext of a course.
    """
    return get_or_create_context(StorageContext.Level.COURSE, course_id)


def get_stored_file(
    context_id: int,
    component: str,
    filearea: str,
    itemid: str,
    filename: str,
) -> StoredFile | None:
    """
    Look up a StoredFile by its full path. Returns None if there isn't one.
    """
    return StoredFile.objects.filter(
        context_id=context_id,
        component=component,
        filearea=filearea,
        itemid=str(itemid),
        filename=filename,
    ).first()


def _validate_file_record(file_record: dict[str, Any]) -> None:
    unknown = set(file_record) - FILE_RECORD_FIELDS
    if unknown:
        raise ValueError(f"Unknown file record fields: {', '.join(sorted(unknown))}")


def _build_stored_file(record: dict[str, Any], content_hash: str, size: int) -> StoredFile:
    """
    Create and save a StoredFile row (but not its bytes) from a full record.
    """
    now = datetime.now(tz=timezone.utc)
    stored_file = StoredFile(
        context_id=record["contextid"],
        component=record["component"],
        filearea=record["filearea"],
        itemid=str(record["itemid"]),
        filename=record["filename"],
        content_hash=content_hash,
        size=size,
        created=record.get("timecreated") or now,
        modified=record.get("timemodified") or now,
    )
    stored_file.full_clean()
    stored_file.save()
    return stored_file


def create_file_from_bytes(file_record: dict[str, Any], data: bytes) -> StoredFile:
    """
    Create a new StoredFile with the given bytes.

    Raises a ValidationError if a file already exists at that path, or if the
    data is larger than StoredFile.MAX_FILE_SIZE.
    """
    _validate_file_record(file_record)
    content_hash = create_hash_digest(data)
    with atomic():
        stored_file = _build_stored_file(file_record, content_hash, len(data))
        stored_file.write_file(ContentFile(data))
    return stored_file


def create_file_from_stored_file(file_record: dict[str, Any], source: StoredFile) -> StoredFile | None:
    """
    Create a new StoredFile that is a copy of ``source``.

    Any field that is not in ``file_record`` is taken from ``source``. The
    copy shares the source's bytes in the storage backend, so nothing is
    written there.

    Returns None if the source's bytes can't be found, since a row without
    bytes would be unreadable.
    """
    _validate_file_record(file_record)
    if not source.has_file():
        logger.warning(
            "Cannot copy stored file %s (id %s): content %r is missing from storage",
            source,
            source.pk,
            source.content_hash,
        )
        return None

    record = {
        "contextid": source.context_id,
        "component": source.component,
        "filearea": source.filearea,
        "itemid": source.itemid,
        "filename": source.filename,
        "timemodified": source.modified,
    }
    record.update(file_record)

    with atomic():
        return _build_stored_file(record, source.content_hash, source.size)
