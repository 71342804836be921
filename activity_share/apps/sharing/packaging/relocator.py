"""
Moves a finished backup from the engine's scratch area into permanent storage.
"""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable

from django.core.exceptions import ValidationError
from django.db import IntegrityError

from ....lib.conf import get_setting
from ....lib.resources import MemoryCeiling
from ..files import api as files_api
from ..files.models import StoredFile
from .data import ActivityReference, PackagedResult
from .exceptions import RelocationFailed

logger = logging.getLogger(__name__)

PACKAGE_COMPONENT = "core"
PACKAGE_FILEAREA = "moodlenet_resource"


class ArtifactRelocator:
    """
    Copies a backup file of ``activity`` into the course's shared resource
    area, removes the original and reads the copy back.

    ``ceiling`` is asked to make room for ``max_package_size`` bytes before
    the package is read into memory. ``clock`` returns the current Unix time.
    """

    def __init__(
        self,
        activity: ActivityReference,
        max_package_size: int | None = None,
        ceiling: MemoryCeiling | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.activity = activity
        self.max_package_size = max_package_size or get_setting("MAX_PACKAGE_SIZE")
        self.ceiling = ceiling or MemoryCeiling()
        self.clock = clock

    def build_file_record(self, now: int) -> dict[str, Any]:
        """
        Where the package goes.

        The itemid is the activity ID with the Unix time appended (as text, not
        added up), so that repeated packaging of one activity doesn't collide.
        Two runs for the same activity within the same second still would, and
        the second one fails with RelocationFailed.
        """
        context = files_api.get_or_create_course_context(self.activity.course_id)
        return {
            "contextid": context.id,
            "component": PACKAGE_COMPONENT,
            "filearea": PACKAGE_FILEAREA,
            "filename": f"{self.activity.modname}_backup.mbz",
            "itemid": f"{self.activity.id}{now}",
            "timemodified": datetime.fromtimestamp(now, tz=timezone.utc),
        }

    def relocate(self, artifact: StoredFile) -> PackagedResult:
        """
        Copy ``artifact`` to permanent storage and return the copy with its bytes.

        The artifact is deleted once the copy exists. If the copy fails (including
        when a package already exists at the same path), RelocationFailed is
        raised and the artifact is left where it is.
        """
        file_record = self.build_file_record(int(self.clock()))

        try:
            stored_file = files_api.create_file_from_stored_file(file_record, artifact)
        except (ValidationError, IntegrityError) as exc:
            # Most likely another package of this activity made in the same second.
            logger.warning("Cannot store package of %s at %s: %s", self.activity, file_record, exc)
            raise RelocationFailed(self.activity) from exc
        if not stored_file:
            raise RelocationFailed(self.activity)

        # Delete the backup now it has been created in the file area.
        artifact.delete()

        # Make sure we can handle files at the upper end of the size limit.
        self.ceiling.ensure_capacity(self.max_package_size)

        file_contents = stored_file.get_content()
        logger.info("Stored package of %s as %s (%d bytes)", self.activity, stored_file, len(file_contents))
        return PackagedResult(stored_file=stored_file, file_contents=file_contents)
