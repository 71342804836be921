"""
Builds and runs the backup plan for one activity.
"""
from __future__ import annotations

import logging

from django.utils.module_loading import import_string

from ....lib.conf import get_setting
from ..files.models import StoredFile
from .backup import (
    FORMAT_MOODLE,
    INTERACTIVE_NO,
    MODE_GENERAL,
    RESULT_ARTIFACT,
    TYPE_1ACTIVITY,
    BackupEngine,
    BackupPlan,
)
from .data import ActivityReference
from .exceptions import InvalidArtifact, PackagingFailed

logger = logging.getLogger(__name__)


def get_backup_engine() -> BackupEngine:
    """
    Return a new instance of the configured backup engine.
    """
    return import_string(get_setting("BACKUP_ENGINE"))()


class BackupPlanExecutor:
    """
    Owns the backup plan of one packaging run.

    The plan is built on construction and released by ``run()``, whatever the
    outcome. Use the executor as a context manager to also release the plan if
    ``run()`` is never reached::

        with BackupPlanExecutor(activity, user_id) as executor:
            override_task_setting(get_all_task_settings(executor.plan()), ...)
            artifact = executor.run()
    """

    def __init__(self, activity: ActivityReference, user_id: int, engine: BackupEngine | None = None):
        self.activity = activity
        self.user_id = user_id
        engine = engine or get_backup_engine()
        self._plan = engine.build(
            TYPE_1ACTIVITY,
            activity.id,
            FORMAT_MOODLE,
            INTERACTIVE_NO,
            MODE_GENERAL,
            user_id,
        )

    def __enter__(self) -> BackupPlanExecutor:
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self._plan.release()

    def plan(self) -> BackupPlan:
        return self._plan

    def run(self) -> StoredFile:
        """
        Execute the plan and return the file it produced.

        Raises PackagingFailed if the plan produced no file, and
        InvalidArtifact if the file has no content hash.
        """
        try:
            result = self._plan.execute()
        finally:
            # Plan no longer required.
            self._plan.release()

        artifact = result.get(RESULT_ARTIFACT)
        if artifact is None:
            raise PackagingFailed(self.activity)

        if not artifact.content_hash:
            raise InvalidArtifact(self.activity)

        logger.info("Backed up %s to %s", self.activity, artifact)
        return artifact
