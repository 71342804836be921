"""
Packager to prepare a backup of an activity that is safe to share outside its
course.
"""
from __future__ import annotations

import logging

from .backup import BackupEngine
from .data import ActivityReference, PackagedResult
from .exceptions import UnsupportedActivityType
from .executor import BackupPlanExecutor
from .features import FEATURE_BACKUP, supports_feature
from .relocator import ArtifactRelocator
from .task_settings import get_all_task_settings, override_task_setting

logger = logging.getLogger(__name__)

# Root settings that carry user data. All of them are switched off before a
# package is made; every other setting keeps the engine's default.
REDACTED_ROOT_SETTINGS = (
    "setting_root_users",
    "setting_root_role_assignments",
    "setting_root_blocks",
    "setting_root_comments",
    "setting_root_badges",
    "setting_root_userscompletion",
    "setting_root_logs",
    "setting_root_grade_histories",
    "setting_root_groups",
)


class ActivityPackager:
    """
    Packages one activity for sharing, without its user data.
    """

    def __init__(
        self,
        activity: ActivityReference,
        user_id: int,
        engine: BackupEngine | None = None,
        relocator: ArtifactRelocator | None = None,
    ):
        """
        Initialize the ActivityPackager.

        Args:
            activity (ActivityReference): The activity to package.
            user_id (int): The ID of the user performing the packaging.
            engine (BackupEngine | None): Builds the backup plans. Defaults to
                the configured engine.
            relocator (ArtifactRelocator | None): Moves the finished backup to
                permanent storage.

        Raises:
            UnsupportedActivityType: If the activity's type can't be backed up.
        """
        if not supports_feature(activity.modname, FEATURE_BACKUP):
            raise UnsupportedActivityType(activity.modname)

        self.activity = activity
        self.user_id = user_id
        self.engine = engine
        self.relocator = relocator or ArtifactRelocator(activity)

    def get_package(self) -> PackagedResult:
        """
        Back up the activity with user data removed, and store the result.

        Every call is a separate run with its own backup plan.
        """
        logger.info("Packaging %s for user %s", self.activity, self.user_id)
        with BackupPlanExecutor(self.activity, self.user_id, self.engine) as executor:
            all_task_settings = get_all_task_settings(executor.plan())

            # Override relevant settings to remove user data when packaging to share.
            for setting_name in REDACTED_ROOT_SETTINGS:
                override_task_setting(all_task_settings, setting_name, 0)

            artifact = executor.run()

        return self.relocator.relocate(artifact)
