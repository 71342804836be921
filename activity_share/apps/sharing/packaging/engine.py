"""
The built-in backup engine.

It builds single-activity plans with a root, an activity and a final task, and
executes them by writing a zip archive (.mbz) with a TOML manifest of the plan
into the activity's backup file area. The manifest records which settings were
on, so a restore (or a reviewer) can tell what was left out.

Any other engine can be used instead by pointing
``ACTIVITY_SHARE["BACKUP_ENGINE"]`` at it.
"""
from __future__ import annotations

import logging
import uuid
import zipfile
from datetime import datetime, timezone
from io import BytesIO
from pathlib import Path

import tomlkit

from ..files import api as files_api
from ..files.models import StorageContext
from .backup import (
    FORMAT_MOODLE,
    RESULT_ARTIFACT,
    TYPE_1ACTIVITY,
    BackupPlan,
    BackupResult,
    BackupSetting,
    BackupTask,
    TaskKind,
)

logger = logging.getLogger(__name__)

MANIFEST_NAME = "moodle_backup.toml"

# Where engine output goes before it's moved somewhere permanent.
BACKUP_COMPONENT = "backup"
BACKUP_FILEAREA = "activity"
BACKUP_ITEMID = "0"

# Root settings and their default values in general mode. Each one becomes a
# setting called "setting_root_<name>".
ROOT_SETTING_DEFAULTS = (
    ("users", 1),
    ("anonymize", 0),
    ("role_assignments", 1),
    ("activities", 1),
    ("blocks", 1),
    ("files", 1),
    ("filters", 1),
    ("comments", 1),
    ("badges", 1),
    ("calendarevents", 1),
    ("userscompletion", 1),
    ("logs", 0),
    ("grade_histories", 0),
    ("questionbank", 1),
    ("groups", 1),
    ("competencies", 1),
    ("customfield", 1),
    ("contentbankcontent", 1),
    ("legacyfiles", 1),
)


def backup_filename(activity_id: int, when: datetime, run_id: str) -> str:
    return f"backup-moodle2-activity-{activity_id}-{when:%Y%m%d-%H%M%S}-{run_id}.mbz"


def toml_backup_manifest(plan: BackupPlan, created: datetime) -> str:
    """
    Create a TOML representation of a plan.

    The resulting content looks like:
        # Datetime of the backup: 2024-08-05 00:00:00+00:00

        [backup]
        type = "activity"
        format = "moodle2"
        mode = 10
        activity_id = 42
        user_id = 3
        created = 2024-08-05T00:00:00Z

        [tasks.root]
        name = "backup_root_task"

        [tasks.root.settings]
        setting_root_users = 0
        ...
    """
    doc = tomlkit.document()
    doc.add(tomlkit.comment(f"Datetime of the backup: {created}"))
    doc.add(tomlkit.nl())

    backup_table = tomlkit.table()
    backup_table.add("type", plan.backup_type)
    backup_table.add("format", plan.backup_format)
    backup_table.add("mode", plan.mode)
    backup_table.add("activity_id", plan.item_id)
    backup_table.add("user_id", plan.user_id)
    backup_table.add("created", created)
    doc.add("backup", backup_table)

    tasks_table = tomlkit.table(is_super_table=True)
    for task in plan.get_tasks():
        task_table = tomlkit.table()
        task_table.add("name", task.name)
        settings_table = tomlkit.table()
        for setting in task.get_settings():
            settings_table.add(setting.name, setting.get_value())
        task_table.add("settings", settings_table)
        tasks_table.add(task.kind.value, task_table)
    doc.add("tasks", tasks_table)

    return tomlkit.dumps(doc)


class ArchiveBackupPlan(BackupPlan):
    """
    A plan that writes a zip archive into the activity's backup area.
    """

    def _write_archive(self, created: datetime) -> bytes:
        buffer = BytesIO()
        timestamp = created.timetuple()[:6]
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zipf:
            manifest_info = zipfile.ZipInfo(MANIFEST_NAME)
            manifest_info.date_time = timestamp
            zipf.writestr(manifest_info, toml_backup_manifest(self, created).encode("utf-8"))

            activity_folder = Path("activities") / f"activity_{self.item_id}"
            for folder in (activity_folder.parent, activity_folder):
                folder_info = zipfile.ZipInfo(str(folder) + "/")
                folder_info.date_time = timestamp
                zipf.writestr(folder_info, "")
        return buffer.getvalue()

    def _execute(self) -> BackupResult:
        created = datetime.now(tz=timezone.utc).replace(microsecond=0)
        data = self._write_archive(created)

        context = files_api.get_or_create_context(StorageContext.Level.MODULE, self.item_id)
        # Each run gets its own file, even for backups made in the same second.
        filename = backup_filename(self.item_id, created, uuid.uuid4().hex[:12])

        artifact = files_api.create_file_from_bytes(
            {
                "contextid": context.id,
                "component": BACKUP_COMPONENT,
                "filearea": BACKUP_FILEAREA,
                "itemid": BACKUP_ITEMID,
                "filename": filename,
                "timecreated": created,
                "timemodified": created,
            },
            data,
        )
        logger.info("Wrote backup %s (%d bytes) for activity %s", filename, len(data), self.item_id)
        return BackupResult({RESULT_ARTIFACT: artifact})


class ArchiveBackupEngine:
    """
    Builds ArchiveBackupPlans for single activities.
    """

    def build(self, backup_type: str, item_id: int, backup_format: str, interactive: bool, mode: int,
              user_id: int) -> ArchiveBackupPlan:
        if backup_type != TYPE_1ACTIVITY:
            raise ValueError(f"Unsupported backup type: {backup_type}")
        if backup_format != FORMAT_MOODLE:
            raise ValueError(f"Unsupported backup format: {backup_format}")
        if interactive:
            raise ValueError("Interactive backups are not supported")

        plan = ArchiveBackupPlan(backup_type, item_id, backup_format, interactive, mode, user_id)
        plan.add_task(BackupTask(
            TaskKind.ROOT,
            "backup_root_task",
            [BackupSetting(f"setting_root_{name}", value) for name, value in ROOT_SETTING_DEFAULTS],
        ))
        plan.add_task(BackupTask(
            TaskKind.ACTIVITY,
            "backup_activity_task",
            [
                BackupSetting(f"setting_activity_{item_id}_included", 1),
                BackupSetting(f"setting_activity_{item_id}_userinfo", 1),
            ],
        ))
        plan.add_task(BackupTask(TaskKind.FINAL, "backup_final_task"))
        return plan
