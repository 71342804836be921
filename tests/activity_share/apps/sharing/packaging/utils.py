"""
Fake backup engine for packaging tests.
"""
import itertools

from activity_share.apps.sharing.files import api as files_api
from activity_share.apps.sharing.files.models import StorageContext
from activity_share.apps.sharing.packaging.backup import (
    RESULT_ARTIFACT,
    BackupPlan,
    BackupResult,
    BackupSetting,
    BackupTask,
    TaskKind,
)

_filename_counter = itertools.count(1)

# Every root setting starts switched on, so redaction is visible.
DEFAULT_ROOT_SETTINGS = (
    ("setting_root_users", 1),
    ("setting_root_anonymize", 1),
    ("setting_root_role_assignments", 1),
    ("setting_root_activities", 1),
    ("setting_root_blocks", 1),
    ("setting_root_files", 1),
    ("setting_root_comments", 1),
    ("setting_root_badges", 1),
    ("setting_root_userscompletion", 1),
    ("setting_root_logs", 1),
    ("setting_root_grade_histories", 1),
    ("setting_root_groups", 1),
    ("setting_root_questionbank", 1),
)


def write_artifact(plan: BackupPlan, data: bytes = b"fake backup data"):
    """
    Store a backup file the way an engine would.
    """
    context = files_api.get_or_create_context(StorageContext.Level.MODULE, plan.item_id)
    return files_api.create_file_from_bytes(
        {
            "contextid": context.id,
            "component": "backup",
            "filearea": "activity",
            "itemid": "0",
            "filename": f"fake-backup-{plan.item_id}-{next(_filename_counter)}.mbz",
        },
        data,
    )


class FakeBackupPlan(BackupPlan):
    """
    Plan that records what happened to it.
    """

    def __init__(self, *args, artifact_factory=write_artifact, error=None):
        super().__init__(*args)
        self.artifact_factory = artifact_factory
        self.error = error
        self.release_count = 0
        self.settings_at_execution = {}

    def _execute(self):
        self.settings_at_execution = {
            task.kind: {setting.name: setting.get_value() for setting in task.get_settings()}
            for task in self.get_tasks()
        }
        if self.error:
            raise self.error
        if self.artifact_factory is None:
            return BackupResult()
        return BackupResult({RESULT_ARTIFACT: self.artifact_factory(self)})

    def _release(self):
        self.release_count += 1


class FakeEngine:
    """
    Engine building FakeBackupPlans, keeping every plan it built.
    """

    def __init__(self, root_settings=DEFAULT_ROOT_SETTINGS, artifact_factory=write_artifact, error=None,
                 with_root_task=True):
        self.root_settings = root_settings
        self.artifact_factory = artifact_factory
        self.error = error
        self.with_root_task = with_root_task
        self.build_calls = []
        self.plans = []

    def build(self, *args):
        self.build_calls.append(args)
        plan = FakeBackupPlan(*args, artifact_factory=self.artifact_factory, error=self.error)
        if self.with_root_task:
            plan.add_task(BackupTask(
                TaskKind.ROOT,
                "fake_root_task",
                [BackupSetting(name, value) for name, value in self.root_settings],
            ))
        # Same name as a root setting, to check that only the root task is touched.
        plan.add_task(BackupTask(
            TaskKind.ACTIVITY,
            "fake_activity_task",
            [BackupSetting("setting_root_users", 1), BackupSetting("setting_activity_included", 1)],
        ))
        plan.add_task(BackupTask(TaskKind.FINAL, "fake_final_task"))
        self.plans.append(plan)
        return plan
