"""
The backup plan model that backup engines build and execute.

A BackupPlan is an ordered list of BackupTasks, and each task owns an ordered
list of BackupSettings. Settings are the knobs that decide what goes into the
archive (users, logs, grades...). They can be changed until the plan starts
executing, after which they are locked.

Engines are pluggable (see ``BackupEngine``); the plan classes here hold the
state that every engine shares, and engines subclass BackupPlan to implement
``_execute`` and ``_release``.
"""
from __future__ import annotations

import enum
import logging
from typing import Protocol

from .exceptions import SettingLocked

logger = logging.getLogger(__name__)

# Backup types
TYPE_1ACTIVITY = "activity"
TYPE_1COURSE = "course"

# Backup formats
FORMAT_MOODLE = "moodle2"

# Interactive flags
INTERACTIVE_YES = True
INTERACTIVE_NO = False

# Execution mode
MODE_GENERAL = 10

# Key of the produced file in a BackupResult
RESULT_ARTIFACT = "artifact"


class TaskKind(enum.Enum):
    """
    What part of the backup a task is responsible for.

    The ROOT task's settings decide what ancillary data (users, logs, ...) is
    included for the whole backup.
    """
    ROOT = "root"
    ACTIVITY = "activity"
    FINAL = "final"


class BackupSetting:
    """
    One integer-valued knob of a backup task.

    ``name`` is the UI-facing name, unique within the task's settings, e.g.
    "setting_root_users".
    """

    def __init__(self, name: str, value: int):
        self.name = name
        self._value = value
        self._locked = False

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.name}={self._value}>"

    def get_ui_name(self) -> str:
        return self.name

    def get_value(self) -> int:
        return self._value

    def set_value(self, value: int) -> None:
        if self._locked:
            raise SettingLocked(self.name)
        self._value = value

    @property
    def locked(self) -> bool:
        return self._locked

    def lock(self) -> None:
        self._locked = True


class BackupTask:
    """
    One stage of a backup plan, with its settings.
    """

    def __init__(self, kind: TaskKind, name: str, settings: list[BackupSetting] | None = None):
        self.kind = kind
        self.name = name
        self._settings = list(settings or [])

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.kind.value}:{self.name}>"

    def add_setting(self, setting: BackupSetting) -> None:
        self._settings.append(setting)

    def get_settings(self) -> list[BackupSetting]:
        return list(self._settings)

    def get_setting(self, name: str) -> BackupSetting | None:
        for setting in self._settings:
            if setting.name == name:
                return setting
        return None


class BackupResult(dict):
    """
    What a plan execution produced. The file, if any, is under RESULT_ARTIFACT.
    """


class BackupPlan:
    """
    An ordered collection of tasks describing one backup.

    A plan can be executed once. ``release`` frees whatever the engine holds
    for this plan and may be called any number of times.
    """

    def __init__(self, backup_type: str, item_id: int, backup_format: str, interactive: bool, mode: int,
                 user_id: int):
        self.backup_type = backup_type
        self.item_id = item_id
        self.backup_format = backup_format
        self.interactive = interactive
        self.mode = mode
        self.user_id = user_id
        self._tasks: list[BackupTask] = []
        self._executed = False
        self._released = False

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.backup_type}:{self.item_id}>"

    def add_task(self, task: BackupTask) -> None:
        self._tasks.append(task)

    def get_tasks(self) -> list[BackupTask]:
        return list(self._tasks)

    @property
    def executed(self) -> bool:
        return self._executed

    @property
    def released(self) -> bool:
        return self._released

    def execute(self) -> BackupResult:
        """
        Lock all settings and run the plan.
        """
        if self._released:
            raise RuntimeError(f"{self!r} has already been released")
        if self._executed:
            raise RuntimeError(f"{self!r} has already been executed")
        self._executed = True

        for task in self._tasks:
            for setting in task.get_settings():
                setting.lock()

        return self._execute()

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._release()
        logger.debug("Released %r", self)

    def _execute(self) -> BackupResult:
        raise NotImplementedError

    def _release(self) -> None:
        """
        Hook for engines to free their resources. Nothing to do by default.
        """


class BackupEngine(Protocol):
    """
    Builds backup plans. Configured with ``ACTIVITY_SHARE["BACKUP_ENGINE"]``.
    """

    def build(self, backup_type: str, item_id: int, backup_format: str, interactive: bool, mode: int,
              user_id: int) -> BackupPlan:
        ...
