"""
Reading and overriding the settings of a backup plan's tasks.
"""
from __future__ import annotations

import logging

from .backup import BackupPlan, BackupSetting, TaskKind

logger = logging.getLogger(__name__)

TaskSettings = dict[TaskKind, list[BackupSetting]]


def get_all_task_settings(plan: BackupPlan) -> TaskSettings:
    """
    Get all backup settings available for override, by task kind.

    Settings keep the order their task lists them in. If a plan has more than
    one task of a kind, the last one wins.
    """
    task_settings: TaskSettings = {}
    for task in plan.get_tasks():
        task_settings[task.kind] = task.get_settings()
    return task_settings


def override_task_setting(all_task_settings: TaskSettings, setting_name: str, setting_value: int) -> None:
    """
    Override a root task setting with a given value.

    Only settings of the ROOT task are considered. If there is no root task,
    or it doesn't have a setting called ``setting_name``, nothing happens:
    different activity types expose different settings, so asking for one that
    isn't there is not an error.
    """
    root_settings = all_task_settings.get(TaskKind.ROOT)
    if not root_settings:
        return

    for setting in root_settings:
        if setting.get_ui_name() == setting_name and setting.get_value() != setting_value:
            logger.debug("Overriding %s: %s -> %s", setting_name, setting.get_value(), setting_value)
            setting.set_value(setting_value)
            return
