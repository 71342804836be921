"""
Exceptions for activity packaging
"""
from __future__ import annotations

import typing

from django.utils.translation import gettext as _

if typing.TYPE_CHECKING:
    from .data import ActivityReference


class PackagingError(Exception):
    """
    Base exception for packaging
    """

    def __init__(self, message: str = ""):
        super().__init__()
        self.message = message

    def __str__(self):
        return str(self.message)

    def __repr__(self):
        return f"{self.__class__.__name__}({str(self)})"


class UnsupportedActivityType(PackagingError):
    """
    Exception used when the activity's type can't be backed up at all
    """

    def __init__(self, modname: str, **kargs):
        super().__init__(**kargs)
        self.modname = modname
        self.message = _(
            "Cannot backup module {modname}. This module doesn't support the backup feature."
        ).format(modname=modname)


class ActivityPackagingError(PackagingError):
    """
    Base exception for a packaging run that failed for one activity
    """

    def __init__(self, activity: ActivityReference, **kargs):
        super().__init__(**kargs)
        self.activity = activity


class PackagingFailed(ActivityPackagingError):
    """
    Exception used when the backup produced no file
    """

    def __init__(self, activity: ActivityReference, **kargs):
        super().__init__(activity, **kargs)
        self.message = _("Failed to package activity {id}.").format(id=activity.id)


class InvalidArtifact(ActivityPackagingError):
    """
    Exception used when the backup produced a file without a content hash
    """

    def __init__(self, activity: ActivityReference, **kargs):
        super().__init__(activity, **kargs)
        self.message = _("Failed to package activity {id} (invalid file).").format(id=activity.id)


class RelocationFailed(ActivityPackagingError):
    """
    Exception used when the backup file could not be copied to its permanent area
    """

    def __init__(self, activity: ActivityReference, **kargs):
        super().__init__(activity, **kargs)
        self.message = _(
            "Failed to copy backup file of activity {id} to moodlenet_resource area."
        ).format(id=activity.id)


class SettingLocked(PackagingError):
    """
    Exception used when a setting is changed after its plan started executing
    """

    def __init__(self, setting_name: str, **kargs):
        super().__init__(**kargs)
        self.setting_name = setting_name
        self.message = _(
            "Setting '{name}' can't be changed once the backup plan has started."
        ).format(name=setting_name)
