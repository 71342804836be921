"""
Access to the ``ACTIVITY_SHARE`` Django setting.

All of our configuration lives in one dict in the Django settings, e.g.::

    ACTIVITY_SHARE = {
        "BACKUP_ENGINE": "activity_share.apps.sharing.packaging.engine.ArchiveBackupEngine",
        "MAX_PACKAGE_SIZE": 1073741824,
        "MEDIA": {
            "BACKEND": "django.core.files.storage.FileSystemStorage",
            "OPTIONS": {"location": "/openedx/data/activity_share"},
        },
    }

Keys that are left out fall back to the values in ``DEFAULTS``.
"""
from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    # Dotted path to the class that builds and runs backup plans.
    "BACKUP_ENGINE": "activity_share.apps.sharing.packaging.engine.ArchiveBackupEngine",
    # Largest package (in bytes) we expect to read back into memory. This is
    # the upper end of what the sharing destination accepts (1 GiB).
    "MAX_PACKAGE_SIZE": 1_073_741_824,
    # Storage backend for stored files. None means Django's default_storage.
    "MEDIA": None,
}


def get_setting(name: str) -> Any:
    """
    Return the configured value for ``name``, or its default.
    """
    configured = getattr(settings, "ACTIVITY_SHARE", None) or {}
    if name in configured:
        return configured[name]
    return DEFAULTS[name]
