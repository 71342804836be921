"""
Packaging API
"""
from __future__ import annotations

from .data import ActivityReference, PackagedResult
from .packager import ActivityPackager

# The public API that will be re-exported by activity_share.api.sharing is
# listed in the __all__ entries below.
__all__ = [
    "ActivityReference",
    "PackagedResult",
    "package_activity",
]


def package_activity(activity: ActivityReference, user_id: int) -> PackagedResult:
    """
    Package an activity for sharing, using the configured backup engine.

    Can throw UnsupportedActivityType if the activity can't be backed up, and
    any of the other PackagingError exceptions if the run fails.
    """
    return ActivityPackager(activity, user_id).get_package()
