"""
This is the public API for sharing activities.

This is the single ``api`` module that code outside of the
``activity_share.apps.sharing.*`` package should import from. It re-exports
the public functions from the api.py modules of all sharing apps.
"""
# These wildcard imports are okay because these api modules declare __all__.
# pylint: disable=wildcard-import
from ..apps.sharing.files.api import *
from ..apps.sharing.packaging.api import *
from ..apps.sharing.packaging.exceptions import (
    InvalidArtifact,
    PackagingError,
    PackagingFailed,
    RelocationFailed,
    UnsupportedActivityType,
)
