"""
Registry of activity types and the features they support.

Activity types ("modname"s like "quiz" or "resource") are provided by other
apps, so we can't know what they support. Apps register their types here, and
the packager asks ``supports_feature`` before it tries to back one up.
"""
import logging
from typing import Iterable

log = logging.getLogger(__name__)

FEATURE_BACKUP = "backup"

# Activity types that ship with backup support.
DEFAULT_BACKUP_TYPES = (
    "assign",
    "book",
    "chat",
    "choice",
    "data",
    "feedback",
    "folder",
    "forum",
    "glossary",
    "h5pactivity",
    "imscp",
    "label",
    "lesson",
    "lti",
    "page",
    "quiz",
    "resource",
    "scorm",
    "survey",
    "url",
    "wiki",
    "workshop",
)

# Global registry
_ACTIVITY_FEATURE_REGISTRY: dict[str, frozenset[str]] = {
    modname: frozenset([FEATURE_BACKUP]) for modname in DEFAULT_BACKUP_TYPES
}


def register_activity_type(modname: str, features: Iterable[str]) -> None:
    """
    Register an activity type and the features it supports.

    Registering a type again replaces its features.
    """
    registered = frozenset(features)
    _ACTIVITY_FEATURE_REGISTRY[modname] = registered
    log.debug("Registered activity type %s with features %s", modname, sorted(registered))


def unregister_activity_type(modname: str) -> None:
    """
    Forget an activity type. Unknown types are ignored.
    """
    _ACTIVITY_FEATURE_REGISTRY.pop(modname, None)


def supports_feature(modname: str, feature: str) -> bool:
    """
    Does the activity type support the feature? Unknown types support nothing.
    """
    return feature in _ACTIVITY_FEATURE_REGISTRY.get(modname, frozenset())
