"""
Plain data types passed into and out of the packaging pipeline.
"""
from __future__ import annotations

from attrs import field, frozen

from ..files.models import StoredFile


@frozen
class ActivityReference:
    """
    The activity to package: its ID, the course it belongs to and its type.

    ``modname`` is the activity type, e.g. "resource" or "quiz".
    """

    id: int
    course_id: int
    modname: str

    def __str__(self):
        return f"{self.modname} {self.id} (course {self.course_id})"


@frozen
class PackagedResult:
    """
    A finished package: where it's stored, and its bytes.
    """

    stored_file: StoredFile
    file_contents: bytes = field(repr=lambda contents: f"<{len(contents)} bytes>")
