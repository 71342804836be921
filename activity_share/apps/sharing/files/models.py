"""
Models for the file store used by the packaging pipeline.

Files are addressed by a (context, component, filearea, itemid, filename)
tuple, but the bytes themselves are stored by content hash. Two StoredFile
rows with the same bytes point at the same blob in the storage backend, which
is what makes copying a file from one area to another cheap: only a new row is
written.
"""
from __future__ import annotations

from django.core.files.base import File
from django.core.files.storage import Storage, default_storage
from django.core.validators import MaxValueValidator
from django.db import models
from django.utils.module_loading import import_string
from django.utils.translation import gettext_lazy as _

from ....lib.cache import lru_cache
from ....lib.conf import get_setting
from ....lib.fields import hash_field, manual_date_time_field


@lru_cache(maxsize=None)
def get_storage() -> Storage:
    """
    Return the Storage instance for StoredFile persistence.

    Uses ``ACTIVITY_SHARE["MEDIA"]`` if it is configured, and Django's
    ``default_storage`` otherwise. The result is cached, so tests that override
    the setting need to clear the cache (the TestCase in lib.test_utils does).
    """
    media_config = get_setting("MEDIA")
    if not media_config:
        return default_storage

    storage_cls = import_string(media_config["BACKEND"])
    return storage_cls(**media_config.get("OPTIONS", {}))


class StorageContext(models.Model):
    """
    The scope that a StoredFile belongs to.

    We don't own courses or activities, we only know their numeric IDs. A
    StorageContext pairs such an ID with what kind of thing it is, so that a
    course and an activity that happen to share an ID don't share files.

    Rows are created lazily by get_or_create_context, so context IDs will not
    be the same across server instances.
    """

    class Level(models.TextChoices):
        COURSE = "course", _("Course")
        MODULE = "module", _("Activity module")

    level = models.CharField(max_length=32, choices=Level.choices)
    instance_id = models.PositiveBigIntegerField()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["level", "instance_id"],
                name="as_files_uniq_ctx_level_instance",
            ),
        ]
        verbose_name = "Storage Context"
        verbose_name_plural = "Storage Contexts"

    def __str__(self):
        return f"{self.level}:{self.instance_id}"


class StoredFile(models.Model):
    """
    A named file in a file area.

    # Areas

    ``component`` and ``filearea`` say which part of the system owns a file.
    Backup engines write their scratch output to the ("backup", "activity")
    area of the activity's module context. Packages prepared for sharing are
    copied into the ("core", "moodlenet_resource") area of the course context.

    ``itemid`` further separates files inside an area. It's a string because
    callers build it by concatenating IDs and timestamps, and we don't want
    that to overflow an integer column.

    # Immutability

    The bytes behind a StoredFile never change. A row can be deleted, but the
    blob it points to may be shared with other rows and is left in place.
    """
    # Largest file we accept. This matches the largest package that can be
    # shared (see lib.conf).
    MAX_FILE_SIZE = 1_073_741_824

    context = models.ForeignKey(StorageContext, on_delete=models.CASCADE)
    component = models.CharField(max_length=100, blank=False)
    filearea = models.CharField(max_length=50, blank=False)
    itemid = models.CharField(max_length=64, blank=False)
    filename = models.CharField(max_length=255, blank=False)

    # Empty means the hash was never computed, see lib.fields.hash_field.
    content_hash = hash_field()

    # Size of the file in bytes.
    size = models.PositiveBigIntegerField(
        validators=[MaxValueValidator(MAX_FILE_SIZE)],
    )

    created = manual_date_time_field()
    modified = manual_date_time_field()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=[
                    "context",
                    "component",
                    "filearea",
                    "itemid",
                    "filename",
                ],
                name="as_files_uniq_storedfile_path",
            ),
        ]
        verbose_name = "Stored File"
        verbose_name_plural = "Stored Files"

    def __str__(self):
        return f"{self.context}/{self.component}/{self.filearea}/{self.itemid}/{self.filename}"

    def file_path(self) -> str:
        """
        Path of this file's bytes in the storage backend.

        This only depends on the content hash, so it's shared by every
        StoredFile with the same bytes.
        """
        content_hash = self.content_hash
        return f"{content_hash[0:2]}/{content_hash[2:4]}/{content_hash}"

    def write_file(self, file: File) -> None:
        """
        Write file contents to the file storage backend.

        The blob may already exist, either because another StoredFile has the
        same bytes, or because an earlier attempt was rolled back in the
        database after the file was written.
        """
        storage = get_storage()
        file_path = self.file_path()
        if not storage.exists(file_path):
            storage.save(file_path, file)

    def has_file(self) -> bool:
        """
        Does the storage backend have the bytes for this file?
        """
        if not self.content_hash:
            return False
        return get_storage().exists(self.file_path())

    def read_file(self) -> File:
        """
        Open the stored bytes for reading. Callers should close the result.
        """
        return get_storage().open(self.file_path(), "rb")

    def get_content(self) -> bytes:
        """
        Return the entire contents of the file.
        """
        with self.read_file() as f:
            return f.read()
