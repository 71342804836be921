"""
Tests for ArtifactRelocator
"""
from datetime import datetime, timezone
from unittest import mock

import pytest
from django.core.exceptions import ValidationError

from activity_share.apps.sharing.files import api as files_api
from activity_share.apps.sharing.files.models import StorageContext, StoredFile
from activity_share.apps.sharing.packaging.data import ActivityReference
from activity_share.apps.sharing.packaging.exceptions import RelocationFailed
from activity_share.apps.sharing.packaging.relocator import ArtifactRelocator
from activity_share.lib.fields import create_hash_digest
from activity_share.lib.test_utils import TestCase

NOW = 1722816000  # 2024-08-05 00:00:00 UTC


class ArtifactRelocatorTestCase(TestCase):
    """
    Moving backups into the shared resource area
    """

    def setUp(self):
        super().setUp()
        self.activity = ActivityReference(id=42, course_id=7, modname="resource")
        self.ceiling = mock.Mock()
        self.relocator = ArtifactRelocator(
            self.activity,
            max_package_size=5_000_000,
            ceiling=self.ceiling,
            clock=lambda: NOW,
        )
        self.module_context = files_api.get_or_create_context(StorageContext.Level.MODULE, 42)
        self.data = b"PK backup of resource 42"
        self.artifact = files_api.create_file_from_bytes(
            {
                "contextid": self.module_context.id,
                "component": "backup",
                "filearea": "activity",
                "itemid": "0",
                "filename": "backup-moodle2-activity-42.mbz",
            },
            self.data,
        )

    def test_build_file_record(self):
        file_record = self.relocator.build_file_record(NOW)
        course_context = files_api.get_or_create_course_context(7)
        assert file_record == {
            "contextid": course_context.id,
            "component": "core",
            "filearea": "moodlenet_resource",
            "filename": "resource_backup.mbz",
            "itemid": "42" + str(NOW),
            "timemodified": datetime(2024, 8, 5, tzinfo=timezone.utc),
        }

    def test_relocate(self):
        result = self.relocator.relocate(self.artifact)

        stored_file = result.stored_file
        assert result.file_contents == self.data
        assert result.file_contents == stored_file.get_content()
        assert stored_file.context == files_api.get_or_create_course_context(7)
        assert stored_file.filename == "resource_backup.mbz"
        assert stored_file.itemid == f"42{NOW}"
        assert stored_file.content_hash == create_hash_digest(self.data)

        # The transient copy is gone.
        assert not StoredFile.objects.filter(pk=self.artifact.pk).exists()
        self.ceiling.ensure_capacity.assert_called_once_with(5_000_000)

    def test_relocate_failure_keeps_artifact(self):
        orphan = StoredFile.objects.create(
            context=self.module_context,
            component="backup",
            filearea="activity",
            itemid="0",
            filename="orphan.mbz",
            content_hash=create_hash_digest(b"never written"),
            size=13,
            created=datetime(2024, 8, 5, tzinfo=timezone.utc),
            modified=datetime(2024, 8, 5, tzinfo=timezone.utc),
        )
        with pytest.raises(RelocationFailed) as exc_info:
            self.relocator.relocate(orphan)

        assert exc_info.value.activity == self.activity
        assert StoredFile.objects.filter(pk=orphan.pk).exists()
        assert not StoredFile.objects.filter(filearea="moodlenet_resource").exists()
        self.ceiling.ensure_capacity.assert_not_called()

    def test_itemids_differ_between_runs(self):
        clock = mock.Mock(side_effect=[NOW, NOW + 1])
        relocator = ArtifactRelocator(self.activity, ceiling=self.ceiling, clock=clock)
        first = relocator.relocate(self.artifact)

        second_artifact = files_api.create_file_from_bytes(
            {
                "contextid": self.module_context.id,
                "component": "backup",
                "filearea": "activity",
                "itemid": "0",
                "filename": "backup-moodle2-activity-42-2.mbz",
            },
            self.data,
        )
        second = relocator.relocate(second_artifact)

        assert first.stored_file.itemid == f"42{NOW}"
        assert second.stored_file.itemid == f"42{NOW + 1}"

    def test_default_max_package_size(self):
        relocator = ArtifactRelocator(self.activity, ceiling=self.ceiling, clock=lambda: NOW)
        relocator.relocate(self.artifact)
        self.ceiling.ensure_capacity.assert_called_once_with(1073741824)

    def test_same_second_collision(self):
        first = self.relocator.relocate(self.artifact)

        second_artifact = files_api.create_file_from_bytes(
            {
                "contextid": self.module_context.id,
                "component": "backup",
                "filearea": "activity",
                "itemid": "0",
                "filename": "backup-moodle2-activity-42-2.mbz",
            },
            b"PK another backup of resource 42",
        )
        with pytest.raises(RelocationFailed) as exc_info:
            self.relocator.relocate(second_artifact)

        assert exc_info.value.activity == self.activity
        assert isinstance(exc_info.value.__cause__, ValidationError)

        # The first package is untouched and the second backup is kept.
        shared = StoredFile.objects.get(filearea="moodlenet_resource")
        assert shared.pk == first.stored_file.pk
        assert shared.get_content() == self.data
        assert StoredFile.objects.filter(pk=second_artifact.pk).exists()
        self.ceiling.ensure_capacity.assert_called_once_with(5_000_000)
