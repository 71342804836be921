"""
Tests for the share_package management command
"""
import tempfile
import zipfile
from io import StringIO
from pathlib import Path
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.management import CommandError, call_command

from activity_share.apps.sharing.files.models import StoredFile
from activity_share.lib.test_utils import TestCase

User = get_user_model()


class SharePackageCommandTestCase(TestCase):
    """
    Test the share_package management command.
    """

    def setUp(self):
        super().setUp()
        self.user = User.objects.create(username="user", email="user@example.com")
        temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(temp_dir.cleanup)
        self.output = Path(temp_dir.name) / "resource_42.mbz"

        ceiling_patch = mock.patch("activity_share.apps.sharing.packaging.relocator.MemoryCeiling")
        self.addCleanup(ceiling_patch.stop)
        ceiling_patch.start()

    def test_share_package(self):
        out = StringIO()
        call_command("share_package", "42", "7", "resource", str(self.output), "--username", "user", stdout=out)

        assert "written to" in out.getvalue()
        stored_file = StoredFile.objects.get(filearea="moodlenet_resource")
        assert self.output.read_bytes() == stored_file.get_content()
        assert zipfile.is_zipfile(self.output)

    def test_bad_file_name(self):
        with self.assertRaisesMessage(CommandError, "Output file name must end with .mbz"):
            call_command("share_package", "42", "7", "resource", "resource_42.zip")
        assert not StoredFile.objects.exists()

    def test_unknown_user(self):
        with self.assertRaisesMessage(CommandError, "User nobody not found"):
            call_command("share_package", "42", "7", "resource", str(self.output), "--username", "nobody")

    def test_unsupported_type(self):
        with self.assertRaisesMessage(CommandError, "Cannot backup module customtype"):
            call_command("share_package", "42", "7", "customtype", str(self.output))
        assert not self.output.exists()

    def test_packaging_error(self):
        with mock.patch(
            "activity_share.apps.sharing.packaging.management.commands.share_package.package_activity",
            side_effect=OSError("disk full"),
        ):
            with self.assertRaisesMessage(CommandError, "Failed to package activity 42: disk full"):
                call_command("share_package", "42", "7", "resource", str(self.output))
