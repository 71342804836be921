"""
Django admin for files models
"""
from django.contrib import admin

from activity_share.lib.admin_utils import ReadOnlyModelAdmin

from .models import StorageContext, StoredFile


@admin.register(StoredFile)
class StoredFileAdmin(ReadOnlyModelAdmin):
    """
    Django admin for StoredFile model
    """
    list_display = [
        "filename",
        "context",
        "component",
        "filearea",
        "itemid",
        "size",
        "modified",
    ]
    fields = [
        "context",
        "component",
        "filearea",
        "itemid",
        "filename",
        "content_hash",
        "size",
        "created",
        "modified",
        "path",
    ]
    list_filter = ("component", "filearea")
    search_fields = ("filename", "content_hash", "itemid")

    def path(self, stored_file: StoredFile):
        return stored_file.file_path() if stored_file.content_hash else ""


@admin.register(StorageContext)
class StorageContextAdmin(ReadOnlyModelAdmin):
    """
    Django admin for StorageContext model
    """
    list_display = ["id", "level", "instance_id"]
    list_filter = ("level",)
