"""
Django metadata for the Files Django application.
"""
from django.apps import AppConfig


class FilesConfig(AppConfig):
    """
    Configuration for the Files Django application.
    """

    name = "activity_share.apps.sharing.files"
    verbose_name = "Activity Share > Files"
    default_auto_field = "django.db.models.BigAutoField"
    label = "as_files"
