"""
Packaging application initialization.
"""

from django.apps import AppConfig


class PackagingConfig(AppConfig):
    name = 'activity_share.apps.sharing.packaging'
    verbose_name = "Activity Share > Packaging"
    default_auto_field = 'django.db.models.BigAutoField'
    label = "as_packaging"
