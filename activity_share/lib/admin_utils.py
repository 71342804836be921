"""
Convenience utilities for the Django Admin.
"""
from django.contrib import admin


class ReadOnlyModelAdmin(admin.ModelAdmin):
    """
    ModelAdmin subclass that removes any editing ability.

    Stored files are only ever created and removed by the packaging pipeline
    (through the api.py functions), so the Django Admin is only useful for
    looking at them. Editing a row by hand could point it at bytes that don't
    match its content hash.
    """

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
