"""
Django management command to package an activity for sharing
"""
import logging
import time

from django.contrib.auth import get_user_model
from django.core.management import CommandError
from django.core.management.base import BaseCommand

from activity_share.apps.sharing.packaging.api import ActivityReference, package_activity
from activity_share.apps.sharing.packaging.exceptions import UnsupportedActivityType

logger = logging.getLogger(__name__)


User = get_user_model()


class Command(BaseCommand):
    """
    Django management command to package an activity and write it to a file.
    """
    help = 'Package an activity without user data and write it to a .mbz file.'

    def add_arguments(self, parser):
        parser.add_argument('activity_id', type=int, help='The ID of the activity to package')
        parser.add_argument('course_id', type=int, help='The ID of the course the activity belongs to')
        parser.add_argument('modname', type=str, help='The type of the activity, e.g. "resource"')
        parser.add_argument('file_name', type=str, help='The name of the output .mbz file')
        parser.add_argument(
            '--username',
            type=str,
            help='The username of the user performing the packaging.',
            default=None
        )

    def handle(self, *args, **options):
        activity = ActivityReference(
            id=options['activity_id'],
            course_id=options['course_id'],
            modname=options['modname'],
        )
        file_name = options['file_name']
        username = options['username']
        if not file_name.lower().endswith(".mbz"):
            raise CommandError("Output file name must end with .mbz")

        user_id = 0
        if username:
            try:
                user_id = User.objects.get(username=username).id
            except User.DoesNotExist as exc:
                raise CommandError(f"User {username} not found") from exc

        try:
            start_time = time.time()
            package = package_activity(activity, user_id)
            with open(file_name, "wb") as f:
                f.write(package.file_contents)
            elapsed = time.time() - start_time
        except UnsupportedActivityType as exc:
            raise CommandError(str(exc)) from exc
        except Exception as e:
            message = f"Failed to package activity {activity.id}: {e}"
            logger.exception(
                "Failed to write package %s (activity %s)",
                file_name,
                activity,
            )
            raise CommandError(message) from e

        message = f'{activity} written to {file_name} (stored as {package.stored_file}: {elapsed:.2f} seconds)'
        self.stdout.write(self.style.SUCCESS(message))
