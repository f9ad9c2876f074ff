"""
Django management command to refresh email delivery statuses.

Queues one Celery task per scope holding sent emails, or runs the
sync inline with --now.
"""

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand

from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from notifications.tasks import sync_all_email_statuses_task, sync_email_statuses_task


class Command(BaseCommand):
    """Command to sync email delivery statuses."""

    help = "Refresh provider delivery statuses of every license with a message id"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--now",
            action="store_true",
            help="Run in this process instead of queueing Celery tasks",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        if not options["now"]:
            sync_all_email_statuses_task.delay()
            # pylint: disable=no-member
            self.stdout.write(self.style.SUCCESS("Queued email status sync"))
            return

        scopes = async_to_sync(DjangoLicenseRepository().scopes_with_message_id)()
        total = 0
        for scope in scopes:
            synced = sync_email_statuses_task.apply(args=(scope.kind, str(scope.owner_id))).get()
            total += synced
            self.stdout.write(f"{scope.kind} {scope.owner_id}: {synced} synced")

        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Synced {total} license(s) in {len(scopes)} scope(s)"))
