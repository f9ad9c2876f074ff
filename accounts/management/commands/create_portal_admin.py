"""
Django management command to create a portal administrator.

Creates a Django user (the session identity) and the Admin record
bound to it, optionally with an initial solo seat count.
"""

import logging

from asgiref.sync import async_to_sync
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from accounts.domain.admin import Admin
from accounts.infrastructure.repositories.django_admin_repository import DjangoAdminRepository
from core.domain.value_objects import Email

logger = logging.getLogger(__name__)
User = get_user_model()


class Command(BaseCommand):
    """Command to create a portal administrator."""

    help = "Create a Django user and its portal Admin record"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("email", type=str, help="Admin email, also used as username")
        parser.add_argument("--password", type=str, required=True, help="Login password")
        parser.add_argument("--first-name", type=str, default="", help="First name")
        parser.add_argument("--last-name", type=str, default="", help="Last name")
        parser.add_argument(
            "--seats",
            type=int,
            default=0,
            help="Initial purchased license count (default: 0)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        if not Email.is_valid(options["email"]):
            raise CommandError(f"Invalid email: {options['email']}")
        if options["seats"] < 0:
            raise CommandError("--seats cannot be negative")
        email = Email.parse(options["email"]).value

        if User.objects.filter(username=email).exists():
            raise CommandError(f"User '{email}' already exists")

        user = User.objects.create_user(
            username=email,
            email=email,
            password=options["password"],
            first_name=options["first_name"],
            last_name=options["last_name"],
        )
        admin = async_to_sync(self.create_admin)(user.pk, email, options)

        logger.info("Portal admin created", extra={"admin_id": str(admin.id)})
        # pylint: disable=no-member
        self.stdout.write(
            self.style.SUCCESS(
                f"Created admin {admin.email} ({admin.id}) "
                f"with {admin.purchased_license_count} seat(s)"
            )
        )

    async def create_admin(self, user_id: int, email: str, options) -> Admin:
        """Persist the Admin record bound to the new user."""
        admin = Admin.create(
            email=email,
            first_name=options["first_name"],
            last_name=options["last_name"],
            user_id=user_id,
            purchased_license_count=options["seats"],
        )
        return await DjangoAdminRepository().save(admin)
