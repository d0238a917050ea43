# users/management/commands/seed_users.py

from __future__ import annotations

from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from locations.models import Location
from permissions.roles import (
    ROLE_ADMIN,
    ROLE_CASHIER,
    ROLE_MANAGER,
    ROLE_TECHNICIAN,
)


@dataclass(frozen=True)
class SeedUserSpec:
    label: str
    role: str
    email: str
    first_name: str = ""
    last_name: str = ""


SEED_USERS = [
    SeedUserSpec("Admin", ROLE_ADMIN, "admin@example.com", "System", "Admin"),
    SeedUserSpec("Manager", ROLE_MANAGER, "manager@example.com", "Shop", "Manager"),
    SeedUserSpec("Cashier", ROLE_CASHIER, "cashier@example.com", "Front", "Desk"),
    SeedUserSpec(
        "Technician", ROLE_TECHNICIAN, "technician@example.com", "Repair", "Bench"
    ),
]


class Command(BaseCommand):
    help = "Seed one staff user per role, attached to a location."

    def add_arguments(self, parser):
        parser.add_argument(
            "--location-code",
            type=str,
            default="MAIN",
            help="Code of the location staff are attached to (created if missing).",
        )
        parser.add_argument(
            "--password",
            type=str,
            default="Pass1234!",
            help="Password for seeded users (default: Pass1234!)",
        )
        parser.add_argument(
            "--force-password",
            action="store_true",
            help="Reset password for existing seeded users too.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        code = (options.get("location_code") or "").strip().upper()
        password = options.get("password") or ""
        force_password = bool(options.get("force_password"))

        if not code:
            raise CommandError("--location-code must not be empty.")
        if len(password) < 6:
            raise CommandError("--password must be at least 6 characters.")

        location, _ = Location.objects.get_or_create(
            code=code, defaults={"name": f"{code.title()} Shop"}
        )

        User = get_user_model()
        created_count = 0
        updated_count = 0

        for spec in SEED_USERS:
            is_admin = spec.role == ROLE_ADMIN
            user, created = User.objects.get_or_create(
                email=spec.email,
                defaults={
                    "role": spec.role,
                    "first_name": spec.first_name,
                    "last_name": spec.last_name,
                    "location": location,
                    "is_staff": True,
                    "is_superuser": is_admin,
                },
            )

            if created:
                user.set_password(password)
                user.save()
                created_count += 1
                self.stdout.write(f"created: {spec.label} ({spec.role}) -> {spec.email}")
                continue

            user.role = spec.role
            user.location = location
            user.is_staff = True
            user.is_superuser = is_admin
            if force_password:
                user.set_password(password)
            user.save()
            updated_count += 1
            self.stdout.write(f"exists:  {spec.label} ({spec.role}) -> {spec.email}")

        self.stdout.write(f"Created: {created_count}  Updated: {updated_count}")
