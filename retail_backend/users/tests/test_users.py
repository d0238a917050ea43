from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from locations.models import Location
from permissions.roles import (
    CAP_POS_REFUND,
    CAP_POS_SELL,
    CAP_POS_VOID,
    CAP_REPORTS_VIEW_POS,
    capabilities_for,
)

User = get_user_model()


class UserModelTests(TestCase):
    def test_create_user_from_username(self):
        user = User.objects.create_user(username="Till1", password="pass1234")
        self.assertEqual(user.email, "till1@local.test")
        self.assertEqual(user.role, User.Role.CASHIER)
        self.assertTrue(user.check_password("pass1234"))

    def test_email_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(password="pass1234")

    def test_display_name(self):
        user = User.objects.create_user(email="a@example.com", first_name="Ann", last_name="Perera")
        self.assertEqual(user.display_name, "Ann Perera")
        self.assertEqual(User(email="b@example.com").display_name, "b@example.com")


class CapabilityTests(TestCase):
    def test_role_capabilities(self):
        cashier = User(role=User.Role.CASHIER)
        manager = User(role=User.Role.MANAGER)
        technician = User(role=User.Role.TECHNICIAN)

        self.assertEqual(capabilities_for(cashier), {CAP_POS_SELL, CAP_REPORTS_VIEW_POS})
        self.assertTrue({CAP_POS_REFUND, CAP_POS_VOID} <= capabilities_for(manager))
        self.assertEqual(capabilities_for(technician), {CAP_REPORTS_VIEW_POS})
        self.assertEqual(capabilities_for(object()), set())


class SeedUsersCommandTests(TestCase):
    def test_seeds_one_user_per_role(self):
        out = StringIO()
        call_command("seed_users", "--location-code", "main", stdout=out)

        location = Location.objects.get(code="MAIN")
        self.assertEqual(User.objects.filter(location=location).count(), 4)
        admin = User.objects.get(email="admin@example.com")
        self.assertTrue(admin.is_superuser)
        self.assertTrue(admin.check_password("Pass1234!"))
        self.assertIn("Created: 4  Updated: 0", out.getvalue())

    def test_rerun_updates_without_resetting_password(self):
        call_command("seed_users", stdout=StringIO())
        cashier = User.objects.get(email="cashier@example.com")
        cashier.set_password("changed123")
        cashier.save()

        out = StringIO()
        call_command("seed_users", stdout=out)

        cashier.refresh_from_db()
        self.assertTrue(cashier.check_password("changed123"))
        self.assertIn("Created: 0  Updated: 4", out.getvalue())

    def test_rejects_short_password(self):
        with self.assertRaises(CommandError):
            call_command("seed_users", "--password", "abc", stdout=StringIO())
