"""
Tests for the CustomUser model and manager.
"""
from django.test import TestCase
from django.contrib.auth import get_user_model

from core.base.test_utils import make_employee
from core.user_accounts.models import UserRole

User = get_user_model()


class CustomUserManagerTest(TestCase):
    """Test user creation through CustomUserManager"""

    def test_create_user_defaults_to_employee_role(self):
        """Test a new user gets the Employee role and a hashed password"""
        user = User.objects.create_user(
            email='Someone@Example.COM',
            name='Some One',
            phone_number='1234567890',
            password='testpass123'
        )
        self.assertEqual(user.role, UserRole.EMPLOYEE)
        self.assertEqual(user.email, 'Someone@example.com')
        self.assertTrue(user.check_password('testpass123'))
        self.assertTrue(user.is_active)

    def test_create_user_with_role(self):
        user = User.objects.create_user(
            email='hr@example.com', name='HR', phone_number='1', role=UserRole.HR
        )
        self.assertTrue(user.is_hr_or_admin())
        self.assertFalse(user.is_admin())

    def test_create_user_unknown_role(self):
        """Test roles outside the closed set are refused"""
        with self.assertRaises(ValueError):
            User.objects.create_user(email='x@example.com', name='X', phone_number='1', role='owner')

    def test_create_user_requires_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', name='X', phone_number='1')

    def test_create_superuser_is_admin(self):
        user = User.objects.create_superuser(
            email='admin@example.com', name='Admin', phone_number='1', password='testpass123'
        )
        self.assertEqual(user.role, UserRole.ADMIN)
        self.assertTrue(user.is_admin())
        self.assertTrue(user.is_hr_or_admin())


class EmployeeLinkTest(TestCase):
    """Test the user -> employee link used to build workflow actors"""

    def test_employee_id_without_employee(self):
        user = User.objects.create_user(email='a@example.com', name='A', phone_number='1')
        self.assertIsNone(user.employee_id)

    def test_employee_id_with_employee(self):
        employee = make_employee(role=UserRole.MANAGER)
        user = User.objects.get(pk=employee.user_id)
        self.assertEqual(user.employee_id, employee.pk)
