"""
User Account Models
Handles authentication identity and the closed role set used for approvals.
"""
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.db import models


class UserRole(models.TextChoices):
    """Closed set of roles consulted by the approval policy."""
    EMPLOYEE = 'employee', 'Employee'
    MANAGER = 'manager', 'Manager'
    HR = 'hr', 'HR'
    ADMIN = 'admin', 'Admin'


class CustomUserManager(BaseUserManager):
    """
    Custom user manager for CustomUser model.
    Handles user creation with a role.
    """

    def create_user(self, email, name, phone_number, password=None, role=UserRole.EMPLOYEE, **extra_fields):
        """
        Create and save a user with the given role.

        Args:
            email: User's email address (used for authentication)
            name: User's full name
            phone_number: User's phone number
            password: User's password (will be hashed)
            role: One of UserRole
            **extra_fields: Additional fields to set on the user

        Returns:
            CustomUser: The created user instance
        """
        if not email:
            raise ValueError('Email is required')
        if not name:
            raise ValueError('Name is required')
        if not phone_number:
            raise ValueError('Phone number is required')
        if role not in UserRole.values:
            raise ValueError(f'Unknown role "{role}"')

        user = self.model(
            email=self.normalize_email(email),
            name=name,
            phone_number=phone_number,
            role=role,
            **extra_fields
        )
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, name, phone_number, password=None, **extra_fields):
        """
        Create and save an admin user.
        Required by Django for the createsuperuser management command.
        """
        return self.create_user(
            email=email,
            name=name,
            phone_number=phone_number,
            password=password,
            role=UserRole.ADMIN,
            **extra_fields
        )


class CustomUser(AbstractBaseUser):
    """Custom user model with email authentication and an approval role"""
    email = models.EmailField(unique=True, db_index=True)
    name = models.CharField(max_length=255)
    phone_number = models.CharField(max_length=15)
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.EMPLOYEE,
        db_index=True,
        help_text="Role consulted for approval authority"
    )
    is_active = models.BooleanField(default=True)

    objects = CustomUserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name', 'phone_number']

    class Meta:
        db_table = 'custom_users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def __str__(self):
        return f"{self.name} ({self.email})"

    def is_admin(self):
        return self.role == UserRole.ADMIN

    def is_hr_or_admin(self):
        """HR and Admin share approval authority over every request."""
        return self.role in (UserRole.HR, UserRole.ADMIN)

    @property
    def employee_id(self):
        """Id of the linked employee record, or None."""
        employee = getattr(self, 'employee', None)
        return employee.pk if employee is not None else None
