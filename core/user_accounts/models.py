"""
User Account Models
Handles user authentication, roles and the stored employee permission map.
"""
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import models

from core.permissions.core_config import Role, UnknownPermissionError
from core.permissions.services import merge_permissions


class CustomUserManager(BaseUserManager):
    """
    Custom user manager for CustomUser model.
    Handles user creation for the different roles.
    """

    def create_user(self, email, name, phone_number='', password=None, role=Role.STAFF, **extra_fields):
        """
        Create and save a user.

        Args:
            email: User's email address (used for authentication)
            name: User's full name
            phone_number: User's phone number
            password: User's password (will be hashed)
            role: One of Role (admin, manager, staff, customer)
            **extra_fields: Additional fields to set on the user

        Returns:
            CustomUser: The created user instance
        """
        if not email:
            raise ValueError('Email is required')
        if not name:
            raise ValueError('Name is required')

        user = self.model(
            email=self.normalize_email(email),
            name=name,
            phone_number=phone_number,
            role=role,
            **extra_fields
        )
        user.set_password(password)
        user.full_clean(exclude=['password'])
        user.save(using=self._db)
        return user

    def create_superuser(self, email, name, phone_number='', password=None, **extra_fields):
        """
        Create and save an admin user.
        Required by Django for the createsuperuser management command.
        """
        return self.create_user(
            email=email,
            name=name,
            phone_number=phone_number,
            password=password,
            role=Role.ADMIN,
            **extra_fields
        )


class CustomUser(AbstractBaseUser):
    """User with email authentication, a role and an employee permission map."""
    email = models.EmailField(unique=True, db_index=True)
    name = models.CharField(max_length=255)
    phone_number = models.CharField(max_length=20, blank=True)

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.STAFF,
        db_index=True,
    )
    permissions = models.JSONField(
        default=dict,
        blank=True,
        help_text='{"resources": {"vendors": {"view": true, ...}, ...}}; '
                  'missing entries fall back to the defaults (denied)'
    )

    is_active = models.BooleanField(default=True)
    date_joined = models.DateTimeField(auto_now_add=True)

    objects = CustomUserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        db_table = 'custom_users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def __str__(self):
        return f"{self.name} ({self.email})"

    def is_admin(self):
        return self.role == Role.ADMIN

    @property
    def is_staff(self):
        # Django admin site access
        return self.role == Role.ADMIN

    def has_perm(self, perm, obj=None):
        return self.is_active and self.is_admin()

    def has_module_perms(self, app_label):
        return self.is_active and self.is_admin()

    def clean(self):
        super().clean()
        try:
            merge_permissions(self.permissions)
        except UnknownPermissionError as exc:
            raise ValidationError({'permissions': str(exc)})

    def delete(self, *args, **kwargs):
        """Prevent deleting the last admin."""
        if self.is_admin() and not CustomUser.objects.filter(role=Role.ADMIN).exclude(pk=self.pk).exists():
            raise PermissionDenied("Cannot delete the last admin user.")
        return super().delete(*args, **kwargs)
