"""
User helpers shared by the app test suites.
"""
from django.contrib.auth import get_user_model

from core.permissions.core_config import Role

User = get_user_model()


def create_admin_user(email='admin@test.com', name='Admin User'):
    """Create a user holding every permission"""
    user, _ = User.objects.get_or_create(
        email=email,
        defaults={'name': name, 'role': Role.ADMIN}
    )
    return user


def create_staff_user(email='staff@test.com', name='Staff User', grants=None, role=Role.STAFF):
    """
    Create a staff user with only the listed grants.

    Args:
        grants: {"vendors": ["view", "update"], ...}
    """
    resources = {
        resource: {action: True for action in actions}
        for resource, actions in (grants or {}).items()
    }
    user, _ = User.objects.get_or_create(
        email=email,
        defaults={
            'name': name,
            'role': role,
            'permissions': {'resources': resources}
        }
    )
    return user


def create_customer_user(email='customer@test.com', name='Customer User'):
    return create_staff_user(email=email, name=name, role=Role.CUSTOMER)
