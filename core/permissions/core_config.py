"""
Permission Catalogue - Hardcoded Setup
======================================

Defines the closed set of permissions an employee can hold:
- 10 resources (screens / business areas)
- 4 standard actions plus 2 credit actions that only exist on customers
- The default permission map given to a new employee (nothing granted)

Resources and actions are enumerations; any pair outside RESOURCE_ACTIONS is
rejected when a Permission is built instead of quietly evaluating to False.
"""
from dataclasses import dataclass
from types import MappingProxyType

from django.db import models


class Resource(models.TextChoices):
    INVENTORY = 'inventory', 'Inventory'
    FINANCE = 'finance', 'Finance'
    CUSTOMERS = 'customers', 'Customers'
    EMPLOYEES = 'employees', 'Employees'
    VENDORS = 'vendors', 'Vendors'
    POS = 'pos', 'Point of Sale'
    REPORTS = 'reports', 'Reports'
    ORDERS = 'orders', 'Online Orders'
    HR = 'hr', 'HR'
    SETTINGS = 'settings', 'Settings'


class Action(models.TextChoices):
    VIEW = 'view', 'View'
    CREATE = 'create', 'Create'
    UPDATE = 'update', 'Update'
    DELETE = 'delete', 'Delete'
    VIEW_CREDITS = 'view_credits', 'View Credits'
    SETTLE_CREDITS = 'settle_credits', 'Settle Credits'


class Role(models.TextChoices):
    ADMIN = 'admin', 'Admin'
    MANAGER = 'manager', 'Manager'
    STAFF = 'staff', 'Staff'
    CUSTOMER = 'customer', 'Customer'


STANDARD_ACTIONS = frozenset({Action.VIEW, Action.CREATE, Action.UPDATE, Action.DELETE})

RESOURCE_ACTIONS = MappingProxyType({
    resource: (
        STANDARD_ACTIONS | {Action.VIEW_CREDITS, Action.SETTLE_CREDITS}
        if resource == Resource.CUSTOMERS
        else STANDARD_ACTIONS
    )
    for resource in Resource
})

# Keys used by older clients when storing the permission map
ACTION_ALIASES = MappingProxyType({
    'viewCredits': Action.VIEW_CREDITS,
    'settleCredits': Action.SETTLE_CREDITS,
})


class UnknownPermissionError(ValueError):
    """A resource/action pair outside the permission catalogue was used."""


@dataclass(frozen=True)
class Permission:
    resource: Resource
    action: Action

    def __post_init__(self):
        try:
            resource = Resource(self.resource)
            action = Action(ACTION_ALIASES.get(self.action, self.action))
        except ValueError as exc:
            raise UnknownPermissionError(
                f"Unknown permission '{self.resource}.{self.action}'"
            ) from exc
        if action not in RESOURCE_ACTIONS[resource]:
            raise UnknownPermissionError(
                f"Action '{action}' is not defined for resource '{resource}'"
            )
        object.__setattr__(self, 'resource', resource)
        object.__setattr__(self, 'action', action)

    def __str__(self):
        return f"{self.resource.value}.{self.action.value}"


ALL_PERMISSIONS = frozenset(
    Permission(resource, action)
    for resource, actions in RESOURCE_ACTIONS.items()
    for action in actions
)

# New employees start with every permission switched off
DEFAULT_EMPLOYEE_PERMISSIONS = MappingProxyType({
    permission: False for permission in ALL_PERMISSIONS
})
