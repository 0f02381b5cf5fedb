"""
Service layer for permission checking.

The stored permission map on a user has the shape used by the admin UI:

    {"resources": {"vendors": {"view": true, "update": false}, ...}}

It is merged over an explicit defaults mapping; the result is the frozenset
of granted Permission values.
"""
from typing import FrozenSet, Mapping, Optional

from .core_config import (
    DEFAULT_EMPLOYEE_PERMISSIONS,
    Permission,
    Role,
    UnknownPermissionError,
)


def merge_permissions(
    stored: Optional[Mapping],
    defaults: Mapping[Permission, bool] = DEFAULT_EMPLOYEE_PERMISSIONS,
) -> FrozenSet[Permission]:
    """
    Overlay a stored permission map on top of ``defaults``.

    Resources or actions missing from ``stored`` keep their default value.
    Unknown resources or actions raise UnknownPermissionError.
    """
    effective = dict(defaults)

    resources = (stored or {}).get('resources', {})
    if not isinstance(resources, Mapping):
        raise UnknownPermissionError("Permission map 'resources' must be an object")

    for resource_name, actions in resources.items():
        if not isinstance(actions, Mapping):
            raise UnknownPermissionError(
                f"Permissions for resource '{resource_name}' must be an object"
            )
        for action_name, granted in actions.items():
            effective[Permission(resource_name, action_name)] = bool(granted)

    return frozenset(permission for permission, granted in effective.items() if granted)


def permissions_to_map(granted: FrozenSet[Permission]) -> dict:
    """Render a granted set back into the nested map shape, every pair included."""
    result = {}
    for permission in sorted(DEFAULT_EMPLOYEE_PERMISSIONS, key=str):
        actions = result.setdefault(permission.resource.value, {})
        actions[permission.action.value] = permission in granted
    return {'resources': result}


def get_effective_permissions(user) -> FrozenSet[Permission]:
    """All permissions the user currently holds."""
    if not user or not user.is_authenticated:
        return frozenset()
    if user.role == Role.ADMIN:
        return frozenset(DEFAULT_EMPLOYEE_PERMISSIONS)
    if user.role == Role.CUSTOMER:
        return frozenset()
    return merge_permissions(user.permissions)


def user_can_perform_action(user, resource, action):
    """
    Check whether ``user`` may perform ``action`` on ``resource``.

    Returns:
        (allowed, reason) tuple

    Raises:
        UnknownPermissionError: the resource/action pair does not exist
    """
    permission = Permission(resource, action)

    if not user or not user.is_authenticated:
        return False, "Authentication required"
    if user.role == Role.ADMIN:
        return True, "Admin has all permissions"
    if user.role == Role.CUSTOMER:
        return False, "Customers have no staff permissions"
    if permission in merge_permissions(user.permissions):
        return True, f"Granted '{permission}'"
    return False, f"Missing permission '{permission}'"


def has_permission(user, resource, action) -> bool:
    allowed, _ = user_can_perform_action(user, resource, action)
    return allowed
