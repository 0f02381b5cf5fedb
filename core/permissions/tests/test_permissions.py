"""
Tests for the permission catalogue, merging and checks.
"""
from types import MappingProxyType

from django.test import RequestFactory, TestCase
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework.test import force_authenticate

from core.base.test_utils import create_admin_user, create_customer_user, create_staff_user
from core.permissions.core_config import (
    ALL_PERMISSIONS,
    DEFAULT_EMPLOYEE_PERMISSIONS,
    Action,
    Permission,
    Resource,
    UnknownPermissionError,
)
from core.permissions.decorators import require_permission
from core.permissions.services import (
    get_effective_permissions,
    has_permission,
    merge_permissions,
    permissions_to_map,
)


class PermissionCatalogueTests(TestCase):

    def test_valid_pair_normalises_to_enums(self):
        permission = Permission('vendors', 'view')
        self.assertIs(permission.resource, Resource.VENDORS)
        self.assertIs(permission.action, Action.VIEW)
        self.assertEqual(str(permission), 'vendors.view')
        self.assertEqual(permission, Permission(Resource.VENDORS, Action.VIEW))

    def test_unknown_resource_raises(self):
        with self.assertRaises(UnknownPermissionError):
            Permission('spaceships', 'view')

    def test_unknown_action_raises(self):
        with self.assertRaises(UnknownPermissionError):
            Permission('vendors', 'launch')

    def test_credit_actions_only_on_customers(self):
        Permission('customers', 'settle_credits')
        Permission('customers', 'viewCredits')
        with self.assertRaises(UnknownPermissionError):
            Permission('vendors', 'settle_credits')

    def test_catalogue_size(self):
        # 10 resources x 4 standard actions + 2 credit actions on customers
        self.assertEqual(len(ALL_PERMISSIONS), 42)

    def test_defaults_are_immutable_and_all_denied(self):
        self.assertIsInstance(DEFAULT_EMPLOYEE_PERMISSIONS, MappingProxyType)
        self.assertFalse(any(DEFAULT_EMPLOYEE_PERMISSIONS.values()))
        with self.assertRaises(TypeError):
            DEFAULT_EMPLOYEE_PERMISSIONS[Permission('vendors', 'view')] = True


class MergePermissionsTests(TestCase):

    def test_empty_map_grants_nothing(self):
        self.assertEqual(merge_permissions({}), frozenset())
        self.assertEqual(merge_permissions(None), frozenset())

    def test_stored_values_override_defaults(self):
        granted = merge_permissions({'resources': {
            'vendors': {'view': True, 'update': True, 'delete': False},
            'customers': {'settleCredits': True},
        }})
        self.assertEqual(granted, frozenset({
            Permission('vendors', 'view'),
            Permission('vendors', 'update'),
            Permission('customers', 'settle_credits'),
        }))

    def test_explicit_defaults_argument(self):
        defaults = MappingProxyType({Permission('inventory', 'view'): True})
        granted = merge_permissions({'resources': {'vendors': {'view': True}}}, defaults)
        self.assertEqual(granted, frozenset({Permission('inventory', 'view'), Permission('vendors', 'view')}))

    def test_stored_false_revokes_default(self):
        defaults = MappingProxyType({Permission('inventory', 'view'): True})
        granted = merge_permissions({'resources': {'inventory': {'view': False}}}, defaults)
        self.assertEqual(granted, frozenset())

    def test_unknown_keys_raise(self):
        with self.assertRaises(UnknownPermissionError):
            merge_permissions({'resources': {'vendors': {'fly': True}}})
        with self.assertRaises(UnknownPermissionError):
            merge_permissions({'resources': {'vendors': True}})

    def test_map_round_trip_shape(self):
        mapped = permissions_to_map(frozenset({Permission('finance', 'view')}))
        self.assertTrue(mapped['resources']['finance']['view'])
        self.assertFalse(mapped['resources']['finance']['create'])
        self.assertIn('settle_credits', mapped['resources']['customers'])


class RolePermissionTests(TestCase):

    def test_admin_has_everything(self):
        admin = create_admin_user()
        self.assertEqual(get_effective_permissions(admin), ALL_PERMISSIONS)
        self.assertTrue(has_permission(admin, Resource.FINANCE, Action.DELETE))

    def test_customer_has_nothing(self):
        customer = create_customer_user()
        self.assertEqual(get_effective_permissions(customer), frozenset())
        self.assertFalse(has_permission(customer, Resource.INVENTORY, Action.VIEW))

    def test_staff_follows_stored_map(self):
        staff = create_staff_user(grants={'inventory': ['view', 'update']})
        self.assertTrue(has_permission(staff, 'inventory', 'update'))
        self.assertFalse(has_permission(staff, 'inventory', 'delete'))
        self.assertFalse(has_permission(staff, 'finance', 'view'))

    def test_check_with_unknown_pair_raises(self):
        staff = create_staff_user()
        with self.assertRaises(UnknownPermissionError):
            has_permission(staff, 'vendors', 'settle_credits')


@api_view(['GET', 'POST'])
@require_permission(Resource.VENDORS)
def _vendor_view(request):
    return Response({'ok': True})


class RequirePermissionDecoratorTests(TestCase):

    def setUp(self):
        self.factory = RequestFactory()

    def test_method_maps_to_action(self):
        staff = create_staff_user(grants={'vendors': ['view']})

        request = self.factory.get('/')
        force_authenticate(request, user=staff)
        self.assertEqual(_vendor_view(request).status_code, status.HTTP_200_OK)

        request = self.factory.post('/')
        force_authenticate(request, user=staff)
        response = _vendor_view(request)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(
            response.data['data']['required_permission'],
            {'resource': 'vendors', 'action': 'create'}
        )

    def test_invalid_pair_rejected_at_decoration(self):
        with self.assertRaises(UnknownPermissionError):
            require_permission(Resource.VENDORS, Action.SETTLE_CREDITS)

    def test_metadata_on_wrapper(self):
        decorated = require_permission(Resource.FINANCE, Action.VIEW)(lambda request: None)
        self.assertEqual(decorated.resource, Resource.FINANCE)
        self.assertEqual(decorated.action, Action.VIEW)
