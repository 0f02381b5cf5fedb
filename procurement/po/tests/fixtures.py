"""
Test fixtures and helper functions for Purchase Order tests.

Builds the standard scenario used across the procurement tests: one vendor,
products A and B, warehouse X.
"""
from decimal import Decimal

from core.base.test_utils import create_admin_user
from inventory.tests.fixtures import create_product, create_warehouse
from procurement.po.dtos import PurchaseOrderCreateDTO, PurchaseOrderLineDTO
from procurement.po.services import PurchaseOrderService
from procurement.vendors.tests.fixtures import create_vendor


def create_purchase_order(user, vendor, lines, notes=''):
    """
    Create a PENDING PO through the service.

    Args:
        lines: [(product, quantity, unit_price), ...]
    """
    dto = PurchaseOrderCreateDTO(
        vendor_id=vendor.id,
        notes=notes,
        lines=[
            PurchaseOrderLineDTO(product_id=product.id, quantity=quantity, unit_price=Decimal(str(price)))
            for product, quantity, price in lines
        ],
    )
    return PurchaseOrderService.create(user, dto)


def create_standard_scenario():
    """
    Vendor, products A and B, warehouse X and a PENDING PO for
    A 10 @ 100 and B 5 @ 50 (total 1250).
    """
    user = create_admin_user()
    vendor = create_vendor()
    product_a = create_product(sku='SKU-A', name='Product A')
    product_b = create_product(sku='SKU-B', name='Product B')
    warehouse = create_warehouse(name='Warehouse X')
    po = create_purchase_order(user, vendor, [(product_a, 10, '100.00'), (product_b, 5, '50.00')])
    return {
        'user': user,
        'vendor': vendor,
        'product_a': product_a,
        'product_b': product_b,
        'warehouse': warehouse,
        'po': po,
    }
