"""
Test fixtures and helper functions for Inventory tests.
"""
from decimal import Decimal

from inventory.models import Product, ProductStock, Warehouse


def create_warehouse(name='Main Warehouse', address='Kathmandu'):
    """Create a test warehouse"""
    warehouse, _ = Warehouse.objects.get_or_create(name=name, defaults={'address': address})
    return warehouse


def create_product(sku='SKU-A', name='Product A', price='150.00', cost_price='100.00', category='General'):
    """Create a test product"""
    product, _ = Product.objects.get_or_create(
        sku=sku,
        defaults={
            'name': name,
            'price': Decimal(price),
            'cost_price': Decimal(cost_price),
            'category': category,
        }
    )
    return product


def set_stock(product, warehouse, quantity, min_quantity=0):
    """Create or overwrite a stock row"""
    stock, _ = ProductStock.objects.update_or_create(
        product=product,
        warehouse=warehouse,
        defaults={'quantity': quantity, 'min_quantity': min_quantity}
    )
    return stock


def stock_of(product, warehouse):
    """Quantity on hand, 0 when no row exists"""
    return (
        ProductStock.objects
        .filter(product=product, warehouse=warehouse)
        .values_list('quantity', flat=True)
        .first()
    ) or 0
