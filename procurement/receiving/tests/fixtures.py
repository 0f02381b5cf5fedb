"""
Test fixtures and helper functions for Receiving tests.
"""
from decimal import Decimal

from procurement.receiving.dtos import ReceiveGoodsDTO, ReceivedItemDTO


def received_item(product, quantity, unit_price=None, warehouse=None):
    """One row of a receipt"""
    return ReceivedItemDTO(
        product_id=product.id,
        quantity=quantity,
        unit_price=Decimal(str(unit_price)) if unit_price is not None else None,
        warehouse_id=warehouse.id if warehouse is not None else None,
    )


def receive_dto(*items, notes='', bill_image=None):
    return ReceiveGoodsDTO(items=list(items), notes=notes, bill_image=bill_image)


def receive_payload(*rows):
    """
    JSON body for the receive endpoint.

    Args:
        rows: (product, quantity, unit_price, warehouse) tuples
    """
    return {
        'items': [
            {
                'product_id': product.id,
                'quantity': quantity,
                'unit_price': str(unit_price),
                'warehouse_id': warehouse.id,
            }
            for product, quantity, unit_price, warehouse in rows
        ]
    }
