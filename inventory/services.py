"""
Stock movements.

Quantities are changed with F() expressions so concurrent movements on the
same (product, warehouse) row never lose updates. Callers that need several
movements to succeed or fail together wrap them in their own transaction.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F

from core.base.exceptions import NotFoundError
from .models import Product, ProductStock, Warehouse

logger = logging.getLogger(__name__)


def _require_positive(quantity):
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
        raise ValidationError({'quantity': 'Quantity must be a positive whole number'})


class StockService:
    """Service layer for per-warehouse stock"""

    @staticmethod
    def get_warehouse(warehouse_id) -> Warehouse:
        try:
            return Warehouse.objects.get(pk=warehouse_id)
        except (Warehouse.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('Warehouse', warehouse_id)

    @staticmethod
    def get_product(product_id) -> Product:
        try:
            return Product.objects.get(pk=product_id)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('Product', product_id)

    @staticmethod
    @transaction.atomic
    def increase_stock(product, warehouse, quantity: int) -> ProductStock:
        """
        Add ``quantity`` units of ``product`` to ``warehouse``.

        The stock row is created at 0 the first time the product lands in
        that warehouse.
        """
        _require_positive(quantity)
        stock, _ = ProductStock.objects.get_or_create(product=product, warehouse=warehouse)
        ProductStock.objects.filter(pk=stock.pk).update(quantity=F('quantity') + quantity)
        stock.refresh_from_db(fields=['quantity'])
        logger.info(
            "Stock +%s for %s in warehouse %s (now %s)",
            quantity, product.sku, warehouse.pk, stock.quantity
        )
        return stock

    @staticmethod
    @transaction.atomic
    def decrease_stock(product, warehouse, quantity: int) -> ProductStock:
        """
        Remove ``quantity`` units of ``product`` from ``warehouse``.

        Raises:
            ValidationError: not enough stock on hand
        """
        _require_positive(quantity)
        updated = ProductStock.objects.filter(
            product=product,
            warehouse=warehouse,
            quantity__gte=quantity
        ).update(quantity=F('quantity') - quantity)

        if not updated:
            available = (
                ProductStock.objects
                .filter(product=product, warehouse=warehouse)
                .values_list('quantity', flat=True)
                .first()
            ) or 0
            logger.warning(
                "Rejected stock -%s for %s in warehouse %s (available %s)",
                quantity, product.sku, warehouse.pk, available
            )
            raise ValidationError({
                'quantity': f"Insufficient stock for {product.sku}: "
                            f"requested {quantity}, available {available}"
            })

        stock = ProductStock.objects.get(product=product, warehouse=warehouse)
        logger.info(
            "Stock -%s for %s in warehouse %s (now %s)",
            quantity, product.sku, warehouse.pk, stock.quantity
        )
        return stock

    @staticmethod
    def adjust_stock(product, warehouse, delta: int) -> ProductStock:
        """Apply a signed manual correction."""
        if not isinstance(delta, int) or isinstance(delta, bool) or delta == 0:
            raise ValidationError({'delta': 'Adjustment must be a non-zero whole number'})
        if delta > 0:
            return StockService.increase_stock(product, warehouse, delta)
        return StockService.decrease_stock(product, warehouse, -delta)

    @staticmethod
    def products_by_warehouse(warehouse):
        """Stock rows with something on hand in ``warehouse``."""
        return (
            ProductStock.objects
            .filter(warehouse=warehouse, quantity__gt=0)
            .select_related('product', 'warehouse')
        )

    @staticmethod
    def low_stock(warehouse=None):
        """Stock rows at or below their threshold."""
        queryset = (
            ProductStock.objects
            .filter(quantity__lte=F('min_quantity'), product__is_active=True)
            .select_related('product', 'warehouse')
        )
        if warehouse is not None:
            queryset = queryset.filter(warehouse=warehouse)
        return queryset
