from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from core.base.managers import ActiveManager
from core.base.models import ActiveFlagMixin, TimestampedMixin


class Warehouse(ActiveFlagMixin, TimestampedMixin):
    """A physical stock location (shop floor, back store, depot)."""
    name = models.CharField(max_length=255, unique=True)
    address = models.TextField(blank=True)

    objects = ActiveManager()

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Product(ActiveFlagMixin, TimestampedMixin):
    """
    A sellable / purchasable item.

    Stock is not held on the product itself but per warehouse in ProductStock.
    """
    sku = models.CharField(max_length=64, unique=True, db_index=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=100, blank=True, db_index=True)
    price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Selling price"
    )
    cost_price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Last purchase price"
    )

    objects = ActiveManager()

    class Meta:
        ordering = ['name']

    def __str__(self):
        return f"{self.sku} - {self.name}"

    def total_stock(self):
        """Quantity on hand across all warehouses."""
        return self.stock_entries.aggregate(total=models.Sum('quantity'))['total'] or 0


class ProductStock(models.Model):
    """Quantity of one product held in one warehouse."""
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='stock_entries')
    warehouse = models.ForeignKey(Warehouse, on_delete=models.PROTECT, related_name='stock_entries')
    quantity = models.PositiveIntegerField(default=0)
    position = models.CharField(max_length=50, blank=True, help_text="Shelf / bin label")
    min_quantity = models.PositiveIntegerField(default=0, help_text="Low stock threshold")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = [('product', 'warehouse')]
        ordering = ['warehouse__name', 'product__name']

    def __str__(self):
        return f"{self.product.sku} @ {self.warehouse.name}: {self.quantity}"

    def is_low(self):
        return self.quantity <= self.min_quantity
