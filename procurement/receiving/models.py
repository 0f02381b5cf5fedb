from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.base.models import generate_document_number
from inventory.models import Product, Warehouse
from procurement.po.models import PurchaseOrder, PurchaseOrderLine
from procurement.vendors.models import Vendor


class GoodsReceipt(models.Model):
    """
    Goods Receipt Note (GRN) header.

    Records the single receipt of a purchase order. The one-to-one link to
    the order is a database-level guarantee that an order is received at
    most once.
    """

    grn_number = models.CharField(
        max_length=50,
        unique=True,
        db_index=True,
        blank=True,
        help_text="Auto-generated GRN number"
    )
    purchase_order = models.OneToOneField(
        PurchaseOrder,
        on_delete=models.PROTECT,
        related_name='goods_receipt',
        help_text="Purchase Order being received"
    )
    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.PROTECT,
        related_name='goods_receipts',
        help_text="Vendor delivering the goods"
    )
    total_amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="Sum of received quantity x received unit price"
    )
    bill_image_url = models.CharField(max_length=500, blank=True)
    notes = models.TextField(blank=True)

    received_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='received_goods_receipts',
        help_text="Person who received the goods"
    )
    received_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-received_at', '-id']
        verbose_name = 'Goods Receipt'
        verbose_name_plural = 'Goods Receipts'
        indexes = [
            models.Index(fields=['vendor', 'received_at']),
        ]

    def __str__(self):
        return f"{self.grn_number} - PO: {self.purchase_order.po_number}"

    def calculate_total(self):
        """Calculate total amount from all lines."""
        return sum((line.line_total for line in self.lines.all()), Decimal('0.00'))

    def get_receipt_summary(self):
        """Ordered vs received, for display next to the order."""
        lines = list(self.lines.all())
        return {
            'total_lines': len(lines),
            'total_items_received': sum(line.quantity_received for line in lines),
            'ordered_amount': self.purchase_order.total_amount,
            'received_amount': self.total_amount,
            'difference': self.total_amount - self.purchase_order.total_amount,
        }

    def save(self, *args, **kwargs):
        if not self.grn_number:
            self.grn_number = generate_document_number(
                GoodsReceipt, 'GRN', 'grn_number', timezone.localtime(self.received_at).date()
            )
        super().save(*args, **kwargs)


class GoodsReceiptLine(models.Model):
    """One received product: how many, at what price, into which warehouse."""
    goods_receipt = models.ForeignKey(GoodsReceipt, on_delete=models.CASCADE, related_name='lines')
    po_line = models.OneToOneField(
        PurchaseOrderLine,
        on_delete=models.PROTECT,
        related_name='receipt_line'
    )
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='receipt_lines')
    warehouse = models.ForeignKey(Warehouse, on_delete=models.PROTECT, related_name='receipt_lines')
    quantity_received = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=14, decimal_places=2)
    line_total = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.goods_receipt.grn_number} - {self.product.sku} x {self.quantity_received}"

    def save(self, *args, **kwargs):
        self.line_total = self.quantity_received * self.unit_price
        super().save(*args, **kwargs)
