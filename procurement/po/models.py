from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from core.base.exceptions import InvalidStateTransitionError
from core.base.models import generate_document_number
from inventory.models import Product, Warehouse
from procurement.vendors.models import Vendor


class PurchaseOrder(models.Model):
    """
    Purchase Order Header.

    Status only moves forward:

        PENDING --approve--> APPROVED --receive--> RECEIVED
        PENDING --receive--> RECEIVED
        PENDING / APPROVED --cancel--> CANCELLED

    RECEIVED and CANCELLED are terminal. Every transition is written as a
    conditional UPDATE on the current status, so two requests racing on the
    same order cannot both succeed.
    """
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    RECEIVED = 'RECEIVED'
    CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (APPROVED, 'Approved'),
        (RECEIVED, 'Received'),
        (CANCELLED, 'Cancelled'),
    ]

    ALLOWED_TRANSITIONS = {
        PENDING: {APPROVED, RECEIVED, CANCELLED},
        APPROVED: {RECEIVED, CANCELLED},
        RECEIVED: set(),
        CANCELLED: set(),
    }

    po_number = models.CharField(max_length=50, unique=True, db_index=True, blank=True)
    vendor = models.ForeignKey(Vendor, on_delete=models.PROTECT, related_name='purchase_orders')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING, db_index=True)

    # Fixed when the order is created, never recomputed
    total_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))
    received_total_amount = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)

    notes = models.TextField(blank=True)
    bill_image_url = models.CharField(max_length=500, blank=True)

    # Workflow
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='purchase_orders_created')
    created_at = models.DateTimeField(auto_now_add=True)

    approved_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='pos_approved')
    approved_at = models.DateTimeField(null=True, blank=True)

    cancelled_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='pos_cancelled')
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.TextField(blank=True)

    received_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='pos_received')
    received_at = models.DateTimeField(null=True, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'purchase_order'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['vendor', 'status']),
        ]

    def __str__(self):
        return f"{self.po_number} - {self.vendor} - {self.get_status_display()}"

    # ==================== STATUS FUNCTIONS ====================

    def can_transition_to(self, target):
        return target in self.ALLOWED_TRANSITIONS.get(self.status, set())

    def is_receivable(self):
        return self.can_transition_to(self.RECEIVED)

    def _transition(self, target, attempted, **fields):
        """
        Move to ``target`` with a compare-and-set on the current status.

        Raises InvalidStateTransitionError when the row is no longer in a
        status that allows ``target``; nothing is written in that case.
        """
        if not self.can_transition_to(target):
            raise InvalidStateTransitionError('purchase order', self.status, attempted)

        sources = [source for source, targets in self.ALLOWED_TRANSITIONS.items() if target in targets]
        fields['updated_at'] = timezone.now()
        updated = PurchaseOrder.objects.filter(pk=self.pk, status__in=sources).update(status=target, **fields)
        if not updated:
            current = PurchaseOrder.objects.filter(pk=self.pk).values_list('status', flat=True).first()
            raise InvalidStateTransitionError('purchase order', current or self.status, attempted)

        self.status = target
        for name, value in fields.items():
            setattr(self, name, value)

    def approve_po(self, approved_by):
        """PENDING -> APPROVED."""
        self._transition(
            self.APPROVED, 'approve',
            approved_by=approved_by,
            approved_at=timezone.now(),
        )

    def cancel_po(self, reason, cancelled_by):
        """PENDING / APPROVED -> CANCELLED. No stock or balance effect."""
        self._transition(
            self.CANCELLED, 'cancel',
            cancelled_by=cancelled_by,
            cancelled_at=timezone.now(),
            cancellation_reason=reason or '',
        )

    def mark_received(self, received_by, received_total_amount, bill_image_url=''):
        """
        PENDING / APPROVED -> RECEIVED.

        Only the status flip; stock, lines and vendor balance are written by
        the receiving service in the same transaction.
        """
        self._transition(
            self.RECEIVED, 'receive',
            received_by=received_by,
            received_at=timezone.now(),
            received_total_amount=received_total_amount,
            bill_image_url=bill_image_url or '',
        )

    def calculate_total(self):
        """Sum of ordered quantity x unit price over all lines."""
        return sum((line.quantity * line.unit_price for line in self.lines.all()), Decimal('0.00'))

    # ==================== SAVE OVERRIDE ====================

    def save(self, *args, **kwargs):
        if not self.po_number:
            self.po_number = generate_document_number(PurchaseOrder, 'PO', 'po_number', timezone.localdate())
        super().save(*args, **kwargs)


class PurchaseOrderLine(models.Model):
    """
    One product on a purchase order.

    The received_* fields and warehouse stay empty until the order is
    received. A line that got nothing is recorded with received_quantity 0 at
    the ordered price and no warehouse.
    """
    purchase_order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name='lines')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='purchase_order_lines')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    line_total = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))

    received_quantity = models.PositiveIntegerField(null=True, blank=True)
    received_unit_price = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    warehouse = models.ForeignKey(
        Warehouse,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='received_po_lines',
        help_text="Where the received stock was put"
    )

    class Meta:
        db_table = 'purchase_order_line'
        ordering = ['id']
        unique_together = [('purchase_order', 'product')]

    def __str__(self):
        return f"{self.purchase_order.po_number} - {self.product.sku} x {self.quantity}"

    def calculate_line_total(self):
        self.line_total = self.quantity * self.unit_price
        return self.line_total

    def received_line_total(self):
        if self.received_quantity is None or self.received_unit_price is None:
            return None
        return self.received_quantity * self.received_unit_price

    def save(self, *args, **kwargs):
        if self.quantity is not None and self.unit_price is not None:
            self.calculate_line_total()
        super().save(*args, **kwargs)
