from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from core.base.managers import ActiveManager
from core.base.models import ActiveFlagMixin, TimestampedMixin
from Finance.ledger.models import LedgerEntry


class Vendor(ActiveFlagMixin, TimestampedMixin):
    """
    A supplier we buy stock from.

    ``balance`` is what we currently owe the vendor (accounts payable). It is
    only moved by goods receipt (up) and payment settlement (down), never
    through the API directly.
    """
    company_name = models.CharField(max_length=255)
    contact_person = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=30)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)
    category = models.CharField(max_length=100, blank=True, db_index=True)
    balance = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00'),
        editable=False,
        help_text="Amount owed to the vendor"
    )

    objects = ActiveManager()

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(balance__gte=0),
                name='vendor_balance_non_negative',
            ),
        ]

    def __str__(self):
        return self.company_name


class VendorPayment(models.Model):
    """A settlement that reduced a vendor's balance."""
    vendor = models.ForeignKey(Vendor, on_delete=models.PROTECT, related_name='payments')
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    payment_method = models.CharField(max_length=20, choices=LedgerEntry.PAYMENT_METHOD_CHOICES)
    notes = models.TextField(blank=True)
    receipt_image_url = models.CharField(max_length=500, blank=True)
    balance_after = models.DecimalField(max_digits=14, decimal_places=2)
    ledger_entry = models.OneToOneField(
        LedgerEntry,
        on_delete=models.PROTECT,
        related_name='vendor_payment'
    )
    paid_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='vendor_payments'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.vendor.company_name}: {self.amount}"
