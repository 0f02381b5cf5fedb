from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class LedgerEntry(models.Model):
    """
    One line of the finance ledger (day book).

    Entries are written by the business operations that move money (vendor
    payments, purchases) or entered manually as expenses. They are never
    edited afterwards.
    """

    INCOME = 'INCOME'
    EXPENSE = 'EXPENSE'
    ASSET = 'ASSET'
    LIABILITY = 'LIABILITY'
    ENTRY_TYPE_CHOICES = [
        (INCOME, 'Income'),
        (EXPENSE, 'Expense'),
        (ASSET, 'Asset'),
        (LIABILITY, 'Liability'),
    ]

    SALES = 'SALES'
    PURCHASE = 'PURCHASE'
    SALARY = 'SALARY'
    RENT = 'RENT'
    UTILITY = 'UTILITY'
    VENDOR_PAY = 'VENDOR_PAY'
    ADVANCE = 'ADVANCE'
    COMMISSION = 'COMMISSION'
    OTHER = 'OTHER'
    CATEGORY_CHOICES = [
        (SALES, 'Sales'),
        (PURCHASE, 'Purchase'),
        (SALARY, 'Salary'),
        (RENT, 'Rent'),
        (UTILITY, 'Utility'),
        (VENDOR_PAY, 'Vendor Payment'),
        (ADVANCE, 'Advance'),
        (COMMISSION, 'Commission'),
        (OTHER, 'Other'),
    ]

    CASH = 'CASH'
    BANK_TRANSFER = 'BANK_TRANSFER'
    FONE_PAY = 'FONE_PAY'
    CREDIT = 'CREDIT'
    CHEQUE = 'CHEQUE'
    PAYMENT_METHOD_CHOICES = [
        (CASH, 'Cash'),
        (BANK_TRANSFER, 'Bank Transfer'),
        (FONE_PAY, 'FonePay'),
        (CREDIT, 'Credit'),
        (CHEQUE, 'Cheque'),
    ]

    date = models.DateTimeField(default=timezone.now, db_index=True)
    entry_type = models.CharField(max_length=20, choices=ENTRY_TYPE_CHOICES, db_index=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, db_index=True)
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    description = models.CharField(max_length=500)
    related_id = models.CharField(
        max_length=64,
        blank=True,
        help_text="Id of the record that caused this entry (vendor, purchase order, ...)"
    )
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True)
    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='ledger_entries'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-date', '-id']
        verbose_name = 'Ledger Entry'
        verbose_name_plural = 'Ledger Entries'
        indexes = [
            models.Index(fields=['entry_type', 'date']),
        ]

    def __str__(self):
        return f"{self.date:%Y-%m-%d} {self.entry_type}/{self.category} {self.amount}"
