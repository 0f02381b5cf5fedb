"""
Finance ledger service.

Posting helpers are plain writes; callers that post as part of a larger
operation (vendor payment settlement) do so inside their own transaction so
the entry commits or rolls back with it.
"""
import logging
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import Optional

from django.core.exceptions import ValidationError
from django.db.models import Sum
from django.utils import timezone

from .models import LedgerEntry

logger = logging.getLogger(__name__)


def _day_bounds(day):
    """Aware [start, end) datetimes covering ``day`` in the current timezone."""
    start = timezone.make_aware(datetime.combine(day, time.min))
    return start, start + timedelta(days=1)


class LedgerService:
    """Service layer for the finance ledger"""

    @staticmethod
    def create_entry(*, entry_type, category, amount, description, performed_by,
                     payment_method='', related_id='', date=None) -> LedgerEntry:
        """Validate and write a single ledger entry."""
        entry = LedgerEntry(
            date=date or timezone.now(),
            entry_type=entry_type,
            category=category,
            amount=Decimal(amount),
            description=description,
            related_id=str(related_id or ''),
            payment_method=payment_method,
            performed_by=performed_by,
        )
        entry.full_clean()
        entry.save()
        logger.info(
            "Ledger %s/%s %s posted by user %s",
            entry_type, category, entry.amount, performed_by.pk
        )
        return entry

    @staticmethod
    def post_vendor_payment(vendor, amount, payment_method, performed_by, notes='') -> LedgerEntry:
        description = f"Payment to {vendor.company_name}"
        if notes:
            description = f"{description} - {notes}"
        return LedgerService.create_entry(
            entry_type=LedgerEntry.EXPENSE,
            category=LedgerEntry.VENDOR_PAY,
            amount=amount,
            description=description[:500],
            related_id=vendor.pk,
            payment_method=payment_method,
            performed_by=performed_by,
        )

    @staticmethod
    def post_purchase_expense(purchase_order, amount, payment_method, performed_by) -> LedgerEntry:
        return LedgerService.create_entry(
            entry_type=LedgerEntry.EXPENSE,
            category=LedgerEntry.PURCHASE,
            amount=amount,
            description=f"Purchase Order #{purchase_order.po_number}",
            related_id=purchase_order.pk,
            payment_method=payment_method,
            performed_by=performed_by,
        )

    @staticmethod
    def create_expense(category, amount, description, payment_method, performed_by) -> LedgerEntry:
        """Manual expense (rent, utilities, salaries paid out of the till, ...)."""
        if category == LedgerEntry.SALES:
            raise ValidationError({'category': 'Sales cannot be recorded as an expense'})
        return LedgerService.create_entry(
            entry_type=LedgerEntry.EXPENSE,
            category=category,
            amount=amount,
            description=description,
            payment_method=payment_method,
            performed_by=performed_by,
        )

    @staticmethod
    def get_entries(start_date, end_date, entry_type: Optional[str] = None):
        """
        Entries dated within [start_date, end_date], both days inclusive,
        newest first.
        """
        if start_date > end_date:
            raise ValidationError({'start_date': 'Start date must not be after end date'})
        start, _ = _day_bounds(start_date)
        _, end = _day_bounds(end_date)
        queryset = LedgerEntry.objects.filter(date__gte=start, date__lt=end).select_related('performed_by')
        if entry_type:
            queryset = queryset.filter(entry_type=entry_type)
        return queryset

    @staticmethod
    def get_daily_pl(day) -> dict:
        """Income, expense and net for one calendar day."""
        start, end = _day_bounds(day)
        totals = (
            LedgerEntry.objects
            .filter(date__gte=start, date__lt=end, entry_type__in=[LedgerEntry.INCOME, LedgerEntry.EXPENSE])
            .values('entry_type')
            .annotate(total=Sum('amount'))
        )
        by_type = {row['entry_type']: row['total'] for row in totals}
        income = by_type.get(LedgerEntry.INCOME) or Decimal('0.00')
        expense = by_type.get(LedgerEntry.EXPENSE) or Decimal('0.00')
        return {
            'date': day,
            'income': income,
            'expense': expense,
            'net': income - expense,
        }

    @staticmethod
    def get_day_book():
        """Today's entries."""
        today = timezone.localdate()
        return LedgerService.get_entries(today, today)
