"""
Test fixtures for Finance ledger tests.
"""
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from Finance.ledger.models import LedgerEntry


def create_entry(user, entry_type=LedgerEntry.EXPENSE, category=LedgerEntry.OTHER,
                 amount='100.00', days_ago=0, description='Test entry'):
    """Write an entry directly, dated ``days_ago`` days back"""
    return LedgerEntry.objects.create(
        date=timezone.now() - timedelta(days=days_ago),
        entry_type=entry_type,
        category=category,
        amount=Decimal(amount),
        description=description,
        payment_method=LedgerEntry.CASH,
        performed_by=user,
    )
