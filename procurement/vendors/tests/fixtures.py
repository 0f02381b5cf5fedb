"""
Test fixtures for Vendor tests.
"""
from decimal import Decimal

from procurement.vendors.models import Vendor


def create_vendor(company_name='Himalayan Traders', balance='0.00', is_active=True, category='Groceries'):
    """Create a test vendor with a given outstanding balance"""
    return Vendor.objects.create(
        company_name=company_name,
        contact_person='Ram Shrestha',
        phone='9800000000',
        category=category,
        balance=Decimal(balance),
        is_active=is_active,
    )


def balance_of(vendor):
    vendor.refresh_from_db(fields=['balance'])
    return vendor.balance
