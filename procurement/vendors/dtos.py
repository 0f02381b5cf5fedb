"""
Data Transfer Objects for the Vendor domain.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional


@dataclass
class VendorPaymentDTO:
    """DTO for settling (part of) a vendor's balance"""
    amount: Decimal
    payment_method: str
    notes: Optional[str] = ''
    receipt_image: Optional[Any] = None
