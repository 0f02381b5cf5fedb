"""
Data Transfer Objects for the Purchase Order domain.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass
class PurchaseOrderLineDTO:
    """DTO for one ordered product"""
    product_id: int
    quantity: int
    unit_price: Decimal


@dataclass
class PurchaseOrderCreateDTO:
    """DTO for creating a new purchase order"""
    vendor_id: int
    lines: List[PurchaseOrderLineDTO] = field(default_factory=list)
    notes: Optional[str] = ''
