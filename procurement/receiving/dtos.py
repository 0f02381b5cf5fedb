"""
Data Transfer Objects for goods receiving.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional


@dataclass
class ReceivedItemDTO:
    """One product as delivered"""
    product_id: int
    quantity: int = 0
    unit_price: Optional[Decimal] = None
    warehouse_id: Optional[int] = None


@dataclass
class ReceiveGoodsDTO:
    """DTO for receiving a purchase order"""
    items: List[ReceivedItemDTO] = field(default_factory=list)
    notes: Optional[str] = ''
    bill_image: Optional[Any] = None
