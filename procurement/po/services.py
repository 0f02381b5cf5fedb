"""
Purchase order lifecycle: create, approve, cancel.

Receiving lives in procurement.receiving.services because it also touches
stock, vendor balance and the goods receipt record.
"""
import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from core.base.exceptions import InvalidStateTransitionError, NotFoundError, PersistenceFailure
from inventory.models import Product
from procurement.vendors.services import VendorService
from .dtos import PurchaseOrderCreateDTO
from .models import PurchaseOrder, PurchaseOrderLine

logger = logging.getLogger(__name__)


class PurchaseOrderService:
    """Service layer for Purchase Order business logic"""

    @staticmethod
    def get_purchase_order(po_id) -> PurchaseOrder:
        try:
            return PurchaseOrder.objects.select_related('vendor').get(pk=po_id)
        except (PurchaseOrder.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('Purchase order', po_id)

    @staticmethod
    def _validate_lines(lines):
        if not lines:
            raise ValidationError({'lines': 'A purchase order needs at least one line item'})

        products = {}
        for index, line in enumerate(lines):
            if line.quantity is None or line.quantity <= 0:
                raise ValidationError({'lines': f"Line {index + 1}: quantity must be greater than 0"})
            if line.unit_price is None or Decimal(line.unit_price) <= 0:
                raise ValidationError({'lines': f"Line {index + 1}: unit price must be greater than 0"})
            if line.product_id in products:
                raise ValidationError({'lines': f"Line {index + 1}: product {line.product_id} appears more than once"})
            try:
                products[line.product_id] = Product.objects.get(pk=line.product_id)
            except (Product.DoesNotExist, ValueError, TypeError):
                raise NotFoundError('Product', line.product_id)
        return products

    @staticmethod
    def create(user, dto: PurchaseOrderCreateDTO) -> PurchaseOrder:
        """
        Create a PENDING purchase order.

        total_amount is fixed here as the sum of quantity x unit price.

        Raises:
            NotFoundError: vendor or a product does not exist
            ValidationError: inactive vendor, no lines, bad quantity/price, duplicate product
        """
        vendor = VendorService.get_vendor(dto.vendor_id)
        if not vendor.is_active:
            raise ValidationError({'vendor_id': f"Vendor '{vendor.company_name}' is inactive"})
        products = PurchaseOrderService._validate_lines(dto.lines)

        try:
            with transaction.atomic():
                po = PurchaseOrder.objects.create(
                    vendor=vendor,
                    notes=dto.notes or '',
                    created_by=user,
                    total_amount=sum(
                        (line.quantity * Decimal(line.unit_price) for line in dto.lines),
                        Decimal('0.00')
                    ),
                )
                for line in dto.lines:
                    PurchaseOrderLine.objects.create(
                        purchase_order=po,
                        product=products[line.product_id],
                        quantity=line.quantity,
                        unit_price=Decimal(line.unit_price),
                    )
        except DatabaseError as exc:
            logger.error("Creating purchase order for vendor %s failed", vendor.pk, exc_info=True)
            raise PersistenceFailure('create purchase order', cause=exc) from exc

        logger.info(
            "Created %s for vendor %s (%s lines, total %s) by user %s",
            po.po_number, vendor.pk, len(dto.lines), po.total_amount, user.pk
        )
        return po

    @staticmethod
    def _apply_transition(po_id, operation, apply):
        """Load the order and run ``apply(po)`` in one transaction."""
        po = PurchaseOrderService.get_purchase_order(po_id)
        try:
            with transaction.atomic():
                apply(po)
        except InvalidStateTransitionError:
            logger.warning("Rejected %s of %s in status %s", operation, po.po_number, po.status)
            raise
        except DatabaseError as exc:
            logger.error("Could not %s %s, rolled back", operation, po.po_number, exc_info=True)
            raise PersistenceFailure(f'{operation} purchase order', cause=exc) from exc
        return po

    @staticmethod
    def approve(po_id, user) -> PurchaseOrder:
        po = PurchaseOrderService._apply_transition(
            po_id, 'approve', lambda po: po.approve_po(user)
        )
        logger.info("Approved %s by user %s", po.po_number, user.pk)
        return po

    @staticmethod
    def cancel(po_id, user, reason='') -> PurchaseOrder:
        po = PurchaseOrderService._apply_transition(
            po_id, 'cancel', lambda po: po.cancel_po(reason, user)
        )
        logger.info("Cancelled %s by user %s", po.po_number, user.pk)
        return po
