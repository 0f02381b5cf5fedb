"""
Goods receipt (GRN) processing.

Receiving a purchase order is one atomic unit: the order's status flip,
the per-line received quantities and prices, the stock increments, the
vendor balance increase and the GoodsReceipt record commit together or not
at all.

The order row is locked with select_for_update and the status is flipped
with a compare-and-set, so of two concurrent receipts of the same order
exactly one succeeds; the other fails with InvalidStateTransitionError and
credits nothing. The one-to-one GoodsReceipt -> PurchaseOrder link backs this
up at the database level.

Known gap: there is no idempotency token. A client that retries after a
lost response gets InvalidStateTransitionError rather than the original
result and has to re-read the order to see that it was received.
"""
import logging
from decimal import Decimal
from typing import List, Tuple

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import F

from core.base.exceptions import InvalidStateTransitionError, PersistenceFailure
from core.storage.services import delete_image, upload_image
from inventory.models import Warehouse
from inventory.services import StockService
from procurement.po.models import PurchaseOrder, PurchaseOrderLine
from procurement.po.services import PurchaseOrderService
from procurement.vendors.models import Vendor
from .dtos import ReceiveGoodsDTO, ReceivedItemDTO
from .models import GoodsReceipt, GoodsReceiptLine

logger = logging.getLogger(__name__)

ValidatedItem = Tuple[PurchaseOrderLine, ReceivedItemDTO, Warehouse]


class ReceivingService:
    """Service layer for receiving purchase orders"""

    @staticmethod
    def validate_items(po: PurchaseOrder, items: List[ReceivedItemDTO]) -> List[ValidatedItem]:
        """
        Drop zero-quantity rows and check the rest against the order.

        Every remaining row needs quantity > 0, unit price > 0, an existing
        warehouse and a product that is on the order. A product may appear
        only once.

        Raises:
            ValidationError: nothing left to receive, or a row is invalid
            NotFoundError: a warehouse does not exist
        """
        lines_by_product = {line.product_id: line for line in po.lines.select_related('product')}
        to_receive = [item for item in items if item.quantity]

        if not to_receive:
            raise ValidationError({
                'items': 'Specify received quantity, unit price and warehouse for at least one item'
            })

        validated = []
        seen = set()
        for item in to_receive:
            line = lines_by_product.get(item.product_id)
            if line is None:
                raise ValidationError({
                    'items': f"Product {item.product_id} is not on purchase order {po.po_number}"
                })
            if item.product_id in seen:
                raise ValidationError({'items': f"Product {line.product.sku} is listed more than once"})
            seen.add(item.product_id)

            if item.quantity < 0:
                raise ValidationError({'items': f"{line.product.sku}: quantity must be greater than 0"})
            if item.unit_price is None or Decimal(item.unit_price) <= 0:
                raise ValidationError({'items': f"{line.product.sku}: unit price must be greater than 0"})
            if item.warehouse_id is None:
                raise ValidationError({'items': f"{line.product.sku}: warehouse is required"})

            warehouse = StockService.get_warehouse(item.warehouse_id)
            validated.append((line, item, warehouse))

        return validated

    @staticmethod
    def receive_goods(po_id, dto: ReceiveGoodsDTO, user) -> GoodsReceipt:
        """
        Receive a PENDING or APPROVED purchase order.

        The bill image, if any, is uploaded before the transaction; an upload
        failure aborts before anything is written, and the image is removed
        again if the transaction does not commit.

        Raises:
            NotFoundError: order or warehouse does not exist
            InvalidStateTransitionError: order is not PENDING / APPROVED (also
                when another receipt won the race)
            ValidationError: invalid items
            UploadError: bill image rejected
            PersistenceFailure: the database write failed; nothing was saved
        """
        po = PurchaseOrderService.get_purchase_order(po_id)
        if not po.is_receivable():
            logger.warning("Rejected receive of %s in status %s", po.po_number, po.status)
            raise InvalidStateTransitionError('purchase order', po.status, 'receive')

        items = ReceivingService.validate_items(po, dto.items)

        bill_image_url = ''
        if dto.bill_image is not None:
            bill_image_url = upload_image(dto.bill_image, f"grn-bills/{po.pk}")

        try:
            with transaction.atomic():
                receipt = ReceivingService._apply_receipt(po, items, user, bill_image_url, dto.notes or '')
        except InvalidStateTransitionError:
            delete_image(bill_image_url)
            logger.warning("Concurrent receive of %s rejected", po.po_number)
            raise
        except ValidationError:
            delete_image(bill_image_url)
            raise
        except DatabaseError as exc:
            delete_image(bill_image_url)
            logger.error("Receiving %s failed, rolled back", po.po_number, exc_info=True)
            raise PersistenceFailure('receive goods', cause=exc) from exc

        logger.info(
            "Received %s as %s: %s items, total %s (ordered %s) by user %s",
            po.po_number, receipt.grn_number, len(items),
            receipt.total_amount, po.total_amount, user.pk
        )
        return receipt

    @staticmethod
    def _apply_receipt(po, items: List[ValidatedItem], user, bill_image_url, notes) -> GoodsReceipt:
        """All writes of a receipt. Must run inside transaction.atomic()."""
        po = PurchaseOrder.objects.select_for_update().get(pk=po.pk)

        received_total = sum(
            (item.quantity * Decimal(item.unit_price) for _, item, _ in items),
            Decimal('0.00')
        )

        # Compare-and-set on status; raises when another receipt got here first
        po.mark_received(user, received_total, bill_image_url)

        received_by_line = {line.pk: (item, warehouse) for line, item, warehouse in items}
        for line in po.lines.select_related('product'):
            item, warehouse = received_by_line.get(line.pk, (None, None))
            if item is None:
                line.received_quantity = 0
                line.received_unit_price = line.unit_price
                line.warehouse = None
            else:
                line.received_quantity = item.quantity
                line.received_unit_price = Decimal(item.unit_price)
                line.warehouse = warehouse
                StockService.increase_stock(line.product, warehouse, item.quantity)
            line.save(update_fields=['received_quantity', 'received_unit_price', 'warehouse'])

        Vendor.objects.filter(pk=po.vendor_id).update(balance=F('balance') + received_total)

        receipt = GoodsReceipt.objects.create(
            purchase_order=po,
            vendor_id=po.vendor_id,
            total_amount=received_total,
            bill_image_url=bill_image_url,
            notes=notes,
            received_by=user,
            received_at=po.received_at,
        )
        for line, item, warehouse in items:
            GoodsReceiptLine.objects.create(
                goods_receipt=receipt,
                po_line=line,
                product_id=line.product_id,
                warehouse=warehouse,
                quantity_received=item.quantity,
                unit_price=Decimal(item.unit_price),
            )
        return receipt
