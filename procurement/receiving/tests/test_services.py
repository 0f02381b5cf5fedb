"""
Tests for ReceivingService.receive_goods.

Covers the full receipt (stock, lines, vendor balance, status, GRN), the
status guard, item validation and the all-or-nothing behaviour when the
upload or the database write fails.
"""
from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone

from core.base.exceptions import InvalidStateTransitionError, NotFoundError, PersistenceFailure
from core.storage.services import UploadError
from core.storage.tests.fixtures import create_image_file, create_text_file
from inventory.tests.fixtures import create_product, create_warehouse, set_stock, stock_of
from procurement.po.models import PurchaseOrder
from procurement.po.services import PurchaseOrderService
from procurement.po.tests.fixtures import create_standard_scenario
from procurement.receiving.models import GoodsReceipt, GoodsReceiptLine
from procurement.receiving.services import ReceivingService
from procurement.vendors.tests.fixtures import balance_of
from .fixtures import receive_dto, received_item


class ReceiveGoodsBase(TestCase):

    def setUp(self):
        scenario = create_standard_scenario()
        self.user = scenario['user']
        self.vendor = scenario['vendor']
        self.product_a = scenario['product_a']
        self.product_b = scenario['product_b']
        self.warehouse = scenario['warehouse']
        self.po = scenario['po']

    def assert_nothing_received(self):
        po = PurchaseOrder.objects.get(pk=self.po.pk)
        self.assertEqual(po.status, PurchaseOrder.PENDING)
        self.assertIsNone(po.received_total_amount)
        self.assertIsNone(po.received_at)
        self.assertEqual(po.bill_image_url, '')
        for line in po.lines.all():
            self.assertIsNone(line.received_quantity)
            self.assertIsNone(line.warehouse_id)
        self.assertEqual(stock_of(self.product_a, self.warehouse), 0)
        self.assertEqual(stock_of(self.product_b, self.warehouse), 0)
        self.assertEqual(balance_of(self.vendor), Decimal('0.00'))
        self.assertFalse(GoodsReceipt.objects.exists())


class ReceiveGoodsTests(ReceiveGoodsBase):

    def test_partial_delivery_at_new_price(self):
        """Ordered A 10 @ 100 and B 5 @ 50; got A 10 @ 110 only."""
        receipt = ReceivingService.receive_goods(
            self.po.id,
            receive_dto(
                received_item(self.product_a, 10, '110.00', self.warehouse),
                received_item(self.product_b, 0),
            ),
            self.user
        )

        po = PurchaseOrder.objects.get(pk=self.po.pk)
        self.assertEqual(po.status, PurchaseOrder.RECEIVED)
        self.assertEqual(po.total_amount, Decimal('1250.00'))
        self.assertEqual(po.received_total_amount, Decimal('1100.00'))
        self.assertEqual(po.received_by, self.user)
        self.assertIsNotNone(po.received_at)

        self.assertEqual(stock_of(self.product_a, self.warehouse), 10)
        self.assertEqual(stock_of(self.product_b, self.warehouse), 0)
        self.assertEqual(balance_of(self.vendor), Decimal('1100.00'))

        line_a = po.lines.get(product=self.product_a)
        self.assertEqual(line_a.received_quantity, 10)
        self.assertEqual(line_a.received_unit_price, Decimal('110.00'))
        self.assertEqual(line_a.warehouse, self.warehouse)

        line_b = po.lines.get(product=self.product_b)
        self.assertEqual(line_b.received_quantity, 0)
        self.assertEqual(line_b.received_unit_price, Decimal('50.00'))
        self.assertIsNone(line_b.warehouse)

        self.assertEqual(receipt.total_amount, Decimal('1100.00'))
        self.assertEqual(receipt.grn_number, f'GRN-{timezone.localdate().year}-00001')
        self.assertEqual(receipt.lines.count(), 1)
        self.assertEqual(receipt.lines.get().line_total, Decimal('1100.00'))

    def test_omitted_lines_are_recorded_as_not_received(self):
        ReceivingService.receive_goods(
            self.po.id,
            receive_dto(received_item(self.product_b, 5, '50.00', self.warehouse)),
            self.user
        )
        line_a = PurchaseOrder.objects.get(pk=self.po.pk).lines.get(product=self.product_a)
        self.assertEqual(line_a.received_quantity, 0)
        self.assertEqual(line_a.received_unit_price, Decimal('100.00'))
        self.assertEqual(balance_of(self.vendor), Decimal('250.00'))

    def test_received_total_matches_lines(self):
        ReceivingService.receive_goods(
            self.po.id,
            receive_dto(
                received_item(self.product_a, 8, '95.50', self.warehouse),
                received_item(self.product_b, 5, '50.00', self.warehouse),
            ),
            self.user
        )
        po = PurchaseOrder.objects.get(pk=self.po.pk)
        expected = sum(line.received_line_total() for line in po.lines.all())
        self.assertEqual(po.received_total_amount, expected)
        self.assertEqual(po.received_total_amount, Decimal('1014.00'))

    def test_adds_to_existing_stock_across_warehouses(self):
        back_store = create_warehouse(name='Back Store')
        set_stock(self.product_a, self.warehouse, 3)
        ReceivingService.receive_goods(
            self.po.id,
            receive_dto(
                received_item(self.product_a, 10, '100.00', self.warehouse),
                received_item(self.product_b, 5, '50.00', back_store),
            ),
            self.user
        )
        self.assertEqual(stock_of(self.product_a, self.warehouse), 13)
        self.assertEqual(stock_of(self.product_b, back_store), 5)
        self.assertEqual(stock_of(self.product_b, self.warehouse), 0)

    def test_receive_approved_order(self):
        PurchaseOrderService.approve(self.po.id, self.user)
        ReceivingService.receive_goods(
            self.po.id,
            receive_dto(received_item(self.product_a, 10, '100.00', self.warehouse)),
            self.user
        )
        self.assertEqual(PurchaseOrder.objects.get(pk=self.po.pk).status, PurchaseOrder.RECEIVED)

    def test_bill_image_stored_on_order_and_receipt(self):
        receipt = ReceivingService.receive_goods(
            self.po.id,
            receive_dto(
                received_item(self.product_a, 10, '100.00', self.warehouse),
                bill_image=create_image_file('bill.png')
            ),
            self.user
        )
        po = PurchaseOrder.objects.get(pk=self.po.pk)
        self.assertIn(f'grn-bills/{self.po.id}/', po.bill_image_url)
        self.assertEqual(receipt.bill_image_url, po.bill_image_url)


class ReceiveGoodsStatusTests(ReceiveGoodsBase):

    def test_second_receive_fails_and_credits_once(self):
        ReceivingService.receive_goods(
            self.po.id,
            receive_dto(received_item(self.product_a, 10, '110.00', self.warehouse)),
            self.user
        )
        with self.assertRaises(InvalidStateTransitionError):
            ReceivingService.receive_goods(
                self.po.id,
                receive_dto(received_item(self.product_a, 10, '110.00', self.warehouse)),
                self.user
            )
        self.assertEqual(stock_of(self.product_a, self.warehouse), 10)
        self.assertEqual(balance_of(self.vendor), Decimal('1100.00'))
        self.assertEqual(GoodsReceipt.objects.count(), 1)

    def test_concurrent_receipt_committed_first(self):
        """Another receipt commits between our status check and our lock."""
        real_get = PurchaseOrderService.get_purchase_order

        def get_then_lose_race(po_id):
            po = real_get(po_id)
            PurchaseOrder.objects.filter(pk=po_id).update(status=PurchaseOrder.RECEIVED)
            return po

        with mock.patch.object(PurchaseOrderService, 'get_purchase_order', side_effect=get_then_lose_race):
            with self.assertRaises(InvalidStateTransitionError):
                ReceivingService.receive_goods(
                    self.po.id,
                    receive_dto(received_item(self.product_a, 10, '100.00', self.warehouse)),
                    self.user
                )

        self.assertEqual(stock_of(self.product_a, self.warehouse), 0)
        self.assertEqual(balance_of(self.vendor), Decimal('0.00'))
        self.assertFalse(GoodsReceipt.objects.exists())

    def test_cancelled_order_cannot_be_received(self):
        PurchaseOrderService.cancel(self.po.id, self.user, 'No longer needed')
        with self.assertRaises(InvalidStateTransitionError):
            ReceivingService.receive_goods(
                self.po.id,
                receive_dto(received_item(self.product_a, 10, '100.00', self.warehouse)),
                self.user
            )
        self.assertEqual(stock_of(self.product_a, self.warehouse), 0)
        self.assertEqual(balance_of(self.vendor), Decimal('0.00'))

    def test_cancel_has_no_side_effects(self):
        PurchaseOrderService.cancel(self.po.id, self.user)
        po = PurchaseOrder.objects.get(pk=self.po.pk)
        self.assertEqual(po.status, PurchaseOrder.CANCELLED)
        self.assertEqual(balance_of(self.vendor), Decimal('0.00'))
        self.assertEqual(stock_of(self.product_a, self.warehouse), 0)

    def test_unknown_order(self):
        with self.assertRaises(NotFoundError):
            ReceivingService.receive_goods(
                99999,
                receive_dto(received_item(self.product_a, 1, '1.00', self.warehouse)),
                self.user
            )


class ReceiveGoodsValidationTests(ReceiveGoodsBase):

    def _receive(self, *items):
        return ReceivingService.receive_goods(self.po.id, receive_dto(*items), self.user)

    def test_all_zero_quantities(self):
        with self.assertRaises(ValidationError):
            self._receive(received_item(self.product_a, 0), received_item(self.product_b, 0))
        self.assert_nothing_received()

    def test_empty_items(self):
        with self.assertRaises(ValidationError):
            self._receive()
        self.assert_nothing_received()

    def test_product_not_on_order(self):
        other = create_product(sku='SKU-C', name='Product C')
        with self.assertRaises(ValidationError):
            self._receive(
                received_item(self.product_a, 10, '100.00', self.warehouse),
                received_item(other, 1, '5.00', self.warehouse),
            )
        self.assert_nothing_received()

    def test_missing_warehouse(self):
        with self.assertRaises(ValidationError):
            self._receive(received_item(self.product_a, 10, '100.00'))
        self.assert_nothing_received()

    def test_unknown_warehouse(self):
        with self.assertRaises(NotFoundError):
            self._receive(received_item(self.product_a, 10, '100.00', mock.Mock(id=99999)))
        self.assert_nothing_received()

    def test_zero_price(self):
        with self.assertRaises(ValidationError):
            self._receive(received_item(self.product_a, 10, '0', self.warehouse))
        self.assert_nothing_received()

    def test_duplicate_product(self):
        with self.assertRaises(ValidationError):
            self._receive(
                received_item(self.product_a, 4, '100.00', self.warehouse),
                received_item(self.product_a, 6, '100.00', self.warehouse),
            )
        self.assert_nothing_received()

    def test_one_bad_row_fails_the_whole_receipt(self):
        with self.assertRaises(ValidationError):
            self._receive(
                received_item(self.product_a, 10, '100.00', self.warehouse),
                received_item(self.product_b, 5, None, self.warehouse),
            )
        self.assert_nothing_received()


class ReceiveGoodsFailureTests(ReceiveGoodsBase):

    def test_database_failure_leaves_no_partial_state(self):
        with mock.patch.object(GoodsReceipt.objects, 'create', side_effect=DatabaseError('connection lost')):
            with self.assertRaises(PersistenceFailure) as ctx:
                ReceivingService.receive_goods(
                    self.po.id,
                    receive_dto(
                        received_item(self.product_a, 10, '110.00', self.warehouse),
                        received_item(self.product_b, 5, '50.00', self.warehouse),
                    ),
                    self.user
                )
        self.assertTrue(ctx.exception.retryable)
        self.assert_nothing_received()
        self.assertFalse(GoodsReceiptLine.objects.exists())

    def test_retry_after_database_failure_succeeds(self):
        items = (received_item(self.product_a, 10, '110.00', self.warehouse),)
        with mock.patch.object(GoodsReceipt.objects, 'create', side_effect=DatabaseError('deadlock')):
            with self.assertRaises(PersistenceFailure):
                ReceivingService.receive_goods(self.po.id, receive_dto(*items), self.user)

        ReceivingService.receive_goods(self.po.id, receive_dto(*items), self.user)
        self.assertEqual(balance_of(self.vendor), Decimal('1100.00'))
        self.assertEqual(stock_of(self.product_a, self.warehouse), 10)

    def test_database_failure_removes_uploaded_bill(self):
        with mock.patch.object(GoodsReceipt.objects, 'create', side_effect=DatabaseError('disk full')), \
                mock.patch('procurement.receiving.services.delete_image') as delete_image:
            with self.assertRaises(PersistenceFailure):
                ReceivingService.receive_goods(
                    self.po.id,
                    receive_dto(
                        received_item(self.product_a, 10, '110.00', self.warehouse),
                        bill_image=create_image_file('bill.png')
                    ),
                    self.user
                )
        delete_image.assert_called_once()
        self.assertIn(f'grn-bills/{self.po.id}/', delete_image.call_args[0][0])

    def test_rejected_bill_image_changes_nothing(self):
        with self.assertRaises(UploadError):
            ReceivingService.receive_goods(
                self.po.id,
                receive_dto(
                    received_item(self.product_a, 10, '110.00', self.warehouse),
                    bill_image=create_text_file()
                ),
                self.user
            )
        self.assert_nothing_received()

    def test_storage_failure_changes_nothing(self):
        with mock.patch(
            'django.core.files.storage.FileSystemStorage.save',
            side_effect=OSError('bucket unavailable')
        ):
            with self.assertRaises(UploadError):
                ReceivingService.receive_goods(
                    self.po.id,
                    receive_dto(
                        received_item(self.product_a, 10, '110.00', self.warehouse),
                        bill_image=create_image_file('bill.png')
                    ),
                    self.user
                )
        self.assert_nothing_received()
