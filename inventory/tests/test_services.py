"""
Tests for StockService.
"""
from django.core.exceptions import ValidationError
from django.test import TestCase

from core.base.exceptions import NotFoundError
from inventory.services import StockService
from .fixtures import create_product, create_warehouse, set_stock, stock_of


class IncreaseStockTests(TestCase):

    def setUp(self):
        self.product = create_product()
        self.warehouse = create_warehouse()

    def test_creates_row_on_first_receipt(self):
        stock = StockService.increase_stock(self.product, self.warehouse, 10)
        self.assertEqual(stock.quantity, 10)
        self.assertEqual(stock_of(self.product, self.warehouse), 10)

    def test_adds_to_existing_row(self):
        set_stock(self.product, self.warehouse, 4)
        StockService.increase_stock(self.product, self.warehouse, 6)
        self.assertEqual(stock_of(self.product, self.warehouse), 10)

    def test_rejects_non_positive_quantity(self):
        for bad in (0, -3):
            with self.assertRaises(ValidationError):
                StockService.increase_stock(self.product, self.warehouse, bad)
        self.assertEqual(stock_of(self.product, self.warehouse), 0)


class DecreaseStockTests(TestCase):

    def setUp(self):
        self.product = create_product()
        self.warehouse = create_warehouse()
        set_stock(self.product, self.warehouse, 5)

    def test_decrease(self):
        stock = StockService.decrease_stock(self.product, self.warehouse, 3)
        self.assertEqual(stock.quantity, 2)

    def test_decrease_to_zero(self):
        StockService.decrease_stock(self.product, self.warehouse, 5)
        self.assertEqual(stock_of(self.product, self.warehouse), 0)

    def test_cannot_go_negative(self):
        with self.assertRaises(ValidationError):
            StockService.decrease_stock(self.product, self.warehouse, 6)
        self.assertEqual(stock_of(self.product, self.warehouse), 5)

    def test_no_row_means_no_stock(self):
        other = create_warehouse(name='Back Store')
        with self.assertRaises(ValidationError):
            StockService.decrease_stock(self.product, other, 1)


class AdjustAndQueryTests(TestCase):

    def setUp(self):
        self.a = create_product(sku='SKU-A', name='Product A')
        self.b = create_product(sku='SKU-B', name='Product B')
        self.warehouse = create_warehouse()

    def test_adjust_signed_delta(self):
        StockService.adjust_stock(self.a, self.warehouse, 7)
        StockService.adjust_stock(self.a, self.warehouse, -2)
        self.assertEqual(stock_of(self.a, self.warehouse), 5)

    def test_adjust_zero_rejected(self):
        with self.assertRaises(ValidationError):
            StockService.adjust_stock(self.a, self.warehouse, 0)

    def test_products_by_warehouse_skips_empty_rows(self):
        set_stock(self.a, self.warehouse, 3)
        set_stock(self.b, self.warehouse, 0)
        skus = [row.product.sku for row in StockService.products_by_warehouse(self.warehouse)]
        self.assertEqual(skus, ['SKU-A'])

    def test_low_stock(self):
        set_stock(self.a, self.warehouse, 2, min_quantity=5)
        set_stock(self.b, self.warehouse, 20, min_quantity=5)
        skus = [row.product.sku for row in StockService.low_stock()]
        self.assertEqual(skus, ['SKU-A'])

    def test_unknown_warehouse(self):
        with self.assertRaises(NotFoundError):
            StockService.get_warehouse(99999)
