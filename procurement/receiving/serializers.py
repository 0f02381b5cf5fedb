from rest_framework import serializers

from .models import GoodsReceipt, GoodsReceiptLine


# ==================== LINE ITEM SERIALIZERS ====================

class GoodsReceiptLineSerializer(serializers.ModelSerializer):
    """Serializer for displaying GRN line items."""
    sku = serializers.CharField(source='product.sku', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True)
    quantity_ordered = serializers.IntegerField(source='po_line.quantity', read_only=True)
    ordered_unit_price = serializers.DecimalField(
        source='po_line.unit_price', max_digits=14, decimal_places=2, read_only=True
    )

    class Meta:
        model = GoodsReceiptLine
        fields = [
            'id', 'po_line', 'product', 'sku', 'product_name',
            'warehouse', 'warehouse_name',
            'quantity_ordered', 'quantity_received',
            'ordered_unit_price', 'unit_price', 'line_total'
        ]
        read_only_fields = fields


# ==================== HEADER SERIALIZERS ====================

class GoodsReceiptListSerializer(serializers.ModelSerializer):
    po_number = serializers.CharField(source='purchase_order.po_number', read_only=True)
    vendor_name = serializers.CharField(source='vendor.company_name', read_only=True)
    received_by_name = serializers.CharField(source='received_by.name', read_only=True)

    class Meta:
        model = GoodsReceipt
        fields = [
            'id', 'grn_number', 'purchase_order', 'po_number',
            'vendor', 'vendor_name', 'total_amount',
            'received_by', 'received_by_name', 'received_at'
        ]


class GoodsReceiptDetailSerializer(serializers.ModelSerializer):
    po_number = serializers.CharField(source='purchase_order.po_number', read_only=True)
    vendor_name = serializers.CharField(source='vendor.company_name', read_only=True)
    received_by_name = serializers.CharField(source='received_by.name', read_only=True)
    lines = GoodsReceiptLineSerializer(many=True, read_only=True)
    summary = serializers.SerializerMethodField()

    class Meta:
        model = GoodsReceipt
        fields = [
            'id', 'grn_number', 'purchase_order', 'po_number',
            'vendor', 'vendor_name', 'total_amount', 'bill_image_url', 'notes',
            'received_by', 'received_by_name', 'received_at',
            'lines', 'summary'
        ]

    def get_summary(self, obj):
        summary = obj.get_receipt_summary()
        for key in ('ordered_amount', 'received_amount', 'difference'):
            summary[key] = f"{summary[key]:.2f}"
        return summary


class GoodsReceiptFilterSerializer(serializers.Serializer):
    po_id = serializers.IntegerField(required=False)
    vendor_id = serializers.IntegerField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    search = serializers.CharField(required=False, allow_blank=True)
