from decimal import Decimal

from rest_framework import serializers

from .models import PurchaseOrder, PurchaseOrderLine


# ==================== LINE ITEM SERIALIZERS ====================

class PurchaseOrderLineSerializer(serializers.ModelSerializer):
    """Serializer for displaying PO line items."""
    sku = serializers.CharField(source='product.sku', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True, default=None)
    received_line_total = serializers.SerializerMethodField()

    class Meta:
        model = PurchaseOrderLine
        fields = [
            'id', 'product', 'sku', 'product_name',
            'quantity', 'unit_price', 'line_total',
            'received_quantity', 'received_unit_price', 'received_line_total',
            'warehouse', 'warehouse_name'
        ]
        read_only_fields = fields

    def get_received_line_total(self, obj):
        total = obj.received_line_total()
        return None if total is None else f"{total:.2f}"


class PurchaseOrderLineCreateSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))


# ==================== HEADER SERIALIZERS ====================

class PurchaseOrderListSerializer(serializers.ModelSerializer):
    vendor_name = serializers.CharField(source='vendor.company_name', read_only=True)
    line_count = serializers.IntegerField(source='lines.count', read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = [
            'id', 'po_number', 'vendor', 'vendor_name', 'status',
            'total_amount', 'received_total_amount', 'line_count',
            'created_at', 'received_at'
        ]


class PurchaseOrderDetailSerializer(serializers.ModelSerializer):
    vendor_name = serializers.CharField(source='vendor.company_name', read_only=True)
    lines = PurchaseOrderLineSerializer(many=True, read_only=True)
    goods_receipt = serializers.SerializerMethodField()

    class Meta:
        model = PurchaseOrder
        fields = [
            'id', 'po_number', 'vendor', 'vendor_name', 'status',
            'total_amount', 'received_total_amount', 'notes', 'bill_image_url',
            'created_by', 'created_at',
            'approved_by', 'approved_at',
            'cancelled_by', 'cancelled_at', 'cancellation_reason',
            'received_by', 'received_at',
            'lines', 'goods_receipt'
        ]
        read_only_fields = fields

    def get_goods_receipt(self, obj):
        receipt = getattr(obj, 'goods_receipt', None)
        if receipt is None:
            return None
        return {'id': receipt.id, 'grn_number': receipt.grn_number}


class PurchaseOrderCreateSerializer(serializers.Serializer):
    vendor_id = serializers.IntegerField()
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    lines = PurchaseOrderLineCreateSerializer(many=True, allow_empty=False)


class CancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class PurchaseOrderFilterSerializer(serializers.Serializer):
    """Query parameters of the purchase order list. Status is case-insensitive."""
    status = serializers.CharField(required=False, allow_blank=True)
    vendor_id = serializers.IntegerField(required=False)
    product_id = serializers.IntegerField(required=False)
    search = serializers.CharField(required=False, allow_blank=True)

    def validate_status(self, value):
        value = value.upper()
        if value and value not in dict(PurchaseOrder.STATUS_CHOICES):
            raise serializers.ValidationError(f"Unknown status '{value}'")
        return value


# ==================== RECEIVING ====================

class ReceivedItemSerializer(serializers.Serializer):
    """
    One row of a goods receipt. Rows with quantity 0 are dropped by the
    service, so price and warehouse are only checked there.
    """
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=0)
    unit_price = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    warehouse_id = serializers.IntegerField(required=False, allow_null=True)


class ReceiveGoodsSerializer(serializers.Serializer):
    """
    Request body for receiving a PO.

    With a bill image the request is multipart and ``items`` arrives as a
    JSON-encoded string, which JSONField decodes.
    """
    items = serializers.JSONField()
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    bill_image = serializers.FileField(required=False, allow_null=True)

    def validate_items(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("Items must be a list")

        items = ReceivedItemSerializer(data=value, many=True)
        if not items.is_valid():
            raise serializers.ValidationError(items.errors)
        return items.validated_data
