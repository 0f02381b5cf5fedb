from rest_framework import serializers

from .models import Product, ProductStock, Warehouse


class WarehouseSerializer(serializers.ModelSerializer):
    class Meta:
        model = Warehouse
        fields = ['id', 'name', 'address', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class ProductStockSerializer(serializers.ModelSerializer):
    """Stock row as shown under a product."""
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True)

    class Meta:
        model = ProductStock
        fields = ['id', 'warehouse', 'warehouse_name', 'quantity', 'position', 'min_quantity']
        read_only_fields = fields


class WarehouseStockSerializer(serializers.ModelSerializer):
    """Stock row as shown under a warehouse or in the low stock list."""
    product_id = serializers.IntegerField(source='product.id', read_only=True)
    sku = serializers.CharField(source='product.sku', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True)

    class Meta:
        model = ProductStock
        fields = [
            'id', 'product_id', 'sku', 'product_name',
            'warehouse', 'warehouse_name', 'quantity', 'position', 'min_quantity'
        ]
        read_only_fields = fields


class ProductListSerializer(serializers.ModelSerializer):
    total_stock = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ['id', 'sku', 'name', 'category', 'price', 'cost_price', 'is_active', 'total_stock']

    def get_total_stock(self, obj):
        return obj.total_stock()


class ProductDetailSerializer(serializers.ModelSerializer):
    stock = ProductStockSerializer(source='stock_entries', many=True, read_only=True)
    total_stock = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            'id', 'sku', 'name', 'description', 'category',
            'price', 'cost_price', 'is_active',
            'total_stock', 'stock', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_total_stock(self, obj):
        return obj.total_stock()


class ProductCreateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ['sku', 'name', 'description', 'category', 'price', 'cost_price', 'is_active']


class StockAdjustSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    warehouse_id = serializers.IntegerField()
    delta = serializers.IntegerField()

    def validate_delta(self, value):
        if value == 0:
            raise serializers.ValidationError("Adjustment must be non-zero")
        return value
