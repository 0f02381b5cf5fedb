from django.contrib import admin

from .models import Product, ProductStock, Warehouse


class ProductStockInline(admin.TabularInline):
    model = ProductStock
    extra = 0


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ['name', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['sku', 'name', 'category', 'price', 'cost_price', 'is_active']
    list_filter = ['category', 'is_active']
    search_fields = ['sku', 'name']
    inlines = [ProductStockInline]
