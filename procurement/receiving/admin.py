from django.contrib import admin

from .models import GoodsReceipt, GoodsReceiptLine


class GoodsReceiptLineInline(admin.TabularInline):
    model = GoodsReceiptLine
    extra = 0
    can_delete = False
    readonly_fields = ['po_line', 'product', 'warehouse', 'quantity_received', 'unit_price', 'line_total']


@admin.register(GoodsReceipt)
class GoodsReceiptAdmin(admin.ModelAdmin):
    list_display = ['grn_number', 'purchase_order', 'vendor', 'total_amount', 'received_by', 'received_at']
    search_fields = ['grn_number', 'purchase_order__po_number', 'vendor__company_name']
    inlines = [GoodsReceiptLineInline]

    def has_change_permission(self, request, obj=None):
        return False
