from django.contrib import admin

from .models import PurchaseOrder, PurchaseOrderLine


class PurchaseOrderLineInline(admin.TabularInline):
    model = PurchaseOrderLine
    extra = 0
    readonly_fields = ['line_total', 'received_quantity', 'received_unit_price', 'warehouse']


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['po_number', 'vendor', 'status', 'total_amount', 'received_total_amount', 'created_at']
    list_filter = ['status']
    search_fields = ['po_number', 'vendor__company_name']
    readonly_fields = [
        'po_number', 'status', 'total_amount', 'received_total_amount',
        'approved_by', 'approved_at', 'cancelled_by', 'cancelled_at',
        'received_by', 'received_at', 'bill_image_url'
    ]
    inlines = [PurchaseOrderLineInline]
