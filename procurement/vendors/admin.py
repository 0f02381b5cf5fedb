from django.contrib import admin

from .models import Vendor, VendorPayment


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ['company_name', 'contact_person', 'phone', 'category', 'balance', 'is_active']
    list_filter = ['category', 'is_active']
    search_fields = ['company_name', 'contact_person', 'phone']
    readonly_fields = ['balance', 'created_at', 'updated_at']


@admin.register(VendorPayment)
class VendorPaymentAdmin(admin.ModelAdmin):
    list_display = ['vendor', 'amount', 'payment_method', 'balance_after', 'paid_by', 'created_at']
    list_filter = ['payment_method']

    def has_change_permission(self, request, obj=None):
        return False
