from django.contrib import admin

from .models import LedgerEntry


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    list_display = ['date', 'entry_type', 'category', 'amount', 'payment_method', 'performed_by']
    list_filter = ['entry_type', 'category', 'payment_method']
    search_fields = ['description', 'related_id']
    date_hierarchy = 'date'

    def has_change_permission(self, request, obj=None):
        return False
