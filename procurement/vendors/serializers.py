from decimal import Decimal

from rest_framework import serializers

from Finance.ledger.models import LedgerEntry
from .models import Vendor, VendorPayment


class VendorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vendor
        fields = [
            'id', 'company_name', 'contact_person', 'phone', 'email', 'address',
            'category', 'balance', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'balance', 'created_at', 'updated_at']


class VendorListSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vendor
        fields = ['id', 'company_name', 'contact_person', 'phone', 'category', 'balance', 'is_active']


class VendorPaymentSerializer(serializers.ModelSerializer):
    paid_by_name = serializers.CharField(source='paid_by.name', read_only=True)

    class Meta:
        model = VendorPayment
        fields = [
            'id', 'vendor', 'amount', 'payment_method', 'notes', 'receipt_image_url',
            'balance_after', 'ledger_entry', 'paid_by', 'paid_by_name', 'created_at'
        ]
        read_only_fields = fields


class SettlePaymentSerializer(serializers.Serializer):
    """Request body for settling a vendor balance (JSON or multipart)"""
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    payment_method = serializers.ChoiceField(choices=LedgerEntry.PAYMENT_METHOD_CHOICES)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    receipt_image = serializers.FileField(required=False, allow_null=True)
