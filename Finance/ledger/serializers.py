from decimal import Decimal

from rest_framework import serializers

from .models import LedgerEntry


class LedgerEntrySerializer(serializers.ModelSerializer):
    performed_by_name = serializers.CharField(source='performed_by.name', read_only=True)

    class Meta:
        model = LedgerEntry
        fields = [
            'id', 'date', 'entry_type', 'category', 'amount', 'description',
            'related_id', 'payment_method', 'performed_by', 'performed_by_name',
            'created_at'
        ]
        read_only_fields = fields


class ExpenseCreateSerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=LedgerEntry.CATEGORY_CHOICES)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    description = serializers.CharField(max_length=500)
    payment_method = serializers.ChoiceField(choices=LedgerEntry.PAYMENT_METHOD_CHOICES)


class EntryFilterSerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    entry_type = serializers.ChoiceField(choices=LedgerEntry.ENTRY_TYPE_CHOICES, required=False)


class DayFilterSerializer(serializers.Serializer):
    date = serializers.DateField(required=False)


class DailyPLSerializer(serializers.Serializer):
    date = serializers.DateField()
    income = serializers.DecimalField(max_digits=14, decimal_places=2)
    expense = serializers.DecimalField(max_digits=14, decimal_places=2)
    net = serializers.DecimalField(max_digits=14, decimal_places=2)
