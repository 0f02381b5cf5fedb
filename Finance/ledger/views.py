"""
Finance Ledger Views - day book, manual expenses and daily P&L.
"""
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.permissions.core_config import Action, Resource
from core.permissions.decorators import require_permission
from erp_project.pagination import auto_paginate
from erp_project.response_formatter import error_response, success_response

from .serializers import (
    DailyPLSerializer,
    DayFilterSerializer,
    EntryFilterSerializer,
    ExpenseCreateSerializer,
    LedgerEntrySerializer,
)
from .services import LedgerService


@api_view(['GET'])
@require_permission(Resource.FINANCE, Action.VIEW)
@auto_paginate
def entry_list(request):
    """
    GET: Ledger entries, newest first.

    Query Parameters:
    - start_date, end_date: YYYY-MM-DD, inclusive (default: today)
    - entry_type: INCOME | EXPENSE | ASSET | LIABILITY
    """
    filters = EntryFilterSerializer(data=request.query_params)
    if not filters.is_valid():
        return error_response(
            message="Invalid filters",
            data=filters.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )

    today = timezone.localdate()
    entries = LedgerService.get_entries(
        filters.validated_data.get('start_date', today),
        filters.validated_data.get('end_date', today),
        filters.validated_data.get('entry_type'),
    )
    return Response(LedgerEntrySerializer(entries, many=True).data)


@api_view(['POST'])
@require_permission(Resource.FINANCE, Action.CREATE)
def expense_create(request):
    """
    POST: Record a manual expense.

    Request body: { "category", "amount", "description", "payment_method" }
    """
    serializer = ExpenseCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response(
            message="Invalid data provided",
            data=serializer.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )

    entry = LedgerService.create_expense(performed_by=request.user, **serializer.validated_data)
    return success_response(
        data=LedgerEntrySerializer(entry).data,
        message="Expense recorded successfully",
        status_code=status.HTTP_201_CREATED
    )


@api_view(['GET'])
@require_permission(Resource.FINANCE, Action.VIEW)
def daily_pl(request):
    """GET: Income, expense and net for ?date=YYYY-MM-DD (default: today)"""
    filters = DayFilterSerializer(data=request.query_params)
    if not filters.is_valid():
        return error_response(
            message="Invalid date",
            data=filters.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )

    day = filters.validated_data.get('date', timezone.localdate())
    return success_response(data=DailyPLSerializer(LedgerService.get_daily_pl(day)).data)
