"""
Goods Receipt Views - read-only access to GRNs.

Receipts are created through POST /procurement/po/<id>/receive/.
"""
from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.base.exceptions import NotFoundError
from core.permissions.core_config import Action, Resource
from core.permissions.decorators import require_permission
from erp_project.pagination import auto_paginate
from erp_project.response_formatter import error_response, success_response

from .models import GoodsReceipt
from .serializers import (
    GoodsReceiptDetailSerializer,
    GoodsReceiptFilterSerializer,
    GoodsReceiptListSerializer,
)


@api_view(['GET'])
@require_permission(Resource.VENDORS, Action.VIEW)
@auto_paginate
def grn_list(request):
    """
    GET: List GRNs, newest first

    Query Parameters:
    - po_id: receipt of one purchase order
    - vendor_id: receipts from one vendor
    - date_from / date_to: received date range (YYYY-MM-DD, inclusive)
    - search: GRN number, PO number or vendor name contains
    """
    filters = GoodsReceiptFilterSerializer(data=request.query_params)
    if not filters.is_valid():
        return error_response(
            message="Invalid filters",
            data=filters.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )
    params = filters.validated_data

    queryset = GoodsReceipt.objects.select_related('purchase_order', 'vendor', 'received_by')
    if 'po_id' in params:
        queryset = queryset.filter(purchase_order_id=params['po_id'])
    if 'vendor_id' in params:
        queryset = queryset.filter(vendor_id=params['vendor_id'])
    if 'date_from' in params:
        queryset = queryset.filter(received_at__date__gte=params['date_from'])
    if 'date_to' in params:
        queryset = queryset.filter(received_at__date__lte=params['date_to'])

    search = params.get('search')
    if search:
        queryset = queryset.filter(
            Q(grn_number__icontains=search) |
            Q(purchase_order__po_number__icontains=search) |
            Q(vendor__company_name__icontains=search)
        )

    return Response(GoodsReceiptListSerializer(queryset, many=True).data)


@api_view(['GET'])
@require_permission(Resource.VENDORS, Action.VIEW)
def grn_detail(request, pk):
    """GET: GRN with its lines and ordered-vs-received summary"""
    try:
        grn = (
            GoodsReceipt.objects
            .select_related('purchase_order', 'vendor', 'received_by')
            .prefetch_related('lines__product', 'lines__warehouse', 'lines__po_line')
            .get(pk=pk)
        )
    except GoodsReceipt.DoesNotExist:
        raise NotFoundError('Goods receipt', pk)

    return success_response(data=GoodsReceiptDetailSerializer(grn).data)
