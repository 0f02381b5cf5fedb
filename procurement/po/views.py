"""
Purchase Order Views - API Endpoints

Thin wrappers over PurchaseOrderService / ReceivingService:
1. HTTP request/response
2. Authentication/Authorization
3. Pagination
4. Format conversion

Domain errors raised by the services (validation, not found, invalid status,
persistence failure) are turned into responses by the project exception
handler.
"""
from django.db.models import Count, Q, Sum
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.permissions.core_config import Action, Resource
from core.permissions.decorators import require_permission
from erp_project.pagination import auto_paginate
from erp_project.response_formatter import error_response, success_response
from procurement.receiving.dtos import ReceiveGoodsDTO, ReceivedItemDTO
from procurement.receiving.services import ReceivingService

from .dtos import PurchaseOrderCreateDTO, PurchaseOrderLineDTO
from .models import PurchaseOrder
from .serializers import (
    CancelSerializer,
    PurchaseOrderCreateSerializer,
    PurchaseOrderDetailSerializer,
    PurchaseOrderFilterSerializer,
    PurchaseOrderListSerializer,
    ReceiveGoodsSerializer,
)
from .services import PurchaseOrderService


def _detail(po_id):
    po = (
        PurchaseOrder.objects
        .select_related('vendor')
        .prefetch_related('lines__product', 'lines__warehouse')
        .get(pk=po_id)
    )
    return PurchaseOrderDetailSerializer(po).data


# ============================================================================
# PURCHASE ORDER VIEWS
# ============================================================================

@api_view(['GET', 'POST'])
@require_permission(Resource.VENDORS)
@auto_paginate
def po_list(request):
    """
    GET: List purchase orders, newest first

    Query Parameters:
    - status: PENDING | APPROVED | RECEIVED | CANCELLED
    - vendor_id: orders of one vendor
    - product_id: orders with a line for this product (purchase history)
    - search: PO number or vendor name contains

    POST: Create a purchase order
    { "vendor_id", "notes"?, "lines": [{ "product_id", "quantity", "unit_price" }] }
    """
    if request.method == 'GET':
        filters = PurchaseOrderFilterSerializer(data=request.query_params)
        if not filters.is_valid():
            return error_response(
                message="Invalid filters",
                data=filters.errors,
                status_code=status.HTTP_400_BAD_REQUEST
            )
        params = filters.validated_data

        queryset = PurchaseOrder.objects.select_related('vendor')
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if 'vendor_id' in params:
            queryset = queryset.filter(vendor_id=params['vendor_id'])
        if 'product_id' in params:
            queryset = queryset.filter(lines__product_id=params['product_id']).distinct()

        search = params.get('search')
        if search:
            queryset = queryset.filter(
                Q(po_number__icontains=search) |
                Q(vendor__company_name__icontains=search)
            )

        return Response(PurchaseOrderListSerializer(queryset, many=True).data)

    serializer = PurchaseOrderCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response(
            message="Invalid data provided",
            data=serializer.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )

    dto = PurchaseOrderCreateDTO(
        vendor_id=serializer.validated_data['vendor_id'],
        notes=serializer.validated_data['notes'],
        lines=[PurchaseOrderLineDTO(**line) for line in serializer.validated_data['lines']],
    )
    po = PurchaseOrderService.create(request.user, dto)
    return success_response(
        data=_detail(po.pk),
        message="Purchase order created successfully",
        status_code=status.HTTP_201_CREATED
    )


@api_view(['GET'])
@require_permission(Resource.VENDORS)
def po_detail(request, pk):
    """GET: Purchase order with its lines and goods receipt"""
    po = PurchaseOrderService.get_purchase_order(pk)
    return success_response(data=_detail(po.pk))


@api_view(['POST'])
@require_permission(Resource.VENDORS, Action.UPDATE)
def po_approve(request, pk):
    """POST: PENDING -> APPROVED"""
    po = PurchaseOrderService.approve(pk, request.user)
    return success_response(data=_detail(po.pk), message=f"{po.po_number} approved")


@api_view(['POST'])
@require_permission(Resource.VENDORS, Action.UPDATE)
def po_cancel(request, pk):
    """POST: PENDING / APPROVED -> CANCELLED  { "reason"? }"""
    serializer = CancelSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    po = PurchaseOrderService.cancel(pk, request.user, serializer.validated_data['reason'])
    return success_response(data=_detail(po.pk), message=f"{po.po_number} cancelled")


@api_view(['POST'])
@require_permission(Resource.VENDORS, Action.UPDATE)
def po_receive(request, pk):
    """
    POST: Receive goods against the order (GRN).

    JSON:      { "items": [{ "product_id", "quantity", "unit_price", "warehouse_id" }], "notes"? }
    Multipart: items (JSON string), notes, bill_image (JPEG / PNG / WebP)

    Items with quantity 0 are ignored. Returns the received order; the goods
    receipt is under data.goods_receipt.
    """
    serializer = ReceiveGoodsSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response(
            message="Invalid data provided",
            data=serializer.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )

    dto = ReceiveGoodsDTO(
        items=[ReceivedItemDTO(**item) for item in serializer.validated_data['items']],
        notes=serializer.validated_data['notes'],
        bill_image=serializer.validated_data.get('bill_image'),
    )
    receipt = ReceivingService.receive_goods(pk, dto, request.user)
    return success_response(
        data=_detail(receipt.purchase_order_id),
        message=f"Goods received ({receipt.grn_number})"
    )


@api_view(['GET'])
@require_permission(Resource.VENDORS, Action.VIEW)
def po_by_status(request):
    """GET: Order count and value per status (?vendor_id=)"""
    filters = PurchaseOrderFilterSerializer(data=request.query_params)
    if not filters.is_valid():
        return error_response(
            message="Invalid filters",
            data=filters.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )

    queryset = PurchaseOrder.objects.all()
    if 'vendor_id' in filters.validated_data:
        queryset = queryset.filter(vendor_id=filters.validated_data['vendor_id'])

    rows = {
        row['status']: row
        for row in queryset.order_by().values('status').annotate(
            count=Count('id'),
            total_amount=Sum('total_amount'),
            received_total_amount=Sum('received_total_amount'),
        )
    }
    data = []
    for code, label in PurchaseOrder.STATUS_CHOICES:
        row = rows.get(code, {})
        data.append({
            'status': code,
            'label': label,
            'count': row.get('count', 0),
            'total_amount': str(row.get('total_amount') or '0.00'),
            'received_total_amount': str(row.get('received_total_amount') or '0.00'),
        })
    return success_response(data=data)
