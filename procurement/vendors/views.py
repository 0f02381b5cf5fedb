"""
Vendor Views - vendor records, payables and payment settlement.
"""
from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.permissions.core_config import Action, Resource
from core.permissions.decorators import require_permission
from erp_project.pagination import auto_paginate
from erp_project.response_formatter import error_response, success_response

from .dtos import VendorPaymentDTO
from .models import Vendor
from .serializers import (
    SettlePaymentSerializer,
    VendorListSerializer,
    VendorPaymentSerializer,
    VendorSerializer,
)
from .services import VendorService


@api_view(['GET', 'POST'])
@require_permission(Resource.VENDORS)
@auto_paginate
def vendor_list(request):
    """
    GET: List vendors, newest first

    Query Parameters:
    - is_active: true|false
    - category: exact category
    - search: company name, contact person or phone contains

    POST: Create a vendor (balance starts at 0)
    """
    if request.method == 'GET':
        queryset = Vendor.objects.all()

        is_active = request.query_params.get('is_active')
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() == 'true')

        category = request.query_params.get('category')
        if category:
            queryset = queryset.filter(category=category)

        search = request.query_params.get('search')
        if search:
            queryset = queryset.filter(
                Q(company_name__icontains=search) |
                Q(contact_person__icontains=search) |
                Q(phone__icontains=search)
            )

        return Response(VendorListSerializer(queryset, many=True).data)

    serializer = VendorSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response(
            message="Invalid data provided",
            data=serializer.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )
    vendor = serializer.save()
    return success_response(
        data=VendorSerializer(vendor).data,
        message="Vendor created successfully",
        status_code=status.HTTP_201_CREATED
    )


@api_view(['GET', 'PATCH'])
@require_permission(Resource.VENDORS)
def vendor_detail(request, pk):
    """
    GET: Retrieve a vendor
    PATCH: Update contact details / category / is_active (balance is read-only)
    """
    vendor = VendorService.get_vendor(pk)

    if request.method == 'GET':
        return success_response(data=VendorSerializer(vendor).data)

    serializer = VendorSerializer(vendor, data=request.data, partial=True)
    if not serializer.is_valid():
        return error_response(
            message="Invalid data provided",
            data=serializer.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )
    serializer.save()
    return success_response(data=serializer.data, message="Vendor updated successfully")


@api_view(['POST'])
@require_permission(Resource.VENDORS, Action.UPDATE)
def vendor_settle_payment(request, pk):
    """
    POST: Pay off (part of) the vendor's balance.

    Request body (JSON, or multipart when a receipt image is attached):
    { "amount", "payment_method", "notes"?, "receipt_image"? }
    """
    serializer = SettlePaymentSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response(
            message="Invalid data provided",
            data=serializer.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )

    payment = VendorService.settle_payment(pk, VendorPaymentDTO(**serializer.validated_data), request.user)
    return success_response(
        data=VendorPaymentSerializer(payment).data,
        message="Payment settled successfully",
        status_code=status.HTTP_201_CREATED
    )


@api_view(['GET'])
@require_permission(Resource.VENDORS, Action.VIEW)
@auto_paginate
def vendor_payments(request, pk):
    """GET: Payment history of a vendor, newest first"""
    vendor = VendorService.get_vendor(pk)
    payments = vendor.payments.select_related('paid_by')
    return Response(VendorPaymentSerializer(payments, many=True).data)
