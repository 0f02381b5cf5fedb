"""
Inventory Views - warehouses, products and stock.
"""
from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.permissions.core_config import Action, Resource
from core.permissions.decorators import require_permission
from erp_project.pagination import auto_paginate
from erp_project.response_formatter import error_response, success_response

from .models import Product, Warehouse
from .serializers import (
    ProductCreateSerializer,
    ProductDetailSerializer,
    ProductListSerializer,
    StockAdjustSerializer,
    WarehouseSerializer,
    WarehouseStockSerializer,
)
from .services import StockService


@api_view(['GET', 'POST'])
@require_permission(Resource.INVENTORY)
@auto_paginate
def warehouse_list(request):
    """
    GET: List warehouses (?is_active=true|false)
    POST: Create a warehouse
    """
    if request.method == 'GET':
        queryset = Warehouse.objects.all()
        is_active = request.query_params.get('is_active')
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() == 'true')
        return Response(WarehouseSerializer(queryset, many=True).data)

    serializer = WarehouseSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response(
            message="Invalid data provided",
            data=serializer.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )
    warehouse = serializer.save()
    return success_response(
        data=WarehouseSerializer(warehouse).data,
        message="Warehouse created successfully",
        status_code=status.HTTP_201_CREATED
    )


@api_view(['GET', 'POST'])
@require_permission(Resource.INVENTORY)
@auto_paginate
def product_list(request):
    """
    GET: List products

    Query Parameters:
    - category: exact category
    - search: name or sku contains
    - is_active: true|false

    POST: Create a product
    """
    if request.method == 'GET':
        queryset = Product.objects.all()

        category = request.query_params.get('category')
        if category:
            queryset = queryset.filter(category=category)

        search = request.query_params.get('search')
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(sku__icontains=search))

        is_active = request.query_params.get('is_active')
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() == 'true')

        return Response(ProductListSerializer(queryset, many=True).data)

    serializer = ProductCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response(
            message="Invalid data provided",
            data=serializer.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )
    product = serializer.save()
    return success_response(
        data=ProductDetailSerializer(product).data,
        message="Product created successfully",
        status_code=status.HTTP_201_CREATED
    )


@api_view(['GET'])
@require_permission(Resource.INVENTORY)
def product_detail(request, pk):
    """GET: Product with its stock per warehouse"""
    product = StockService.get_product(pk)
    return success_response(data=ProductDetailSerializer(product).data)


@api_view(['GET'])
@require_permission(Resource.INVENTORY)
@auto_paginate
def warehouse_products(request, pk):
    """GET: Products with stock on hand in a warehouse"""
    warehouse = StockService.get_warehouse(pk)
    stock = StockService.products_by_warehouse(warehouse)
    return Response(WarehouseStockSerializer(stock, many=True).data)


@api_view(['GET'])
@require_permission(Resource.INVENTORY)
@auto_paginate
def low_stock(request):
    """GET: Stock rows at or below their threshold (?warehouse_id=)"""
    warehouse = None
    warehouse_id = request.query_params.get('warehouse_id')
    if warehouse_id:
        warehouse = StockService.get_warehouse(warehouse_id)
    stock = StockService.low_stock(warehouse)
    return Response(WarehouseStockSerializer(stock, many=True).data)


@api_view(['POST'])
@require_permission(Resource.INVENTORY, Action.UPDATE)
def stock_adjust(request):
    """
    POST: Apply a manual stock correction.

    Request body: { "product_id", "warehouse_id", "delta" } (delta may be negative)
    """
    serializer = StockAdjustSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response(
            message="Invalid data provided",
            data=serializer.errors,
            status_code=status.HTTP_400_BAD_REQUEST
        )

    product = StockService.get_product(serializer.validated_data['product_id'])
    warehouse = StockService.get_warehouse(serializer.validated_data['warehouse_id'])
    stock = StockService.adjust_stock(product, warehouse, serializer.validated_data['delta'])
    return success_response(
        data=WarehouseStockSerializer(stock).data,
        message="Stock adjusted successfully"
    )
