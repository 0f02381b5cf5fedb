from django.urls import path

from . import views

app_name = 'inventory'

urlpatterns = [
    path('warehouses/', views.warehouse_list, name='warehouse-list'),
    path('warehouses/<int:pk>/products/', views.warehouse_products, name='warehouse-products'),
    path('products/', views.product_list, name='product-list'),
    path('products/<int:pk>/', views.product_detail, name='product-detail'),
    path('low-stock/', views.low_stock, name='low-stock'),
    path('stock/adjust/', views.stock_adjust, name='stock-adjust'),
]
