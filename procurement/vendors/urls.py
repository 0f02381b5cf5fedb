from django.urls import path

from . import views

app_name = 'vendors'

urlpatterns = [
    path('', views.vendor_list, name='vendor-list'),
    path('<int:pk>/', views.vendor_detail, name='vendor-detail'),
    path('<int:pk>/settle-payment/', views.vendor_settle_payment, name='vendor-settle-payment'),
    path('<int:pk>/payments/', views.vendor_payments, name='vendor-payments'),
]
