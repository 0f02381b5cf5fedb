from django.urls import path

from . import views

app_name = 'po'

urlpatterns = [
    path('', views.po_list, name='po-list'),
    path('by-status/', views.po_by_status, name='po-by-status'),
    path('<int:pk>/', views.po_detail, name='po-detail'),
    path('<int:pk>/approve/', views.po_approve, name='po-approve'),
    path('<int:pk>/cancel/', views.po_cancel, name='po-cancel'),
    path('<int:pk>/receive/', views.po_receive, name='po-receive'),
]
