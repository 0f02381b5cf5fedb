from django.urls import path

from . import views

app_name = 'receiving'

urlpatterns = [
    path('', views.grn_list, name='grn-list'),
    path('<int:pk>/', views.grn_detail, name='grn-detail'),
]
