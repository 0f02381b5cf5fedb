"""
URL Configuration for the signed-in user's account.
Authentication endpoints are in auth_urls.py
"""
from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    path('me/', views.me, name='me'),
    path('users/<int:user_id>/permissions/', views.user_permissions, name='user-permissions'),
]
