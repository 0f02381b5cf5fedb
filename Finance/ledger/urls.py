from django.urls import path

from . import views

app_name = 'ledger'

urlpatterns = [
    path('', views.entry_list, name='entry-list'),
    path('expenses/', views.expense_create, name='expense-create'),
    path('daily-pl/', views.daily_pl, name='daily-pl'),
]
