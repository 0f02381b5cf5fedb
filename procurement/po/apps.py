from django.apps import AppConfig


class PurchaseOrderConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'procurement.po'
    label = 'po'
    verbose_name = 'Purchase Orders'
