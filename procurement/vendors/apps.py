from django.apps import AppConfig


class VendorsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'procurement.vendors'
    label = 'vendors'
    verbose_name = 'Vendors'
