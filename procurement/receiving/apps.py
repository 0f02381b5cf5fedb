from django.apps import AppConfig


class ReceivingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'procurement.receiving'
    label = 'receiving'
    verbose_name = 'Goods Receiving'
