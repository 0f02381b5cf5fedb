"""
URL configuration for the retail ERP backend.

Each business area mounts its own URLconf; the apps own their namespaces.
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # Authentication (login, token refresh) and account profile
    path('auth/', include('core.user_accounts.auth_urls')),
    path('accounts/', include('core.user_accounts.urls')),

    path('inventory/', include('inventory.urls')),
    path('procurement/vendors/', include('procurement.vendors.urls')),
    path('procurement/po/', include('procurement.po.urls')),
    path('procurement/receiving/', include('procurement.receiving.urls')),
    path('finance/ledger/', include('Finance.ledger.urls')),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
