"""WSGI entry point for the retail ERP backend."""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'erp_project.settings')

application = get_wsgi_application()
