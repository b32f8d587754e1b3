"""WSGI entry point for the degree planning project."""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "advising.settings")

application = get_wsgi_application()
