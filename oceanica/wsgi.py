"""
WSGI config for the Oceânica Pescados project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'oceanica.settings')

application = get_wsgi_application()
