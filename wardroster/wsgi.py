"""
WSGI configuration for WardRoster.

The API is plain request/response JSON, so a WSGI server (gunicorn) is enough.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "wardroster.settings.local")

application = get_wsgi_application()
