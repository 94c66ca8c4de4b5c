"""WSGI config for Meetpoint.

Entry point for gunicorn and other WSGI servers; falls back to the
development settings when DJANGO_SETTINGS_MODULE is unset.
"""

import os
from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_wsgi_application()
