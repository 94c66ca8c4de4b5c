"""ASGI config for Meetpoint.

Exposes the API to ASGI servers such as uvicorn or daphne. The
scheduling core is synchronous; Django runs the views in a thread pool.
"""

import os
from django.core.asgi import get_asgi_application  # type: ignore

# Production servers should set DJANGO_SETTINGS_MODULE explicitly.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_asgi_application()
