"""
WSGI config for the CarePoint project.

Exposes the WSGI callable as a module-level variable named ``application``.
WebSocket schedule updates need the ASGI entrypoint instead
(see ``carepoint.asgi``).
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'carepoint.settings')

application = get_wsgi_application()
