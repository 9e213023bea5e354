"""
ASGI config for the CarePoint project.

Serves HTTP through Django and the schedule update WebSocket through
Channels.  Settings must be configured before anything imports models.
"""
import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "carepoint.settings")

import django  # noqa: E402
django.setup()  # noqa: E402

from django.core.asgi import get_asgi_application  # noqa: E402
from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from django.urls import path  # noqa: E402

from clinic.realtime.auth import TokenAuthMiddlewareStack  # noqa: E402
from clinic.realtime.consumers import ScheduleUpdatesConsumer  # noqa: E402

django_asgi_app = get_asgi_application()

websocket_urlpatterns = [
    path("ws/schedules/", ScheduleUpdatesConsumer.as_asgi()),
]

application = ProtocolTypeRouter({
    "http": django_asgi_app,
    "websocket": TokenAuthMiddlewareStack(URLRouter(websocket_urlpatterns)),
})
